"""Small TCP programs: broadcast relay, chat, line client, file transfer and readers-writers."""

__version__ = "0.1.0"
__all__ = ["broadcast", "chat", "lineclient", "filetransfer", "readerswriters"]