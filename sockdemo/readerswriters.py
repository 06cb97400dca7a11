"""Readers-writers demonstration driven by TCP clients that ask for a role."""

from __future__ import annotations

import argparse
import socket
import struct
import sys
import threading
import time
from typing import TextIO

PORT = 8989
BACKLOG = 50
BATCH = 50
HOLD = 5.0
READER = 1
WRITER = 2
CHOICE = struct.Struct("<i")
_ACCEPT_TICK = 0.2


class ReadersWriters:
    """Readers share the room; a writer needs it to itself."""

    def __init__(self, hold: float = HOLD, out: TextIO | None = None) -> None:
        self.hold = hold
        self.readers = 0
        self._out = out if out is not None else sys.stdout
        self._mutex = threading.Semaphore(1)
        self._room = threading.Semaphore(1)
        self._print_lock = threading.Lock()

    def _emit(self, text: str) -> None:
        with self._print_lock:
            self._out.write(text)
            self._out.flush()

    def reader(self) -> None:
        """Enter as a reader, stay for ``hold`` seconds, then leave."""
        with self._mutex:
            self.readers += 1
            if self.readers == 1:
                self._room.acquire()
            inside = self.readers
        self._emit(f"\n{inside} reader is inside")
        time.sleep(self.hold)
        with self._mutex:
            self.readers -= 1
            if self.readers == 0:
                self._room.release()
            leaving = self.readers + 1
        self._emit(f"\n{leaving} Reader is leaving")

    def writer(self) -> None:
        """Wait until no reader is inside, enter and leave at once."""
        self._emit("\nWriter is trying to enter")
        with self._room:
            self._emit("\nWriter has entered")
        self._emit("\nWriter is leaving")


class ReadersWritersServer:
    """Starts a reader or writer thread for each client's requested role."""

    def __init__(
        self,
        host: str = "",
        port: int = PORT,
        hold: float = HOLD,
        out: TextIO | None = None,
    ) -> None:
        self._out = out if out is not None else sys.stdout
        self.room = ReadersWriters(hold, self._out)
        self._threads: list[threading.Thread] = []
        self._stopped = threading.Event()
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._listener.bind((host, port))
            self._listener.listen(BACKLOG)
        except OSError:
            self._listener.close()
            raise
        self._listener.settimeout(_ACCEPT_TICK)
        self.address = self._listener.getsockname()
        self._out.write("Listening\n")
        self._out.flush()

    def handle(self, conn: socket.socket) -> threading.Thread | None:
        """Read the client's role and start its thread; return it, or None."""
        with conn:
            data = b""
            while len(data) < CHOICE.size:
                chunk = conn.recv(CHOICE.size - len(data))
                if not chunk:
                    break
                data += chunk
        if len(data) < CHOICE.size:
            return None
        choice = CHOICE.unpack(data)[0]
        if choice == READER:
            target = self.room.reader
        elif choice == WRITER:
            target = self.room.writer
        else:
            return None
        thread = threading.Thread(target=target, daemon=True)
        try:
            thread.start()
        except RuntimeError:
            self._out.write("Failed to create thread\n")
            self._out.flush()
            return None
        self._threads.append(thread)
        return thread

    def serve_forever(self) -> None:
        """Accept clients until closed, joining threads every ``BATCH`` clients."""
        while not self._stopped.is_set():
            try:
                conn, _ = self._listener.accept()
            except socket.timeout:
                continue
            except OSError:
                if self._stopped.is_set():
                    return
                raise
            conn.settimeout(None)
            self.handle(conn)
            if len(self._threads) >= BATCH:
                self.join_all()

    def join_all(self) -> int:
        """Wait for every started thread to finish; return how many there were."""
        threads, self._threads = self._threads, []
        for thread in threads:
            thread.join()
        return len(threads)

    def close(self) -> None:
        """Stop serving and close the listening socket."""
        self._stopped.set()
        self._listener.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Readers-writers demonstration server.")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--hold", type=float, default=HOLD)
    args = parser.parse_args(argv)
    try:
        server = ReadersWritersServer(args.host, args.port, args.hold)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())