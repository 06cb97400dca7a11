"""Multi-client TCP server that relays each message to every other client."""

from __future__ import annotations

import argparse
import selectors
import socket
import sys
from typing import TextIO

PORT = 8080
MAX_CLIENTS = 100
BUFFER_SIZE = 1024
BACKLOG = 10


class BroadcastServer:
    """Accepts clients and relays what each one sends to all the others."""

    def __init__(
        self,
        host: str = "",
        port: int = PORT,
        max_clients: int = MAX_CLIENTS,
        out: TextIO | None = None,
    ) -> None:
        if max_clients < 1:
            raise ValueError("max_clients must be at least 1")
        self._out = out if out is not None else sys.stdout
        self._slots: list[socket.socket | None] = [None] * max_clients
        self._peers: dict[socket.socket, tuple] = {}
        self._selector = selectors.DefaultSelector()
        self._closed = False
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._listener.bind((host, port))
            self._listener.listen(BACKLOG)
        except OSError:
            self._listener.close()
            self._selector.close()
            raise
        self.address = self._listener.getsockname()
        self._selector.register(self._listener, selectors.EVENT_READ)
        self._emit(f"Server listening on port {self.address[1]}...")

    def _emit(self, line: str) -> None:
        self._out.write(line + "\n")
        self._out.flush()

    def poll(self, timeout: float | None = None) -> int:
        """Wait up to ``timeout`` seconds and handle ready sockets; return how many."""
        handled = 0
        for key, _ in self._selector.select(timeout):
            if key.fileobj is self._listener:
                self._accept()
            else:
                self._receive(key.fileobj)
            handled += 1
        return handled

    def serve_forever(self) -> None:
        """Handle connections and messages until interrupted."""
        while True:
            self.poll(None)

    def _accept(self) -> None:
        conn, addr = self._listener.accept()
        self._emit(
            f"New connection: socket fd is {conn.fileno()}, ip is {addr[0]}, port {addr[1]}"
        )
        try:
            index = self._slots.index(None)
        except ValueError:
            conn.close()
            return
        self._slots[index] = conn
        self._peers[conn] = addr
        self._selector.register(conn, selectors.EVENT_READ)
        self._emit(f"Added to client list at index {index}")

    def _receive(self, conn: socket.socket) -> None:
        try:
            data = conn.recv(BUFFER_SIZE)
        except ConnectionError:
            data = b""
        if not data:
            self._drop(conn)
            return
        payload = data.split(b"\0", 1)[0]
        self._emit(
            f"Message from client {conn.fileno()}: {payload.decode('utf-8', 'replace')}"
        )
        for other in self._slots:
            if other is not None and other is not conn:
                try:
                    other.sendall(payload)
                except OSError:
                    pass

    def _drop(self, conn: socket.socket) -> None:
        addr = self._peers.pop(conn, ("", 0))
        self._emit(f"Client disconnected: ip {addr[0]}, port {addr[1]}")
        self._selector.unregister(conn)
        self._slots[self._slots.index(conn)] = None
        conn.close()

    def close(self) -> None:
        """Close every client connection and the listening socket."""
        if self._closed:
            return
        self._closed = True
        for index, conn in enumerate(self._slots):
            if conn is not None:
                conn.close()
                self._slots[index] = None
        self._peers.clear()
        self._listener.close()
        self._selector.close()

    def __enter__(self) -> BroadcastServer:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Relay messages between TCP clients.")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--max-clients", type=int, default=MAX_CLIENTS)
    args = parser.parse_args(argv)
    try:
        server = BroadcastServer(args.host, args.port, args.max_clients)
    except OSError as exc:
        print(f"Bind failed: {exc}", file=sys.stderr)
        return 1
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())