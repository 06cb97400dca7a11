"""Interactive client that sends typed lines and prints the server's echo."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import TextIO

PORT = 8080
BUFFER_SIZE = 1024
DEFAULT_HOST = "192.168.0.255"
EXIT_WORD = "exit"


def _write(stream: TextIO, text: str) -> None:
    stream.write(text)
    stream.flush()


def session(
    sock: socket.socket, stdin: TextIO | None = None, stdout: TextIO | None = None
) -> None:
    """Send each typed line and show the reply until exit, end of input or hang-up."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    while True:
        _write(stdout, "> ")
        line = stdin.readline(BUFFER_SIZE - 1)
        if not line:
            return
        message = line.split("\n", 1)[0]
        if message == EXIT_WORD:
            return
        sock.sendall(message.encode("utf-8"))
        try:
            data = sock.recv(BUFFER_SIZE - 1)
        except ConnectionError:
            data = b""
        if not data:
            _write(stdout, "Server closed connection\n")
            return
        _write(stdout, f"Echo from server: {data.decode('utf-8', 'replace')}\n")


def run(
    host: str = DEFAULT_HOST,
    port: int = PORT,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Connect to ``host``:``port`` (an IPv4 address) and run a session."""
    stdout = stdout if stdout is not None else sys.stdout
    try:
        socket.inet_pton(socket.AF_INET, host)
    except OSError as exc:
        raise ValueError("Invalid address/ Address not supported") from exc
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.connect((host, port))
        except OSError as exc:
            raise ConnectionError("Connection Failed") from exc
        _write(stdout, "Connected to server. Type messages:\n")
        session(sock, stdin, stdout)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Send lines to a TCP server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)
    try:
        run(args.host, args.port)
    except (ValueError, ConnectionError) as exc:
        cause = exc.__cause__
        print(f"{exc}: {cause}" if cause else str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())