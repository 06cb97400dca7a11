"""Turn-taking chat between one client and one server over fixed-size frames."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import TextIO

MAX = 80
PORT = 8080
BACKLOG = 5


def pack_message(text: str) -> bytes:
    """Encode ``text`` into one NUL-padded frame of ``MAX`` bytes."""
    data = text.encode("utf-8")
    if len(data) > MAX:
        raise ValueError(f"message is {len(data)} bytes, frame holds {MAX}")
    return data.ljust(MAX, b"\0")


def unpack_message(data: bytes) -> str:
    """Decode a frame, stopping at the first NUL byte."""
    return data.split(b"\0", 1)[0].decode("utf-8", "replace")


def _recv_frame(sock: socket.socket) -> bytes | None:
    chunks = []
    remaining = MAX
    while remaining:
        chunk = sock.recv(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    frame = b"".join(chunks)
    return frame or None


def _write(stream: TextIO, text: str) -> None:
    stream.write(text)
    stream.flush()


def _read_line(stream: TextIO) -> str | None:
    line = stream.readline()
    if not line:
        return None
    return line if line.endswith("\n") else line + "\n"


def client_session(
    sock: socket.socket, stdin: TextIO | None = None, stdout: TextIO | None = None
) -> None:
    """Send typed lines and show replies until the server says exit."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    while True:
        _write(stdout, "Enter the string : ")
        line = _read_line(stdin)
        if line is None:
            return
        sock.sendall(pack_message(line))
        frame = _recv_frame(sock)
        if frame is None:
            return
        reply = unpack_message(frame)
        _write(stdout, f"From Server : {reply}")
        if reply.startswith("exit"):
            _write(stdout, "Client Exit...\n")
            return


def server_session(
    conn: socket.socket, stdin: TextIO | None = None, stdout: TextIO | None = None
) -> None:
    """Show client messages and answer each with a typed line until exit."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    while True:
        frame = _recv_frame(conn)
        if frame is None:
            return
        _write(stdout, f"From client: {unpack_message(frame)}\t To client : ")
        line = _read_line(stdin)
        if line is None:
            return
        conn.sendall(pack_message(line))
        if line.startswith("exit"):
            _write(stdout, "Server Exit...\n")
            return


def run_client(
    host: str = "127.0.0.1",
    port: int = PORT,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Connect to a chat server and run a client session."""
    stdout = stdout if stdout is not None else sys.stdout
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        _write(stdout, "Socket successfully created..\n")
        try:
            sock.connect((host, port))
        except OSError as exc:
            raise ConnectionError("connection with the server failed...") from exc
        _write(stdout, "connected to the server..\n")
        client_session(sock, stdin, stdout)


def run_server(
    host: str = "",
    port: int = PORT,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Accept one client and run a server session with it."""
    stdout = stdout if stdout is not None else sys.stdout
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        _write(stdout, "Socket successfully created..\n")
        try:
            listener.bind((host, port))
        except OSError as exc:
            raise OSError("socket bind failed...") from exc
        _write(stdout, "Socket successfully binded..\n")
        listener.listen(BACKLOG)
        _write(stdout, "Server listening..\n")
        conn, _ = listener.accept()
        _write(stdout, "server accept the client...\n")
        with conn:
            server_session(conn, stdin, stdout)


def _parse(argv: list[str] | None, default_host: str) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Line-by-line TCP chat.")
    parser.add_argument("--host", default=default_host)
    parser.add_argument("--port", type=int, default=PORT)
    return parser.parse_args(argv)


def main_client(argv: list[str] | None = None) -> int:
    args = _parse(argv, "127.0.0.1")
    try:
        run_client(args.host, args.port)
    except OSError as exc:
        print(exc)
        return 1
    return 0


def main_server(argv: list[str] | None = None) -> int:
    args = _parse(argv, "")
    try:
        run_server(args.host, args.port)
    except OSError as exc:
        print(exc)
        return 1
    return 0