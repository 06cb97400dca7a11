"""Send one file over TCP, prefixed by its size, and receive it on the other end."""

from __future__ import annotations

import argparse
import os
import socket
import struct
import sys
from typing import BinaryIO, TextIO

PORT = 5005
BUFSIZE = 1024
DEFAULT_SOURCE = "test.bmp"
DEFAULT_OUTPUT = "received.bmp"
SIZE_HEADER = struct.Struct("<q")


def _emit(out: TextIO | None, line: str) -> None:
    stream = out if out is not None else sys.stdout
    stream.write(line + "\n")
    stream.flush()


def _recv_exact(sock: socket.socket, count: int) -> bytes:
    chunks = []
    remaining = count
    while remaining:
        chunk = sock.recv(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _send_stream(sock: socket.socket, fp: BinaryIO) -> int:
    size = os.fstat(fp.fileno()).st_size
    sock.sendall(SIZE_HEADER.pack(size))
    for chunk in iter(lambda: fp.read(BUFSIZE), b""):
        sock.sendall(chunk)
    return size


def _read_size(sock: socket.socket) -> int:
    header = _recv_exact(sock, SIZE_HEADER.size)
    if len(header) < SIZE_HEADER.size:
        raise ConnectionError("connection closed before the file size arrived")
    return SIZE_HEADER.unpack(header)[0]


def _receive_into(sock: socket.socket, fp: BinaryIO, size: int) -> int:
    received = 0
    while received < size:
        chunk = sock.recv(min(BUFSIZE, size - received))
        if not chunk:
            break
        fp.write(chunk)
        received += len(chunk)
    return received


def send_file(sock: socket.socket, path: str | os.PathLike) -> int:
    """Send the size of ``path`` and then its bytes; return the size."""
    with open(path, "rb") as fp:
        return _send_stream(sock, fp)


def receive_file(sock: socket.socket, path: str | os.PathLike) -> int:
    """Receive a size-prefixed file into ``path``; return the bytes written."""
    size = _read_size(sock)
    with open(path, "wb") as fp:
        return _receive_into(sock, fp, size)


def serve(
    path: str | os.PathLike = DEFAULT_SOURCE,
    host: str = "",
    port: int = PORT,
    out: TextIO | None = None,
) -> int:
    """Wait for one client, send it ``path`` and return the size sent."""
    with open(path, "rb") as fp:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
            listener.bind((host, port))
            listener.listen(1)
            bound_port = listener.getsockname()[1]
            _emit(out, f"Server is waiting for a connection on port {bound_port}...")
            conn, _ = listener.accept()
            with conn:
                _emit(out, "Client connected. Sending file...")
                sent = _send_stream(conn, fp)
            _emit(out, "File sent successfully.")
    return sent


def fetch(
    path: str | os.PathLike = DEFAULT_OUTPUT,
    host: str = "127.0.0.1",
    port: int = PORT,
    out: TextIO | None = None,
) -> int:
    """Connect to a file server, store what it sends in ``path``; return bytes received."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.connect((host, port))
        except OSError as exc:
            raise ConnectionError("Connection failed") from exc
        size = _read_size(sock)
        _emit(out, f"Receiving file of size: {size} bytes")
        with open(path, "wb") as fp:
            received = _receive_into(sock, fp, size)
        _emit(out, "File received successfully.")
    return received


def _parse(argv: list[str] | None, default_file: str, default_host: str) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Transfer one file over TCP.")
    parser.add_argument("--file", default=default_file)
    parser.add_argument("--host", default=default_host)
    parser.add_argument("--port", type=int, default=PORT)
    return parser.parse_args(argv)


def main_server(argv: list[str] | None = None) -> int:
    args = _parse(argv, DEFAULT_SOURCE, "")
    try:
        serve(args.file, args.host, args.port)
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


def main_client(argv: list[str] | None = None) -> int:
    args = _parse(argv, DEFAULT_OUTPUT, "127.0.0.1")
    try:
        fetch(args.file, args.host, args.port)
    except OSError as exc:
        cause = exc.__cause__
        print(f"{exc}: {cause}" if cause else str(exc), file=sys.stderr)
        return 1
    return 0