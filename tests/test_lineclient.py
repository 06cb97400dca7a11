import io
import socket
import threading

import pytest

from sockdemo.lineclient import main, run, session


def _echo(sock):
    with sock:
        while True:
            try:
                data = sock.recv(1024)
            except OSError:
                return
            if not data:
                return
            sock.sendall(data)


def _closed_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def test_session_echoes_until_exit():
    client, server = socket.socketpair()
    worker = threading.Thread(target=_echo, args=(server,))
    worker.start()
    out = io.StringIO()
    try:
        session(client, io.StringIO("hello\nworld\nexit\nignored\n"), out)
    finally:
        client.close()
        worker.join(5)
    assert out.getvalue() == (
        "> Echo from server: hello\n> Echo from server: world\n> "
    )


def test_session_stops_at_end_of_input_without_sending():
    client, server = socket.socketpair()
    out = io.StringIO()
    with client, server:
        session(client, io.StringIO(""), out)
        server.setblocking(False)
        with pytest.raises(BlockingIOError):
            server.recv(16)
    assert out.getvalue() == "> "


def test_session_reports_server_hang_up():
    client, server = socket.socketpair()
    out = io.StringIO()
    with client, server:
        server.shutdown(socket.SHUT_WR)
        session(client, io.StringIO("ping\nmore\n"), out)
        assert server.recv(16) == b"ping"
    assert out.getvalue() == "> Server closed connection\n"


def test_session_splits_long_lines():
    client, server = socket.socketpair()
    worker = threading.Thread(target=_echo, args=(server,))
    worker.start()
    out = io.StringIO()
    long_line = "x" * 1500
    try:
        session(client, io.StringIO(long_line + "\nexit\n"), out)
    finally:
        client.close()
        worker.join(5)
    text = out.getvalue()
    assert text.count("Echo from server: ") == 2
    assert text.count("x") == len(long_line)


def test_run_connects_and_announces():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        port = listener.getsockname()[1]

        def accept_and_echo():
            conn, _ = listener.accept()
            _echo(conn)

        worker = threading.Thread(target=accept_and_echo)
        worker.start()
        out = io.StringIO()
        run("127.0.0.1", port, io.StringIO("hi\nexit\n"), out)
        worker.join(5)
    assert out.getvalue() == (
        "Connected to server. Type messages:\n> Echo from server: hi\n> "
    )


def test_run_rejects_non_ipv4_address():
    with pytest.raises(ValueError):
        run("not-an-address", 8080, io.StringIO(""), io.StringIO())


def test_run_raises_when_nothing_listens():
    with pytest.raises(ConnectionError):
        run("127.0.0.1", _closed_port(), io.StringIO(""), io.StringIO())


def test_main_returns_failure_when_nothing_listens():
    assert main(["--host", "127.0.0.1", "--port", str(_closed_port())]) == 1