import io
import socket
import threading

import pytest

from sockdemo.readerswriters import (
    CHOICE,
    READER,
    WRITER,
    ReadersWriters,
    ReadersWritersServer,
    main,
)


class _Recorder:
    def __init__(self):
        self._parts = []
        self._cond = threading.Condition()

    def write(self, text):
        with self._cond:
            self._parts.append(text)
            self._cond.notify_all()
        return len(text)

    def flush(self):
        pass

    @property
    def text(self):
        with self._cond:
            return "".join(self._parts)

    def wait_for(self, fragment, timeout=5.0):
        with self._cond:
            return self._cond.wait_for(lambda: fragment in "".join(self._parts), timeout)


def test_single_reader_output():
    out = io.StringIO()
    room = ReadersWriters(hold=0, out=out)
    room.reader()
    assert out.getvalue() == "\n1 reader is inside\n1 Reader is leaving"
    assert room.readers == 0


def test_single_writer_output():
    out = io.StringIO()
    room = ReadersWriters(hold=0, out=out)
    room.writer()
    assert out.getvalue() == (
        "\nWriter is trying to enter\nWriter has entered\nWriter is leaving"
    )


def test_writer_waits_for_reader():
    out = _Recorder()
    room = ReadersWriters(hold=0.5, out=out)
    reader = threading.Thread(target=room.reader)
    reader.start()
    assert out.wait_for("reader is inside")
    writer = threading.Thread(target=room.writer)
    writer.start()
    assert out.wait_for("Writer is trying to enter")
    writer.join(0.1)
    assert writer.is_alive()
    assert "Writer has entered" not in out.text
    reader.join(5)
    writer.join(5)
    assert not writer.is_alive()
    assert "Writer has entered" in out.text


def test_readers_share_the_room():
    out = _Recorder()
    room = ReadersWriters(hold=0.5, out=out)
    first = threading.Thread(target=room.reader)
    first.start()
    assert out.wait_for("1 reader is inside")
    second = threading.Thread(target=room.reader)
    second.start()
    assert out.wait_for("2 reader is inside")
    first.join(5)
    second.join(5)
    assert room.readers == 0
    assert out.text.count("Reader is leaving") == 2


@pytest.fixture
def server():
    out = _Recorder()
    srv = ReadersWritersServer("127.0.0.1", 0, hold=0, out=out)
    yield srv, out
    srv.close()


def test_server_announces_listening(server):
    _, out = server
    assert out.text == "Listening\n"


def test_handle_starts_reader(server):
    srv, out = server
    left, right = socket.socketpair()
    with left:
        left.sendall(CHOICE.pack(READER))
    thread = srv.handle(right)
    thread.join(5)
    assert "\n1 reader is inside" in out.text
    assert srv.join_all() == 1


def test_handle_starts_writer(server):
    srv, out = server
    left, right = socket.socketpair()
    with left:
        left.sendall(CHOICE.pack(WRITER))
    thread = srv.handle(right)
    thread.join(5)
    assert "Writer has entered" in out.text


def test_handle_ignores_unknown_choice(server):
    srv, _ = server
    left, right = socket.socketpair()
    with left:
        left.sendall(CHOICE.pack(7))
    assert srv.handle(right) is None
    assert srv.join_all() == 0


def test_handle_ignores_short_request(server):
    srv, _ = server
    left, right = socket.socketpair()
    with left:
        left.sendall(b"\x01")
    assert srv.handle(right) is None


def test_serve_forever_handles_clients_until_closed(server):
    srv, out = server
    worker = threading.Thread(target=srv.serve_forever)
    worker.start()
    for choice in (WRITER, READER):
        with socket.create_connection(srv.address[:2], timeout=5) as client:
            client.sendall(CHOICE.pack(choice))
    assert out.wait_for("Writer is leaving")
    assert out.wait_for("Reader is leaving")
    srv.close()
    worker.join(5)
    assert not worker.is_alive()
    assert srv.join_all() == 2


def test_main_fails_when_port_taken():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as holder:
        holder.bind(("127.0.0.1", 0))
        holder.listen(1)
        port = holder.getsockname()[1]
        assert main(["--host", "127.0.0.1", "--port", str(port)]) == 1