import logging
import socket
import time

import pytest

from transport import stream as stream_mod
from transport.stream import StreamTransport, encode_line


@pytest.fixture
def server():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(1)
    srv.settimeout(2.0)
    yield srv
    srv.close()


class BrokenSocket:
    def __init__(self):
        self.sendall_calls = 0
        self.closed = False

    def setsockopt(self, *args):
        pass

    def settimeout(self, value):
        self.timeout = value

    def sendall(self, data):
        self.sendall_calls += 1
        raise BrokenPipeError(32, "Broken pipe")

    def shutdown(self, how):
        raise OSError(107, "Transport endpoint is not connected")

    def close(self):
        self.closed = True


def test_encode_line_strips_internal_newlines():
    assert encode_line('{\n  "a": 1,\r\n  "b": 2\n}\n') == b'{  "a": 1,  "b": 2}\n'
    assert encode_line("x").count(b"\n") == 1


def test_frames_arrive_newline_delimited(server):
    port = server.getsockname()[1]
    with StreamTransport("127.0.0.1", port) as transport:
        assert transport.connect() is True
        conn, _ = server.accept()
        assert transport.send(encode_line('{"n": 1}'))
        assert transport.send(encode_line('{\n"n": 2\n}'))

        conn.settimeout(2.0)
        buf = b""
        while buf.count(b"\n") < 2:
            chunk = conn.recv(1024)
            assert chunk
            buf += chunk
        conn.close()

    assert buf.split(b"\n")[:2] == [b'{"n": 1}', b'{"n": 2}']
    assert transport.frames_sent == 2
    assert not transport.connected


def test_connect_failure_disables_streaming(caplog):
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()  # nothing listens on this port now

    transport = StreamTransport("127.0.0.1", port, timeout=0.5)
    with caplog.at_level(logging.WARNING, logger="txbridge.stream"):
        assert transport.connect() is False
    assert "continuing without network streaming" in caplog.text
    assert transport.send(b"frame\n") is False
    assert transport.frames_sent == 0


def test_send_failure_is_permanent(monkeypatch):
    broken = BrokenSocket()
    connects = []

    def fake_create_connection(addr, timeout=None):
        connects.append(addr)
        return broken

    monkeypatch.setattr(stream_mod.socket, "create_connection", fake_create_connection)

    transport = StreamTransport("10.0.0.1", 9000)
    assert transport.connect() is True
    assert transport.send(b"one\n") is False
    assert broken.closed
    assert transport.disabled
    assert not transport.connected

    assert transport.send(b"two\n") is False
    assert transport.connect() is False
    assert broken.sendall_calls == 1
    assert connects == [("10.0.0.1", 9000)]


def test_close_is_idempotent():
    transport = StreamTransport()
    transport.close()
    transport.close()
    assert not transport.connected


def test_connected_socket_uses_short_send_timeout(server):
    port = server.getsockname()[1]
    with StreamTransport("127.0.0.1", port, timeout=2.0, send_timeout=0.05) as transport:
        assert transport.connect() is True
        conn, _ = server.accept()
        assert transport._sock.gettimeout() == 0.05
        conn.close()


def test_stalled_peer_cannot_block_a_tick(server):
    port = server.getsockname()[1]
    transport = StreamTransport("127.0.0.1", port, send_timeout=0.05)
    assert transport.connect() is True
    conn, _ = server.accept()  # never reads

    chunk = b"x" * (1 << 20)
    slowest = 0.0
    try:
        for _ in range(256):
            start = time.monotonic()
            ok = transport.send(chunk)
            slowest = max(slowest, time.monotonic() - start)
            if not ok:
                break
    finally:
        conn.close()
        transport.close()

    assert transport.disabled
    assert slowest < 1.0
