"""TCP stream transport for newline-delimited frames

`StreamTransport` owns one outbound connection. It is connected once at
startup; the first send error closes it for good and every later frame is
dropped without another attempt.
"""
import logging
import socket

LOG = logging.getLogger("txbridge.stream")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9000
# a stalled peer may hold up one tick at most this long
SEND_TIMEOUT = 0.05


def encode_line(text: str) -> bytes:
    """One frame per line: strip internal CR/LF, terminate with a single LF."""
    return (text.replace("\r", "").replace("\n", "") + "\n").encode("utf-8")


class StreamTransport:
    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, timeout: float = 2.0,
                 send_timeout: float = SEND_TIMEOUT):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.send_timeout = send_timeout
        self._sock = None
        self.disabled = False
        self.frames_sent = 0

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> bool:
        if self._sock is not None:
            return True
        if self.disabled:
            return False
        LOG.info("Connecting to %s:%d via TCP", self.host, self.port)
        try:
            sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            LOG.warning("failed to connect to %s:%d (%s) — continuing without network streaming",
                        self.host, self.port, e)
            self.disabled = True
            return False
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.settimeout(self.send_timeout)
        self._sock = sock
        LOG.info("Connected to %s:%d", self.host, self.port)
        return True

    def send(self, payload: bytes) -> bool:
        if self._sock is None:
            return False
        try:
            self._sock.sendall(payload)
        except OSError as e:
            LOG.error("send() to %s:%d failed: %s — streaming disabled for this run",
                      self.host, self.port, e)
            self.close()
            self.disabled = True
            return False
        self.frames_sent += 1
        return True

    def close(self):
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # peer already gone
            pass
        finally:
            sock.close()
        LOG.info("Closed stream to %s:%d (%d frames sent)", self.host, self.port, self.frames_sent)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
