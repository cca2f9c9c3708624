"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Dict, Generator, Tuple

import pytest

from staticserver import StaticServer, ServerConfig
from staticserver.access_log import RequestLog
from staticserver.handlers import StaticFileHandler


INDEX_HTML = b"<p>hi</p>"


@pytest.fixture
def web_root(tmp_path: Path) -> Path:
    """
    A web-root with one file of each kind, plus one that is not allow-listed.

        www/
        ├── index.html      <p>hi</p>
        ├── style.css
        ├── app.js
        ├── style.png       exists, but .png is not served
        └── docs/
            └── guide.html
    """
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "style.css").write_bytes(b"body { color: red; }\n")
    (root / "app.js").write_bytes(b"console.log('hi');\n")
    (root / "style.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / "docs").mkdir()
    (root / "docs" / "guide.html").write_bytes("<h1>Guide – café</h1>".encode("utf-8"))
    return root


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "requests.log"


@pytest.fixture
def request_log(log_path: Path) -> Generator[RequestLog, None, None]:
    log = RequestLog(log_path)
    yield log
    log.close()


@pytest.fixture
def handler(web_root: Path, request_log: RequestLog) -> StaticFileHandler:
    return StaticFileHandler(web_root, request_log)


@pytest.fixture
def read_log(log_path: Path):
    """Callable returning the request log lines written so far."""
    def read() -> list:
        if not log_path.exists():
            return []
        return log_path.read_text(encoding="utf-8").splitlines()
    return read


# =============================================================================
# LIVE SERVER
# =============================================================================

class RunningServer:
    """A StaticServer on an ephemeral port, running on a background thread."""

    def __init__(self, server: StaticServer):
        self.server = server
        self._thread = threading.Thread(target=server.run, daemon=True)

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread.start()
        if not self.server.wait_until_listening(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        self._thread.join(timeout=5.0)

    def request(self, data: bytes, timeout: float = 5.0) -> bytes:
        """Send raw bytes, half-close, and read until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=timeout) as sock:
            sock.sendall(data)
            sock.shutdown(socket.SHUT_WR)
            return self.recv_all(sock)

    def fetch(self, request_line: str) -> Tuple[int, Dict[str, str], bytes]:
        """Send one request line (plus a header) and parse the response."""
        raw = self.request(f"{request_line}\r\nHost: localhost\r\n\r\n".encode("utf-8"))
        return self.parse(raw)

    @staticmethod
    def recv_all(sock: socket.socket) -> bytes:
        chunks = []
        while True:
            try:
                chunk = sock.recv(4096)
            except ConnectionResetError:
                break
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def parse(raw: bytes) -> Tuple[int, Dict[str, str], bytes]:
        """Split raw response bytes into (status, headers, body)."""
        head, _, body = raw.partition(b"\r\n\r\n")
        lines = head.decode("ascii").split("\r\n")
        status = int(lines[0].split(" ", 2)[1])
        headers = {}
        for line in lines[1:]:
            name, _, value = line.partition(": ")
            headers[name] = value
        return status, headers, body


@pytest.fixture
def live_server(web_root: Path, log_path: Path) -> Generator[RunningServer, None, None]:
    server = StaticServer(ServerConfig(
        port=0,
        web_root=str(web_root),
        request_log=str(log_path),
        log_level="WARNING",
    ))

    running = RunningServer(server)
    running.start()

    yield running

    running.stop()
