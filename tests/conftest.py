"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig
from minihttp.http import Route, RouteTable


INDEX_HTML = b"<html><body><h1>Index</h1></body></html>\n"
TEST_HTML = b"<html><body><h1>Test</h1></body></html>\n"


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET / HTTP/1.1\r\n"
        b"Host: x\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a 5-byte body."""
    return (
        b"POST /submit HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Length: 5\r\n"
        b"\r\n"
        b"hello"
    )


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Document root holding index.html and test.html."""
    (tmp_path / "index.html").write_bytes(INDEX_HTML)
    (tmp_path / "test.html").write_bytes(TEST_HTML)
    return tmp_path


@pytest.fixture
def routes(site_dir: Path) -> RouteTable:
    """Stock routes plus one route whose file does not exist."""
    return RouteTable([
        Route("/", str(site_dir / "index.html")),
        Route("/test", str(site_dir / "test.html")),
        Route("/missing", str(site_dir / "missing.html")),
    ])


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class RunningServer:
    """Runs an HTTPServer in a background thread."""

    def __init__(self, server: HTTPServer, port: int):
        self.server = server
        self.port = port
        self._thread: threading.Thread = None

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()
        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def connect(self) -> socket.socket:
        sock = socket.create_connection(("127.0.0.1", self.port), timeout=5.0)
        return sock

    def request(self, data: bytes) -> bytes:
        """Send one request and return everything until the server closes."""
        with self.connect() as sock:
            sock.sendall(data)
            return recv_all(sock)


def recv_all(sock: socket.socket) -> bytes:
    """Read until the peer closes the connection."""
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def test_server(free_port: int, routes: RouteTable) -> Generator[RunningServer, None, None]:
    """A live server on a free port, serving the `routes` table."""
    server = HTTPServer(
        ServerConfig(
            host="127.0.0.1",
            port=free_port,
            accept_timeout=0.1,
            log_level="WARNING",
        ),
        routes=routes,
    )

    running = RunningServer(server, free_port)
    running.start()

    yield running

    running.stop()
