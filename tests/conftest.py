"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from taskserver import TaskServer, ServerConfig, TaskStore
from taskserver.handlers import TaskHandler
from taskserver.http import RequestParser, HTTPResponse


def make_raw_request(method: str, path: str, body: Optional[str] = None, headers: Optional[dict] = None) -> bytes:
    """Build request bytes the way a simple HTTP client would send them."""
    lines = [f"{method} {path} HTTP/1.1", "Host: localhost:7878"]
    if body is not None:
        encoded = body.encode("utf-8")
        lines.append("Content-Type: application/json")
        lines.append(f"Content-Length: {len(encoded)}")
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    head = ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")
    return head + (body.encode("utf-8") if body is not None else b"")


def split_response(raw: bytes):
    """Split raw response bytes into (status_line, headers, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body.decode("utf-8")


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample POST /tasks request with a JSON body."""
    return make_raw_request("POST", "/tasks", '{"description": "test"}')


@pytest.fixture
def sample_put_request() -> bytes:
    """Sample PUT /tasks/1 request marking the task completed."""
    return make_raw_request("PUT", "/tasks/1", '{"completed": true}')


@pytest.fixture
def store() -> TaskStore:
    """Fresh, empty task store."""
    return TaskStore()


@pytest.fixture
def handler(store: TaskStore) -> TaskHandler:
    """Task handler backed by the fresh store."""
    return TaskHandler(store)


class RequestRunner:
    """Feeds raw request bytes through scanning and dispatch, no sockets."""

    def __init__(self, handler: TaskHandler, buffer_size: int = 1024):
        self.handler = handler
        self.parser = RequestParser(buffer_size=buffer_size)

    def __call__(self, raw: bytes) -> HTTPResponse:
        return self.handler.handle(self.parser.parse(raw, ("127.0.0.1", 50000)))

    def send(self, method: str, path: str, body: Optional[str] = None) -> HTTPResponse:
        return self(make_raw_request(method, path, body))


@pytest.fixture
def run(handler: TaskHandler) -> RequestRunner:
    """Callable that turns raw request bytes into an HTTPResponse."""
    return RequestRunner(handler)


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: TaskServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def exchange(self, raw: bytes, timeout: float = 5.0) -> bytes:
        """Send raw bytes on a fresh connection and read until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=timeout) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def test_server(free_port: int) -> Generator[TestServer, None, None]:
    """Run a real TaskServer on a free port."""
    server = TaskServer(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        log_level="WARNING",
    ))

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()
