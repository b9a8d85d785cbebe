"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from oneshot import EchoServer, HTTPServer, ServerConfig, create_server
from oneshot.http import ok


@pytest.fixture
def sample_get_request() -> bytes:
    """Scenario 1: GET / with one header and no body."""
    return b"GET / HTTP/1.1\r\nHost: x\r\n\r\n"


@pytest.fixture
def sample_post_request() -> bytes:
    """Scenario 2: POST /something with a body."""
    return b"POST /something HTTP/1.1\r\nHost: x\r\n\r\nhello"


@pytest.fixture
def config() -> ServerConfig:
    """Test configuration: localhost, OS-assigned port."""
    return ServerConfig(host="127.0.0.1", port=0, log_level="WARNING")


def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to 127.0.0.1:port and read until the server closes."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as sock:
        if data:
            sock.sendall(data)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def raw_client():
    """Function sending raw request bytes and returning the raw response."""
    return send_raw


class ServerThread:
    """Runs a server's blocking run() in a background thread."""

    def __init__(self, server):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def http_server(config: ServerConfig) -> Generator[ServerThread, None, None]:
    """The default application listening on a free port."""
    running = ServerThread(create_server(config))
    running.start()

    yield running

    running.stop()


@pytest.fixture
def custom_server(config: ServerConfig) -> Generator[ServerThread, None, None]:
    """An HTTPServer with test-only routes, including a failing one."""
    server = HTTPServer(config)

    @server.get("/boom")
    def boom(request):
        raise RuntimeError("handler exploded")

    @server.put("/len")
    def body_length(request):
        return ok(str(len(request.body)))

    running = ServerThread(server)
    running.start()

    yield running

    running.stop()


@pytest.fixture
def echo_server(config: ServerConfig) -> Generator[ServerThread, None, None]:
    running = ServerThread(EchoServer(config))
    running.start()

    yield running

    running.stop()


@pytest.fixture
def serve():
    """Start any server in the background; stopped again at teardown."""
    started = []

    def _serve(server) -> ServerThread:
        running = ServerThread(server)
        running.start()
        started.append(running)
        return running

    yield _serve

    for running in started:
        running.stop()
