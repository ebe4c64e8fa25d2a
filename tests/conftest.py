"""
pytest configuration and fixtures.
"""

import socket
import time
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from webserver import Listener, ServerConfig, start, stop


@pytest.fixture
def web_root(tmp_path: Path) -> Path:
    """
    A small web root:

        webroot/
            a/index.html
            b/
            notes.txt
            page.html
    """
    root = tmp_path / "webroot"
    (root / "a").mkdir(parents=True)
    (root / "b").mkdir()
    (root / "a" / "index.html").write_text("<h1>a</h1>\n<p>first</p>\n")
    (root / "notes.txt").write_text("line one\nline two\r\nline three\n")
    (root / "page.html").write_text("<html>\n<body>hi</body>\n</html>\n")
    return root


@pytest.fixture
def config(web_root: Path) -> ServerConfig:
    """Test configuration serving web_root on a free port."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        web_root=str(web_root),
        connection_timeout=5.0,
        accept_poll_interval=0.1,
        log_level="WARNING",
    )


@pytest.fixture
def listener(config: ServerConfig) -> Generator[Listener, None, None]:
    """A running server, stopped after the test."""
    running = start(config)
    yield running
    stop(running)


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def send_raw(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes and read until the server closes the connection."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        s.sendall(data)
        chunks = []
        while True:
            try:
                chunk = s.recv(4096)
            except ConnectionResetError:
                break
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


def http_get(port: int, path: str, method: str = "GET") -> bytes:
    """Issue a one-shot request and return the raw response."""
    request = (
        f"{method} {path} HTTP/1.1\r\n"
        f"Host: 127.0.0.1:{port}\r\n"
        f"\r\n"
    ).encode("ascii")
    return send_raw(port, request)


def split_response(raw: bytes):
    """Split a raw response into (head, body) text."""
    text = raw.decode("utf-8")
    head, _, body = text.partition("\r\n\r\n")
    return head, body


def wait_until(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
