"""
pytest configuration and fixtures.
"""

import io
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from filehttpd import FileServer, ServerConfig


# A few bytes that are not valid UTF-8 and contain line terminators,
# so any text-mode handling would corrupt them
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n"
    b"\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06"
    b"\xff\xfe\n\r\n<cs371date>\n\x00"
)

INDEX_HTML = (
    b"<html>\n"
    b"<body>\n"
    b"<cs371date>\n"
    b"<cs371server>\n"
    b"</body>\n"
    b"</html>\n"
)


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request as sent by a browser."""
    return (
        b"GET /index.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
    """Directory with a templated HTML page and an image."""
    (tmp_path / "index.html").write_bytes(INDEX_HTML)
    (tmp_path / "cat.png").write_bytes(PNG_BYTES)
    (tmp_path / "photos").mkdir()
    return tmp_path


@pytest.fixture
def config(docroot: Path) -> ServerConfig:
    """Test configuration serving the docroot on an OS-assigned port."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        timeout=5.0,
        root_dir=str(docroot),
        log_level="WARNING",
    )


class BrokenStream(io.RawIOBase):
    """Writable stream whose writes fail like a disconnected socket."""

    def __init__(self, fail_after: int = 0):
        self.fail_after = fail_after
        self.written = b""

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        if self.fail_after <= 0:
            raise BrokenPipeError("client went away")
        self.fail_after -= 1
        self.written += bytes(data)
        return len(data)


@pytest.fixture
def broken_stream() -> BrokenStream:
    """A stream that fails on the first write."""
    return BrokenStream()


@pytest.fixture
def make_broken_stream():
    """Factory for streams that fail after a number of successful writes."""
    return BrokenStream


class RunningServer:
    """Runs a FileServer in a background thread."""

    def __init__(self, server: FileServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"setup_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def server_factory() -> Generator:
    """Start servers on demand; all are stopped at teardown."""
    started = []

    def start(config: ServerConfig) -> RunningServer:
        srv = RunningServer(FileServer(config))
        srv.start()
        started.append(srv)
        return srv

    yield start

    for srv in started:
        srv.stop()


@pytest.fixture
def running_server(config: ServerConfig, server_factory) -> RunningServer:
    """A live server serving the docroot."""
    return server_factory(config)
