"""
=============================================================================
CONTENT STREAMER
=============================================================================

Writes the response body after the header has been sent.

=============================================================================
THREE KINDS OF BODY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   resource.found?                                                    │
    │        │                                                             │
    │        ├── no  ──► "<h3>Error: 404 not Found</h3>"                   │
    │        │                                                             │
    │        └── yes ──► mime_type starts with "image/"?                   │
    │                        │                                             │
    │                        ├── yes ──► raw byte copy                     │
    │                        │                                             │
    │                        └── no  ──► line copy + template tokens       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
TEMPLATE TOKENS
=============================================================================

A text line that is EXACTLY one of these tokens gets extra text written
in front of it. The token itself is still written afterward:

    File line          Output
    ─────────          ──────
    <cs371date>        07/03/24 13:45:02<cs371date>
    <cs371server>      Farouk's Server.<cs371server>
    <p>hi</p>          <p>hi</p>

Tokens inside a longer line ("<p><cs371date></p>") are not expanded.

Line terminators ("\\r\\n", "\\n" or a lone "\\r") are stripped while
reading and never written back, so a multi-line HTML file reaches the
client as a single line. Browsers do not care; anything diffing the
output against the file will.

=============================================================================
"""

import io
import logging
import shutil
from contextlib import closing
from datetime import datetime
from typing import BinaryIO, Callable, Dict, Iterator, Optional

from ..errors import StreamError
from ..http.mime_types import is_binary_type
from .resource import Resource


logger = logging.getLogger(__name__)


NOT_FOUND_BODY = b"<h3>Error: 404 not Found</h3>"

DATE_TOKEN = b"<cs371date>"
SERVER_TOKEN = b"<cs371server>"

SERVER_SIGNATURE = "Farouk's Server."

# Two-digit day/month/year, 24-hour clock, local time
DATE_FORMAT = "%d/%m/%y %H:%M:%S"


def render_date(now: Optional[datetime] = None) -> str:
    """Render the replacement text for the date token."""
    return (now or datetime.now()).strftime(DATE_FORMAT)


def render_server() -> str:
    """Render the replacement text for the server token."""
    return SERVER_SIGNATURE


# Token line → function producing the text written before it
TEMPLATE_TOKENS: Dict[bytes, Callable[[], str]] = {
    DATE_TOKEN: render_date,
    SERVER_TOKEN: render_server,
}


class ContentStreamer:
    """
    Writes one response body.

    Usage:
        with resolve_resource(request.target_path) as resource:
            ContentStreamer().write(conn.wfile, "text/html", resource)
    """

    def __init__(self, chunk_size: int = 64 * 1024):
        """
        Args:
            chunk_size: Buffer size for binary copies.
        """
        self.chunk_size = chunk_size

    def write(self, stream: BinaryIO, mime_type: str, resource: Resource) -> None:
        """
        Write the body for a resolved resource.

        Args:
            stream: Writable binary stream (the client connection).
            mime_type: Content type decided for this request.
            resource: Result of resolving the request path.

        Raises:
            StreamError: If writing to the client fails.
            OSError: If reading the local file fails.
        """
        if not resource.found:
            self._send(stream, NOT_FOUND_BODY)
            return

        if is_binary_type(mime_type):
            self._copy_binary(stream, resource)
        else:
            self._copy_text(stream, resource)

    def _copy_binary(self, stream: BinaryIO, resource: Resource) -> None:
        """Copy the file's bytes verbatim."""
        try:
            shutil.copyfileobj(resource.handle, _ClientWriter(stream), self.chunk_size)
        except _ClientWriteError as e:
            raise StreamError(f"Body write failed: {e.__cause__}", stage="body") from e.__cause__

    def _copy_text(self, stream: BinaryIO, resource: Resource) -> None:
        """Copy the file line by line, expanding template tokens."""
        with closing(_lines_without_terminators(resource.handle)) as lines:
            for line in lines:
                render = TEMPLATE_TOKENS.get(line)
                if render is not None:
                    self._send(stream, render().encode("utf-8"))
                self._send(stream, line)

    def _send(self, stream: BinaryIO, data: bytes) -> None:
        try:
            stream.write(data)
        except OSError as e:
            raise StreamError(f"Body write failed: {e}", stage="body") from e


def write_body(stream: BinaryIO, mime_type: str, resource: Resource) -> None:
    """
    Convenience function to write a body with default settings.

    Args:
        stream: Writable binary stream.
        mime_type: Content type decided for this request.
        resource: Result of resolving the request path.
    """
    ContentStreamer().write(stream, mime_type, resource)


def _lines_without_terminators(handle: BinaryIO) -> Iterator[bytes]:
    """
    Yield lines with their terminator removed.

    "\\r\\n", "\\n" and a lone "\\r" all end a line. Latin-1 maps every byte
    to one character and back, so the line bytes come out unchanged.
    """
    text = io.TextIOWrapper(handle, encoding="latin-1", newline=None)
    try:
        for line in text:
            if line.endswith("\n"):
                line = line[:-1]
            yield line.encode("latin-1")
    finally:
        # Leave the file open; the Resource owns it
        text.detach()


class _ClientWriteError(Exception):
    """Marks a failure on the client side of a copy."""


class _ClientWriter:
    """
    Wraps the client stream during shutil.copyfileobj.

    copyfileobj raises the same OSError for a failed read of the file and
    a failed write to the socket. Tagging the write side lets us report
    only the latter as a stream fault.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def write(self, data: bytes) -> int:
        try:
            return self._stream.write(data)
        except OSError as e:
            raise _ClientWriteError() from e
