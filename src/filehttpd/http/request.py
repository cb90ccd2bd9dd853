"""
=============================================================================
HTTP REQUEST LINE PARSING
=============================================================================

Reads the request header block from the client stream and extracts the
one thing this server cares about: the requested path.

=============================================================================
WHAT WE READ
=============================================================================

    GET /index.html HTTP/1.1\r\n       ← Retrieval-method line
    Host: localhost:8080\r\n           ← Ignored
    User-Agent: curl/8.0\r\n           ← Ignored
    \r\n                               ← Blank line: stop reading

Only the path between the first and second space of the GET line is
kept. The version token and every other header are thrown away.

=============================================================================
A PERMISSIVE PARSER
=============================================================================

The parser never rejects a request. Anything it does not understand
simply ends the read loop, and whatever path was seen so far is used:

    ┌──────────────────────────────────┬──────────────────────────────────┐
    │ Input line                       │ Effect                           │
    ├──────────────────────────────────┼──────────────────────────────────┤
    │ ""          (blank)              │ stop, normal end of headers      │
    │ "X"         (< 3 chars)          │ stop                             │
    │ "GET /a HTTP/1.1"                │ path = "/a", keep reading        │
    │ "GET /a"    (no version)         │ path = "/a", stop                │
    │ "GET"       (nothing after)      │ stop, path unchanged             │
    │ "Host: x"   (anything else)      │ ignored, keep reading            │
    │ end of stream                    │ stop                             │
    └──────────────────────────────────┴──────────────────────────────────┘

If no GET line is ever seen the path stays at the placeholder " ", which
never names an existing file, so the client gets a 404.

=============================================================================
BLOCKING, NOT POLLING
=============================================================================

readline() blocks on the socket until a full line arrives or the socket's
idle timeout fires. A timeout, like any other read error, is a stream
fault: the request is abandoned without a response.

=============================================================================
PATH BYTES
=============================================================================

Lines are decoded as UTF-8 with "surrogateescape". A UTF-8 path such as
"/café.html" comes out as the same text the filesystem uses, and bytes
that are not valid UTF-8 survive as lone surrogates, which Path turns
back into the original bytes when the file is opened.

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

from ..errors import StreamError


logger = logging.getLogger(__name__)


# The only method this server understands
RETRIEVAL_METHOD = "GET"

# Path used when no GET line is seen; never resolves to a file
PLACEHOLDER_PATH = " "


@dataclass(frozen=True)
class Request:
    """
    A parsed request.

    Attributes:
        target_path: The path from the request line, exactly as sent
                     (leading "/" included). May be empty or malformed.
    """
    target_path: str = PLACEHOLDER_PATH


class RequestParser:
    """
    Reads request header lines from a binary stream.

    Usage:
        parser = RequestParser()
        request = parser.parse(conn.rfile)
        request.target_path  # "/index.html"
    """

    def __init__(self, encoding: str = "utf-8", errors: str = "surrogateescape"):
        """
        Args:
            encoding: Used to decode header lines.
            errors: Decoding error handler. "surrogateescape" never fails
                    and lets the filesystem layer re-encode the path to the
                    exact bytes the client sent.
        """
        self.encoding = encoding
        self.errors = errors

    def parse(self, stream: BinaryIO) -> Request:
        """
        Read lines until the end of the header block and build a Request.

        Args:
            stream: Readable binary stream positioned at the request start.

        Returns:
            The parsed request. Malformed input never raises.

        Raises:
            StreamError: If reading from the stream fails or times out.
        """
        target_path = PLACEHOLDER_PATH

        while True:
            line = self._read_line(stream)
            if line is None:
                break  # Client closed its side

            logger.debug(f"Request line: ({line!r})")

            if len(line) < len(RETRIEVAL_METHOD):
                # Blank line ends the headers; a stub line is an anomaly
                break

            if not line.startswith(RETRIEVAL_METHOD):
                continue

            # ─────────────────────────────────────────────────────────────
            # "GET <path> <version>" → <path>
            # ─────────────────────────────────────────────────────────────
            if len(line) == len(RETRIEVAL_METHOD):
                logger.debug(f"Request line has no target: ({line!r})")
                break

            candidate = line[len(RETRIEVAL_METHOD) + 1:]
            space = candidate.find(" ")
            if space == -1:
                # No version token; take what we have and stop
                target_path = candidate
                logger.debug(f"Request line has no version: ({line!r})")
                break

            target_path = candidate[:space]
            logger.debug(f"Requested file is: {target_path!r}")

        return Request(target_path=target_path)

    def _read_line(self, stream: BinaryIO) -> Optional[str]:
        """
        Read one line without its terminator.

        Returns:
            The decoded line, or None at end of stream.
        """
        try:
            raw = stream.readline()
        except OSError as e:
            raise StreamError(f"Request read failed: {e}", stage="parse") from e

        if not raw:
            return None

        if raw.endswith(b"\n"):
            raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return raw.decode(self.encoding, self.errors)


def parse_request(stream: BinaryIO) -> Request:
    """
    Convenience function to parse a request with default settings.

    Args:
        stream: Readable binary stream.

    Returns:
        Parsed Request.
    """
    return RequestParser().parse(stream)
