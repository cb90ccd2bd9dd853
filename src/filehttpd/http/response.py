"""
=============================================================================
HTTP RESPONSE HEADER
=============================================================================

Writes the status line and the fixed header fields that start every
response.

=============================================================================
WHAT GOES ON THE WIRE
=============================================================================

    HTTP/1.1 200 OK\n                        ← Status line
    Date: Wed, 01 Jan 2026 12:00:00 GMT\n    ← When the response was made
    Server: Jon's very own server\n          ← Server identity
    Connection: close\n                      ← One request per connection
    Content-Type: text/html\n                ← From the MIME classifier
    \n                                       ← End of header block

Notes:
- Lines end with a bare "\n". Browsers and curl accept it.
- There is no Content-Length: the body ends when the connection closes,
  which is what "Connection: close" tells the client.
- The status depends ONLY on whether the resource was found. A missing
  .png is "404 Not Found" with "Content-Type: image/png".

=============================================================================
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Optional

from ..errors import StreamError
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


HTTP_VERSION = "HTTP/1.1"
SERVER_NAME = "Jon's very own server"
LINE_END = "\n"


@dataclass
class ResponseHeader:
    """
    The header block of one response.

    Built fresh for every request and serialized once.
    """

    status: HTTPStatus
    content_type: str
    server_name: str = SERVER_NAME
    date: Optional[datetime] = None

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{HTTP_VERSION} {int(self.status)} {self.status.phrase}"

    def to_bytes(self) -> bytes:
        """Serialize the header block, including the terminating blank line."""
        date = self.date or datetime.now(timezone.utc)
        lines = [
            self.status_line,
            f"Date: {format_http_date(date)}",
            f"Server: {self.server_name}",
            "Connection: close",
            f"Content-Type: {self.content_type}",
            "",
        ]
        return (LINE_END.join(lines) + LINE_END).encode("utf-8")


def write_header(
    stream: BinaryIO,
    mime_type: str,
    found: bool,
    server_name: str = SERVER_NAME,
) -> ResponseHeader:
    """
    Write the response header block to the client.

    Args:
        stream: Writable binary stream.
        mime_type: Content type decided for this request.
        found: Whether the requested resource exists.
        server_name: Value of the Server header.

    Returns:
        The header that was written.

    Raises:
        StreamError: If the write fails. The body must not be attempted.
    """
    status = HTTPStatus.OK if found else HTTPStatus.NOT_FOUND
    header = ResponseHeader(
        status=status,
        content_type=mime_type,
        server_name=server_name,
    )

    try:
        stream.write(header.to_bytes())
    except OSError as e:
        raise StreamError(f"Header write failed: {e}", stage="header") from e

    logger.debug(f"Sent header: {header.status_line}")
    return header


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT

    Aware datetimes are converted to UTC first; naive ones are assumed
    to already be UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
