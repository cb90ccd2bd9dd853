"""
HTTP protocol pieces: request line parsing, response header writing,
status codes and MIME classification.
"""

from .request import Request, RequestParser, parse_request
from .response import ResponseHeader, write_header, format_http_date
from .status_codes import HTTPStatus
from .mime_types import get_mime_type, is_binary_type

__all__ = [
    # Request parsing
    "Request",
    "RequestParser",
    "parse_request",

    # Response header
    "ResponseHeader",
    "write_header",
    "format_http_date",

    # Status codes
    "HTTPStatus",

    # MIME types
    "get_mime_type",
    "is_binary_type",
]
