"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server answers with exactly one of two statuses:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ OK         - The requested path is an existing file       │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  404   │ Not Found  - Anything else (missing file, directory,      │
    │        │              malformed request line)                      │
    └────────┴───────────────────────────────────────────────────────────┘

There is deliberately no 400: a request line the parser cannot make
sense of is answered as "not found".

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    NOT_FOUND = 404

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
