"""
Exception types raised by the request pipeline.

Only faults on the client stream are exceptional. A malformed request line
or a missing file are ordinary outcomes (they become a 404 response), so
they have no exception type here.
"""


class FileHTTPDError(Exception):
    """Base class for all filehttpd errors."""


class StreamError(FileHTTPDError):
    """
    Raised when reading from or writing to the client stream fails.

    A stream fault is fatal for the current request: the remaining stages
    are skipped and the dispatcher tears the connection down. No retry is
    attempted.

    Attributes:
        stage: Pipeline stage that hit the fault ("parse", "header", "body").
    """

    def __init__(self, message: str, stage: str = ""):
        super().__init__(message)
        self.stage = stage
