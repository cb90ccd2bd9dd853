"""
=============================================================================
REQUEST HANDLER
=============================================================================

Runs the full request/response cycle for ONE connection.

=============================================================================
THE PIPELINE
=============================================================================

    ┌───────────┐   ┌───────────┐   ┌───────────┐   ┌──────────┐   ┌──────────┐
    │  PARSE    │──►│ CLASSIFY  │──►│  RESOLVE  │──►│  HEADER  │──►│   BODY   │
    │ rfile →   │   │ path →    │   │ path →    │   │ status + │   │ 404 page │
    │ Request   │   │ mime_type │   │ Resource  │   │ 4 fields │   │ or file  │
    └───────────┘   └───────────┘   └───────────┘   └──────────┘   └──────────┘

Stages run strictly in order. There are no back-edges and no retries: if
a stage hits a stream fault the rest are skipped.

The content type and the resource are computed once here and handed to
both the header and body stages as plain values, so the two halves of
the response can never disagree.

=============================================================================
ERROR BOUNDARY
=============================================================================

Nothing escapes handle(). Stream faults are logged as warnings (clients
hang up all the time); anything else is a bug and is logged with a
traceback. Closing the connection is the dispatcher's job.

=============================================================================
"""

import logging
from typing import BinaryIO, Optional

from ..config import ServerConfig
from ..errors import StreamError
from ..http.mime_types import get_mime_type
from ..http.request import RequestParser
from ..http.response import write_header
from .content import ContentStreamer
from .resource import resolve_resource


logger = logging.getLogger(__name__)


class RequestHandler:
    """
    Handles a single request on an already-open stream pair.

    A handler holds only read-only configuration, so one instance can be
    shared by every connection thread.

    Usage:
        handler = RequestHandler(config)
        with conn:
            handler.handle(conn.rfile, conn.wfile, conn_id=conn.id)
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self._parser = RequestParser()
        self._streamer = ContentStreamer()

    def handle(self, rfile: BinaryIO, wfile: BinaryIO, conn_id: str = "-") -> bool:
        """
        Read one request and write the complete response.

        Args:
            rfile: Readable side of the client connection.
            wfile: Writable side of the client connection.
            conn_id: Connection id used in log messages.

        Returns:
            True if a full response was written, False if the request was
            abandoned.
        """
        try:
            self._respond(rfile, wfile, conn_id)
            return True
        except StreamError as e:
            logger.warning(f"[{conn_id}] Stream error during {e.stage or 'request'}: {e}")
        except Exception as e:
            logger.exception(f"[{conn_id}] Request failed: {e}")
        return False

    def _respond(self, rfile: BinaryIO, wfile: BinaryIO, conn_id: str) -> None:
        request = self._parser.parse(rfile)
        mime_type = get_mime_type(request.target_path)

        with resolve_resource(request.target_path, self.config.root_dir) as resource:
            header = write_header(
                wfile,
                mime_type,
                resource.found,
                server_name=self.config.server_name,
            )
            self._streamer.write(wfile, mime_type, resource)

        try:
            wfile.flush()
        except OSError as e:
            raise StreamError(f"Flush failed: {e}", stage="body") from e

        logger.info(
            f"[{conn_id}] GET {request.target_path!r} -> "
            f"{int(header.status)} {mime_type}"
        )
