"""
=============================================================================
FILE SERVER
=============================================================================

Ties the pieces together: a SocketServer accepts connections, and each
one gets its own thread running the RequestHandler once.

=============================================================================
THREAD PER CONNECTION
=============================================================================

    main thread                      worker threads
    ───────────                      ──────────────

    accept() ──► conn #1 ──start──►  handle(conn #1) ──► close
       │
    accept() ──► conn #2 ──start──►  handle(conn #2) ──► close
       │
    accept() ...

Workers share nothing but the read-only config and handler, so there is
nothing to lock. A worker lives for exactly one request; the connection
idle timeout bounds how long a slow client can keep it alive.

=============================================================================
"""

import logging
import threading
from typing import Optional, Tuple

from .config import ServerConfig
from .core import Connection, SocketServer
from .handlers import RequestHandler


logger = logging.getLogger(__name__)


class FileServer:
    """
    HTTP file server.

    Usage:
        server = FileServer(ServerConfig(port=8080, root_dir="./public"))
        server.run()  # Blocks until Ctrl+C
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._handler = RequestHandler(self.config)

    @property
    def address(self) -> Tuple[str, int]:
        """Address the server is (or will be) listening on."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def run(self, setup_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            setup_logging: Configure the root logger from config.log_level.
                           Pass False when embedding in an application that
                           configures logging itself.
        """
        if setup_logging:
            self._setup_logging()

        logger.info(f"Serving files from {self.config.root_dir!r}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting new connections."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening (useful in tests)."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("filehttpd").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """Start a worker thread for a newly accepted connection."""
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"worker-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process_connection(self, conn: Connection):
        """Run one request on a connection (worker thread)."""
        logger.debug(f"[{conn.id}] Handling connection from {conn.client_ip}:{conn.client_port}")
        with conn:  # Context manager ensures connection is closed
            self._handler.handle(conn.rfile, conn.wfile, conn_id=conn.id)
        logger.debug(f"[{conn.id}] Done handling connection")
