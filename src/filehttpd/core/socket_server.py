"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop. Every accepted client is
wrapped in a Connection and handed to a callback; what happens next is
the caller's business.

=============================================================================
SOCKET LIFECYCLE
=============================================================================

    socket() ──► bind() ──► listen() ──► accept() loop ──► close()
                                              │
                                              ▼
                                   connection_handler(conn)

accept() waits at most ACCEPT_POLL_SECONDS at a time so the loop can
notice shutdown() without needing a wake-up connection.

=============================================================================
SIGNALS
=============================================================================

SIGINT (Ctrl+C) and SIGTERM stop the accept loop. Python only lets the
main thread install signal handlers, so when the server runs in a
background thread (as it does in tests) handlers are left alone and
shutdown() must be called directly.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


ACCEPT_POLL_SECONDS = 1.0

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class SocketServer:
    """
    Listening socket plus accept loop.

    Usage:
        server = SocketServer(config)
        server.start(lambda conn: ...)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config

        self._listener: Optional[socket.socket] = None
        self._running = False
        self._bound_address: Optional[Tuple[str, int]] = None
        self._ready = threading.Event()
        self._saved_handlers: Dict[int, object] = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        Address the server listens on.

        Once bound this is the real address, so port 0 reports the port
        the OS picked.
        """
        return self._bound_address or (self.config.host, self.config.port)

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept connections until shutdown() is called.

        Args:
            connection_handler: Called with each new Connection on the
                                accepting thread; it must hand the work
                                off and return quickly.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._listener = self._listen()
        self._bound_address = self._listener.getsockname()[:2]
        self._running = True
        self._install_signal_handlers()
        self._ready.set()

        host, port = self._bound_address
        logger.info(f"Server listening on {host}:{port}")

        try:
            while self._running:
                conn = self._accept()
                if conn is not None:
                    connection_handler(conn)
        finally:
            self._close()

    def shutdown(self):
        """
        Stop accepting connections.

        Callable from any thread, any number of times. Connections already
        handed off run to completion.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the socket is listening.

        Returns:
            False if `timeout` expired first.
        """
        return self._ready.wait(timeout)

    def _listen(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        # Header lines go out as soon as they are flushed
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.settimeout(ACCEPT_POLL_SECONDS)

        try:
            sock.bind((self.config.host, self.config.port))
            sock.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            sock.close()
            raise

        return sock

    def _accept(self) -> Optional[Connection]:
        """Wait one poll interval for a client; None if nobody came."""
        try:
            client_socket, client_address = self._listener.accept()
        except socket.timeout:
            return None
        except OSError as e:
            if self._running:
                logger.error(f"Accept error: {e}")
            self._running = False
            return None

        logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")
        return Connection(
            socket=client_socket,
            address=client_address,
            timeout=self.config.timeout,
        )

    def _install_signal_handlers(self):
        if threading.current_thread() is not threading.main_thread():
            return

        def on_signal(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
            self.shutdown()

        for sig in STOP_SIGNALS:
            self._saved_handlers[sig] = signal.signal(sig, on_signal)

    def _close(self):
        for sig, handler in self._saved_handlers.items():
            signal.signal(sig, handler)
        self._saved_handlers.clear()

        self._listener.close()
        self._listener = None
        self._running = False
        self._ready.clear()
        logger.info("Socket server stopped")
