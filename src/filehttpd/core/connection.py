"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket and exposes it as a pair of buffered
binary streams that the request handler reads from and writes to.

=============================================================================
SOCKET → FILE OBJECTS
=============================================================================

    client socket
         │
         ├──► makefile("rb") → rfile   readline() blocks until a full
         │                             line arrives or the timeout fires
         │
         └──► makefile("wb") → wfile   write() buffers; flush() sends

The timeout set on the socket applies to every blocking call on both
files. That is what bounds how long a silent client can hold a worker.

=============================================================================
LIFECYCLE
=============================================================================

    accepted ──► OPEN ──► (handler runs) ──► close() ──► CLOSED

    close():
      1. flush wfile       anything still buffered goes out
      2. shutdown(SHUT_WR) sends FIN so the client sees end of body
      3. close files + socket

Each step tolerates a socket the client already dropped.

=============================================================================
"""

import socket
import time
import logging
import uuid
from dataclasses import dataclass, field
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        timeout: Idle timeout for reads and writes (None = block forever).
        id: Short identifier used in log messages.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple
    timeout: Optional[float] = 30.0

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    created_at: float = field(default_factory=time.time)
    closed: bool = False

    rfile: BinaryIO = field(init=False, repr=False)
    wfile: BinaryIO = field(init=False, repr=False)

    def __post_init__(self):
        # Blocking mode with a timeout: no polling, bounded waits
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

        self.rfile = self.socket.makefile("rb")
        self.wfile = self.socket.makefile("wb")

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def client_port(self) -> int:
        """Get the client port."""
        return self.address[1]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    def close(self):
        """Flush pending output and close the connection."""
        if self.closed:
            return

        try:
            self.wfile.flush()
        except OSError as e:
            logger.debug(f"[{self.id}] Flush on close failed: {e}")

        for stream in (self.wfile, self.rfile):
            try:
                stream.close()
            except OSError:
                pass  # Unflushed data on a dead socket

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.close()
        except OSError:
            pass

        self.closed = True
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
