"""
=============================================================================
CONNECTION DISPATCHING
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Creates the listening socket, binds, listens                     │
    │  • Runs the accept() loop                                           │
    │  • Handles graceful shutdown via signals (SIGTERM, SIGINT)         │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ One Connection per accepted client
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • Wraps the client socket as buffered rfile / wfile                │
    │  • Applies the idle timeout to every read and write                 │
    │  • Flushes and closes cleanly when the request is done              │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection

__all__ = [
    "SocketServer",     # Listening socket + accept loop
    "Connection",       # Accepted client socket as a stream pair
]
