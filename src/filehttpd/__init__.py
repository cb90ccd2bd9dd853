"""
=============================================================================
FILEHTTPD - Minimal HTTP File Server
=============================================================================

Serves files from a directory over HTTP/1.1, one request per connection.
Text files are streamed line by line with two template tokens expanded;
images are copied byte for byte.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    filehttpd/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m filehttpd)
    ├── server.py            # FileServer: accept loop + thread per connection
    ├── config.py            # ServerConfig dataclass
    ├── errors.py            # StreamError
    ├── core/                # Connection dispatching
    │   ├── socket_server.py # Listening socket and accept loop
    │   └── connection.py    # Accepted socket as rfile/wfile
    ├── http/                # Protocol pieces
    │   ├── request.py       # Request line parsing
    │   ├── response.py      # Status line + header fields
    │   ├── status_codes.py  # 200 / 404
    │   └── mime_types.py    # Extension → Content-Type
    └── handlers/            # The per-request pipeline
        ├── resource.py      # Path → open file (once per request)
        ├── content.py       # Body: 404 page, byte copy, or templated text
        └── worker.py        # RequestHandler: parse → header → body

=============================================================================
QUICK START
=============================================================================

    from filehttpd import FileServer, ServerConfig

    server = FileServer(ServerConfig(port=8080, root_dir="./public"))
    server.run()

Or drive a single request over any pair of binary streams:

    from filehttpd import RequestHandler

    RequestHandler().handle(rfile, wfile)

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .errors import FileHTTPDError, StreamError
from .handlers import RequestHandler
from .server import FileServer

__all__ = [
    "FileServer",
    "RequestHandler",
    "ServerConfig",
    "FileHTTPDError",
    "StreamError",
    "__version__",
]
