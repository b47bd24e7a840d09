"""
=============================================================================
MINIHTTP - Minimal single-threaded HTTP/1.1 file server
=============================================================================

Accepts one TCP connection at a time, reads one request, looks the path
up in a fixed route table and answers with the file behind it.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept ─► recv ─► parse ─► route ─► load file ─► send ─► close    │
    │     ▲                                                         │      │
    │     └─────────────────────────────────────────────────────────┘      │
    │                                                                      │
    │   200  path matched, file read                                       │
    │   400  request line unusable                                         │
    │   404  no route for the path                                         │
    │   405  method other than GET                                         │
    │   500  path matched, file unreadable                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttp)
    ├── server.py            # HTTPServer: ties everything together
    ├── config.py            # ServerConfig dataclass + limits
    ├── utils.py             # Debug dump helper
    ├── core/                # Networking
    │   ├── socket_server.py # Listening socket, accept loop
    │   └── connection.py    # One client socket
    ├── http/                # Protocol
    │   ├── request.py       # Request parsing
    │   ├── response.py      # Response serialization
    │   ├── router.py        # Route table + dispatcher
    │   └── status_codes.py  # Status enum
    └── handlers/
        └── static.py        # File loading

=============================================================================
QUICK START
=============================================================================

    from minihttp import HTTPServer, ServerConfig

    HTTPServer(ServerConfig(host="127.0.0.1", port=8080)).run()

or from a shell:

    minihttp 127.0.0.1 8080

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig
from .http import Route, RouteTable

__all__ = ["HTTPServer", "ServerConfig", "Route", "RouteTable", "__version__"]
