"""
=============================================================================
CORE PACKAGE - Networking
=============================================================================

Low-level socket handling, below the HTTP layer:

1. SocketServer (socket_server.py)
   - Creates, binds and listens on the TCP socket
   - Runs the accept loop, one connection at a time
   - Stops on SIGINT/SIGTERM or shutdown()

2. Connection (connection.py)
   - Wraps one client socket
   - One recv() in, one sendall() out, then close

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Listening socket + accept loop
    "Connection",       # One client socket
    "ConnectionState",  # Connection lifecycle states
]
