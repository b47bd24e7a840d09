"""
=============================================================================
CONNECTION HANDLING
=============================================================================

Wraps one accepted client socket for the lifetime of one request.

=============================================================================
ONE RECV, ONE SEND
=============================================================================

TCP is a byte stream, so a request may in principle arrive in several
pieces. This server does not reassemble them. It does exactly one recv()
of up to buffer_size bytes and treats that as the whole request:

    Client sends:   "GET / HTTP/1.1\\r\\nHost: x\\r\\n\\r\\n"
    recv(30000) →   "GET / HTTP/1.1\\r\\nHost: x\\r\\n\\r\\n"   (usual case)

    Client sends 40 KB:
    recv(30000) →   first 30000 bytes; the rest is never read

The response goes out with a single sendall(), then the socket is closed.
There is no keep-alive.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► DISPATCHING ──► WRITING ──► CLOSING ──► CLOSED
               │                                      ▲
               └── recv failed / peer closed ─────────┘

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..config import RECV_BUFFER_SIZE


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Lifecycle of a client connection, used in debug logs."""

    NEW = "new"                  # Just accepted
    READING = "reading"          # Waiting in recv()
    DISPATCHING = "dispatching"  # Parsing and routing the request
    WRITING = "writing"          # Sending the response
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short random identifier used in log lines.
        state: Current ConnectionState.
        created_at: Accept time (time.time()).
        buffer_size: Maximum bytes read by read_request().
        timeout: recv/send timeout; None blocks indefinitely.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = RECV_BUFFER_SIZE
    timeout: Optional[float] = None

    def __post_init__(self):
        # Accepted sockets may inherit the listening socket's accept timeout
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    def read_request(self) -> Optional[bytes]:
        """
        Read the request with a single recv().

        Returns:
            The received bytes, or None if the peer closed the connection
            without sending anything.

        Raises:
            OSError: If recv() fails (reset, timeout, ...). The caller logs
                     it and drops the connection.
        """
        self.state = ConnectionState.READING
        data = self.socket.recv(self.buffer_size)
        if not data:
            return None
        if len(data) == self.buffer_size:
            logger.debug(f"[{self.id}] Request filled the {self.buffer_size}-byte buffer, may be truncated")
        return data

    def send_response(self, data: bytes) -> bool:
        """
        Send the whole response.

        Returns:
            True if sent, False if the client went away.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.error(f"[{self.id}] Error sending response: {e}")
            return False

    def close(self):
        """Close the socket. Safe to call more than once."""
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING
        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone
        self.socket.close()

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
