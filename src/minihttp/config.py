"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every tunable of the server lives in one dataclass.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WHERE VALUES COME FROM                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Command line       minihttp 127.0.0.1 8080 --root ./site       │
    │   2. Environment        MINIHTTP_PORT=8080 MINIHTTP_ROOT=./site     │
    │   3. Defaults           the field defaults below                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The buffer and field capacities used to be implicit array sizes. They are
plain constants here so tests (and callers) can see and change them.

=============================================================================
"""

import os
import socket
from dataclasses import dataclass
from typing import Optional


# Capacities of the parsed request fields (one slot is reserved, so a
# method keeps at most MAX_METHOD_SIZE - 1 characters)
MAX_METHOD_SIZE = 10
MAX_PATH_SIZE = 100
MAX_BODY_SIZE = 4096

# One recv() reads at most this many bytes; the rest of a request is lost
RECV_BUFFER_SIZE = 30000

LISTEN_BACKLOG = 10
MAX_PORT = 65534

DEFAULT_DOCUMENT_ROOT = "./public_html"


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK
    - host, port, backlog, buffer_size, timeout, accept_timeout

    REQUEST LIMITS
    - max_method_size, max_path_size, max_body_size

    CONTENT
    - document_root

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """IPv4 address to bind to, in dotted-quad form."""

    port: int = 8080
    """Port to listen on, 1-65534."""

    backlog: int = LISTEN_BACKLOG
    """Connections the kernel queues while we serve the current one."""

    buffer_size: int = RECV_BUFFER_SIZE
    """Size of the single recv() per connection."""

    timeout: Optional[float] = None
    """
    recv/send timeout on client sockets. None blocks forever, so a silent
    client stalls the whole server.
    """

    accept_timeout: float = 1.0
    """How often the accept loop wakes up to check for shutdown."""

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST LIMITS
    # ─────────────────────────────────────────────────────────────────────

    max_method_size: int = MAX_METHOD_SIZE
    max_path_size: int = MAX_PATH_SIZE
    max_body_size: int = MAX_BODY_SIZE

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = DEFAULT_DOCUMENT_ROOT
    """Directory the stock routes ("/" and "/test") point into."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG also dumps every raw request and response."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        MINIHTTP_HOST       Bind address (default: 127.0.0.1)
        MINIHTTP_PORT       Port (default: 8080)
        MINIHTTP_ROOT       Document root (default: ./public_html)
        MINIHTTP_LOG_LEVEL  Logging level (default: INFO)
        """
        return cls(
            host=os.getenv("MINIHTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("MINIHTTP_PORT", "8080")),
            document_root=os.getenv("MINIHTTP_ROOT", DEFAULT_DOCUMENT_ROOT),
            log_level=os.getenv("MINIHTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad value fails before the socket is
        created.

        Raises:
            ValueError: On the first invalid value.
        """
        if not is_ipv4_address(self.host):
            raise ValueError(f"Invalid IP address: {self.host}")

        if not 0 < self.port <= MAX_PORT:
            raise ValueError(f"Invalid port number: {self.port}. Must be 1-{MAX_PORT}.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.accept_timeout <= 0:
            raise ValueError("accept_timeout must be > 0")

        for name in ("max_method_size", "max_path_size", "max_body_size"):
            if getattr(self, name) < 2:
                raise ValueError(f"{name} must be >= 2")


def is_ipv4_address(value: str) -> bool:
    """True if value is a dotted-quad IPv4 address such as "127.0.0.1"."""
    try:
        socket.inet_pton(socket.AF_INET, value)
    except (OSError, TypeError):
        return False
    return True
