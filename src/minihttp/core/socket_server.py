"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop.

=============================================================================
SOCKET LIFECYCLE
=============================================================================

    1. socket()    Create the TCP socket
    2. bind()      Reserve host:port
    3. listen()    Let the kernel queue up to `backlog` connections
    4. accept()    Take the next queued client (loop)
    5. close()     Release the listening socket on shutdown

=============================================================================
STRICTLY SEQUENTIAL
=============================================================================

The connection handler runs on the accept loop's own thread. accept() is
not called again until the handler returns, so connections are served
one at a time, in the order the kernel queued them:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept ─► handle(conn A) ─► accept ─► handle(conn B) ─► accept    │
    │                  │                           │                       │
    │   conn B waits in the backlog while A is served                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A client that connects and never sends stalls everyone behind it.

=============================================================================
SHUTDOWN
=============================================================================

accept() times out every `accept_timeout` seconds so the loop can notice
shutdown() (called from a signal handler or another thread). The timeout
only applies to waiting for new clients, never to a client being served.

=============================================================================
"""

import logging
import signal
import socket
import threading
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is listening, cleared when it is closed
        self._listening = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the configured pair until the socket exists."""
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create the IPv4 TCP socket with SO_REUSEADDR set."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Restarting right after a stop would otherwise fail with
        # "Address already in use" while old sockets sit in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(self.config.accept_timeout)
        return sock

    def _setup_signals(self):
        """
        Turn SIGINT/SIGTERM into a clean shutdown.

        Python only allows signal handlers on the main thread; when the
        server runs elsewhere (tests) the caller stops it with shutdown().
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
            self.shutdown()

        for sig in (signal.SIGTERM, signal.SIGINT):
            self._original_handlers[sig] = signal.signal(sig, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        Blocks until shutdown() is called.

        Args:
            connection_handler: Called with each accepted Connection. The
                                next accept() waits for it to return.

        Raises:
            OSError: If the socket cannot be created, bound or put into
                     listen mode.
        """
        try:
            self._socket = self._create_socket()
        except OSError as e:
            logger.error(f"Failed to create server socket: {e}")
            raise

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind server socket to {self.config.host}:{self.config.port}: {e}")
            self._close_socket()
            raise

        try:
            self._socket.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to listen on server socket: {e}")
            self._close_socket()
            raise

        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._listening.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Accept clients one at a time until shutdown.

        A failed accept() or an error escaping the connection handler is
        logged and the loop carries on.
        """
        while self._running:
            logger.debug("Waiting for new connection")
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    break  # Socket closed by shutdown()
                logger.error(f"Error accepting client connection: {e}")
                continue

            logger.debug(f"Connection established with {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )
            try:
                connection_handler(conn)
            except Exception:
                logger.exception(f"Unhandled error serving {client_address[0]}:{client_address[1]}")
                conn.close()

    def shutdown(self):
        """
        Ask the accept loop to stop.

        Takes effect within accept_timeout seconds, or once the connection
        being served is finished. Safe to call more than once.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the socket is listening.

        Returns:
            True if listening, False on timeout.
        """
        return self._listening.wait(timeout)

    def _close_socket(self):
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def _cleanup(self):
        self._restore_signals()
        self._listening.clear()
        self._close_socket()
        logger.info("Socket server stopped")
