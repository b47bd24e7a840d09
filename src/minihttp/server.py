"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

Ties the socket layer and the HTTP layer together.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.read_request()     one recv()                           │
    │        │    └── error / peer closed ──► close, back to accept        │
    │        ▼                                                             │
    │   RequestParser.parse()                                              │
    │        │    └── no method/path ──► 400 Bad Request                   │
    │        ▼                                                             │
    │   Dispatcher.dispatch()         405 / 404 / 200 / 500                │
    │        │                                                             │
    │        ▼                                                             │
    │   HTTPResponse.to_bytes()                                            │
    │        │    └── cannot serialize ──► close without reply             │
    │        ▼                                                             │
    │   Connection.send_response()    one sendall()                        │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection.close()  ──► back to accept                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing that goes wrong with one connection stops the server. Only
startup failures (bad config, bind/listen errors) propagate out of run().

=============================================================================
"""

import logging
from typing import Optional

from .http import (
    Dispatcher, HTTPParseError, HTTPResponse, HTTPStatus, RequestParser,
    ResponseError, RouteTable, bad_request, default_routes, internal_error,
)
from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer
from .handlers import load_file
from .handlers.static import FileLoader
from .utils import escape_crlf


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Single-threaded HTTP/1.1 file server.

    =========================================================================
    USAGE
    =========================================================================

        # Stock routes ("/" and "/test") under ./public_html
        HTTPServer(ServerConfig(host="127.0.0.1", port=8080)).run()

        # Custom table
        routes = RouteTable([Route("/about", "./site/about.html")])
        HTTPServer(config, routes=routes).run()

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        routes: Optional[RouteTable] = None,
        loader: FileLoader = load_file,
    ):
        """
        Args:
            config: Server configuration. Defaults are used if omitted.
            routes: Route table. Defaults to the stock routes under
                    config.document_root.
            loader: File loader handed to the dispatcher.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        if routes is None:
            routes = default_routes(self.config.document_root)

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(
            max_method_size=self.config.max_method_size,
            max_path_size=self.config.max_path_size,
            max_body_size=self.config.max_body_size,
        )
        self._dispatcher = Dispatcher(routes, loader)

    @property
    def routes(self) -> RouteTable:
        return self._dispatcher.route_table

    @property
    def address(self) -> tuple[str, int]:
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start serving (blocking).

        Returns after shutdown() or SIGINT/SIGTERM.

        Raises:
            OSError: If the socket cannot be created, bound or listened on.
        """
        self._setup_logging()

        host, port = self.address
        logger.info(f"Starting HTTP server on {host}:{port}")
        for route in self.routes:
            logger.info(f"  GET {route.path} -> {route.file_path}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        logger.info("Server stopped")

    def shutdown(self):
        """Stop the accept loop. Safe to call from another thread."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server accepts connections. False on timeout."""
        return self._socket_server.wait_until_listening(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def handle_request(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0),
    ) -> HTTPResponse:
        """
        Turn one raw request buffer into a response.

        Never raises: a parse failure becomes 400, and an exception from a
        route handler becomes 500.
        """
        try:
            request = self._parser.parse(data, client_address)
        except HTTPParseError as e:
            logger.warning(f"Bad request from {client_address[0]}: {e}")
            return bad_request()

        try:
            response = self._dispatcher.dispatch(request)
            if not isinstance(response, HTTPResponse):
                raise TypeError(f"Handler returned {type(response).__name__}, not HTTPResponse")
            response.status = HTTPStatus(response.status)
        except Exception as e:
            logger.exception(f"Handler error for {request.method} {request.path}: {e}")
            response = internal_error()

        log = logger.warning if response.status.is_error else logger.info
        log(
            f'{client_address[0]} "{request.method} {request.path}" '
            f"{int(response.status)} {response.content_length}"
        )
        return response

    def _handle_connection(self, conn: Connection):
        """
        Serve one connection from accept to close.

        Runs on the accept loop's thread; the next client is accepted only
        after this returns.
        """
        with conn:
            try:
                raw = conn.read_request()
            except OSError as e:
                logger.error(f"[{conn.id}] Error receiving data: {e}")
                return

            if raw is None:
                logger.debug(f"[{conn.id}] Connection closed by {conn.client_ip} before sending data")
                return

            logger.debug(f"[{conn.id}] Received data:\n{escape_crlf(raw)}")

            conn.state = ConnectionState.DISPATCHING
            response = self.handle_request(raw, conn.address)

            try:
                payload = response.to_bytes()
            except ResponseError as e:
                logger.error(f"[{conn.id}] Failed to serialize response: {e}")
                return

            if conn.send_response(payload):
                logger.debug(f"[{conn.id}] Response sent:\n{escape_crlf(payload)}")
