"""
=============================================================================
ROUTE TABLE AND DISPATCHER
=============================================================================

Maps exact request paths to files and turns a request into a response.

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   GET /test                                                          │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  DISPATCHER                                                  │   │
    │   │                                                              │   │
    │   │  method != GET ?  ──────────────────────► 405 (Allow: GET)   │   │
    │   │        │                                                     │   │
    │   │        ▼                                                     │   │
    │   │  ROUTE TABLE (scanned in order, first match wins)            │   │
    │   │  ┌────────────────────────────────────────────────────────┐ │   │
    │   │  │ /      → ./public_html/index.html                      │ │   │
    │   │  │ /test  → ./public_html/test.html        ← MATCH        │ │   │
    │   │  └────────────────────────────────────────────────────────┘ │   │
    │   │        │                              │                      │   │
    │   │     matched                       no match ───────► 404      │   │
    │   │        │                                                     │   │
    │   │        ▼                                                     │   │
    │   │  route.handler or StaticFileHandler(route.file_path)         │   │
    │   │        │                                                     │   │
    │   │        ├── file read  ─────────────────────────────► 200     │   │
    │   │        └── read failed ────────────────────────────► 500     │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MATCHING RULES
=============================================================================

Paths are compared for exact equality, limited to the first
max_path_size characters. There are no parameters, no wildcards, no
prefix matches and no trailing-slash normalization:

    Route "/test"   matches "/test"
                    does not match "/test/", "/TEST", "/test?x=1"

The table is a tuple built once at startup. Changing the routes means
building a new table and a new Dispatcher.

=============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

from ..config import DEFAULT_DOCUMENT_ROOT, MAX_PATH_SIZE
from ..handlers.static import FileLoader, StaticFileHandler, load_file
from .request import HTTPRequest
from .response import HTTPResponse, method_not_allowed, not_found


logger = logging.getLogger(__name__)

# A handler takes the request and returns the full response
Handler = Callable[[HTTPRequest], HTTPResponse]

ALLOWED_METHODS = ("GET",)


@dataclass(frozen=True)
class Route:
    """
    One entry of the route table.

    Attributes:
        path:      URL path to match exactly (e.g. "/test").
        file_path: File served when the route matches.
        handler:   Optional handler that replaces the file lookup.
                   None means "serve file_path".
    """

    path: str
    file_path: str
    handler: Optional[Handler] = None


class RouteTable:
    """
    Immutable, ordered list of routes.

        table = RouteTable([
            Route("/", "./public_html/index.html"),
            Route("/test", "./public_html/test.html"),
        ])
        table.lookup("/test").file_path  # "./public_html/test.html"
    """

    def __init__(self, routes: Iterable[Route], max_path_size: int = MAX_PATH_SIZE):
        self._routes: tuple[Route, ...] = tuple(routes)
        self.max_path_size = max_path_size

    def lookup(self, path: str) -> Optional[Route]:
        """
        Find the first route whose path equals the request path.

        Only the first max_path_size characters of either side are
        compared.

        Returns:
            The matching Route, or None.
        """
        limit = self.max_path_size
        for route in self._routes:
            if route.path[:limit] == path[:limit]:
                return route
        return None

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)


class Dispatcher:
    """
    Produces the response for a parsed request.

    The route table and the file loader are injected, so tests can
    dispatch against their own routes and a fake loader.

        dispatcher = Dispatcher(default_routes("./public_html"))
        response = dispatcher.dispatch(request)
    """

    def __init__(self, route_table: RouteTable, loader: FileLoader = load_file):
        self.route_table = route_table
        self._loader = loader

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route one request.

        Returns:
            405 for any method but GET, 404 when no route matches, and
            otherwise whatever the route's handler returns (200 with the
            file, or 500 when the file cannot be read).
        """
        if request.method not in ALLOWED_METHODS:
            logger.warning(f"Unsupported HTTP method: {request.method}")
            return method_not_allowed(ALLOWED_METHODS)

        route = self.route_table.lookup(request.path)
        if route is None:
            logger.debug(f"No route for {request.path}")
            return not_found()

        handler = route.handler or StaticFileHandler(route.file_path, self._loader).handle
        return handler(request)

    __call__ = dispatch


def default_routes(document_root: Union[str, Path] = DEFAULT_DOCUMENT_ROOT) -> RouteTable:
    """The stock table: "/" → index.html, "/test" → test.html."""
    root = Path(document_root)
    return RouteTable([
        Route("/", str(root / "index.html")),
        Route("/test", str(root / "test.html")),
    ])
