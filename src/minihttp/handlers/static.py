"""
=============================================================================
STATIC FILE LOADING
=============================================================================

Reads the file behind a route and turns it into a response.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    FILE → RESPONSE                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   route "/"  ──►  ./public_html/index.html                          │
    │                         │                                            │
    │                 load_file() succeeds?                                │
    │                    │              │                                  │
    │                   yes             no (missing, directory, EACCES)    │
    │                    │              │                                  │
    │                    ▼              ▼                                  │
    │              200 OK + bytes   500 Internal Server Error (empty)     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Files are read whole, in binary mode, on every request. There is no
caching and no streaming.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Callable, Union

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, internal_error, ok


logger = logging.getLogger(__name__)

FileLoader = Callable[[Union[str, Path]], bytes]


class FileLoadError(Exception):
    """Raised when a route's file cannot be read."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Error opening file: {path} ({reason})")
        self.path = str(path)
        self.reason = reason


def load_file(path: Union[str, Path]) -> bytes:
    """
    Read a whole file into memory.

    Args:
        path: File-system location of the file.

    Returns:
        The file contents. len() of the result is the file size.

    Raises:
        FileLoadError: If the file is missing, is a directory, or cannot
                       be read.
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise FileLoadError(path, e.strerror or type(e).__name__) from e


class StaticFileHandler:
    """
    Serves one file for one route.

        handler = StaticFileHandler("./public_html/index.html")
        response = handler.handle(request)

    The loader is injectable so tests can simulate read failures without
    touching file permissions.
    """

    def __init__(self, file_path: Union[str, Path], loader: FileLoader = load_file):
        self.file_path = Path(file_path)
        self._loader = loader

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        try:
            content = self._loader(self.file_path)
        except FileLoadError as e:
            logger.error(f"{request.method} {request.path}: {e}")
            return internal_error()

        logger.debug(f"Loaded {self.file_path} ({len(content)} bytes)")
        return ok(content)
