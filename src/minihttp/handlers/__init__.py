"""
=============================================================================
HANDLERS PACKAGE
=============================================================================

Request handlers: callables that take an HTTPRequest and return an
HTTPResponse.

1. load_file() / FileLoadError
   - Reads a file fully into memory, raising FileLoadError on failure

2. StaticFileHandler
   - Serves a single file for a route
   - 200 with the file bytes, or 500 if the file cannot be read

=============================================================================
"""

from .static import FileLoadError, StaticFileHandler, load_file

__all__ = [
    "FileLoadError",
    "StaticFileHandler",
    "load_file",
]
