"""
=============================================================================
HTTP PROTOCOL PACKAGE
=============================================================================

Everything between "bytes arrived" and "bytes to send":

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST PARSING (request.py)                                        │
    │   raw bytes → HTTPRequest(method, path, body, body_size)            │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ROUTING (router.py)                                                 │
    │   HTTPRequest → Route lookup → handler → HTTPResponse               │
    ├─────────────────────────────────────────────────────────────────────┤
    │ RESPONSE BUILDING (response.py)                                     │
    │   HTTPResponse → b"HTTP/1.1 200 OK\\r\\n..."                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │ STATUS CODES (status_codes.py)                                      │
    │   200, 400, 404, 405, 500 with reason phrases                       │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ResponseError,
    ok,                  # 200 OK
    bad_request,         # 400 Bad Request
    not_found,           # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
    internal_error,      # 500 Internal Server Error
)
from .status_codes import HTTPStatus
from .router import Dispatcher, Route, RouteTable, default_routes

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "ResponseError",
    "ok",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "internal_error",

    # Routing
    "Dispatcher",
    "Route",
    "RouteTable",
    "default_routes",

    # Status codes
    "HTTPStatus",
]
