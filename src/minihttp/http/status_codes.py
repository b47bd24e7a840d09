"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server can answer with.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  Code  │ When minihttp sends it                                    │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  200   │ Path matched a route and the file was read                │
    │  400   │ Request line could not be split into method + path        │
    │  404   │ No route matched the request path                         │
    │  405   │ Method other than GET                                     │
    │  500   │ Path matched a route but the file could not be read       │
    └────────┴───────────────────────────────────────────────────────────┘

The reason phrase goes on the status line right after the code:

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase
              └───────── Status code

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    IntEnum so a status compares equal to its plain integer:

        >>> HTTPStatus.NOT_FOUND == 404
        True
    """

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line (e.g. "Not Found")."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        """4xx or 5xx. Used to pick the log level of access lines."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
