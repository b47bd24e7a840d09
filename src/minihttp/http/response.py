"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds HTTP/1.1 responses in the one wire format this server speaks.

=============================================================================
WIRE FORMAT
=============================================================================

Every response has the same shape. Only the status line, the length and
the body change:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n                        ← status line         │
    │    Content-Type: text/html;charset=UTF-8\r\n  ← always this type    │
    │    Content-Length: 27\r\n                     ← len(body)           │
    │    \r\n                                       ← separator           │
    │    <html>...</html>                           ← body                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The Content-Type is fixed. A .css or .png served through a route still
goes out as text/html. Extra headers (only "Allow" on a 405 today) are
written after Content-Length.

=============================================================================
CONTENT LENGTH
=============================================================================

content_length is a property computed from the body, so it can never
disagree with the bytes actually sent. Re-parsing Content-Length from
to_bytes() always yields the number of bytes after the blank line.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.1"
CONTENT_TYPE = "text/html;charset=UTF-8"


class ResponseError(Exception):
    """Raised when a response cannot be serialized to bytes."""


@dataclass
class HTTPResponse:
    """
    An HTTP response waiting to be written to the socket.

        HTTPResponse(status=HTTPStatus.OK, body=b"<h1>hi</h1>").to_bytes()

    Use ResponseBuilder or the helpers at the bottom of this module
    rather than filling the fields by hand.
    """

    status: HTTPStatus = HTTPStatus.OK
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.status = HTTPStatus(self.status)

    @property
    def content_length(self) -> int:
        return len(self.body)

    @property
    def status_line(self) -> str:
        """e.g. "HTTP/1.1 404 Not Found"."""
        return f"{HTTP_VERSION} {int(self.status)} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

        Content-Type and Content-Length always come first and cannot be
        overridden through headers.

        Raises:
            ResponseError: If the status line or a header value cannot be
                           encoded (non-Latin-1 text, CR/LF in a value).
        """
        lines = [
            self.status_line,
            f"Content-Type: {CONTENT_TYPE}",
            f"Content-Length: {self.content_length}",
        ]
        for name, value in self.headers.items():
            if name.lower() in ("content-type", "content-length"):
                continue
            if "\r" in value or "\n" in value:
                raise ResponseError(f"Line break in header {name!r}")
            lines.append(f"{name}: {value}")

        try:
            head = ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")
        except UnicodeEncodeError as e:
            raise ResponseError(f"Cannot encode response head: {e}") from e

        return head + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .body(file_bytes)
            .build())

    Every method except build() returns the builder itself.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = HTTPStatus(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def body(self, content: Union[str, bytes]) -> "ResponseBuilder":
        """Set the body. Text is encoded as UTF-8."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._body = content
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            body=self._body,
            headers=dict(self._headers),
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
# One per status the server produces. Only 200 carries a body.

def ok(content: Union[str, bytes] = b"") -> HTTPResponse:
    """200 OK with the given content."""
    return ResponseBuilder().status(HTTPStatus.OK).body(content).build()


def bad_request() -> HTTPResponse:
    """400 Bad Request, empty body."""
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).build()


def not_found() -> HTTPResponse:
    """404 Not Found, empty body."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()


def method_not_allowed(allowed: tuple[str, ...] = ("GET",)) -> HTTPResponse:
    """405 Method Not Allowed with an Allow header, empty body."""
    return (ResponseBuilder()
        .status(HTTPStatus.METHOD_NOT_ALLOWED)
        .header("Allow", ", ".join(allowed))
        .build())


def internal_error() -> HTTPResponse:
    """500 Internal Server Error, empty body."""
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).build()
