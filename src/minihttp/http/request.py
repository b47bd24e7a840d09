"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one recv() into a structured HTTPRequest.

This parser is deliberately small. It reads exactly what the dispatcher
needs and nothing else:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     WHAT WE EXTRACT                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    GET /test HTTP/1.1\r\n          ← request line                   │
    │    ─┬─ ──┬──                                                        │
    │     │    └── path   (2nd space-separated token)                     │
    │     └─────── method (1st space-separated token)                     │
    │                                                                      │
    │    Host: localhost\r\n             ← ignored                        │
    │    Content-Length: 5\r\n           ← body_size = 5                  │
    │    \r\n                            ← header/body separator          │
    │    hello                           ← body (at most body_size bytes) │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no HTTP version check, no URL decoding and no query string
handling. "/test?x=1" is a different path from "/test".

=============================================================================
SIZE LIMITS
=============================================================================

Every field is bounded. The limits are the capacities of the fields, so a
limit of 10 keeps at most 9 characters of the method (one slot is
reserved, the same way a terminated string buffer would be):

    max_method_size = 10   → "GET", "OPTIONS", ... (9 chars max)
    max_path_size   = 100  → 99 chars max
    max_body_size   = 4096 → 4095 bytes max

Anything longer is truncated, not rejected.

=============================================================================
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import MAX_BODY_SIZE, MAX_METHOD_SIZE, MAX_PATH_SIZE


HEADER_TERMINATOR = b"\r\n\r\n"

# Content-Length grammar: 1*DIGIT
DIGITS_PATTERN = re.compile(r"[0-9]+")


class HTTPParseError(Exception):
    """
    Raised when a buffer does not contain a usable request.

    Carries the status code the server answers with. Parsing only fails
    when the request line has no method or no path, which maps to 400.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Attributes:
        method:         Request method, truncated to the method capacity.
        path:           Request path exactly as sent (no decoding).
        body:           Body bytes. Empty unless a Content-Length header
                        was found AND the blank line was present.
        body_size:      Declared Content-Length (0 if absent or malformed).
        headers:        Header name (lowercase) → first value seen.
        client_address: (ip, port) of the peer, for logging.
        raw:            The bytes this request was parsed from.
    """

    method: str
    path: str
    body: bytes = b""
    body_size: int = 0
    headers: Dict[str, str] = field(default_factory=dict)
    client_address: tuple[str, int] = ("", 0)
    raw: bytes = field(default=b"", repr=False)

    @property
    def has_body(self) -> bool:
        """True when a Content-Length header was sent."""
        return "content-length" in self.headers

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

        parser = RequestParser()
        request = parser.parse(b"GET / HTTP/1.1\\r\\nHost: x\\r\\n\\r\\n")
        request.method  # "GET"
        request.path    # "/"

    The capacities come from ServerConfig so tests can shrink them.
    """

    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(
        self,
        max_method_size: int = MAX_METHOD_SIZE,
        max_path_size: int = MAX_PATH_SIZE,
        max_body_size: int = MAX_BODY_SIZE,
    ):
        self.max_method_size = max_method_size
        self.max_path_size = max_path_size
        self.max_body_size = max_body_size

    def parse(
        self,
        data: Optional[bytes],
        client_address: tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse one request buffer.

        Args:
            data: Bytes received from the socket (one recv()).
            client_address: Peer address, stored on the request.

        Returns:
            The parsed HTTPRequest.

        Raises:
            HTTPParseError: If data is empty or the request line does not
                            hold at least a method and a path.
        """
        if not data:
            raise HTTPParseError("Empty request")

        header_end = data.find(HEADER_TERMINATOR)
        header_section = data if header_end == -1 else data[:header_end]
        lines = header_section.decode("utf-8", errors="replace").split("\n")
        lines = [line.rstrip("\r") for line in lines]

        method, path = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        body = b""
        body_size = self._declared_length(headers)
        if body_size and header_end != -1:
            # One slot of the body capacity is reserved, as for the other fields
            start = header_end + len(HEADER_TERMINATOR)
            copy_size = min(body_size, self.max_body_size - 1)
            body = data[start:start + copy_size]

        return HTTPRequest(
            method=method,
            path=path,
            body=body,
            body_size=body_size,
            headers=headers,
            client_address=client_address,
            raw=data,
        )

    def _parse_request_line(self, line: str) -> tuple[str, str]:
        """
        Split the request line on spaces and keep the first two tokens.

        Runs of spaces count as one separator. The HTTP version token,
        if any, is ignored.
        """
        tokens = [token for token in line.split(" ") if token]
        if len(tokens) < 2:
            raise HTTPParseError(f"Invalid request line: {line!r}")

        method = tokens[0][:self.max_method_size - 1]
        path = tokens[1][:self.max_path_size - 1]
        return method, path

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Collect "Name: value" lines.

        Names are lowercased. Only the first occurrence of a name is kept;
        repeated headers are not merged. Malformed lines are skipped.
        """
        headers: Dict[str, str] = {}
        for line in lines:
            if not line:
                continue
            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue
            name, value = match.groups()
            headers.setdefault(name.strip().lower(), value.strip())
        return headers

    @staticmethod
    def _declared_length(headers: Dict[str, str]) -> int:
        """
        Content-Length as an integer.

        Only plain ASCII digits are accepted. A missing value, a sign, an
        underscore or any other character counts as 0, which leaves the body
        empty.
        """
        value = headers.get("content-length")
        if value is None or not DIGITS_PATTERN.fullmatch(value):
            return 0
        return int(value)


def parse_request(
    data: Optional[bytes],
    client_address: tuple[str, int] = ("", 0),
) -> HTTPRequest:
    """Parse with the default capacities. See RequestParser.parse()."""
    return RequestParser().parse(data, client_address)
