"""Helpers for debug output."""

from typing import Union


def escape_crlf(data: Union[bytes, str]) -> str:
    """
    Make CR and LF visible in a request/response dump.

    Each "\\n" is written as the two characters \\n followed by a real line
    break, so the dump keeps one HTTP line per output line:

        >>> print(escape_crlf(b"GET / HTTP/1.1\\r\\nHost: x\\r\\n"))
        GET / HTTP/1.1\\r\\n
        Host: x\\r\\n
        <BLANKLINE>
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    return data.replace("\r", "\\r").replace("\n", "\\n\n")
