"""
=============================================================================
HTTP SERVER CLI ENTRY POINT
=============================================================================

    minihttp <ip-address> <port> [--root DIR] [--log-level LEVEL]

    # Serve ./public_html on localhost:8080
    python -m minihttp 127.0.0.1 8080

    # Another document root, with request/response dumps
    python -m minihttp 0.0.0.0 8080 --root ./site --log-level DEBUG

=============================================================================
EXIT CODES
=============================================================================

    1   wrong number of arguments, address not a dotted quad, port
        outside 1-65534, or the socket could not be created/bound/listened
    0   the server was stopped with Ctrl+C / SIGTERM

MINIHTTP_ROOT and MINIHTTP_LOG_LEVEL supply defaults for --root and
--log-level. MINIHTTP_HOST and MINIHTTP_PORT are ignored here because the
address and port are always given on the command line.

=============================================================================
"""

import argparse
import os
import sys
from typing import Optional, Sequence

from . import __version__
from .config import DEFAULT_DOCUMENT_ROOT, MAX_PORT, ServerConfig, is_ipv4_address
from .server import HTTPServer


EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors (not 2)."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="minihttp",
        description="Minimal single-threaded HTTP/1.1 file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  minihttp 127.0.0.1 8080                    # Serve ./public_html
  minihttp 0.0.0.0 8080 --root ./site        # Another document root
  minihttp 127.0.0.1 8080 --log-level DEBUG  # Dump requests/responses
        """
    )

    parser.add_argument("address", help="IPv4 address to bind to (e.g. 127.0.0.1)")
    parser.add_argument("port", help=f"Port to listen on (1-{MAX_PORT})")

    parser.add_argument(
        "--root", "-r",
        default=None,
        help="Directory holding index.html and test.html (default: ./public_html)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def parse_port(value: str) -> Optional[int]:
    """The port as an int, or None if it is not a number in 1-65534."""
    try:
        port = int(value)
    except ValueError:
        return None
    if not 0 < port <= MAX_PORT:
        return None
    return port


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse arguments, build the server and run it.

    Returns:
        The process exit status.
    """
    args = build_parser().parse_args(argv)

    if not is_ipv4_address(args.address):
        print(f"Invalid IP address: {args.address}", file=sys.stderr)
        return EXIT_FAILURE

    port = parse_port(args.port)
    if port is None:
        print(f"Invalid port number: {args.port}", file=sys.stderr)
        return EXIT_FAILURE

    # Address and port come only from the command line; the environment
    # supplies defaults for the options
    config = ServerConfig(
        host=args.address,
        port=port,
        document_root=args.root or os.getenv("MINIHTTP_ROOT", DEFAULT_DOCUMENT_ROOT),
        log_level=args.log_level or os.getenv("MINIHTTP_LOG_LEVEL", "INFO"),
    )

    try:
        server = HTTPServer(config)
        server.run()
    except (OSError, ValueError) as e:
        print(f"Failed to start HTTP server: {e}", file=sys.stderr)
        return EXIT_FAILURE

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
