"""
=============================================================================
FILEHTTPD CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m filehttpd

    # Custom port and directory
    python -m filehttpd --port 3000 --directory ./public

    # Verbose logging (shows every request line)
    python -m filehttpd --log-level DEBUG

Defaults come from the environment (see ServerConfig.from_env), and
command-line flags override them.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig
from .server import FileServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, using `defaults` for every option."""
    parser = argparse.ArgumentParser(
        prog="filehttpd",
        description="Minimal HTTP file server with template tokens",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m filehttpd                        # Serve . on 127.0.0.1:8080
  python -m filehttpd --port 3000            # Custom port
  python -m filehttpd --host 0.0.0.0         # Listen on all interfaces
  python -m filehttpd --directory ./public   # Serve another directory
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=defaults.timeout,
        help=f"Client idle timeout in seconds (default: {defaults.timeout})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=defaults.root_dir,
        help=f"Directory to serve files from (default: {defaults.root_dir})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"filehttpd {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment configuration: {e}", file=sys.stderr)
        return 2

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        root_dir=args.directory,
        log_level=args.log_level,
        server_name=defaults.server_name,
    )

    try:
        server = FileServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
