"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Serve the current directory on port 8080
    python -m staticserver

    # Serve ./public on port 3000
    python -m staticserver --port 3000 --root ./public

    # Same, from the environment
    HTTP_PORT=3000 HTTP_WEB_ROOT=./public python -m staticserver

Exit status is 1 when the configuration is invalid or the port cannot be
bound.

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .config import ServerConfig
from .server import StaticServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staticserver",
        description="Minimal static file server for .html, .css and .js files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m staticserver                          # ./ on port 8080
  python -m staticserver --port 3000 --root site  # site/ on port 3000
        """
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on, all interfaces (default: {defaults.port})"
    )

    parser.add_argument(
        "--root", "-r",
        default=defaults.web_root,
        help=f"Directory to serve (default: {defaults.web_root})"
    )

    parser.add_argument(
        "--log-file",
        default=defaults.request_log,
        help=f"Request log for error responses (default: {defaults.request_log})"
    )

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Console logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"staticserver {__version__}"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse arguments, build the server, run it.

    Returns:
        Process exit status.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment: {e}", file=sys.stderr)
        return 1

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        port=args.port,
        web_root=args.root,
        request_log=args.log_file,
        log_level=args.log_level,
    )

    try:
        StaticServer(config).run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
