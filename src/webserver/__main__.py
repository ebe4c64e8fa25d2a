"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    python -m webserver                        # port 8080, ./webroot
    python -m webserver --port 3000            # custom port
    python -m webserver --web-root ./public    # custom web root
    python -m webserver --keep-newlines        # serve files unchanged

The process starts the listener, prints how to connect, then waits for
the operator to press Enter. Enter, end of input (Ctrl+D) and Ctrl+C all
stop the listener.

=============================================================================
"""

import argparse
import sys
from typing import Callable, List, Optional

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .errors import BindError
from .server import setup_logging, start, stop


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the CLI parser; defaults come from the environment."""
    parser = argparse.ArgumentParser(
        prog="webserver",
        description="Minimal threaded HTTP/1.1 file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  WEBSERVER_HOST, WEBSERVER_PORT, WEBSERVER_WEB_ROOT, WEBSERVER_DEFAULT_FILE,
  WEBSERVER_URL_PREFIX, WEBSERVER_PUBLIC_HOST, WEBSERVER_STRIP_NEWLINES,
  WEBSERVER_LOG_LEVEL
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--web-root", "-r",
        default=defaults.web_root,
        help=f"Directory to serve (default: {defaults.web_root})",
    )

    parser.add_argument(
        "--default-file",
        default=defaults.default_file,
        help=f"Default file name (default: {defaults.default_file})",
    )

    parser.add_argument(
        "--url-prefix",
        default=defaults.url_prefix,
        help=f"URL path the listing pages link under (default: {defaults.url_prefix})",
    )

    parser.add_argument(
        "--public-host",
        default=defaults.public_host,
        help=f"Host used in directory listing links (default: {defaults.public_host})",
    )

    parser.add_argument(
        "--keep-newlines",
        action="store_true",
        default=not defaults.strip_newlines,
        help="Serve static files with their line breaks intact",
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"webserver {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    return ServerConfig(
        host=args.host,
        port=args.port,
        web_root=args.web_root,
        default_file=args.default_file,
        url_prefix=args.url_prefix,
        public_host=args.public_host,
        strip_newlines=not args.keep_newlines,
        log_level=args.log_level,
    )


def wait_for_operator(read_line: Callable[[str], str] = input) -> None:
    """Block until the operator presses Enter (or input ends)."""
    try:
        read_line("Press enter to shutdown the web server...\n")
    except (EOFError, KeyboardInterrupt):
        pass


def main(argv: Optional[List[str]] = None, read_line: Callable[[str], str] = input) -> int:
    """
    Run the server until the operator asks it to stop.

    Returns:
        Process exit status.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"webserver: invalid environment: {e}", file=sys.stderr)
        return 1

    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    config = config_from_args(args)

    setup_logging(config)

    try:
        listener = start(config)
    except (BindError, ValueError, OSError) as e:
        print(f"webserver: {e}", file=sys.stderr)
        return 1

    print(
        'To connect to this server via a web browser, try '
        f'"http://{config.public_host}:{listener.port}/{{url to retrieve}}"'
    )

    try:
        wait_for_operator(read_line)
    finally:
        stop(listener)

    return 0


if __name__ == "__main__":
    sys.exit(main())
