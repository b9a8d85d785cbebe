"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    # Default routes on the default port (2442)
    python -m oneshot

    # Pick a port
    python -m oneshot 8080

    # Verbose logging, localhost only
    python -m oneshot 8080 --host 127.0.0.1 --log-level DEBUG

    # Raw TCP echo instead of HTTP
    python -m oneshot 2442 --echo

Values not given on the command line come from ONESHOT_* environment
variables (see ServerConfig.from_env), then from the defaults.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .app import create_server
from .config import ServerConfig
from .echo import EchoServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oneshot",
        description="Minimal single-request-per-connection HTTP/1.1 server",
    )

    parser.add_argument(
        "port",
        nargs="?",
        type=int,
        default=None,
        help="TCP port to listen on (default: $ONESHOT_PORT or 2442)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Address to bind (default: $ONESHOT_HOST or 0.0.0.0)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=None,
        help="Logging verbosity (default: $ONESHOT_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--echo",
        action="store_true",
        help="Run a raw TCP echo server instead of HTTP",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"oneshot {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Overlay CLI arguments on the environment-derived configuration."""
    config = ServerConfig.from_env()
    if args.port is not None:
        config.port = args.port
    if args.host is not None:
        config.host = args.host
    if args.log_level is not None:
        config.log_level = args.log_level
    return config


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    if args.echo:
        server = EchoServer(config)
    else:
        server = create_server(config)

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
