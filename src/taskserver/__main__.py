"""
=============================================================================
TASK SERVER CLI ENTRY POINT
=============================================================================

    # Run with defaults (127.0.0.1:7878)
    python -m taskserver

    # Custom port
    python -m taskserver --port 3000

    # Listen on all interfaces (for containers)
    python -m taskserver --host 0.0.0.0

    # Bigger requests, and don't let idle clients pin a thread forever
    python -m taskserver --buffer-size 4096 --read-timeout 10

    # Machine-readable access logs
    python -m taskserver --log-format json

Every option can also come from the environment (see ServerConfig.from_env);
command-line flags win over environment variables.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig, LOG_FORMATS
from .server import TaskServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, with defaults taken from the environment."""
    parser = argparse.ArgumentParser(
        prog="taskserver",
        description="In-memory task tracking over a minimal hand-rolled HTTP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m taskserver                        # Run with defaults
  python -m taskserver --port 3000            # Custom port
  python -m taskserver --host 0.0.0.0         # Listen on all interfaces
  python -m taskserver --read-timeout 10      # Drop silent clients after 10s
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
        "--buffer-size", "-b",
        type=int,
        default=defaults.buffer_size,
        help=f"Bytes read per request; longer requests are truncated (default: {defaults.buffer_size})"
    )

    parser.add_argument(
        "--read-timeout", "-t",
        type=float,
        default=defaults.read_timeout,
        help="Seconds to wait for a request before dropping the connection (default: wait forever)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"taskserver {__version__}"
    )

    return parser


def config_from_args(argv=None) -> ServerConfig:
    """Resolve configuration: CLI flags over environment over defaults."""
    env_config = ServerConfig.from_env()
    args = build_parser(env_config).parse_args(argv)

    return ServerConfig(
        host=args.host,
        port=args.port,
        buffer_size=args.buffer_size,
        read_timeout=args.read_timeout,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv=None):
    """Main CLI entry point."""
    try:
        config = config_from_args(argv)
        server = TaskServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        server.run()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
