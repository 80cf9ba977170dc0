#!/usr/bin/env python3
"""
MPI cluster management CLI.

Usage: mpi-cluster [--config FILE] [-v] [command] [argument]
"""

import argparse
import sys
from pathlib import Path

from .controller.commands import Command, dispatch, usage_text
from .utils.config import ClusterSettings, load_config
from .utils.exceptions import ClusterError, ConfigurationError
from .utils.logging import failure, get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpi-cluster",
        description="Manage a local Docker Compose MPI cluster",
        add_help=False,
    )
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("command", nargs="?", default="", help="Command to run")
    parser.add_argument("argument", nargs="?", help="Worker count or node reference")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args, extra = parser.parse_known_args(argv)

    # -h/--help are handled as the help command
    if extra and set(extra) <= {"-h", "--help"} and not args.command:
        args.command = extra[0]
    elif extra:
        failure(f"Unexpected arguments: {' '.join(extra)}")
        print(usage_text())
        return 1

    try:
        command = Command.parse(args.command)
    except ClusterError as e:
        failure(str(e))
        print(usage_text())
        return e.exit_code

    # help needs no configuration
    if command is Command.HELP:
        print(usage_text())
        return 0

    try:
        config = load_config(args.config)
        settings = ClusterSettings.from_config(config)
    except ConfigurationError as e:
        failure(f"Configuration error: {e}")
        return e.exit_code

    setup_logging("DEBUG" if args.verbose else config["LOG_LEVEL"], config["LOG_FILE"])

    try:
        return dispatch(command, args.argument, settings)
    except ClusterError as e:
        logger.debug(f"{command.value} failed", exc_info=True)
        failure(f"{command.value} failed: {e}")
        return e.exit_code
    except KeyboardInterrupt:
        failure("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
