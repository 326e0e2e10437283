"""Command-line entry point for dtgen."""

import argparse
import sys

from . import __version__
from .codegen.cli_integration import (
    console,
    create_generate_subparser,
    create_languages_subparser,
)
from .logging_config import LOG_LEVELS, get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="dtgen",
        description="Generate SQL Server stored procedures and data access code",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write the log to this file")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    create_generate_subparser(subparsers)
    create_languages_subparser(subparsers)
    return parser


def main(argv=None) -> int:
    """Run the CLI and return its exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)
    logger.debug("Parsed arguments: %s", args)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
