"""Argument parsing functionality for pinmap."""

import argparse
from typing import Optional, Sequence

from constants import Constants


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog=Constants.TOOL_NAME,
        description="Pin JavaScript imports to CDN URLs and write an importmap lockfile",
        add_help=True,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {Constants.VERSION}")

    subparsers = parser.add_subparsers(dest="action", required=True)
    update = subparsers.add_parser(
        "update",
        help="Resolve configured imports and rewrite the lockfile",
    )
    update.add_argument("-r", "--root",
                        dest="ROOT",
                        help="Project root the default config and lockfile paths are relative to",
                        action="store", type=str,
                        default=".")
    update.add_argument("-c", "--config",
                        dest="CONFIG",
                        help=f"Path to the package config (default: {Constants.CONFIG_FILE})",
                        action="store", type=str)
    update.add_argument("-o", "--lockfile",
                        dest="LOCKFILE",
                        help=f"Path to the generated lockfile (default: {Constants.LOCKFILE})",
                        action="store", type=str)
    update.add_argument("-n", "--dry-run",
                        dest="DRY_RUN",
                        help="Print the lockfile to stdout instead of writing it",
                        action="store_true")
    update.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
