"""pinmap - resolve JavaScript imports into a pinned importmap lockfile.

    Returns:
        int: Exit code
"""
import logging
import os
import sys
from typing import Optional, Sequence

from args import parse_args
from common.http_client import RequestsHttpClient
from common.logging_utils import configure_logging
from constants import Constants, ExitCodes
from errors import (
    ConfigError,
    LockfileWriteError,
    PinmapError,
    ResolutionError,
    TransportError,
)
from importmap.config import load_config
from importmap.service import ImportmapUpdateService

logger = logging.getLogger(__name__)

_EXIT_CODES = (
    (ConfigError, ExitCodes.CONFIG_ERROR),
    (TransportError, ExitCodes.CONNECTION_ERROR),
    (ResolutionError, ExitCodes.RESOLUTION_ERROR),
    (LockfileWriteError, ExitCodes.FILE_ERROR),
)


def exit_code_for(error: PinmapError) -> int:
    """Map a pipeline failure to the process exit code."""
    for error_type, code in _EXIT_CODES:
        if isinstance(error, error_type):
            return code.value
    return ExitCodes.FILE_ERROR.value


def _resolve_path(root: str, explicit: Optional[str], default: str) -> str:
    return explicit if explicit else os.path.join(root, default)


def run_update(args) -> int:
    """Run ``pinmap update`` for parsed CLI arguments."""
    config_path = _resolve_path(args.ROOT, args.CONFIG, Constants.CONFIG_FILE)
    lockfile_path = _resolve_path(args.ROOT, args.LOCKFILE, Constants.LOCKFILE)
    source = args.CONFIG or Constants.CONFIG_FILE

    try:
        config = load_config(config_path)
        with RequestsHttpClient(timeout=config.settings.request_timeout) as client:
            service = ImportmapUpdateService(client, config.settings)
            if args.DRY_RUN:
                sys.stdout.write(service.preview(config.imports, source=source))
                return ExitCodes.SUCCESS.value
            import_map = service.update(config.imports, lockfile_path, source=source)
    except PinmapError as e:
        logger.error("%s: %s", e.__class__.__name__, e)
        return exit_code_for(e)

    logger.info("Pinned %d imports", len(import_map))
    return ExitCodes.SUCCESS.value


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)
    if args.action == "update":
        return run_update(args)
    logger.error("Unknown action: %s", args.action)
    return ExitCodes.FILE_ERROR.value


if __name__ == "__main__":
    sys.exit(main())
