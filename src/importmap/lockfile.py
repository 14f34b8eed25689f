"""Render and write the importmap pin lockfile."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from typing import Mapping

from constants import Constants
from errors import LockfileWriteError

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_lockfile(
    import_map: Mapping[str, str],
    *,
    source: str = Constants.CONFIG_FILE,
    command: str = Constants.UPDATE_COMMAND,
) -> str:
    """Return the lockfile text for ``import_map``.

    Two advisory header lines are followed by one ``pin`` statement per
    entry, sorted by import name.
    """
    lines = [
        f"# NOTE: this file is managed by {Constants.TOOL_NAME}.",
        f"# DO NOT edit this file directly! Instead, edit `{source}` and run `{command}`",
    ]
    for name in sorted(import_map):
        lines.append(f"pin {_quote(name)}, to: {_quote(import_map[name])}")
    return "\n".join(lines) + "\n"


def write_lockfile(
    import_map: Mapping[str, str],
    path: str,
    *,
    source: str = Constants.CONFIG_FILE,
    command: str = Constants.UPDATE_COMMAND,
) -> None:
    """Overwrite ``path`` with the rendered lockfile.

    The content goes to a temporary file in the same directory first and is
    then moved over ``path``, so readers never observe a partial lockfile.

    Raises:
        LockfileWriteError: The lockfile could not be written.
    """
    content = render_lockfile(import_map, source=source, command=command)
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".pinmap-", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        # mkstemp creates 0600; keep the existing file's mode or use a readable default
        mode = os.stat(path).st_mode & 0o777 if os.path.exists(path) else 0o644
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        logger.error("Unable to write lockfile %s: %s", path, e)
        raise LockfileWriteError(f"Unable to write lockfile {path}: {e}") from e
    finally:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
    logger.info("Wrote %d pins to %s", len(import_map), path)
