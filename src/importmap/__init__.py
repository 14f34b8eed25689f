"""Import map resolution: install targets, URL generation and lockfile output."""

from .generator import JspmUrlResolver
from .lockfile import render_lockfile, write_lockfile
from .service import ImportmapUpdateService
from .targets import build_install_targets

__all__ = [
    "JspmUrlResolver",
    "ImportmapUpdateService",
    "build_install_targets",
    "render_lockfile",
    "write_lockfile",
]
