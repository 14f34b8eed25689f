"""End-to-end import map update: normalize, pin, generate, write."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import semantic_version

from common.http_client import HttpClient
from constants import Constants
from versioning.models import ImportMap, ImportSpec
from versioning.parser import normalize_imports
from versioning.resolvers.npm import NpmVersionResolver
from .config import Settings
from .generator import JspmUrlResolver
from .lockfile import render_lockfile, write_lockfile
from .targets import build_install_targets

logger = logging.getLogger(__name__)


class ImportmapUpdateService:
    """Resolve import declarations into a pinned import map.

    Holds no state between runs: each call builds a fresh version resolver,
    so registry listings are only shared within one run.
    """

    def __init__(self, client: HttpClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or Settings()

    def _version_resolver(self) -> NpmVersionResolver:
        return NpmVersionResolver(self.client, registry_url=self.settings.registry_url)

    def _url_resolver(self) -> JspmUrlResolver:
        return JspmUrlResolver(
            self.client,
            generator_url=self.settings.generator_url,
            default_provider=self.settings.default_provider,
        )

    def resolve_versions(self, specs: List[ImportSpec]) -> Dict[str, semantic_version.Version]:
        """Pin every spec, looking up each distinct package once, concurrently.

        Returns:
            Exact version per import name.
        """
        resolver = self._version_resolver()
        packages = list(dict.fromkeys(spec.package for spec in specs))
        workers = max(1, min(self.settings.max_concurrency, len(packages)))
        logger.info("Fetching versions for %d packages", len(packages))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="npm-registry") as pool:
            # list() re-raises the first lookup failure
            list(pool.map(resolver.fetch_candidates, packages))
        return {spec.import_name: resolver.resolve(spec.package, spec.constraints) for spec in specs}

    def build_import_map(self, imports: Any) -> ImportMap:
        """Run the pipeline up to, but not including, the lockfile write.

        Raises:
            ConfigError: Declarations are missing or malformed.
            TransportError: A service could not be reached.
            ResolutionError: A constraint set has no match or generation failed.
        """
        specs = normalize_imports(imports)
        resolved = self.resolve_versions(specs)
        targets = build_install_targets(specs, resolved)
        return self._url_resolver().resolve(targets)

    def update(
        self,
        imports: Any,
        lockfile: str,
        *,
        source: str = Constants.CONFIG_FILE,
        command: str = Constants.UPDATE_COMMAND,
    ) -> ImportMap:
        """Resolve ``imports`` and overwrite ``lockfile`` with the result.

        Nothing is written unless every network call succeeded.
        """
        import_map = self.build_import_map(imports)
        write_lockfile(import_map, lockfile, source=source, command=command)
        return import_map

    def preview(
        self,
        imports: Any,
        *,
        source: str = Constants.CONFIG_FILE,
        command: str = Constants.UPDATE_COMMAND,
    ) -> str:
        """Resolve ``imports`` and return the lockfile text without writing it."""
        return render_lockfile(self.build_import_map(imports), source=source, command=command)
