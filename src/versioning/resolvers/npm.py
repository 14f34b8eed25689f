"""NPM version resolver using semantic versioning."""

import logging
import threading
import urllib.parse
from typing import Dict, List, Sequence

import semantic_version

from common.http_client import HttpClient
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from errors import ResolutionError, TransportError
from ..parser import parse_constraint

logger = logging.getLogger(__name__)


def registry_package_url(registry_url: str, package: str) -> str:
    """Return the packument URL for ``package``; scoped names keep their ``@``."""
    base = registry_url if registry_url.endswith("/") else registry_url + "/"
    return base + urllib.parse.quote(package, safe="@")


class NpmVersionResolver:
    """Pin npm packages to the newest stable version that satisfies a constraint set.

    Version listings are memoized per instance, so a resolver built for one
    run talks to the registry once per distinct package. Instances are safe
    to share between worker threads.
    """

    def __init__(self, client: HttpClient, registry_url: str = Constants.REGISTRY_URL_NPM):
        self.client = client
        self.registry_url = registry_url
        self._candidates: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def fetch_candidates(self, package: str) -> List[str]:
        """Fetch every published version string for ``package``.

        Args:
            package: npm package name, optionally scoped.

        Returns:
            List of version strings, as keys of the packument ``versions`` map.

        Raises:
            TransportError: The registry is unreachable, answered with an
                error status or returned something other than a packument.
        """
        with self._lock:
            cached = self._candidates.get(package)
        if cached is not None:
            return cached

        url = registry_package_url(self.registry_url, package)
        try:
            status_code, data = self.client.get_json(url, context="npm")
        except TransportError:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise TransportError(
                f"Unexpected transport error for {package} ({exc.__class__.__name__}: {exc})"
            ) from exc

        if status_code != 200:
            raise TransportError(
                f"npm registry returned HTTP {status_code} for package {package}"
            )
        if not isinstance(data, dict) or not isinstance(data.get("versions"), dict):
            raise TransportError(f"npm registry returned an unreadable packument for {package}")

        versions = list(data["versions"].keys())
        with self._lock:
            self._candidates[package] = versions
        return versions

    def pick(
        self, package: str, constraints: Sequence[str], candidates: Sequence[str]
    ) -> semantic_version.Version:
        """Select the highest stable candidate accepted by every constraint.

        Raises:
            ResolutionError: No candidate satisfies the constraint set.
        """
        specs = [parse_constraint(raw) for raw in constraints]

        matching: List[semantic_version.Version] = []
        for v in candidates:
            try:
                ver = semantic_version.Version(v)
            except ValueError:
                if is_debug_enabled(logger):
                    logger.debug(
                        "Skipping invalid version",
                        extra=extra_context(
                            event="parse",
                            component="npm_resolver",
                            package=package,
                            version=v,
                        ),
                    )
                continue
            # Pre-releases are never selected automatically
            if ver.prerelease:
                continue
            if all(spec.match(ver) for spec in specs):
                matching.append(ver)

        if not matching:
            raise ResolutionError(
                f"No version of {package} satisfies {', '.join(constraints)} "
                f"({len(candidates)} versions published)"
            )
        return max(matching)

    def resolve(self, package: str, constraints: Sequence[str]) -> semantic_version.Version:
        """Return the exact version to pin for ``package``.

        Args:
            package: npm package name.
            constraints: Version ranges that must all accept the result.

        Returns:
            The maximum non-prerelease published version satisfying every range.
        """
        resolved = self.pick(package, constraints, self.fetch_candidates(package))
        logger.debug("Resolved %s (%s) to %s", package, ", ".join(constraints), resolved)
        return resolved
