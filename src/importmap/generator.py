"""Client for the JSPM import map generator API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from common.http_client import HttpClient
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from errors import ResolutionError, TransportError
from versioning.models import ImportMap, InstallTarget

logger = logging.getLogger(__name__)


class JspmUrlResolver:
    """Resolve pinned install targets to CDN URLs in a single batch call.

    Only the flat ``map.imports`` section of the generator response is used.
    ``map.scopes`` is discarded: the lockfile format has one URL per import
    name, so incompatible sub-dependency versions cannot be expressed.
    """

    def __init__(
        self,
        client: HttpClient,
        generator_url: str = Constants.GENERATOR_URL_JSPM,
        default_provider: str = Constants.DEFAULT_PROVIDER,
    ):
        self.client = client
        self.generator_url = generator_url
        self.default_provider = default_provider

    def build_payload(self, targets: Sequence[InstallTarget]) -> Dict[str, Any]:
        """Return the generator request body for ``targets``."""
        return {
            "install": [t.to_payload() for t in targets],
            "flattenScope": True,
            "env": list(Constants.GENERATOR_ENV),
            "defaultProvider": self.default_provider,
        }

    def resolve(self, targets: Sequence[InstallTarget]) -> ImportMap:
        """Generate the import map for ``targets``.

        Args:
            targets: Pinned install targets.

        Returns:
            Import name to URL, sorted by import name. Includes incidental
            dependencies the generator added.

        Raises:
            ResolutionError: The generator rejected the install.
            TransportError: The generator could not be reached or returned
                an unreadable body.
        """
        status_code, body = self.client.post_json(
            self.generator_url, self.build_payload(targets), context="jspm"
        )

        if not 200 <= status_code < 300:
            raise ResolutionError(
                f"Error resolving imports: {_error_message(body, status_code)}"
            )
        if not isinstance(body, dict):
            raise TransportError("JSPM generator returned an unreadable response")

        import_map = body.get("map")
        imports = import_map.get("imports") if isinstance(import_map, dict) else None
        if not isinstance(imports, dict):
            raise ResolutionError("Error resolving imports: response contains no import map")
        invalid = sorted(name for name, url in imports.items() if not isinstance(url, str) or not url)
        if invalid:
            raise ResolutionError(
                f"Error resolving imports: no URL returned for {', '.join(invalid)}"
            )

        scopes = import_map.get("scopes")
        if scopes and is_debug_enabled(logger):
            logger.debug(
                "Discarding scoped imports",
                extra=extra_context(
                    event="scopes_discarded",
                    component="jspm_resolver",
                    scope_count=len(scopes),
                ),
            )

        logger.info("Resolved %d import URLs for %d install targets", len(imports), len(targets))
        return {name: imports[name] for name in sorted(imports)}


def _error_message(body: Optional[Any], status_code: int) -> str:
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {status_code}"
