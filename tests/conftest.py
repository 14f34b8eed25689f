"""Shared fixtures: a deterministic stand-in for the registry and JSPM generator."""

import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

REGISTRY = "https://registry.npmjs.org/"
GENERATOR = "https://api.jspm.io/generate"

STANDARD_VERSIONS = ["1.0.0", "1.0.1", "1.0.2", "1.1.0", "2.0.0"]


def packument(versions: List[str]) -> Dict[str, Any]:
    """Minimal npm packument with the given version keys."""
    return {"name": "package-name", "versions": {v: {} for v in versions}}


class FakeHttpClient:
    """In-memory HttpClient.

    Registry responses are keyed by packument URL. The generator either
    returns a fixed response or, by default, echoes a ga.jspm.io URL for
    every install target (honouring subpaths) plus any ``extra_imports``.
    """

    def __init__(
        self,
        packages: Optional[Dict[str, List[str]]] = None,
        generate_response: Optional[Tuple[int, Any]] = None,
        extra_imports: Optional[Dict[str, str]] = None,
        scopes: Optional[Dict[str, Any]] = None,
    ):
        self.packages = packages or {}
        self.generate_response = generate_response
        self.extra_imports = extra_imports or {}
        self.scopes = scopes or {}
        self.get_calls: List[str] = []
        self.post_calls: List[Tuple[str, Any]] = []

    def get_json(self, url: str, *, context: str):
        self.get_calls.append(url)
        name = url[len(REGISTRY):].replace("%2F", "/")
        if name not in self.packages:
            return 404, {"error": "Not found"}
        return 200, packument(self.packages[name])

    def post_json(self, url: str, payload: Any, *, context: str):
        # Round-trip through JSON so tests see exactly what would be sent
        self.post_calls.append((url, json.loads(json.dumps(payload))))
        if self.generate_response is not None:
            return self.generate_response
        imports = {}
        for item in payload["install"]:
            package, version = item["target"].rsplit("@", 1)
            entry = item.get("subpath", "./index.js")[2:]
            name = package if "subpath" not in item else f"{package}/{entry}"
            imports[name] = f"https://ga.jspm.io/npm:{package}@{version}/{entry}"
        imports.update(self.extra_imports)
        # Deliberately unsorted
        ordered = dict(sorted(imports.items(), reverse=True))
        return 200, {"map": {"imports": ordered, "scopes": self.scopes}}


@pytest.fixture
def fake_client():
    """Registry with the standard package-name release history."""
    return FakeHttpClient(packages={"package-name": list(STANDARD_VERSIONS)})
