"""Data models for import declarations and version resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class DeclarationKind(Enum):
    """Shape of a raw import declaration in the package config."""
    RANGE = "range"            # "~> 1.0"
    RANGE_LIST = "range_list"  # ["> 1.0.0", "< 1.0.2"]
    OBJECT = "object"          # {package: ..., version: ..., subpath: ...}


@dataclass(frozen=True)
class ImportDeclaration:
    """A raw declaration tagged with the shape it was written in."""
    import_name: str
    kind: DeclarationKind
    package: Optional[str]
    versions: Tuple[str, ...]
    subpath: Optional[str] = None


@dataclass(frozen=True)
class ImportSpec:
    """Canonical import request: which package, which versions, which entry point."""
    import_name: str
    package: str
    constraints: Tuple[str, ...]  # conjunction; never empty
    subpath: Optional[str] = None


@dataclass(frozen=True)
class InstallTarget:
    """Unit submitted to the URL generator: exact ``package@version`` plus optional subpath."""
    target: str
    subpath: Optional[str] = None

    def to_payload(self) -> Dict[str, str]:
        """Serialize for the generator request, omitting an absent subpath."""
        payload = {"target": self.target}
        if self.subpath:
            payload["subpath"] = self.subpath
        return payload


# Import name -> resolved URL, built in sorted key order.
ImportMap = Dict[str, str]
