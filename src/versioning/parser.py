"""Import declaration normalization and version range parsing."""

import re
from collections.abc import Mapping
from typing import Any, List, Optional, Tuple

import semantic_version

from constants import Constants
from errors import ConfigError
from .models import DeclarationKind, ImportDeclaration, ImportSpec

# RubyGems-style requirement: optional operator followed by a 1-3 segment version.
_GEM_REQUIREMENT_RE = re.compile(r"^\s*(~>|>=|<=|!=|=|>|<)?\s*(\d+(?:\.\d+){0,2})\s*$")

_GEM_TO_SIMPLE_OPERATORS = {
    None: "==",
    "=": "==",
    "!=": "!=",
    ">": ">",
    "<": "<",
    ">=": ">=",
    "<=": "<=",
}


def _pessimistic_upper_bound(segments: List[int]) -> semantic_version.Version:
    """Return the exclusive upper bound of ``~> segments``.

    ``~> 1.2.3`` stops before 1.3.0, ``~> 1.2`` and ``~> 1`` stop before 2.0.0.
    """
    bumped = list(segments[:-1]) if len(segments) > 1 else list(segments)
    bumped[-1] += 1
    return semantic_version.Version.coerce(".".join(str(s) for s in bumped))


def _gem_to_simple_spec(operator: Optional[str], version: str) -> str:
    """Translate a RubyGems requirement into SimpleSpec syntax."""
    lower = semantic_version.Version.coerce(version)
    if operator == "~>":
        upper = _pessimistic_upper_bound([int(s) for s in version.split(".")])
        return f">={lower},<{upper}"
    return f"{_GEM_TO_SIMPLE_OPERATORS[operator]}{lower}"


def parse_constraint(raw: str) -> semantic_version.base.BaseSpec:
    """Parse one version range into a ``semantic_version`` spec.

    RubyGems requirements (``1.0.0``, ``> 1.0``, ``~> 1.0.0``) are translated to
    ``SimpleSpec``; anything else is read as an npm range (``^1.2``, ``1.x``,
    ``1.2.3 - 1.4.0``).

    Raises:
        ConfigError: The range cannot be parsed by either grammar.
    """
    m = _GEM_REQUIREMENT_RE.match(raw)
    if m:
        return semantic_version.SimpleSpec(_gem_to_simple_spec(m.group(1), m.group(2)))
    try:
        return semantic_version.NpmSpec(raw.strip())
    except ValueError as e:
        raise ConfigError(f"Invalid version constraint '{raw}': {e}") from e


def _coerce_versions(import_name: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        versions: Tuple[Any, ...] = (value,)
    elif isinstance(value, (list, tuple)):
        versions = tuple(value)
    else:
        raise ConfigError(
            f"Import '{import_name}': version must be a string or a list of strings"
        )
    if not versions:
        raise ConfigError(f"Import '{import_name}': no version constraint given")
    for v in versions:
        if not isinstance(v, str) or not v.strip():
            raise ConfigError(
                f"Import '{import_name}': invalid version constraint {v!r}"
            )
    return tuple(v.strip() for v in versions)


def _optional_string(import_name: str, field: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Import '{import_name}': {field} must be a non-empty string")
    return value.strip()


def classify_declaration(import_name: Any, raw: Any) -> ImportDeclaration:
    """Tag a raw config value with the declaration shape it uses.

    Raises:
        ConfigError: The declaration matches none of the supported shapes.
    """
    if not isinstance(import_name, str) or not import_name.strip():
        raise ConfigError(f"Invalid import name {import_name!r}")
    import_name = import_name.strip()

    if isinstance(raw, str):
        return ImportDeclaration(
            import_name=import_name,
            kind=DeclarationKind.RANGE,
            package=None,
            versions=_coerce_versions(import_name, raw),
        )
    if isinstance(raw, (list, tuple)):
        return ImportDeclaration(
            import_name=import_name,
            kind=DeclarationKind.RANGE_LIST,
            package=None,
            versions=_coerce_versions(import_name, raw),
        )
    if isinstance(raw, Mapping):
        if raw.get("version") is None:
            raise ConfigError(f"Import '{import_name}': missing 'version'")
        return ImportDeclaration(
            import_name=import_name,
            kind=DeclarationKind.OBJECT,
            package=_optional_string(import_name, "package", raw.get("package")),
            versions=_coerce_versions(import_name, raw["version"]),
            subpath=_optional_string(import_name, "subpath", raw.get("subpath")),
        )
    raise ConfigError(
        f"Import '{import_name}': expected a version string, a list of versions "
        f"or a mapping, got {type(raw).__name__}"
    )


def to_import_spec(declaration: ImportDeclaration) -> ImportSpec:
    """Build the canonical spec, validating every range up front."""
    for raw in declaration.versions:
        parse_constraint(raw)
    return ImportSpec(
        import_name=declaration.import_name,
        package=declaration.package or declaration.import_name,
        constraints=declaration.versions,
        subpath=declaration.subpath,
    )


def normalize_imports(imports: Any) -> List[ImportSpec]:
    """Normalize the ``imports`` section of the package config.

    Args:
        imports: Mapping of import name to a range string, a list of range
            strings, or a mapping with ``package``, ``version`` and ``subpath``.

    Returns:
        One ImportSpec per declaration, in declaration order.

    Raises:
        ConfigError: The collection is missing, empty or malformed.
    """
    if imports is None:
        raise ConfigError(
            f"No imports defined. Add import definitions to `{Constants.CONFIG_FILE}`"
        )
    if not isinstance(imports, Mapping):
        raise ConfigError(
            f"Imports must be a mapping of import name to version, got {type(imports).__name__}"
        )
    if not imports:
        raise ConfigError(
            f"No imports defined. Add import definitions to `{Constants.CONFIG_FILE}`"
        )
    return [to_import_spec(classify_declaration(name, raw)) for name, raw in imports.items()]
