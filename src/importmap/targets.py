"""Combine normalized import specs with pinned versions into install targets."""

from typing import List, Mapping, Sequence

import semantic_version

from versioning.models import ImportSpec, InstallTarget


def build_install_target(spec: ImportSpec, version: semantic_version.Version) -> InstallTarget:
    """Return ``package@version`` for ``spec``, keeping its subpath."""
    return InstallTarget(target=f"{spec.package}@{version}", subpath=spec.subpath)


def build_install_targets(
    specs: Sequence[ImportSpec],
    resolved: Mapping[str, semantic_version.Version],
) -> List[InstallTarget]:
    """Build one install target per spec.

    Args:
        specs: Normalized import specs.
        resolved: Exact version per import name.

    Returns:
        Install targets in the order of ``specs``.
    """
    return [build_install_target(spec, resolved[spec.import_name]) for spec in specs]
