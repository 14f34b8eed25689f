"""Version resolvers."""

from .npm import NpmVersionResolver, registry_package_url

__all__ = [
    "NpmVersionResolver",
    "registry_package_url",
]
