"""Package configuration loading.

The config is a YAML document with an ``imports`` mapping and an optional
``settings`` mapping overriding service endpoints and tunables::

    imports:
      react: "~> 18.2"
      lodash-es: ["> 4.0.0", "< 5"]
      dayjs-plugin:
        package: dayjs
        version: "1.11.10"
        subpath: ./plugin/utc.js
    settings:
      max_concurrency: 4
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict

import yaml

from constants import Constants
from errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Endpoints and tunables for one resolution run."""
    registry_url: str = Constants.REGISTRY_URL_NPM
    generator_url: str = Constants.GENERATOR_URL_JSPM
    default_provider: str = Constants.DEFAULT_PROVIDER
    max_concurrency: int = Constants.REGISTRY_MAX_CONCURRENCY
    request_timeout: float = Constants.REQUEST_TIMEOUT


@dataclass(frozen=True)
class PackageConfig:
    """Parsed package config: raw import declarations plus settings."""
    imports: Any
    settings: Settings = field(default_factory=Settings)


_STRING_SETTINGS = ("registry_url", "generator_url", "default_provider")
_POSITIVE_NUMBER_SETTINGS = {"max_concurrency": int, "request_timeout": float}


def parse_settings(raw: Any) -> Settings:
    """Validate a ``settings`` mapping and merge it over the defaults.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise ConfigError("`settings` must be a mapping")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(map(str, unknown))}")

    values: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in _STRING_SETTINGS:
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"Setting `{key}` must be a non-empty string")
            values[key] = value.strip()
        elif key in _POSITIVE_NUMBER_SETTINGS:
            cast = _POSITIVE_NUMBER_SETTINGS[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError(f"Setting `{key}` must be a positive number")
            values[key] = cast(value)
    return Settings(**values)


def load_config(path: str) -> PackageConfig:
    """Load the package config file.

    Args:
        path: Path to the YAML config.

    Returns:
        PackageConfig with the raw ``imports`` section (validated later by
        the normalizer) and parsed settings.

    Raises:
        ConfigError: The file is missing, unreadable or not a YAML mapping.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Unable to read config {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping with an `imports` key")

    logger.debug("Loaded config %s", path)
    return PackageConfig(
        imports=data.get(Constants.CONFIG_IMPORTS_KEY),
        settings=parse_settings(data.get(Constants.CONFIG_SETTINGS_KEY)),
    )
