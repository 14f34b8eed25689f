"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONFIG_ERROR = 1
    CONNECTION_ERROR = 2
    RESOLUTION_ERROR = 3


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration defaults; not intended to provide behavior.
    """

    TOOL_NAME = "pinmap"
    VERSION = "0.1.0"
    USER_AGENT = f"{TOOL_NAME}/{VERSION}"

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    GENERATOR_URL_JSPM = "https://api.jspm.io/generate"
    DEFAULT_PROVIDER = "jspm.io"
    GENERATOR_ENV = ("browser", "module", "production")

    CONFIG_FILE = "config/importmap_packages.yml"
    LOCKFILE = "config/importmap-packages-lock.rb"
    UPDATE_COMMAND = "pinmap update"
    CONFIG_IMPORTS_KEY = "imports"
    CONFIG_SETTINGS_KEY = "settings"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "PINMAP_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    REGISTRY_MAX_CONCURRENCY = 8
