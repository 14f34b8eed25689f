"""Error taxonomy for import map resolution.

Every failure in the pipeline is fatal for the run; nothing is retried and no
partial lockfile is written.
"""


class PinmapError(Exception):
    """Base class for all pinmap failures."""


class ConfigError(PinmapError):
    """Import declarations are missing or malformed."""


class TransportError(PinmapError):
    """A remote service could not be reached or returned an unreadable body."""


class ResolutionError(PinmapError):
    """No version satisfies a constraint set, or the URL generator refused the install."""


class LockfileWriteError(PinmapError, OSError):
    """The lockfile could not be written."""
