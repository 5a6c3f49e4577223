from __future__ import annotations


class NoiseError(Exception):
    """Base class for every error raised by the noise graph and its builders."""


class ConfigurationError(NoiseError, ValueError):
    """A parameter value is outside its valid range."""


class UnboundModuleError(ConfigurationError):
    """A required child module (or builder input/output) has not been set."""


class UnsupportedDimensionError(NoiseError, TypeError):
    """A module was sampled with a coordinate count it cannot handle."""


class ModuleLockedError(NoiseError, RuntimeError):
    """A module or builder was reconfigured while a pass was running."""
