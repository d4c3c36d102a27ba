"""Exceptions raised by the hook."""


class HookError(Exception):
    """Base class for all hook errors."""


class ConfigError(HookError):
    """Missing or malformed hook configuration."""


class BuildError(HookError):
    """An entry could not be turned into a trace event."""


class TransportError(HookError):
    """The telemetry sender could not queue a trace event."""
