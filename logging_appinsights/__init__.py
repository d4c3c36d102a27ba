"""Forward stdlib logging records to Azure Application Insights."""

from logging_appinsights.config import HookConfig, load_config
from logging_appinsights.errors import BuildError, ConfigError, HookError, TransportError
from logging_appinsights.handler import AppInsightsHandler
from logging_appinsights.hook import AppInsightsHook
from logging_appinsights.levels import Level, Severity
from logging_appinsights.models import Entry, TraceEvent

__all__ = [
    "AppInsightsHandler",
    "AppInsightsHook",
    "BuildError",
    "ConfigError",
    "Entry",
    "HookConfig",
    "HookError",
    "Level",
    "Severity",
    "TraceEvent",
    "TransportError",
    "load_config",
]
