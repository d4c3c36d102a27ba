"""Log entry and trace event models."""

import datetime
from dataclasses import dataclass, field

from logging_appinsights.levels import Level, Severity


@dataclass
class Entry:
    level: Level
    message: str = ""
    data: dict = field(default_factory=dict)
    time: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )


@dataclass
class TraceEvent:
    """One trace handed to the telemetry sender."""

    message: str
    severity: Severity
    properties: dict[str, str] = field(default_factory=dict)
