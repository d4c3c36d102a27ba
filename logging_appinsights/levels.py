"""Local log levels, the remote severity scale, and the table between them."""

import logging
from enum import IntEnum

logger = logging.getLogger(__name__)


class Level(IntEnum):
    """Local log level. Lower value means more severe."""

    PANIC = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5

    @property
    def label(self) -> str:
        return _LABELS[self]


class Severity(IntEnum):
    """Application Insights severity scale."""

    VERBOSE = 0
    INFORMATION = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4


_LABELS = {
    Level.PANIC: "panic",
    Level.FATAL: "fatal",
    Level.ERROR: "error",
    Level.WARN: "warning",
    Level.INFO: "info",
    Level.DEBUG: "debug",
}

_NAMES = {
    "panic": Level.PANIC,
    "fatal": Level.FATAL,
    "error": Level.ERROR,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "info": Level.INFO,
    "debug": Level.DEBUG,
}

DEFAULT_LEVELS = (
    Level.PANIC,
    Level.FATAL,
    Level.ERROR,
    Level.WARN,
    Level.INFO,
)

SEVERITY_MAP = {
    Level.PANIC: Severity.CRITICAL,
    Level.FATAL: Severity.CRITICAL,
    Level.ERROR: Severity.ERROR,
    Level.WARN: Severity.WARNING,
    Level.INFO: Severity.INFORMATION,
    Level.DEBUG: Severity.VERBOSE,
}

# Used for levels missing from SEVERITY_MAP.
DEFAULT_SEVERITY = Severity.VERBOSE


def to_severity(level, default: Severity = DEFAULT_SEVERITY) -> Severity:
    """Look up the remote severity for *level*, falling back to *default*."""
    severity = SEVERITY_MAP.get(level)
    if severity is None:
        logger.debug("No severity mapped for level %r, using %s", level, default.name)
        return default
    return severity


def level_label(level) -> str:
    """Return the label of *level*, or its raw value when it is not a known level."""
    try:
        return Level(level).label
    except ValueError:
        return str(level)


def level_from_logging(levelno: int) -> Level:
    """Map a stdlib ``logging`` level number onto a Level."""
    if levelno >= logging.CRITICAL:
        return Level.FATAL
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARN
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


def parse_level(name: str) -> Level:
    """Parse a level name such as ``"error"`` or ``"WARN"``.

    Raises ValueError for unknown names.
    """
    try:
        return _NAMES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {name!r}") from None
