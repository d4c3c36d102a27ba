"""Attach the hook to the stdlib ``logging`` module."""

import datetime
import logging

from logging_appinsights.errors import HookError
from logging_appinsights.hook import AppInsightsHook
from logging_appinsights.levels import level_from_logging
from logging_appinsights.models import Entry

logger = logging.getLogger(__name__)

# Package loggers are never forwarded, otherwise the hook's own warnings
# would be fired back into it.
_OWN_LOGGER = __name__.split(".")[0]

_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

ERROR_FIELD = "error"


def entry_from_record(record: logging.LogRecord) -> Entry:
    """Convert a LogRecord into an Entry.

    Fields are the attributes passed with ``extra=``. When the record carries
    exception info, the exception is added as the "error" field unless one
    was given explicitly.
    """
    data = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
    if record.exc_info and record.exc_info[1] is not None:
        data.setdefault(ERROR_FIELD, record.exc_info[1])
    return Entry(
        level=level_from_logging(record.levelno),
        message=record.getMessage(),
        data=data,
        time=datetime.datetime.fromtimestamp(record.created, tz=datetime.timezone.utc),
    )


class AppInsightsHandler(logging.Handler):
    """logging.Handler that fires records through an AppInsightsHook.

    Only records whose level is in hook.levels() are fired.
    """

    def __init__(self, hook: AppInsightsHook, level=logging.NOTSET):
        super().__init__(level)
        self._hook = hook

    @property
    def hook(self) -> AppInsightsHook:
        return self._hook

    def emit(self, record: logging.LogRecord):
        if record.name == _OWN_LOGGER or record.name.startswith(_OWN_LOGGER + "."):
            return
        try:
            entry = entry_from_record(record)
            if entry.level not in self._hook.levels():
                return
            self._hook.fire(entry)
        except Exception:
            self.handleError(record)

    def flush(self):
        try:
            self._hook.flush()
        except HookError as exc:
            logger.warning("Flush failed: %s", exc)

    def close(self):
        try:
            self._hook.close()
        finally:
            super().close()
