"""Application Insights hook: builds trace events from entries and sends them."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Iterable, Optional

from logging_appinsights.config import HookConfig, validate_config
from logging_appinsights.errors import BuildError, TransportError
from logging_appinsights.formatter import FieldFilter, normalize
from logging_appinsights.levels import DEFAULT_LEVELS, Level, level_label, to_severity
from logging_appinsights.metrics import DispatchMetrics
from logging_appinsights.models import Entry, TraceEvent
from logging_appinsights.sender import AppInsightsSender, TelemetrySender

logger = logging.getLogger(__name__)


class AppInsightsHook:
    """Forwards log entries to Application Insights as traces.

    The host decides which entries to fire by checking levels(). Setters are
    safe to call while entries are being fired, but the intended usage is to
    configure the hook fully before attaching it.

    In async mode fire() returns at once and the trace is built and sent on a
    worker thread. Delivery is best effort: failures are recorded in
    ``metrics`` and logged, never raised, and traces fired close together may
    be sent out of order.
    """

    def __init__(
        self,
        config: HookConfig,
        sender: Optional[TelemetrySender] = None,
        metrics: Optional[DispatchMetrics] = None,
    ):
        validate_config(config)
        self._config = config
        self._sender = sender if sender is not None else AppInsightsSender.from_config(config)
        self._metrics = metrics or DispatchMetrics()
        self._lock = threading.Lock()
        self._async = config.async_dispatch
        self._levels: list = list(config.levels if config.levels is not None else DEFAULT_LEVELS)
        self._ignore: set[str] = set(config.ignore_fields)
        self._filters: dict[str, FieldFilter] = {}
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: set[Future] = set()
        self._closed = False

    @property
    def metrics(self) -> DispatchMetrics:
        return self._metrics

    @property
    def is_async(self) -> bool:
        with self._lock:
            return self._async

    def levels(self) -> list:
        """Return the levels this hook fires for."""
        with self._lock:
            return list(self._levels)

    def set_levels(self, levels: Optional[Iterable[Level]]):
        with self._lock:
            self._levels = list(levels) if levels is not None else []

    def set_async(self, enabled: bool):
        """Switch to fire-and-forget sending. Async fires never raise."""
        with self._lock:
            self._async = bool(enabled)

    def add_ignore(self, name: str):
        """Never send the field *name*."""
        with self._lock:
            self._ignore.add(name)

    def add_filter(self, name: str, fn: FieldFilter):
        """Replace the default formatting of field *name* with *fn*."""
        with self._lock:
            self._filters[name] = fn

    def ignored_fields(self) -> frozenset:
        with self._lock:
            return frozenset(self._ignore)

    def filters(self) -> dict:
        with self._lock:
            return dict(self._filters)

    def build_trace(self, entry: Entry) -> TraceEvent:
        """Build the trace event for *entry*. Raises BuildError on failure."""
        with self._lock:
            ignore = frozenset(self._ignore)
            filters = dict(self._filters)

        try:
            properties = normalize(entry, ignore, filters)
        except Exception as exc:
            raise BuildError(f"Could not create telemetry trace with entry {entry!r}: {exc}") from exc

        properties["source_level"] = level_label(entry.level)
        properties["source_timestamp"] = entry.time.isoformat()
        return TraceEvent(
            message=entry.message,
            severity=to_severity(entry.level),
            properties=properties,
        )

    def fire(self, entry: Entry):
        """Send *entry* to Application Insights.

        Sync mode raises BuildError or TransportError. Async mode never raises.
        """
        self._metrics.record_fired()
        if not self.is_async:
            self._fire(entry)
            return

        try:
            future = self._submit(entry)
        except RuntimeError as exc:
            self._metrics.record_dropped()
            logger.warning("Dropping entry, hook is closed: %s", exc)
            return
        future.add_done_callback(self._forget)

    def _submit(self, entry: Entry) -> Future:
        with self._lock:
            if self._closed:
                raise RuntimeError("cannot fire after close()")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._config.async_workers,
                    thread_name_prefix="appinsights-hook",
                )
            future = self._executor.submit(self._fire_async, entry)
            self._pending.add(future)
        return future

    def _fire(self, entry: Entry):
        try:
            trace = self.build_trace(entry)
        except BuildError as exc:
            self._metrics.record_build_failed(exc)
            raise

        try:
            self._sender.send(trace)
        except TransportError as exc:
            self._metrics.record_transport_failed(exc)
            raise
        except Exception as exc:
            err = TransportError(f"Could not send trace {trace.message!r}: {exc}")
            self._metrics.record_transport_failed(err)
            raise err from exc
        self._metrics.record_sent()

    def _fire_async(self, entry: Entry):
        try:
            self._fire(entry)
        except Exception as exc:
            self._metrics.record_async_failed(exc)
            logger.warning("Async fire failed: %s", exc)

    def _forget(self, future: Future):
        with self._lock:
            self._pending.discard(future)

    def flush(self, timeout: Optional[float] = None):
        """Wait for pending async fires, then flush the sender."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)
        self._sender.flush()

    def close(self):
        """Finish pending fires and release the worker threads and sender."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            executor = self._executor
        if executor is not None:
            executor.shutdown(wait=True)
        self._sender.close()
