"""Thread-safe dispatch counters and a ring of recent failures."""

import datetime
import threading


class DispatchMetrics:
    """Counts what happened to fired entries.

    Async fires have no way to report back to the caller, so their failures
    land here (and in the log) instead.
    """

    def __init__(self, max_failures: int = 100):
        self._lock = threading.Lock()
        self._max_failures = max_failures
        self._fired = 0
        self._sent = 0
        self._build_failed = 0
        self._transport_failed = 0
        self._async_failed = 0
        self._dropped = 0
        self._failures: list[dict] = []

    def record_fired(self):
        with self._lock:
            self._fired += 1

    def record_sent(self):
        with self._lock:
            self._sent += 1

    def record_build_failed(self, exc: BaseException):
        with self._lock:
            self._build_failed += 1
            self._add_failure("build", exc)

    def record_transport_failed(self, exc: BaseException):
        with self._lock:
            self._transport_failed += 1
            self._add_failure("transport", exc)

    def record_async_failed(self, exc: BaseException):
        """Record a failure that escaped a background fire."""
        with self._lock:
            self._async_failed += 1
            self._add_failure("async", exc)

    def record_dropped(self):
        with self._lock:
            self._dropped += 1

    def _add_failure(self, kind: str, exc: BaseException):
        # caller holds the lock
        self._failures.append({
            "kind": kind,
            "error": str(exc) or type(exc).__name__,
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        })
        if len(self._failures) > self._max_failures:
            self._failures.pop(0)

    def recent_failures(self, n: int = 10) -> list[dict]:
        """Return the N most recent failures, oldest first."""
        with self._lock:
            return list(self._failures[-n:])

    def snapshot(self) -> dict:
        """Return a point-in-time copy of all counters."""
        with self._lock:
            return {
                "fired": self._fired,
                "sent": self._sent,
                "build_failed": self._build_failed,
                "transport_failed": self._transport_failed,
                "async_failed": self._async_failed,
                "dropped": self._dropped,
            }
