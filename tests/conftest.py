import threading

import pytest

from logging_appinsights.config import HookConfig
from logging_appinsights.errors import TransportError
from logging_appinsights.hook import AppInsightsHook


class RecordingSender:
    """Sender that keeps every trace it is given instead of sending it."""

    def __init__(self, fail: bool = False, error: Exception | None = None):
        self._lock = threading.Lock()
        self.events = []
        self.flushed = 0
        self.closed = False
        self.fail = fail
        self.error = error

    def send(self, event):
        if self.error is not None:
            raise self.error
        if self.fail:
            raise TransportError("collector unavailable")
        with self._lock:
            self.events.append(event)

    def flush(self):
        self.flushed += 1

    def close(self):
        self.closed = True


@pytest.fixture
def config():
    return HookConfig(instrumentation_key="test-key", role_name="test-client")


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def hook(config, sender):
    h = AppInsightsHook(config, sender=sender)
    yield h
    h.close()
