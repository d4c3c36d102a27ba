"""Telemetry sender: hands trace events to the Application Insights SDK."""

import logging
from typing import Protocol

from applicationinsights import TelemetryClient, channel

from logging_appinsights.config import HookConfig
from logging_appinsights.errors import TransportError
from logging_appinsights.levels import Severity
from logging_appinsights.models import TraceEvent

logger = logging.getLogger(__name__)

# track_trace() takes stdlib level names and maps them onto its own scale.
_SDK_SEVERITY = {
    Severity.VERBOSE: "DEBUG",
    Severity.INFORMATION: "INFO",
    Severity.WARNING: "WARNING",
    Severity.ERROR: "ERROR",
    Severity.CRITICAL: "CRITICAL",
}


class TelemetrySender(Protocol):
    def send(self, event: TraceEvent) -> None: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


class AppInsightsSender:
    """Queues trace events on an applicationinsights TelemetryClient.

    Batching, retry and transport are left to the client's channel.
    """

    def __init__(self, client: TelemetryClient):
        self._client = client

    @property
    def client(self) -> TelemetryClient:
        return self._client

    @classmethod
    def from_config(cls, config: HookConfig) -> "AppInsightsSender":
        """Build a client with an asynchronous channel from *config*.

        Batch size, batch interval and endpoint are only applied when set;
        otherwise the SDK defaults stand.
        """
        if config.endpoint_url:
            sender = channel.AsynchronousSender(config.endpoint_url)
        else:
            sender = channel.AsynchronousSender()
        if config.max_batch_size:
            sender.send_buffer_size = config.max_batch_size
        if config.max_batch_interval:
            sender.send_interval = config.max_batch_interval

        queue = channel.AsynchronousQueue(sender)
        if config.max_batch_size:
            queue.max_queue_length = config.max_batch_size

        client = TelemetryClient(
            config.instrumentation_key, channel.TelemetryChannel(None, queue)
        )
        client.context.cloud.role = config.role_name
        logger.debug(
            "Created telemetry client: role=%s endpoint=%s",
            config.role_name, sender.service_endpoint_uri,
        )
        return cls(client)

    def send(self, event: TraceEvent) -> None:
        """Queue *event* on the client. Raises TransportError if it cannot be queued."""
        try:
            self._client.track_trace(
                event.message,
                properties=event.properties,
                severity=_SDK_SEVERITY.get(event.severity, "DEBUG"),
            )
        except Exception as exc:
            raise TransportError(f"Could not queue trace {event.message!r}: {exc}") from exc

    def flush(self) -> None:
        try:
            self._client.flush()
        except Exception as exc:
            raise TransportError(f"Could not flush telemetry client: {exc}") from exc

    def close(self) -> None:
        self.flush()
