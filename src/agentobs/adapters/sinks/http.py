"""HTTP sink adapters forwarding records to external log and metrics services.

Records are queued on a bounded queue and POSTed as JSON by a single
daemon worker thread, so forwarding never blocks or raises into the
code that recorded them. Delivery is best effort: failed deliveries are
logged and dropped, and records are dropped when the queue is full.
"""

import json
import logging
import queue
import threading
from typing import Any

import httpx

from agentobs.core.config import ObservabilityConfig
from agentobs.core.encoding.ndjson import log_to_dict, sample_to_dict
from agentobs.core.models import LogEntry, MetricSample
from agentobs.core.ports import SinkPort

logger = logging.getLogger(__name__)

_STOP = object()


class NullSinkForwarder:
    """SinkPort implementation that drops every record."""

    def forward_log(self, entry: LogEntry) -> None:
        pass

    def forward_metric(self, sample: MetricSample) -> None:
        pass

    def close(self, timeout: float | None = None) -> None:
        pass


class HttpSinkForwarder:
    """SinkPort implementation posting each record to an HTTP endpoint.

    The worker thread starts lazily on the first queued record.

    Args:
        log_sink_url: Endpoint for log entries, or None to skip logs.
        metrics_sink_url: Endpoint for metric samples, or None to skip metrics.
        queue_size: Maximum number of pending deliveries.
        timeout: HTTP timeout in seconds for a single delivery.
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests).
    """

    def __init__(
        self,
        log_sink_url: str | None = None,
        metrics_sink_url: str | None = None,
        queue_size: int = 1000,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.log_sink_url = log_sink_url
        self.metrics_sink_url = metrics_sink_url
        self._timeout = timeout
        self._transport = transport
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=queue_size)
        self._worker: threading.Thread | None = None
        self._start_lock = threading.Lock()
        self._closed = False
        self.dropped = 0

    def forward_log(self, entry: LogEntry) -> None:
        """Queue a log entry for delivery to the log sink."""
        if self.log_sink_url:
            self._enqueue(self.log_sink_url, log_to_dict(entry))

    def forward_metric(self, sample: MetricSample) -> None:
        """Queue a metric sample for delivery to the metrics sink."""
        if self.metrics_sink_url:
            self._enqueue(self.metrics_sink_url, sample_to_dict(sample))

    def close(self, timeout: float | None = None) -> None:
        """Stop the worker after it drains the queued deliveries.

        Args:
            timeout: Seconds to wait for the worker; None waits indefinitely.
        """
        with self._start_lock:
            self._closed = True
            worker = self._worker
        if worker is None:
            return
        self._queue.put(_STOP)
        worker.join(timeout)

    def _enqueue(self, url: str, payload: dict[str, Any]) -> None:
        if self._closed:
            return
        self._ensure_worker()
        try:
            self._queue.put_nowait((url, payload))
        except queue.Full:
            with self._start_lock:
                self.dropped += 1
            logger.warning("Sink queue full; dropping record for %s", url)

    def _ensure_worker(self) -> None:
        if self._worker is not None:
            return
        with self._start_lock:
            if self._worker is None and not self._closed:
                self._worker = threading.Thread(
                    target=self._run, name="agentobs-sink", daemon=True
                )
                self._worker.start()

    def _run(self) -> None:
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            while True:
                item = self._queue.get()
                if item is _STOP:
                    break
                url, payload = item
                self._deliver(client, url, payload)

    def _deliver(self, client: httpx.Client, url: str, payload: dict[str, Any]) -> None:
        try:
            response = client.post(
                url,
                content=json.dumps(payload, default=str),
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to send record to external service %s: %s", url, e)
        except Exception:
            logger.exception("Unexpected error sending record to %s", url)


def create_forwarder(
    config: ObservabilityConfig, transport: httpx.BaseTransport | None = None
) -> SinkPort:
    """Build the forwarder matching the configured sink URLs.

    Returns:
        HttpSinkForwarder when at least one URL is set, else NullSinkForwarder.
    """
    if not config.sinks_enabled:
        return NullSinkForwarder()
    return HttpSinkForwarder(
        log_sink_url=config.log_sink_url,
        metrics_sink_url=config.metrics_sink_url,
        queue_size=config.sink_queue_size,
        timeout=config.sink_timeout_seconds,
        transport=transport,
    )
