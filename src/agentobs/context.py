"""ObservabilityContext: one isolated set of buffers, sinks and readers.

Construct one per process (or per test) and pass it to the code that
performs agent operations and to the dashboards that read from it.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Any, TypeVar

from agentobs.adapters.sinks.http import create_forwarder
from agentobs.adapters.storage.ring_buffer import (
    RingBufferLogStorage,
    RingBufferMetricsStorage,
)
from agentobs.core.alerts import AlertEvaluator
from agentobs.core.analytics import Aggregator
from agentobs.core.classify import classify_error
from agentobs.core.config import ObservabilityConfig
from agentobs.core.export import Exporter, empty_export
from agentobs.core.instrument import Instrumentation
from agentobs.core.logs import filter_logs, normalize_level
from agentobs.core.models import AlertResult, LogEntry, MetricsExport, WindowedAnalytics
from agentobs.core.ports import ErrorClassifier, SinkPort
from agentobs.core.recorder import EventRecorder

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ObservabilityContext:
    """Instrumentation, aggregation, alerting and export over shared buffers.

    Writers (track, info, warn, error) never see exceptions from the
    observability layer. Readers (get_analytics, get_logs, check_alerts,
    export_metrics) work on copies of the buffers and fall back to empty
    results if an internal fault occurs.

    Args:
        config: Buffer sizes, sink URLs and alert thresholds.
        classifier: Maps failure messages to error categories.
        forwarder: Sink forwarder; built from config when omitted.
        clock: Returns the current Unix timestamp.

    Example:
        ```python
        obs = ObservabilityContext(ObservabilityConfig.from_env())

        work = await obs.track("publish", "abraham", trainer_id, publish)
        print(obs.check_alerts().critical_alerts)
        ```
    """

    def __init__(
        self,
        config: ObservabilityConfig | None = None,
        classifier: ErrorClassifier = classify_error,
        forwarder: SinkPort | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or ObservabilityConfig()
        self.log_storage = RingBufferLogStorage(self.config.logs_capacity)
        self.metrics_storage = RingBufferMetricsStorage(self.config.metrics_capacity)
        self.forwarder = forwarder if forwarder is not None else create_forwarder(
            self.config
        )
        self.clock = clock
        self.recorder = EventRecorder(
            self.log_storage, self.metrics_storage, self.forwarder, clock
        )
        self.instrumentation = Instrumentation(self.recorder)
        self.aggregator = Aggregator(
            self.metrics_storage, classifier, clock, self.config.default_window_ms
        )
        self.evaluator = AlertEvaluator(self.aggregator, self.config.alerts)
        self.exporter = Exporter(
            self.aggregator,
            self.evaluator,
            self.log_storage,
            self.metrics_storage,
            self.config,
            clock,
        )

    # === Instrumentation ===

    async def track(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        fn: Callable[[], Awaitable[T] | T],
        metadata: dict[str, Any] | None = None,
    ) -> T:
        """Run and record an agent operation. See Instrumentation.track."""
        return await self.instrumentation.track(
            operation, agent_id, actor_id, fn, metadata
        )

    def track_sync(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        fn: Callable[[], T],
        metadata: dict[str, Any] | None = None,
    ) -> T:
        """Run and record a synchronous agent operation."""
        return self.instrumentation.track_sync(
            operation, agent_id, actor_id, fn, metadata
        )

    def info(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.instrumentation.info(operation, agent_id, actor_id, message, context)

    def warn(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.instrumentation.warn(operation, agent_id, actor_id, message, context)

    def error(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.instrumentation.error(operation, agent_id, actor_id, message, context)

    # === Readers ===

    def get_analytics(self, window_ms: float | None = None) -> WindowedAnalytics:
        """Analytics over the trailing window (default: config.default_window_ms)."""
        try:
            return self.aggregator.get_analytics(window_ms)
        except Exception:
            logger.exception("Failed to compute analytics")
            return WindowedAnalytics()

    def get_logs(
        self,
        level: str | None = None,
        operation: str | None = None,
        agent_id: str | None = None,
        actor_id: str | None = None,
        window_ms: float | None = None,
        limit: int | None = None,
    ) -> list[LogEntry]:
        """Filtered log entries, newest first, limit applied last.

        Raises:
            ValueError: If level is not INFO, WARN or ERROR.
        """
        if level is not None:
            level = normalize_level(level)
        try:
            entries = self.log_storage.read()
        except Exception:
            logger.exception("Failed to read logs")
            return []
        return filter_logs(
            entries,
            level=level,
            operation=operation,
            agent_id=agent_id,
            actor_id=actor_id,
            window_ms=window_ms,
            limit=limit,
            now=self.clock(),
        )

    def check_alerts(self) -> AlertResult:
        """Evaluate the alert rules over the alert window."""
        try:
            return self.evaluator.check_alerts()
        except Exception:
            logger.exception("Failed to evaluate alerts")
            return AlertResult()

    def export_metrics(self) -> MetricsExport:
        """Render Prometheus text, a JSON snapshot and CSV from one instant."""
        try:
            return self.exporter.export_metrics()
        except Exception:
            logger.exception("Failed to export metrics")
            return empty_export(self.config.metric_prefix)

    # === Lifecycle ===

    def close(self, timeout: float | None = 5.0) -> None:
        """Flush and stop the sink forwarder."""
        self.forwarder.close(timeout)

    def __enter__(self) -> "ObservabilityContext":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
