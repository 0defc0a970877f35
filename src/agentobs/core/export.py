"""Export of analytics, alerts and raw records in external formats."""

import logging
import time
from collections.abc import Callable

from agentobs.core.alerts import AlertEvaluator
from agentobs.core.analytics import Aggregator
from agentobs.core.config import ObservabilityConfig
from agentobs.core.encoding.csv_text import encode_samples, iso_timestamp
from agentobs.core.encoding.ndjson import log_to_dict
from agentobs.core.encoding.prometheus import encode_analytics
from agentobs.core.logs import filter_logs
from agentobs.core.models import AlertResult, MetricsExport, WindowedAnalytics
from agentobs.core.ports import LogStoragePort, MetricsStoragePort

logger = logging.getLogger(__name__)


class Exporter:
    """Renders Prometheus text, a JSON snapshot and CSV from current state.

    All three views are computed from a single read of the metrics buffer
    and a single reading of the clock, so they agree with each other and
    the snapshot's analytics match get_analytics() at that instant. A
    fault in one view is logged and that view falls back to empty.
    Nothing is cached and no storage is modified.
    """

    def __init__(
        self,
        aggregator: Aggregator,
        evaluator: AlertEvaluator,
        log_storage: LogStoragePort,
        metrics_storage: MetricsStoragePort,
        config: ObservabilityConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._aggregator = aggregator
        self._evaluator = evaluator
        self._log_storage = log_storage
        self._metrics_storage = metrics_storage
        self._config = config or ObservabilityConfig()
        self._clock = clock

    def export_metrics(self) -> MetricsExport:
        now = self._clock()
        try:
            samples = self._metrics_storage.scrape()
        except Exception:
            logger.exception("Failed to read metrics for export")
            samples = []
        try:
            analytics = self._aggregator.get_analytics(now=now, samples=samples)
            alerts = self._evaluator.check_alerts(now=now, samples=samples)
        except Exception:
            logger.exception("Failed to compute metrics for export")
            analytics, alerts = WindowedAnalytics(), AlertResult()
        try:
            recent_logs = filter_logs(
                self._log_storage.read(), limit=self._config.recent_logs_limit, now=now
            )
        except Exception:
            logger.exception("Failed to read logs for export")
            recent_logs = []
        try:
            csv_text = encode_samples(samples[-self._config.csv_rows_limit :])
        except Exception:
            logger.exception("Failed to encode samples as CSV")
            csv_text = encode_samples([])

        return MetricsExport(
            prometheus_text=encode_analytics(analytics, self._config.metric_prefix),
            json_snapshot={
                "timestamp": iso_timestamp(now),
                "analytics": analytics.to_dict(),
                "recent_logs": [log_to_dict(entry) for entry in recent_logs],
                "alerts": alerts.to_dict(),
            },
            csv_text=csv_text,
        )


def empty_export(prefix: str = "agent") -> MetricsExport:
    """Export with no data, returned when exporting fails outright."""
    return MetricsExport(
        prometheus_text=encode_analytics(WindowedAnalytics(), prefix),
        json_snapshot={
            "timestamp": None,
            "analytics": WindowedAnalytics().to_dict(),
            "recent_logs": [],
            "alerts": AlertResult().to_dict(),
        },
        csv_text=encode_samples([]),
    )
