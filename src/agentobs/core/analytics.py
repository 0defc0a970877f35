"""Windowed aggregation over recorded metric samples."""

import logging
import time
from collections import Counter
from collections.abc import Callable, Iterable, Sequence

from agentobs.core.classify import OTHER, classify_error
from agentobs.core.config import DEFAULT_WINDOW_MS
from agentobs.core.models import MetricSample, WindowedAnalytics
from agentobs.core.ports import ErrorClassifier, MetricsStoragePort

logger = logging.getLogger(__name__)


def _categorize(sample: MetricSample, classifier: ErrorClassifier) -> str:
    if not sample.error:
        return OTHER
    try:
        return classifier(sample.error)
    except Exception:
        logger.warning(
            "Error classifier failed for %r; counting it as %s",
            sample.error,
            OTHER,
            exc_info=True,
        )
        return OTHER


def compute_analytics(
    samples: Iterable[MetricSample],
    window_ms: float,
    now: float,
    classifier: ErrorClassifier = classify_error,
) -> WindowedAnalytics:
    """Compute statistics over the samples that started inside the window.

    Args:
        samples: Candidate samples, in any order.
        window_ms: Length of the trailing window in milliseconds.
        now: Unix timestamp marking the end of the window.
        classifier: Maps failure messages to error categories.

    Returns:
        WindowedAnalytics. All-zero when the window is empty or not positive.
    """
    if window_ms <= 0:
        return WindowedAnalytics()

    cutoff = now - window_ms / 1000
    recent = [s for s in samples if s.timestamp >= cutoff]
    if not recent:
        return WindowedAnalytics()

    total = len(recent)
    successes = sum(1 for s in recent if s.success)
    errors = Counter(_categorize(s, classifier) for s in recent if not s.success)

    return WindowedAnalytics(
        total_operations=total,
        success_rate=successes / total,
        avg_duration_ms=sum(s.duration_ms for s in recent) / total,
        throughput=total / (window_ms / 1000),
        operation_breakdown=dict(Counter(s.operation for s in recent)),
        actor_activity=dict(Counter(s.actor_id for s in recent if s.actor_id)),
        error_summary=dict(errors),
    )


class Aggregator:
    """Computes windowed analytics from a metrics storage snapshot.

    Args:
        storage: Storage holding the metric samples.
        classifier: Maps failure messages to error categories.
        clock: Returns the current Unix timestamp.
        default_window_ms: Window used when get_analytics() gets none.
    """

    def __init__(
        self,
        storage: MetricsStoragePort,
        classifier: ErrorClassifier = classify_error,
        clock: Callable[[], float] = time.time,
        default_window_ms: int = DEFAULT_WINDOW_MS,
    ) -> None:
        self._storage = storage
        self._classifier = classifier
        self._clock = clock
        self._default_window_ms = default_window_ms

    def get_analytics(
        self,
        window_ms: float | None = None,
        now: float | None = None,
        samples: Sequence[MetricSample] | None = None,
    ) -> WindowedAnalytics:
        """Analytics over the trailing window ending now.

        Args:
            window_ms: Window length; defaults to the configured window.
            now: End of the window; defaults to the clock.
            samples: Samples already read from storage; scraped when None.
        """
        return compute_analytics(
            self._storage.scrape() if samples is None else samples,
            self._default_window_ms if window_ms is None else window_ms,
            self._clock() if now is None else now,
            self._classifier,
        )
