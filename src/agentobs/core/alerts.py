"""Fixed-rule alert evaluation over short-window analytics."""

from collections.abc import Sequence

from agentobs.core.analytics import Aggregator
from agentobs.core.config import AlertThresholds
from agentobs.core.models import AlertResult, MetricSample, WindowedAnalytics


def _describe_window(window_ms: int) -> str:
    seconds = window_ms / 1000
    if seconds % 60 == 0:
        minutes = int(seconds // 60)
        return "last minute" if minutes == 1 else f"last {minutes} minutes"
    return f"last {seconds:g} seconds"


def evaluate_alerts(
    analytics: WindowedAnalytics, thresholds: AlertThresholds | None = None
) -> AlertResult:
    """Apply the alert rules to a set of analytics.

    Rules:
    - critical when more than min_operations_for_success_rate operations ran
      and the success rate is below min_success_rate
    - critical when the average duration exceeds max_avg_duration_ms
    - warning per error category seen more than max_error_count times
    - warning per actor responsible for more than actor_dominance_ratio of
      all operations, once more than min_operations_for_dominance ran

    Args:
        analytics: Analytics computed over thresholds.window_ms.
        thresholds: Rule constants; defaults to AlertThresholds().

    Returns:
        AlertResult with critical and warning messages.
    """
    t = thresholds or AlertThresholds()
    window = _describe_window(t.window_ms)
    critical: list[str] = []
    warning: list[str] = []

    if (
        analytics.total_operations > t.min_operations_for_success_rate
        and analytics.success_rate < t.min_success_rate
    ):
        critical.append(
            f"CRITICAL: Agent operation success rate is "
            f"{analytics.success_rate * 100:.1f}% ({window})"
        )

    if analytics.avg_duration_ms > t.max_avg_duration_ms:
        critical.append(
            f"CRITICAL: Agent operations averaging "
            f"{analytics.avg_duration_ms / 1000:.1f}s duration ({window})"
        )

    for category, count in analytics.error_summary.items():
        if count > t.max_error_count:
            warning.append(f"WARNING: {count} {category} errors in {window}")

    total = analytics.total_operations
    if total > t.min_operations_for_dominance:
        for actor_id, count in analytics.actor_activity.items():
            share = count / total
            if share > t.actor_dominance_ratio:
                warning.append(
                    f"WARNING: Actor {actor_id} is responsible for "
                    f"{share * 100:.1f}% of operations ({window})"
                )

    return AlertResult(critical_alerts=critical, warning_alerts=warning)


class AlertEvaluator:
    """Evaluates alert rules against the aggregator's short window."""

    def __init__(
        self, aggregator: Aggregator, thresholds: AlertThresholds | None = None
    ) -> None:
        self._aggregator = aggregator
        self.thresholds = thresholds or AlertThresholds()

    def check_alerts(
        self, now: float | None = None, samples: Sequence[MetricSample] | None = None
    ) -> AlertResult:
        analytics = self._aggregator.get_analytics(
            self.thresholds.window_ms, now=now, samples=samples
        )
        return evaluate_alerts(analytics, self.thresholds)
