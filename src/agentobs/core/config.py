"""Configuration for the observability context."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_METRICS_CAPACITY = 10_000
DEFAULT_LOGS_CAPACITY = 5_000
DEFAULT_WINDOW_MS = 3_600_000
ALERT_WINDOW_MS = 300_000

ENV_LOG_SINK_URL = "AGENTOBS_LOG_SINK_URL"
ENV_METRICS_SINK_URL = "AGENTOBS_METRICS_SINK_URL"
ENV_METRICS_CAPACITY = "AGENTOBS_METRICS_CAPACITY"
ENV_LOGS_CAPACITY = "AGENTOBS_LOGS_CAPACITY"


def _check_ratio(name: str, value: float) -> None:
    if not 0 <= value <= 1:
        raise ValueError(f"{name} must be between 0 and 1, got {value}")


def _check_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class AlertThresholds:
    """Rule constants applied by the alert evaluator.

    Attributes:
        window_ms: Trailing window the rules are evaluated over.
        min_success_rate: Success rate below which a critical alert fires.
        min_operations_for_success_rate: Operations required (exclusive)
            before the success rate rule applies.
        max_avg_duration_ms: Average latency above which a critical alert fires.
        max_error_count: Per-category error count above which a warning fires.
        actor_dominance_ratio: Share of operations above which a single actor
            is reported.
        min_operations_for_dominance: Operations required (exclusive) before
            the dominance rule applies.
    """

    window_ms: int = ALERT_WINDOW_MS
    min_success_rate: float = 0.8
    min_operations_for_success_rate: int = 10
    max_avg_duration_ms: float = 30_000
    max_error_count: int = 5
    actor_dominance_ratio: float = 0.8
    min_operations_for_dominance: int = 20

    def __post_init__(self) -> None:
        _check_positive("window_ms", self.window_ms)
        _check_ratio("min_success_rate", self.min_success_rate)
        _check_ratio("actor_dominance_ratio", self.actor_dominance_ratio)


@dataclass(frozen=True)
class ObservabilityConfig:
    """Settings for buffers, sinks, exports and alerting.

    Attributes:
        log_sink_url: Endpoint receiving one JSON POST per log entry.
        metrics_sink_url: Endpoint receiving one JSON POST per metric sample.
        metrics_capacity: Ring buffer size for metric samples.
        logs_capacity: Ring buffer size for log entries.
        default_window_ms: Window used by get_analytics() and exports.
        recent_logs_limit: Number of log entries in the JSON export.
        csv_rows_limit: Number of raw samples in the CSV export.
        metric_prefix: Prefix for Prometheus metric names.
        sink_queue_size: Pending deliveries kept before records are dropped.
        sink_timeout_seconds: HTTP timeout for a single delivery.
        alerts: Alert rule constants.
    """

    log_sink_url: str | None = None
    metrics_sink_url: str | None = None
    metrics_capacity: int = DEFAULT_METRICS_CAPACITY
    logs_capacity: int = DEFAULT_LOGS_CAPACITY
    default_window_ms: int = DEFAULT_WINDOW_MS
    recent_logs_limit: int = 100
    csv_rows_limit: int = 1_000
    metric_prefix: str = "agent"
    sink_queue_size: int = 1_000
    sink_timeout_seconds: float = 5.0
    alerts: AlertThresholds = field(default_factory=AlertThresholds)

    def __post_init__(self) -> None:
        _check_positive("metrics_capacity", self.metrics_capacity)
        _check_positive("logs_capacity", self.logs_capacity)
        _check_positive("default_window_ms", self.default_window_ms)
        _check_positive("sink_queue_size", self.sink_queue_size)
        _check_positive("sink_timeout_seconds", self.sink_timeout_seconds)

    @property
    def sinks_enabled(self) -> bool:
        return bool(self.log_sink_url or self.metrics_sink_url)

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: object
    ) -> "ObservabilityConfig":
        """Build a config from AGENTOBS_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ.
            **overrides: Fields that take precedence over the environment.

        Raises:
            ValueError: If a capacity variable is not an integer.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if env.get(ENV_LOG_SINK_URL):
            values["log_sink_url"] = env[ENV_LOG_SINK_URL]
        if env.get(ENV_METRICS_SINK_URL):
            values["metrics_sink_url"] = env[ENV_METRICS_SINK_URL]
        if env.get(ENV_METRICS_CAPACITY):
            values["metrics_capacity"] = int(env[ENV_METRICS_CAPACITY])
        if env.get(ENV_LOGS_CAPACITY):
            values["logs_capacity"] = int(env[ENV_LOGS_CAPACITY])
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]
