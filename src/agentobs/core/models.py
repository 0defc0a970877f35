"""Core domain models for agent observability data."""

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

LogLevel = Literal["INFO", "WARN", "ERROR"]

LOG_LEVELS: frozenset[str] = frozenset({"INFO", "WARN", "ERROR"})


@dataclass(frozen=True)
class MetricSample:
    """Outcome of a single instrumented agent operation.

    Attributes:
        operation: Operation name (e.g., "publish", "economic_graduation").
        agent_id: Agent the operation acted on.
        actor_id: Trainer or caller that triggered it. May be empty.
        timestamp: Unix timestamp in seconds when the operation started.
        duration_ms: Elapsed time in milliseconds.
        success: Whether the operation completed without raising.
        error: Failure message, expected when success is False.
        metadata: Additional structured fields supplied by the caller.
    """

    operation: str
    agent_id: str
    actor_id: str
    timestamp: float
    duration_ms: float
    success: bool
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LogEntry:
    """A structured log entry scoped to an agent operation.

    Attributes:
        level: One of INFO, WARN, ERROR.
        operation: Operation name the entry belongs to.
        agent_id: Agent the entry refers to.
        actor_id: Trainer or caller. May be empty.
        timestamp: Unix timestamp in seconds.
        message: The log message.
        context: Additional structured fields.
    """

    level: LogLevel
    operation: str
    agent_id: str
    actor_id: str
    timestamp: float
    message: str
    context: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WindowedAnalytics:
    """Statistics computed over the samples of a trailing time window."""

    total_operations: int = 0
    success_rate: float = 0.0
    avg_duration_ms: float = 0.0
    throughput: float = 0.0
    operation_breakdown: dict[str, int] = field(default_factory=dict)
    actor_activity: dict[str, int] = field(default_factory=dict)
    error_summary: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AlertResult:
    """Alerts raised by one evaluation pass."""

    critical_alerts: list[str] = field(default_factory=list)
    warning_alerts: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "critical_alerts": list(self.critical_alerts),
            "warning_alerts": list(self.warning_alerts),
        }


@dataclass(frozen=True)
class MetricsExport:
    """The three export views rendered from one instant of state.

    Attributes:
        prometheus_text: Prometheus exposition text of the window gauges.
        json_snapshot: Analytics, recent logs and alerts as plain JSON data.
        csv_text: Most recent raw samples as CSV.
    """

    prometheus_text: str
    json_snapshot: dict[str, Any]
    csv_text: str
