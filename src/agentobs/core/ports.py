"""Port interfaces for storage, sinks and error classification.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from agentobs.core.models import LogEntry, MetricSample

ErrorClassifier = Callable[[str], str]
"""Maps a failure message to a normalized error category."""


@runtime_checkable
class LogStoragePort(Protocol):
    """Port for log storage operations.

    Adapters implementing this protocol can store and retrieve log entries.
    Examples: RingBufferLogStorage.
    """

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        ...

    def read(self, since: float = 0) -> list[LogEntry]:
        """Read log entries with timestamp >= since, in insertion order."""
        ...


@runtime_checkable
class MetricsStoragePort(Protocol):
    """Port for metrics storage operations.

    Adapters implementing this protocol can store and retrieve metric samples.
    Examples: RingBufferMetricsStorage.
    """

    def write(self, sample: MetricSample) -> None:
        """Write a metric sample to storage."""
        ...

    def scrape(self) -> list[MetricSample]:
        """Return a point-in-time copy of all stored samples, oldest first."""
        ...


@runtime_checkable
class SinkPort(Protocol):
    """Port for best-effort delivery of records to external endpoints.

    Implementations must never raise from forward_* and must never block
    the caller on network I/O.
    """

    def forward_log(self, entry: LogEntry) -> None:
        """Hand a log entry over for delivery."""
        ...

    def forward_metric(self, sample: MetricSample) -> None:
        """Hand a metric sample over for delivery."""
        ...

    def close(self, timeout: float | None = None) -> None:
        """Stop delivering and release resources."""
        ...
