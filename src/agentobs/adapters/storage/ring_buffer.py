"""Ring buffer storage adapters for logs and metrics.

Provides bounded in-memory storage that automatically evicts oldest
entries when the buffer is full. Appends are serialized by a lock and
readers work on a copy, so aggregation never holds up writers for
longer than the copy itself.
"""

import threading
from collections import deque
from typing import Generic, TypeVar

from agentobs.core.models import LogEntry, MetricSample

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """Thread-safe fixed-capacity FIFO buffer.

    Args:
        capacity: Maximum number of items to store.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._buffer: deque[T] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._buffer.maxlen or 0

    def append(self, item: T) -> None:
        """Append an item, evicting the oldest one when full."""
        with self._lock:
            self._buffer.append(item)

    def snapshot(self) -> list[T]:
        """Return an independent copy of the contents, oldest first."""
        with self._lock:
            return list(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)


class RingBufferLogStorage:
    """Ring buffer implementation of LogStoragePort.

    Stores log entries in a fixed-size circular buffer. When the buffer
    is full, the oldest entry is automatically evicted to make room for
    new entries.

    Args:
        max_size: Maximum number of entries to store.
    """

    def __init__(self, max_size: int) -> None:
        self._buffer: RingBuffer[LogEntry] = RingBuffer(max_size)

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        self._buffer.append(entry)

    def read(self, since: float = 0) -> list[LogEntry]:
        """Read log entries with timestamp >= since, in insertion order."""
        return [e for e in self._buffer.snapshot() if e.timestamp >= since]

    def __len__(self) -> int:
        return len(self._buffer)


class RingBufferMetricsStorage:
    """Ring buffer implementation of MetricsStoragePort.

    Stores metric samples in a fixed-size circular buffer. When the buffer
    is full, the oldest sample is automatically evicted to make room for
    new samples.

    Args:
        max_size: Maximum number of samples to store.
    """

    def __init__(self, max_size: int) -> None:
        self._buffer: RingBuffer[MetricSample] = RingBuffer(max_size)

    def write(self, sample: MetricSample) -> None:
        """Write a metric sample to storage."""
        self._buffer.append(sample)

    def scrape(self) -> list[MetricSample]:
        """Scrape all current metric samples."""
        return self._buffer.snapshot()

    def __len__(self) -> int:
        return len(self._buffer)
