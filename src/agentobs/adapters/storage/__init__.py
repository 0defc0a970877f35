"""Storage adapters implementing core ports."""

from agentobs.adapters.storage.ring_buffer import (
    RingBuffer,
    RingBufferLogStorage,
    RingBufferMetricsStorage,
)

__all__ = [
    "RingBuffer",
    "RingBufferLogStorage",
    "RingBufferMetricsStorage",
]
