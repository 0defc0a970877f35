"""agentobs: in-process observability for agent operations.

Wraps agent operations with timing and structured logs, keeps bounded
in-memory history, and derives windowed analytics, alerts and exports
from it.
"""

from agentobs.adapters.logging import AgentLogHandler
from agentobs.adapters.sinks.http import HttpSinkForwarder, NullSinkForwarder
from agentobs.adapters.storage.ring_buffer import (
    RingBuffer,
    RingBufferLogStorage,
    RingBufferMetricsStorage,
)
from agentobs.context import ObservabilityContext
from agentobs.core.classify import DEFAULT_RULES, KeywordClassifier, classify_error
from agentobs.core.config import AlertThresholds, ObservabilityConfig
from agentobs.core.models import (
    AlertResult,
    LogEntry,
    MetricSample,
    MetricsExport,
    WindowedAnalytics,
)

__all__ = [
    "DEFAULT_RULES",
    "AgentLogHandler",
    "AlertResult",
    "AlertThresholds",
    "HttpSinkForwarder",
    "KeywordClassifier",
    "LogEntry",
    "MetricSample",
    "MetricsExport",
    "NullSinkForwarder",
    "ObservabilityConfig",
    "ObservabilityContext",
    "RingBuffer",
    "RingBufferLogStorage",
    "RingBufferMetricsStorage",
    "WindowedAnalytics",
    "classify_error",
]
