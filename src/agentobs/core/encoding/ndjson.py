"""JSON and NDJSON encoders for log entries and metric samples."""

import json
from collections.abc import Iterable
from typing import Any

from agentobs.core.models import LogEntry, MetricSample


def log_to_dict(entry: LogEntry) -> dict[str, Any]:
    """Convert a log entry to a JSON-compatible dict."""
    return {
        "level": entry.level,
        "operation": entry.operation,
        "agent_id": entry.agent_id,
        "actor_id": entry.actor_id,
        "timestamp": entry.timestamp,
        "message": entry.message,
        "context": dict(entry.context),
    }


def sample_to_dict(sample: MetricSample) -> dict[str, Any]:
    """Convert a metric sample to a JSON-compatible dict."""
    return {
        "operation": sample.operation,
        "agent_id": sample.agent_id,
        "actor_id": sample.actor_id,
        "timestamp": sample.timestamp,
        "duration_ms": sample.duration_ms,
        "success": sample.success,
        "error": sample.error,
        "metadata": dict(sample.metadata),
    }


def encode_logs(entries: Iterable[LogEntry]) -> str:
    """Encode log entries to newline-delimited JSON.

    Args:
        entries: An iterable of LogEntry objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no entries.
    """
    lines = [json.dumps(log_to_dict(entry), default=str) for entry in entries]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
