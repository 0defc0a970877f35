"""Metric helper functions for creating MetricSample objects."""

import time
from typing import Any

from agentobs.core.models import MetricSample


def elapsed_ms(started: float) -> float:
    """Milliseconds elapsed since a time.perf_counter() reading."""
    return (time.perf_counter() - started) * 1000


def failure_message(exc: BaseException) -> str:
    """Message recorded for a failed operation.

    Falls back to the exception class name when str(exc) is empty,
    which is the case for bare cancellations and timeouts.
    """
    return str(exc) or type(exc).__name__


def success(
    operation: str,
    agent_id: str,
    actor_id: str,
    started_at: float,
    duration_ms: float,
    metadata: dict[str, Any] | None = None,
) -> MetricSample:
    """Create a sample for an operation that completed.

    Args:
        operation: Operation name
        agent_id: Agent the operation acted on
        actor_id: Trainer or caller, may be empty
        started_at: Unix timestamp when the operation started
        duration_ms: Elapsed time in milliseconds
        metadata: Optional structured fields

    Returns:
        MetricSample with success=True
    """
    return MetricSample(
        operation=operation,
        agent_id=agent_id,
        actor_id=actor_id,
        timestamp=started_at,
        duration_ms=duration_ms,
        success=True,
        metadata=dict(metadata) if metadata else {},
    )


def failure(
    operation: str,
    agent_id: str,
    actor_id: str,
    started_at: float,
    duration_ms: float,
    error: str,
    metadata: dict[str, Any] | None = None,
) -> MetricSample:
    """Create a sample for an operation that raised.

    Args:
        operation: Operation name
        agent_id: Agent the operation acted on
        actor_id: Trainer or caller, may be empty
        started_at: Unix timestamp when the operation started
        duration_ms: Elapsed time until the failure, in milliseconds
        error: Failure message
        metadata: Optional structured fields

    Returns:
        MetricSample with success=False
    """
    return MetricSample(
        operation=operation,
        agent_id=agent_id,
        actor_id=actor_id,
        timestamp=started_at,
        duration_ms=duration_ms,
        success=False,
        error=error,
        metadata=dict(metadata) if metadata else {},
    )
