"""Log helper functions for creating LogEntry objects."""

import time
from collections.abc import Iterable
from typing import Any

from agentobs.core.models import LOG_LEVELS, LogEntry, LogLevel


def normalize_level(level: str) -> LogLevel:
    """Return the canonical upper-case level.

    Accepts "warning" as an alias for WARN.

    Raises:
        ValueError: If the level is not INFO, WARN or ERROR.
    """
    upper = level.upper()
    if upper == "WARNING":
        upper = "WARN"
    if upper not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level!r}")
    return upper  # type: ignore[return-value]


def log(
    level: str,
    operation: str,
    agent_id: str,
    actor_id: str,
    message: str,
    context: dict[str, Any] | None = None,
    timestamp: float | None = None,
) -> LogEntry:
    """Create a log entry for an agent operation.

    Args:
        level: Log level (INFO, WARN or ERROR, case-insensitive)
        operation: Operation name
        agent_id: Agent the entry refers to
        actor_id: Trainer or caller, may be empty
        message: The log message
        context: Optional structured fields
        timestamp: Unix timestamp; defaults to the current time

    Returns:
        LogEntry with the given or current timestamp
    """
    return LogEntry(
        level=normalize_level(level),
        operation=operation,
        agent_id=agent_id,
        actor_id=actor_id,
        timestamp=time.time() if timestamp is None else timestamp,
        message=message,
        context=dict(context) if context else {},
    )


def info(
    operation: str,
    agent_id: str,
    actor_id: str,
    message: str,
    context: dict[str, Any] | None = None,
) -> LogEntry:
    """Create an INFO log entry with automatic timestamp."""
    return log("INFO", operation, agent_id, actor_id, message, context)


def warn(
    operation: str,
    agent_id: str,
    actor_id: str,
    message: str,
    context: dict[str, Any] | None = None,
) -> LogEntry:
    """Create a WARN log entry with automatic timestamp."""
    return log("WARN", operation, agent_id, actor_id, message, context)


def error(
    operation: str,
    agent_id: str,
    actor_id: str,
    message: str,
    context: dict[str, Any] | None = None,
) -> LogEntry:
    """Create an ERROR log entry with automatic timestamp."""
    return log("ERROR", operation, agent_id, actor_id, message, context)


def filter_logs(
    entries: Iterable[LogEntry],
    *,
    level: str | None = None,
    operation: str | None = None,
    agent_id: str | None = None,
    actor_id: str | None = None,
    window_ms: float | None = None,
    limit: int | None = None,
    now: float | None = None,
) -> list[LogEntry]:
    """Filter log entries and order them newest first.

    Every criterion left as None is not applied. The limit is applied
    after filtering and sorting.

    Args:
        entries: Entries to filter, in any order.
        level: Keep only this level (case-insensitive).
        operation: Keep only this operation.
        agent_id: Keep only this agent.
        actor_id: Keep only this actor.
        window_ms: Keep only entries from the trailing window.
        limit: Maximum number of entries returned.
        now: End of the window; defaults to the current time.

    Returns:
        Matching entries sorted by timestamp, newest first.
    """
    wanted_level = normalize_level(level) if level else None
    cutoff = None
    if window_ms:
        cutoff = (time.time() if now is None else now) - window_ms / 1000

    result = [
        e
        for e in entries
        if (wanted_level is None or e.level == wanted_level)
        and (operation is None or e.operation == operation)
        and (agent_id is None or e.agent_id == agent_id)
        and (actor_id is None or e.actor_id == actor_id)
        and (cutoff is None or e.timestamp >= cutoff)
    ]
    # Newest insertion first among equal timestamps.
    result.reverse()
    result.sort(key=lambda e: e.timestamp, reverse=True)
    if limit is not None:
        result = result[: max(limit, 0)]
    return result
