"""Event recorder owning the log and metric buffers."""

import dataclasses
import json
import logging
import time
from collections.abc import Callable
from typing import Any

from agentobs.core import logs
from agentobs.core.models import LogEntry, MetricSample
from agentobs.core.ports import LogStoragePort, MetricsStoragePort, SinkPort

logger = logging.getLogger(__name__)

# Every recorded entry is echoed here for local console output.
events_logger = logging.getLogger("agentobs.events")

_STDLIB_LEVELS = {"INFO": logging.INFO, "WARN": logging.WARNING, "ERROR": logging.ERROR}


def format_entry(entry: LogEntry) -> str:
    """One-line console rendering of a log entry."""
    actor = f" actor={entry.actor_id}" if entry.actor_id else ""
    context = f" {json.dumps(entry.context, default=str)}" if entry.context else ""
    return (
        f"[AGENT:{entry.level}] {entry.operation} agent={entry.agent_id}{actor}"
        f" - {entry.message}{context}"
    )


class EventRecorder:
    """Appends records to storage and hands them to the sink forwarder.

    Recording is fail-open: a fault while building, storing or forwarding
    a record is logged locally and the record is dropped. Nothing raised
    here reaches the caller.

    Args:
        log_storage: Bounded storage for log entries.
        metrics_storage: Bounded storage for metric samples.
        forwarder: Sink forwarder, or None to keep records local.
        clock: Returns the current Unix timestamp.
    """

    def __init__(
        self,
        log_storage: LogStoragePort,
        metrics_storage: MetricsStoragePort,
        forwarder: SinkPort | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.log_storage = log_storage
        self.metrics_storage = metrics_storage
        self._forwarder = forwarder
        self.clock = clock

    def record_metric(self, sample: MetricSample) -> None:
        """Store a metric sample and forward it."""
        try:
            sample = self._check_sample(sample)
            self.metrics_storage.write(sample)
        except Exception:
            logger.exception("Failed to record metric for %s", sample.operation)
            return
        if self._forwarder is not None:
            try:
                self._forwarder.forward_metric(sample)
            except Exception:
                logger.exception("Sink forwarder rejected metric sample")

    def log(
        self,
        level: str,
        operation: str,
        agent_id: str,
        actor_id: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Store a log entry, echo it locally and forward it."""
        try:
            entry = logs.log(
                level,
                operation,
                agent_id,
                actor_id,
                message,
                context,
                timestamp=self.clock(),
            )
            self.log_storage.write(entry)
        except Exception:
            logger.exception("Failed to record %s log for %s", level, operation)
            return
        self.write_entry(entry, stored=True)

    def write_entry(self, entry: LogEntry, stored: bool = False) -> None:
        """Store a prebuilt entry (unless already stored), echo and forward it."""
        try:
            if not stored:
                self.log_storage.write(entry)
            events_logger.log(_STDLIB_LEVELS[entry.level], format_entry(entry))
        except Exception:
            logger.exception("Failed to record log entry for %s", entry.operation)
            return
        if self._forwarder is not None:
            try:
                self._forwarder.forward_log(entry)
            except Exception:
                logger.exception("Sink forwarder rejected log entry")

    def _check_sample(self, sample: MetricSample) -> MetricSample:
        if sample.duration_ms < 0:
            logger.warning(
                "Negative duration %.3fms for %s (clock skew?); clamping to 0",
                sample.duration_ms,
                sample.operation,
            )
            sample = dataclasses.replace(sample, duration_ms=0.0)
        if not sample.success and not sample.error:
            logger.warning(
                "Failed sample for %s has no error message; it counts as Other",
                sample.operation,
            )
        return sample
