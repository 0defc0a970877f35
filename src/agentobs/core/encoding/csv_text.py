"""CSV encoder for raw metric samples."""

import csv
import io
from collections.abc import Iterable
from datetime import UTC, datetime

from agentobs.core.models import MetricSample

CSV_COLUMNS = (
    "timestamp",
    "operation",
    "agentId",
    "actorId",
    "durationMs",
    "success",
    "error",
)


def iso_timestamp(timestamp: float) -> str:
    """Format a Unix timestamp as ISO-8601 UTC with millisecond precision."""
    moment = datetime.fromtimestamp(timestamp, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def encode_samples(samples: Iterable[MetricSample]) -> str:
    """Encode metric samples as CSV with a fixed header row.

    Fields containing commas, quotes or newlines are quoted.

    Args:
        samples: Samples to encode, written in the given order.

    Returns:
        CSV text with "\\n" line endings. Header only if no samples.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for sample in samples:
        writer.writerow(
            (
                iso_timestamp(sample.timestamp),
                sample.operation,
                sample.agent_id,
                sample.actor_id,
                _format_duration(sample.duration_ms),
                "true" if sample.success else "false",
                sample.error or "",
            )
        )
    return buffer.getvalue()


def _format_duration(duration_ms: float) -> str:
    if float(duration_ms).is_integer():
        return str(int(duration_ms))
    return f"{duration_ms:.3f}"
