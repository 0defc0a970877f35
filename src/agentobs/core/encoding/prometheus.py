"""Prometheus text encoder for windowed analytics."""

from agentobs.core.models import WindowedAnalytics

# (suffix, help text, value attribute)
_GAUGES = (
    ("operations_total", "Agent operations in the current window", "total_operations"),
    ("success_rate", "Success rate of agent operations", "success_rate"),
    (
        "avg_duration_ms",
        "Average duration of agent operations in milliseconds",
        "avg_duration_ms",
    ),
    (
        "throughput_ops_per_sec",
        "Agent operations throughput per second",
        "throughput",
    ),
)


def _format_value(value: float) -> str:
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def encode_analytics(analytics: WindowedAnalytics, prefix: str = "agent") -> str:
    """Encode analytics as Prometheus exposition text.

    Every value is exposed as a gauge. operations_total counts the
    operations inside the window, so it can go down between scrapes.

    Args:
        analytics: Analytics to expose.
        prefix: Metric name prefix; an empty prefix yields bare names.

    Returns:
        Text with HELP/TYPE comment lines, ending with a newline.
    """
    lines: list[str] = []
    for suffix, help_text, attr in _GAUGES:
        name = f"{prefix}_{suffix}" if prefix else suffix
        if lines:
            lines.append("")
        lines.append(f"# HELP {name} {help_text}")
        lines.append(f"# TYPE {name} gauge")
        lines.append(f"{name} {_format_value(getattr(analytics, attr))}")
    return "\n".join(lines) + "\n"
