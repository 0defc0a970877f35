"""Query parameter parsing utilities for the dashboard router.

Invalid values are ignored (treated as absent) instead of rejected, so a
dashboard with a stale or malformed URL still gets data back.
"""

import math

from agentobs.core.models import LOG_LEVELS


def _parse_window_param(raw: str | None) -> float | None:
    """Parse and validate a window length in milliseconds.

    Args:
        raw: Raw query string value.

    Returns:
        Window as float, or None if missing or invalid.
        Rejects zero, negative, NaN, and infinite values.
    """
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if value <= 0 or math.isnan(value) or math.isinf(value):
        return None
    return value


def _parse_limit_param(raw: str | None) -> int | None:
    """Parse and validate the 'limit' query parameter.

    Returns:
        Non-negative limit, or None if missing or invalid.
    """
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 0 else None


def _parse_level_param(raw: str | None) -> str | None:
    """Parse and validate the 'level' query parameter.

    Returns:
        Validated level string (uppercase) or None if invalid/missing.
    """
    if raw and raw.upper() in LOG_LEVELS:
        return raw.upper()
    return None
