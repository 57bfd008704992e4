"""Defensive conversion helpers.

Every public calculation in alcotrack is total over pathological input: None,
NaN, infinities, negatives and unparseable timestamps are turned into safe
defaults here instead of raising further down.
"""

import math
from datetime import datetime
from typing import Any, Optional


def to_float(value: Any) -> Optional[float]:
    """Return value as a finite float, or None when it is not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def finite_nonnegative(value: Any, default: float = 0.0) -> float:
    parsed = to_float(value)
    if parsed is None or parsed < 0:
        return default
    return parsed


def finite_positive(value: Any, default: float) -> float:
    parsed = to_float(value)
    if parsed is None or parsed <= 0:
        return default
    return parsed


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def parse_bool(value: Any, default: bool = True) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "y", "male"}:
            return True
        if lowered in {"false", "0", "no", "n", "female"}:
            return False
    if isinstance(value, (int, float)) and math.isfinite(value):
        return bool(value)
    return default


def epoch_seconds(value: Any) -> Optional[float]:
    """Seconds since the epoch for a datetime or numeric timestamp.

    Naive datetimes are read as local time, aware ones by their offset, so
    mixed collections compare without raising. Unusable values give None.
    """
    if isinstance(value, datetime):
        try:
            return value.timestamp()
        except (OverflowError, OSError, ValueError):
            return None
    return to_float(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch number into a datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    seconds = to_float(value)
    if seconds is None:
        return None
    try:
        return datetime.fromtimestamp(seconds).astimezone()
    except (OverflowError, OSError, ValueError):
        return None
