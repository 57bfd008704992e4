"""Activity samples and low-activity (sleep) detection.

Samples come from a step counter at a nominal fixed interval, with steps split
into walking and dancing. The thresholds are heuristics tuned for nights out
and festivals, not a physiological measurement.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from alcotrack.coerce import epoch_seconds, finite_nonnegative, finite_positive, parse_timestamp, to_float

logger = logging.getLogger(__name__)

# A sample with fewer total steps than this counts as low activity.
LOW_ACTIVITY_STEPS = 50
SAMPLE_INTERVAL_MINUTES = 10.0
SLEEP_MIN_HOURS = 3.0


@dataclass
class Steps:
    walking: Any = 0
    dancing: Any = 0
    total: Any = 0


@dataclass
class ActivitySample:
    timestamp: Any
    steps: Steps = field(default_factory=Steps)


def _count(value: Any) -> Optional[float]:
    """A usable step count, or None. +inf is kept and reads as very active."""
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == math.inf:
        return math.inf
    parsed = to_float(value)
    if parsed is None or parsed < 0:
        return None
    return parsed


def _steps_field(steps: Any, name: str) -> Any:
    if isinstance(steps, Mapping):
        return steps.get(name)
    return getattr(steps, name, None)


def total_steps(sample: Any) -> Optional[float]:
    """Best interpretable step total for a sample, or None when unknown.

    When total and walking + dancing disagree, the larger one is used.
    """
    steps = sample.get("steps") if isinstance(sample, Mapping) else getattr(sample, "steps", None)
    if steps is None:
        return None
    total = _count(_steps_field(steps, "total"))
    parts = [_count(_steps_field(steps, name)) for name in ("walking", "dancing")]
    known = [p for p in parts if p is not None]
    split_total = sum(known) if known else None
    if total is None:
        return split_total
    if split_total is None:
        return total
    return max(total, split_total)


def activity_readings(samples: Iterable[Any]) -> List[Tuple[float, Optional[float]]]:
    """(epoch_seconds, total_steps) newest first, dropping unusable timestamps."""
    out = []
    for sample in samples or ():
        raw_ts = sample.get("timestamp") if isinstance(sample, Mapping) else getattr(sample, "timestamp", None)
        t = epoch_seconds(raw_ts)
        if t is None:
            logger.debug("Skipping activity sample with unusable timestamp %r", raw_ts)
            continue
        out.append((t, total_steps(sample)))
    out.sort(key=lambda r: r[0], reverse=True)
    return out


def _span_minutes(newer: Optional[float], t: float, interval: float) -> float:
    if newer is None:
        return interval
    return min(interval, (newer - t) / 60.0)


def _trailing_inactivity(readings, threshold: float, interval: float) -> float:
    minutes = 0.0
    newer = None
    for t, total in readings:
        if total is None:
            continue
        if total >= threshold:
            break
        minutes += _span_minutes(newer, t, interval)
        newer = t
    return minutes


def _longest_inactivity(readings, threshold: float, interval: float) -> float:
    best = 0.0
    current = 0.0
    newer = None
    for t, total in readings:
        if total is None:
            continue
        if total >= threshold:
            current = 0.0
            newer = None
            continue
        current += _span_minutes(newer, t, interval)
        newer = t
        best = max(best, current)
    return best


def _result(minutes: float, min_hours: Any) -> dict:
    required = finite_nonnegative(min_hours, default=SLEEP_MIN_HOURS)
    hours = minutes / 60.0
    return {
        "is_sleeping": bool(hours > 0 and hours >= required),
        "inactivity_duration": round(hours, 2),
    }


def detect_sleep(
    samples: Iterable[Any],
    min_hours: Any = SLEEP_MIN_HOURS,
    *,
    low_activity_steps: float = LOW_ACTIVITY_STEPS,
    sample_interval_minutes: float = SAMPLE_INTERVAL_MINUTES,
) -> dict:
    """Whether the subject has been in low activity for at least min_hours.

    Scans from the most recent sample backward while step totals stay under
    low_activity_steps. Each low sample accounts for one sampling interval,
    or for the time to the next newer sample when that is shorter. Samples with
    corrupt step counts neither extend nor break the stretch.
    """
    interval = finite_positive(sample_interval_minutes, default=SAMPLE_INTERVAL_MINUTES)
    minutes = _trailing_inactivity(activity_readings(samples), low_activity_steps, interval)
    return _result(minutes, min_hours)


def detect_sleep_between(
    samples: Iterable[Any],
    start: float,
    end: float,
    min_hours: Any = SLEEP_MIN_HOURS,
    *,
    low_activity_steps: float = LOW_ACTIVITY_STEPS,
    sample_interval_minutes: float = SAMPLE_INTERVAL_MINUTES,
) -> dict:
    """Sleep detection over the longest low-activity stretch in [start, end] (epoch seconds)."""
    return sleep_in_window(
        activity_readings(samples),
        start,
        end,
        min_hours,
        low_activity_steps=low_activity_steps,
        sample_interval_minutes=sample_interval_minutes,
    )


def sleep_in_window(
    readings: List[Tuple[float, Optional[float]]],
    start: float,
    end: float,
    min_hours: Any = SLEEP_MIN_HOURS,
    *,
    low_activity_steps: float = LOW_ACTIVITY_STEPS,
    sample_interval_minutes: float = SAMPLE_INTERVAL_MINUTES,
) -> dict:
    """detect_sleep_between over readings already built by activity_readings."""
    interval = finite_positive(sample_interval_minutes, default=SAMPLE_INTERVAL_MINUTES)
    window = [r for r in readings if start <= r[0] <= end]
    minutes = _longest_inactivity(window, low_activity_steps, interval)
    return _result(minutes, min_hours)


def sample_from_dict(raw: Mapping[str, Any]) -> ActivitySample:
    steps = raw.get("steps") or {}
    if not isinstance(steps, Mapping):
        steps = {}
    return ActivitySample(
        timestamp=parse_timestamp(raw.get("timestamp")),
        steps=Steps(
            walking=steps.get("walking"),
            dancing=steps.get("dancing"),
            total=steps.get("total"),
        ),
    )
