"""Drinking pace classification.

The average gap between consecutive drinks selects a pattern and a
multiplicative speed factor applied to the estimated BAC peak.
"""

from typing import Any, Iterable, List

from alcotrack.coerce import epoch_seconds

# (upper bound of average gap in minutes, pattern, speed factor); the last
# band is open-ended.
SPEED_BANDS = (
    (15.0, "binge", 1.4),
    (30.0, "fast", 1.2),
    (60.0, "moderate", 1.0),
)
SLOW_PATTERN = ("slow", 0.85)

DEFAULT_GAP_MINUTES = 60


def _drink_times(drinks: Iterable[Any]) -> List[float]:
    times = []
    for drink in drinks or ():
        if getattr(drink, "is_template", False):
            continue
        t = epoch_seconds(getattr(drink, "timestamp", None))
        if t is not None:
            times.append(t)
    return sorted(times)


def classify_gap(average_minutes: float) -> tuple:
    """Return (pattern, speed_factor) for an average inter-drink gap."""
    for upper, pattern, factor in SPEED_BANDS:
        if average_minutes < upper:
            return pattern, factor
    return SLOW_PATTERN


def analyze_speed(drinks: Iterable[Any]) -> dict:
    """Average minutes between drinks, speed factor and pattern.

    Fewer than two usable drinks gives the neutral moderate result.
    """
    times = _drink_times(drinks)
    if len(times) < 2:
        return {
            "average_time_between_drinks": DEFAULT_GAP_MINUTES,
            "speed_factor": 1.0,
            "pattern": "moderate",
        }

    gaps = [(b - a) / 60.0 for a, b in zip(times, times[1:])]
    average = sum(gaps) / len(gaps)
    pattern, factor = classify_gap(average)
    return {
        "average_time_between_drinks": int(round(average)),
        "speed_factor": factor,
        "pattern": pattern,
    }
