"""
Alcohol tracker core: unit conversion, Widmark-style BAC estimation,
drinking pace, session detection (with optional sleep detection) and group stats.
Use from project root: python -m alcotrack.main
"""

from alcotrack.drinks import DrinkEvent, compute_units, new_drink
from alcotrack.calculations import (
    BodyProfile,
    estimate_advanced_bac,
    estimate_bac,
    remaining_units,
    time_to_sober,
)
from alcotrack.activity import ActivitySample, Steps, detect_sleep
from alcotrack.speed import analyze_speed
from alcotrack.session import Session, session_drinks, session_drinks_with_activity
from alcotrack.group import group_session_average

__all__ = [
    "ActivitySample",
    "BodyProfile",
    "DrinkEvent",
    "Session",
    "Steps",
    "analyze_speed",
    "compute_units",
    "detect_sleep",
    "estimate_advanced_bac",
    "estimate_bac",
    "group_session_average",
    "new_drink",
    "remaining_units",
    "session_drinks",
    "session_drinks_with_activity",
    "time_to_sober",
]
