"""
Drinking sessions: the current run of a user's drinks with no long break.

A gap of more than 4 hours between two consecutive drinks ends a session. With
activity data, a gap of 3 hours or more also ends it when the step counter shows
a sleep-length stretch of low activity inside that gap.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from alcotrack import calculations
from alcotrack.activity import SLEEP_MIN_HOURS, activity_readings, sleep_in_window
from alcotrack.coerce import epoch_seconds
from alcotrack.drinks import DrinkEvent
from alcotrack.speed import analyze_speed

logger = logging.getLogger(__name__)

SESSION_BREAK_MINUTES = 240
SLEEP_BREAK_MINUTES = 180
MAX_SESSION_LOOKBACK_HOURS = 24

# (epoch_seconds, drink), ascending by time.
Timeline = List[Tuple[float, DrinkEvent]]
BreakRule = Callable[[float, float], bool]


def _timed(drinks: Iterable[DrinkEvent]) -> Iterable[Tuple[float, DrinkEvent]]:
    for drink in drinks or ():
        if drink.is_template:
            continue
        t = epoch_seconds(drink.timestamp)
        if t is None:
            logger.debug("Drink %s skipped: unusable timestamp", drink.id)
            continue
        yield t, drink


def timeline(drinks: Iterable[DrinkEvent], user_id: Optional[str] = None) -> Timeline:
    """A user's real drinks sorted by time. user_id=None keeps every user."""
    timed = [(t, d) for t, d in _timed(drinks) if user_id is None or d.user_id == user_id]
    timed.sort(key=lambda item: item[0])
    return timed


def timelines_by_user(drinks: Iterable[DrinkEvent]) -> Dict[str, Timeline]:
    out: Dict[str, Timeline] = {}
    for t, drink in _timed(drinks):
        out.setdefault(drink.user_id, []).append((t, drink))
    for items in out.values():
        items.sort(key=lambda item: item[0])
    return out


def gap_rule(break_minutes: float = SESSION_BREAK_MINUTES) -> BreakRule:
    limit = break_minutes * 60.0
    return lambda previous, current: current - previous > limit


def trailing_session(
    events: Timeline,
    break_at: Optional[BreakRule] = None,
    as_of: Any = None,
    max_lookback_hours: float = MAX_SESSION_LOOKBACK_HOURS,
) -> List[DrinkEvent]:
    """Drinks of the session containing the latest event in a sorted timeline.

    With as_of, drinks older than max_lookback_hours before it are dropped.
    """
    if not events:
        return []
    if break_at is None:
        break_at = gap_rule()

    start = 0
    for i in range(len(events) - 1, 0, -1):
        if break_at(events[i - 1][0], events[i][0]):
            logger.debug("Session boundary before drink %s", events[i][1].id)
            start = i
            break

    session = events[start:]
    now = epoch_seconds(as_of)
    if now is not None:
        cutoff = now - max_lookback_hours * 3600.0
        session = [(t, d) for t, d in session if t >= cutoff]
    return [d for _, d in session]


def session_drinks(
    all_drinks: Iterable[DrinkEvent],
    user_id: Optional[str],
    *,
    as_of: Any = None,
    break_minutes: float = SESSION_BREAK_MINUTES,
) -> List[DrinkEvent]:
    """The user's current session: drinks after the last gap longer than break_minutes."""
    return trailing_session(timeline(all_drinks, user_id), gap_rule(break_minutes), as_of)


def session_drinks_with_activity(
    all_drinks: Iterable[DrinkEvent],
    activity: Iterable[Any],
    user_id: Optional[str],
    *,
    as_of: Any = None,
    break_minutes: float = SESSION_BREAK_MINUTES,
    sleep_break_minutes: float = SLEEP_BREAK_MINUTES,
    sleep_min_hours: float = SLEEP_MIN_HOURS,
) -> List[DrinkEvent]:
    """session_drinks refined by activity: a shorter gap also splits when spent asleep.

    Without usable activity samples this is exactly session_drinks.
    """
    readings = activity_readings(activity)
    if not readings:
        return session_drinks(all_drinks, user_id, as_of=as_of, break_minutes=break_minutes)

    long_gap = gap_rule(break_minutes)
    sleep_gap = sleep_break_minutes * 60.0

    def break_at(previous: float, current: float) -> bool:
        if long_gap(previous, current):
            return True
        if current - previous < sleep_gap:
            return False
        sleep = sleep_in_window(readings, previous, current, sleep_min_hours)
        if sleep["is_sleeping"]:
            logger.debug("Sleep of %.2fh detected inside drink gap", sleep["inactivity_duration"])
        return sleep["is_sleeping"]

    return trailing_session(timeline(all_drinks, user_id), break_at, as_of)


@dataclass
class Session:
    """One user's current drinking session."""

    user_id: Optional[str]
    drinks: List[DrinkEvent] = field(default_factory=list)

    @classmethod
    def current(
        cls,
        all_drinks: Iterable[DrinkEvent],
        user_id: Optional[str],
        activity: Optional[Iterable[Any]] = None,
        as_of: Any = None,
    ) -> "Session":
        drinks = session_drinks_with_activity(all_drinks, activity or [], user_id, as_of=as_of)
        return cls(user_id=user_id, drinks=drinks)

    @property
    def start_time(self) -> Any:
        return self.drinks[0].timestamp if self.drinks else None

    @property
    def last_drink_time(self) -> Any:
        return self.drinks[-1].timestamp if self.drinks else None

    @property
    def total_units(self) -> float:
        return round(sum(d.units for d in self.drinks), 2)

    @property
    def speed(self) -> dict:
        return analyze_speed(self.drinks)

    def remaining_units(self, as_of: Any, profile: Any = None) -> float:
        if profile is None:
            return calculations.remaining_units(self.drinks, as_of)
        return calculations.advanced_remaining_units(self.drinks, profile, as_of)

    def bac(self, as_of: Any, weight_kg: Any = calculations.DEFAULT_WEIGHT_KG, is_male: Any = True) -> dict:
        """Simple BAC for what is left of this session, adjusted for pace."""
        return calculations.estimate_bac(
            self.remaining_units(as_of),
            weight_kg,
            is_male,
            self.speed["speed_factor"],
        )

    def advanced_bac(self, as_of: Any, profile: Any = None) -> dict:
        return calculations.estimate_advanced_bac(self.remaining_units(as_of, profile), profile)
