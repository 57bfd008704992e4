"""Group-level consumption statistics over members' drinks."""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from alcotrack.coerce import epoch_seconds, finite_nonnegative
from alcotrack.drinks import DrinkEvent
from alcotrack.session import timelines_by_user, trailing_session

logger = logging.getLogger(__name__)


def member_id(member: Any) -> Optional[str]:
    """Id of a member given as a plain id, a mapping or an object with .id."""
    if member is None:
        return None
    if isinstance(member, str):
        return member
    if isinstance(member, Mapping):
        value = member.get("id")
    else:
        value = getattr(member, "id", None)
    return None if value is None else str(value)


def _stats_entry(drinks: List[DrinkEvent]) -> dict:
    return {
        "drinks": len(drinks),
        "units": round(sum(finite_nonnegative(d.units) for d in drinks), 2),
    }


def group_session_average(drinks: Iterable[DrinkEvent], members: List[Any]) -> dict:
    """Average session units per member, per-member session stats and session start.

    Members with no session drinks are left out of session_member_stats. The
    average divides by the literal len(members); a repeated member id is counted
    once in the stats and in the total, but twice in the denominator.
    """
    members = list(members or [])
    timelines = timelines_by_user(drinks)

    member_stats: Dict[str, dict] = {}
    start_time: Any = None
    start_epoch: Optional[float] = None
    for member in members:
        uid = member_id(member)
        if uid is None or uid in member_stats or uid not in timelines:
            continue
        session = trailing_session(timelines[uid])
        if not session:
            continue
        member_stats[uid] = _stats_entry(session)
        first = epoch_seconds(session[0].timestamp)
        if first is not None and (start_epoch is None or first < start_epoch):
            start_epoch = first
            start_time = session[0].timestamp

    total_units = sum(entry["units"] for entry in member_stats.values())
    average = total_units / max(1, len(members))
    logger.debug("Group session: %d active of %d members", len(member_stats), len(members))
    return {
        "session_group_average": round(average, 2),
        "session_member_stats": member_stats,
        "session_start_time": start_time,
    }


def group_stats(drinks: Iterable[DrinkEvent], members: List[Any]) -> dict:
    """Whole-history totals for a group: drinks, units, average and busiest day."""
    real = [d for d in drinks or () if not d.is_template]
    members = list(members or [])
    total_units = sum(finite_nonnegative(d.units) for d in real)

    day_count: Dict[str, int] = {}
    by_member: Dict[str, List[DrinkEvent]] = {}
    for drink in real:
        by_member.setdefault(drink.user_id, []).append(drink)
        if isinstance(drink.timestamp, datetime):
            day = drink.timestamp.strftime("%Y-%m-%d")
            day_count[day] = day_count.get(day, 0) + 1

    most_active_day = ""
    max_drinks = 0
    for day, count in day_count.items():
        if count > max_drinks:
            most_active_day, max_drinks = day, count

    return {
        "total_drinks": len(real),
        "total_units": round(total_units, 2),
        "average_per_person": round(total_units / len(members), 2) if members else 0.0,
        "most_active_day": most_active_day,
        "member_stats": {uid: _stats_entry(items) for uid, items in by_member.items()},
    }
