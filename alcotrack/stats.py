"""Per-user consumption statistics: by category, by hour, by day."""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List

from alcotrack.coerce import finite_nonnegative
from alcotrack.drinks import DRINK_CATEGORIES, DrinkEvent


def _dated(drinks: Iterable[DrinkEvent]) -> List[DrinkEvent]:
    return [d for d in drinks or () if not d.is_template and isinstance(d.timestamp, datetime)]


def daily_consumption(drinks: Iterable[DrinkEvent], day: date) -> float:
    """Units consumed on a calendar day (in each drink's own timezone)."""
    total = sum(finite_nonnegative(d.units) for d in _dated(drinks) if d.timestamp.date() == day)
    return round(total, 2)


def weekly_trend(drinks: Iterable[DrinkEvent], as_of: datetime) -> List[float]:
    """Daily unit totals for the 7 days ending on as_of, oldest first."""
    dated = _dated(drinks)
    today = as_of.date()
    return [daily_consumption(dated, today - timedelta(days=i)) for i in range(6, -1, -1)]


def drink_stats(drinks: Iterable[DrinkEvent], as_of: datetime) -> dict:
    dated = _dated(drinks)
    total_units = sum(finite_nonnegative(d.units) for d in dated)

    by_category: Dict[str, int] = {c: 0 for c in DRINK_CATEGORIES}
    type_count: Dict[str, int] = {}
    hourly = [0] * 24
    for drink in dated:
        by_category[drink.category] = by_category.get(drink.category, 0) + 1
        key = f"{drink.category}:{drink.drink_type}"
        type_count[key] = type_count.get(key, 0) + 1
        hourly[drink.timestamp.hour] += 1

    favorite_type = ""
    max_count = 0
    for key, count in type_count.items():
        if count > max_count:
            favorite_type, max_count = key, count

    daily_average = 0.0
    if dated:
        first = min(d.timestamp.date() for d in dated)
        days = max(1, (as_of.date() - first).days + 1)
        daily_average = total_units / days

    return {
        "total_drinks": len(dated),
        "total_units": round(total_units, 2),
        "by_category": by_category,
        "favorite_type": favorite_type,
        "hourly_distribution": hourly,
        "daily_average": round(daily_average, 2),
    }
