"""Tests for per-user consumption statistics."""
from datetime import timedelta

from alcotrack.drinks import DRINK_CATEGORIES
from alcotrack.stats import daily_consumption, drink_stats, weekly_trend


def history(make_drink):
    return [
        make_drink(minutes_ago=0, drink_type="pint", volume_cl=50),
        make_drink(minutes_ago=60, drink_type="pint", volume_cl=50),
        make_drink(minutes_ago=24 * 60, category="wine", drink_type="glass", volume_cl=12.5, strength_percent=12),
        make_drink(minutes_ago=6 * 24 * 60, category="shot", drink_type="vodka", volume_cl=4, strength_percent=40),
        make_drink(minutes_ago=30, is_template=True),
    ]


def test_daily_consumption(make_drink, now):
    drinks = history(make_drink)
    assert daily_consumption(drinks, now.date()) == 4.0
    assert daily_consumption(drinks, (now - timedelta(days=1)).date()) == 1.2
    assert daily_consumption(drinks, (now - timedelta(days=3)).date()) == 0.0


def test_weekly_trend_oldest_first(make_drink, now):
    trend = weekly_trend(history(make_drink), now)
    assert len(trend) == 7
    assert trend[-1] == 4.0
    assert trend[-2] == 1.2
    assert trend[0] == 1.28
    assert trend[1:5] == [0.0, 0.0, 0.0, 0.0]


def test_drink_stats(make_drink, now):
    stats = drink_stats(history(make_drink), now)
    assert stats["total_drinks"] == 4
    assert stats["total_units"] == 6.48
    assert set(DRINK_CATEGORIES) <= set(stats["by_category"])
    assert stats["by_category"]["beer"] == 2
    assert stats["by_category"]["cocktail"] == 0
    assert stats["favorite_type"] == "beer:pint"
    assert len(stats["hourly_distribution"]) == 24
    assert stats["hourly_distribution"][14] == 3
    assert stats["hourly_distribution"][13] == 1
    assert sum(stats["hourly_distribution"]) == 4
    assert stats["daily_average"] == round(6.48 / 7, 2)


def test_drink_stats_empty(now):
    stats = drink_stats([], now)
    assert stats["total_drinks"] == 0
    assert stats["favorite_type"] == ""
    assert stats["daily_average"] == 0.0
