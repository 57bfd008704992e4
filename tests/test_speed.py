"""Tests for drinking pace classification."""
import random

import pytest

from alcotrack.drinks import new_drink
from alcotrack.speed import analyze_speed, classify_gap


def sequence(make_drink, gaps):
    """Drinks separated by the given gaps (minutes), the last one now."""
    minutes_ago = sum(gaps)
    drinks = [make_drink(minutes_ago=minutes_ago)]
    for gap in gaps:
        minutes_ago -= gap
        drinks.append(make_drink(minutes_ago=minutes_ago))
    return drinks


def test_fewer_than_two_drinks_is_neutral(make_drink):
    neutral = {"average_time_between_drinks": 60, "speed_factor": 1.0, "pattern": "moderate"}
    assert analyze_speed([]) == neutral
    assert analyze_speed([make_drink()]) == neutral


@pytest.mark.parametrize("gaps,pattern,factor", [
    ([45, 45], "moderate", 1.0),
    ([25, 25], "fast", 1.2),
    ([10, 10, 5], "binge", 1.4),
    ([60, 60], "slow", 0.85),
    ([90, 120], "slow", 0.85),
])
def test_patterns(make_drink, gaps, pattern, factor):
    result = analyze_speed(sequence(make_drink, gaps))
    assert result["pattern"] == pattern
    assert result["speed_factor"] == factor


@pytest.mark.parametrize("average,pattern", [
    (14.99, "binge"),
    (15, "fast"),
    (29.99, "fast"),
    (30, "moderate"),
    (59.99, "moderate"),
    (60, "slow"),
])
def test_band_boundaries(average, pattern):
    assert classify_gap(average)[0] == pattern


def test_classification_uses_unrounded_average(make_drink):
    # Average 14.75 min: reported as 15 but still binge.
    result = analyze_speed(sequence(make_drink, [14.5, 15]))
    assert result["average_time_between_drinks"] == 15
    assert result["pattern"] == "binge"


def test_order_independent(make_drink):
    drinks = sequence(make_drink, [20, 35, 12, 40])
    shuffled = list(drinks)
    random.Random(7).shuffle(shuffled)
    assert analyze_speed(shuffled) == analyze_speed(drinks)


def test_ignores_templates_and_unusable_timestamps(make_drink, now):
    drinks = [
        make_drink(minutes_ago=20),
        make_drink(minutes_ago=0),
        make_drink(minutes_ago=10, is_template=True),
        new_drink("marie", "beer", 25, 5, None),
    ]
    result = analyze_speed(drinks)
    assert result["average_time_between_drinks"] == 20
    assert result["pattern"] == "fast"
