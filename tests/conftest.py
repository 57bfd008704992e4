"""Shared fixtures. Every test builds timestamps relative to a fixed NOW."""

from datetime import datetime, timedelta, timezone

import pytest

from alcotrack.activity import ActivitySample, Steps
from alcotrack.drinks import new_drink

NOW = datetime(2025, 7, 25, 14, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_drink():
    def _make(user_id="marie", minutes_ago=0.0, volume_cl=25, strength_percent=5, category="beer", **kwargs):
        return new_drink(
            user_id,
            category,
            volume_cl,
            strength_percent,
            NOW - timedelta(minutes=minutes_ago),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_activity():
    """Samples every 10 minutes from start_minutes_ago up to end_minutes_ago, inclusive."""

    def _make(start_minutes_ago, end_minutes_ago=0, steps_per_sample=0):
        samples = []
        minutes = start_minutes_ago
        while minutes >= end_minutes_ago:
            samples.append(ActivitySample(
                timestamp=NOW - timedelta(minutes=minutes),
                steps=Steps(walking=steps_per_sample, dancing=0, total=steps_per_sample),
            ))
            minutes -= 10
        return samples

    return _make
