"""Tests for activity samples and sleep detection."""
import math
from datetime import timedelta

import pytest

from alcotrack.activity import (
    ActivitySample,
    Steps,
    detect_sleep,
    detect_sleep_between,
    sample_from_dict,
    total_steps,
)


def test_empty_samples_not_sleeping():
    assert detect_sleep([]) == {"is_sleeping": False, "inactivity_duration": 0.0}
    assert detect_sleep(None) == {"is_sleeping": False, "inactivity_duration": 0.0}


def test_eight_hours_of_sleep(make_activity):
    samples = make_activity(8 * 60 - 10, steps_per_sample=2)
    result = detect_sleep(samples, 3)
    assert result["is_sleeping"] is True
    assert result["inactivity_duration"] == 8.0


def test_dancing_is_not_sleep(make_activity):
    result = detect_sleep(make_activity(4 * 60, steps_per_sample=250), 3)
    assert result == {"is_sleeping": False, "inactivity_duration": 0.0}


def test_only_trailing_stretch_counts(make_activity):
    # Slept 4h, then danced for the last hour.
    samples = make_activity(5 * 60, 70, steps_per_sample=0) + make_activity(60, 0, steps_per_sample=300)
    assert detect_sleep(samples, 3)["is_sleeping"] is False


def test_threshold_is_exclusive(make_activity):
    assert detect_sleep(make_activity(170, steps_per_sample=49), 3)["is_sleeping"] is True
    assert detect_sleep(make_activity(170, steps_per_sample=50), 3)["is_sleeping"] is False


def test_unordered_samples(make_activity):
    samples = list(reversed(make_activity(170, steps_per_sample=0)))
    assert detect_sleep(samples, 3)["inactivity_duration"] == 3.0


def test_duplicate_timestamps_do_not_inflate(make_activity):
    samples = make_activity(50, steps_per_sample=0)
    assert detect_sleep(samples + samples, 0.5)["inactivity_duration"] == 1.0


def test_sparse_samples_count_one_interval_each(now):
    samples = [
        ActivitySample(timestamp=now - timedelta(hours=h), steps=Steps(0, 0, 0))
        for h in range(4)
    ]
    result = detect_sleep(samples, 3)
    assert result["inactivity_duration"] == pytest.approx(40 / 60, abs=0.01)
    assert result["is_sleeping"] is False


@pytest.mark.parametrize("corrupt", [None, float("nan"), -20, "many"])
def test_corrupt_sample_neither_breaks_nor_extends(make_activity, corrupt):
    # 19 samples, one unreadable: 18 intervals of 10 minutes remain.
    samples = make_activity(180, steps_per_sample=0)
    samples[5] = ActivitySample(timestamp=samples[5].timestamp, steps=Steps(corrupt, corrupt, corrupt))
    result = detect_sleep(samples, 3)
    assert result["is_sleeping"] is True
    assert result["inactivity_duration"] == 3.0


def test_infinite_steps_read_as_active(make_activity):
    samples = make_activity(170, steps_per_sample=0)
    samples[-1] = ActivitySample(timestamp=samples[-1].timestamp, steps=Steps(0, 0, float("inf")))
    assert detect_sleep(samples, 3) == {"is_sleeping": False, "inactivity_duration": 0.0}


def test_invalid_timestamps_and_steps_are_tolerated(make_activity):
    samples = make_activity(60, steps_per_sample=0) + [
        ActivitySample(timestamp=None),
        ActivitySample(timestamp=float("nan"), steps=Steps(1, 1, 2)),
        ActivitySample(timestamp="yesterday", steps=None),
    ]
    result = detect_sleep(samples, float("nan"))
    assert isinstance(result["is_sleeping"], bool)
    assert math.isfinite(result["inactivity_duration"])
    assert result["inactivity_duration"] == pytest.approx(70 / 60, abs=0.01)


def test_total_steps_tolerates_inconsistent_counts():
    assert total_steps(ActivitySample(None, Steps(walking=30, dancing=40, total=10))) == 70
    assert total_steps(ActivitySample(None, Steps(walking=30, dancing=None, total=None))) == 30
    assert total_steps(ActivitySample(None, Steps(walking=None, dancing=None, total=None))) is None
    assert total_steps({"steps": {"total": 12}}) == 12


def test_detect_sleep_between_uses_longest_stretch(make_activity, now):
    # Asleep, then a short walk at the end of the window.
    samples = make_activity(240, 40, steps_per_sample=0) + make_activity(30, 0, steps_per_sample=120)
    start = (now - timedelta(hours=4)).timestamp()
    result = detect_sleep_between(samples, start, now.timestamp(), 3)
    assert result["is_sleeping"] is True
    assert detect_sleep(samples, 3)["is_sleeping"] is False


def test_sample_from_dict():
    sample = sample_from_dict({"timestamp": "2025-07-25T03:00:00+00:00", "steps": {"walking": 5, "dancing": 1, "total": 6}})
    assert sample.timestamp.hour == 3
    assert total_steps(sample) == 6
    assert sample_from_dict({"steps": "bad"}).timestamp is None


def test_zero_min_hours_accepts_any_low_activity(make_activity):
    result = detect_sleep(make_activity(30, steps_per_sample=0), 0)
    assert result == {"is_sleeping": True, "inactivity_duration": 0.67}
    assert detect_sleep(make_activity(30, steps_per_sample=500), 0)["is_sleeping"] is False
    assert detect_sleep(make_activity(30, steps_per_sample=0), -1)["is_sleeping"] is False
