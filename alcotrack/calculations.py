"""Alcohol elimination and blood-alcohol estimation.

Model:
- Elimination: linear, 0.15 units per hour per drink, floored at 0
- Simple BAC (g/L) = [units * 10 / (weight_kg * r)] * speed_factor
- r = 0.7 (male), 0.6 (female)
- Breath alcohol (mg/L) = BAC * 0.5
- Advanced BAC personalizes r and the elimination rate from a body profile
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from alcotrack.coerce import (
    clamp,
    epoch_seconds,
    finite_nonnegative,
    finite_positive,
    parse_bool,
)

logger = logging.getLogger(__name__)

# Units eliminated per hour (average hepatic clearance).
ELIMINATION_RATE = 0.15

# Widmark distribution ratio for the simple estimate.
WIDMARK_MALE = 0.7
WIDMARK_FEMALE = 0.6

# Base ratio for the personalized estimate, before body-composition adjustments.
PERSONAL_R_MALE = 0.68
PERSONAL_R_FEMALE = 0.55

BLOOD_TO_BREATH = 0.5
UNIT_GRAMS = 10.0

DEFAULT_WEIGHT_KG = 70.0
DEFAULT_HEIGHT_CM = 170.0
DEFAULT_AGE = 30.0
DEFAULT_GENDER = "male"
DEFAULT_ACTIVITY_LEVEL = "moderate"

MIN_WEIGHT_KG, MAX_WEIGHT_KG = 30.0, 300.0
MIN_HEIGHT_CM, MAX_HEIGHT_CM = 100.0, 250.0
MIN_AGE, MAX_AGE = 10.0, 120.0

ACTIVITY_MULTIPLIERS = {
    "sedentary": 0.95,
    "light": 1.0,
    "moderate": 1.05,
    "active": 1.1,
}

# Personalized rates stay strictly inside (0.1, 0.25).
MIN_PERSONAL_ELIMINATION, MAX_PERSONAL_ELIMINATION = 0.11, 0.2
MIN_PERSONAL_R, MAX_PERSONAL_R = 0.4, 0.8


def _round(value: float, digits: int = 2) -> float:
    if not math.isfinite(value) or value < 0:
        return 0.0
    return round(value, digits)


def _round_positive(value: float, digits: int = 2) -> float:
    """_round, except a positive value never rounds down to 0."""
    rounded = _round(value, digits)
    if rounded == 0 and math.isfinite(value) and value > 0:
        return 10.0 ** -digits
    return rounded


def _timed_units(events: Iterable[Any]) -> Iterator[Tuple[float, float]]:
    """(epoch_seconds, units) for every real drink with a usable timestamp."""
    for event in events or ():
        if getattr(event, "is_template", False):
            continue
        t = epoch_seconds(getattr(event, "timestamp", None))
        if t is None:
            continue
        yield t, finite_nonnegative(getattr(event, "units", 0.0))


def remaining_units(events: Iterable[Any], as_of: Any, elimination_rate: float = ELIMINATION_RATE) -> float:
    """Units still in the body at as_of after linear elimination of each drink.

    Elapsed time is clamped at 0, so a drink logged after as_of counts its full
    units and never more.
    """
    now = epoch_seconds(as_of)
    if now is None:
        logger.debug("remaining_units called with unusable as_of=%r", as_of)
        return 0.0
    rate = finite_nonnegative(elimination_rate, default=ELIMINATION_RATE)

    total = 0.0
    for t_drink, units in _timed_units(events):
        hours_elapsed = max(0.0, (now - t_drink) / 3600.0)
        total += max(0.0, units - hours_elapsed * rate)
    return _round(total)


def time_to_sober(current_units: Any, elimination_rate: float = ELIMINATION_RATE) -> float:
    """Hours until current_units are fully eliminated."""
    units = finite_nonnegative(current_units)
    rate = finite_positive(elimination_rate, default=ELIMINATION_RATE)
    return _round_positive(units / rate)


def estimate_bac(
    current_units: Any,
    weight_kg: Any = DEFAULT_WEIGHT_KG,
    is_male: Any = True,
    speed_factor: Any = 1.0,
) -> dict:
    """Blood (g/L) and breath (mg/L) alcohol for current_units in the body."""
    units = finite_nonnegative(current_units)
    weight = finite_positive(weight_kg, default=DEFAULT_WEIGHT_KG)
    factor = finite_positive(speed_factor, default=1.0)
    r = WIDMARK_MALE if parse_bool(is_male, default=True) else WIDMARK_FEMALE

    grams = units * UNIT_GRAMS
    blood = (grams / (weight * r)) * factor
    return {
        "blood_alcohol": _round(blood),
        "breath_alcohol": _round(blood * BLOOD_TO_BREATH),
    }


@dataclass
class BodyProfile:
    """Subject metabolism inputs. Every field is optional."""

    age: Optional[float] = None
    gender: Optional[str] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    activity_level: Optional[str] = None


@dataclass(frozen=True)
class ResolvedProfile:
    age: float
    gender: str
    height_cm: float
    weight_kg: float
    activity_level: str

    @property
    def is_male(self) -> bool:
        return self.gender == "male"


def _field(profile: Any, name: str, *aliases: str) -> Any:
    for key in (name,) + aliases:
        if isinstance(profile, dict):
            if key in profile:
                return profile[key]
        elif hasattr(profile, key):
            return getattr(profile, key)
    return None


def resolve_profile(profile: Any) -> ResolvedProfile:
    """Merge a possibly partial profile (BodyProfile, dict, object or None) with defaults.

    Numeric fields outside plausible human ranges are clamped into them.
    """
    age = finite_positive(_field(profile, "age"), DEFAULT_AGE)
    height = finite_positive(_field(profile, "height_cm", "height"), DEFAULT_HEIGHT_CM)
    weight = finite_positive(_field(profile, "weight_kg", "weight"), DEFAULT_WEIGHT_KG)

    gender = _field(profile, "gender")
    gender = gender.strip().lower() if isinstance(gender, str) else ""
    if gender not in ("male", "female"):
        gender = DEFAULT_GENDER

    activity = _field(profile, "activity_level", "activityLevel")
    activity = activity.strip().lower() if isinstance(activity, str) else ""
    if activity not in ACTIVITY_MULTIPLIERS:
        activity = DEFAULT_ACTIVITY_LEVEL

    return ResolvedProfile(
        age=clamp(age, MIN_AGE, MAX_AGE),
        gender=gender,
        height_cm=clamp(height, MIN_HEIGHT_CM, MAX_HEIGHT_CM),
        weight_kg=clamp(weight, MIN_WEIGHT_KG, MAX_WEIGHT_KG),
        activity_level=activity,
    )


def _bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "underweight"
    if bmi < 25:
        return "normal"
    if bmi < 30:
        return "overweight"
    return "obese"


def body_composition(height_cm: float, weight_kg: float, age: float, gender: str) -> dict:
    """BMI and Deurenberg body-fat estimate."""
    height_m = height_cm / 100.0
    bmi = weight_kg / (height_m * height_m)
    male = 1 if gender == "male" else 0
    body_fat = clamp(1.20 * bmi + 0.23 * age - 10.8 * male - 5.4, 0.0, 75.0)
    fat_mass = weight_kg * body_fat / 100.0
    return {
        "bmi": round(bmi, 1),
        "bmi_category": _bmi_category(bmi),
        "body_fat_percentage": round(body_fat, 1),
        "fat_mass": round(fat_mass, 1),
        "lean_body_mass": round(weight_kg - fat_mass, 1),
    }


def personalized_widmark_factor(age: float, gender: str, bmi: float, body_fat_percentage: float) -> float:
    """Distribution ratio adjusted for age and body composition, within [0.4, 0.8]."""
    male = gender == "male"
    r = PERSONAL_R_MALE if male else PERSONAL_R_FEMALE
    if age > 30:
        r -= (age - 30) * 0.002
    # More fat mass, less body water.
    r -= max(0.0, (body_fat_percentage - (15 if male else 25)) * 0.003)
    if bmi < 18.5:
        r += 0.02
    elif bmi > 30:
        r -= 0.03
    return clamp(r, MIN_PERSONAL_R, MAX_PERSONAL_R)


def personalized_elimination_rate(
    age: float,
    gender: str,
    weight_kg: float,
    activity_level: str = DEFAULT_ACTIVITY_LEVEL,
) -> float:
    """Units eliminated per hour for a profile, within [0.11, 0.2]."""
    rate = ELIMINATION_RATE
    if gender == "female":
        rate *= 0.9
    if age > 50:
        rate *= 0.95
    elif age < 25:
        rate *= 1.05
    rate *= clamp(math.sqrt(weight_kg / DEFAULT_WEIGHT_KG), 0.8, 1.2)
    rate *= ACTIVITY_MULTIPLIERS.get(activity_level, ACTIVITY_MULTIPLIERS[DEFAULT_ACTIVITY_LEVEL])
    return clamp(rate, MIN_PERSONAL_ELIMINATION, MAX_PERSONAL_ELIMINATION)


def estimate_advanced_bac(current_units: Any, profile: Any = None) -> dict:
    """Personalized BAC, elimination rate and time to sober for a body profile.

    The profile may be None, partial or malformed; missing fields use defaults
    (70 kg, 170 cm, 30 years, male, moderate activity).
    """
    units = finite_nonnegative(current_units)
    p = resolve_profile(profile)
    body = body_composition(p.height_cm, p.weight_kg, p.age, p.gender)
    r = personalized_widmark_factor(p.age, p.gender, body["bmi"], body["body_fat_percentage"])
    rate = personalized_elimination_rate(p.age, p.gender, p.weight_kg, p.activity_level)

    blood = units * UNIT_GRAMS / (p.weight_kg * r)
    return {
        "blood_alcohol": _round_positive(blood, 3),
        "breath_alcohol": _round_positive(blood * BLOOD_TO_BREATH, 3),
        "elimination_rate": round(rate, 2),
        "time_to_sober": _round_positive(units / rate),
        "widmark_factor": round(r, 2),
        "metabolism_info": {
            "bmi": body["bmi"],
            "body_fat_percentage": body["body_fat_percentage"],
            "lean_body_mass": body["lean_body_mass"],
        },
    }


def profile_elimination_rate(profile: Any) -> float:
    p = resolve_profile(profile)
    return personalized_elimination_rate(p.age, p.gender, p.weight_kg, p.activity_level)


def advanced_remaining_units(events: Iterable[Any], profile: Any, as_of: Any) -> float:
    """remaining_units using the profile's personalized elimination rate."""
    return remaining_units(events, as_of, elimination_rate=profile_elimination_rate(profile))


def units_curve(
    events: Iterable[Any],
    start: datetime,
    end: datetime,
    step_minutes: float = 15.0,
    elimination_rate: float = ELIMINATION_RATE,
) -> List[Tuple[datetime, float]]:
    """Return (time, remaining_units) pairs for graphing.

    Only drinks consumed at or before each point contribute to it.
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes must be > 0")
    drinks = [e for e in events or () if epoch_seconds(getattr(e, "timestamp", None)) is not None]
    if not drinks or end < start:
        return []

    step = timedelta(minutes=step_minutes)
    points: List[Tuple[datetime, float]] = []
    t = start
    while t <= end:
        now = t.timestamp()
        consumed = [e for e in drinks if epoch_seconds(e.timestamp) <= now]
        points.append((t, remaining_units(consumed, t, elimination_rate)))
        t += step
    return points
