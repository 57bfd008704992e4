"""Alert levels, personalized consumption limits and risk guidance.

Guidance is educational only. Baselines follow WHO low-risk drinking advice.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from alcotrack.calculations import resolve_profile
from alcotrack.coerce import epoch_seconds, finite_nonnegative, finite_positive

ALERT_THRESHOLDS = {"moderate": 3, "high": 6, "critical": 10}

MIN_MINUTES_BETWEEN_DRINKS = 30
MAX_WAIT_MINUTES = 48 * 60

# (daily, weekly, single session) units.
BASE_LIMITS = {"male": (3.0, 21.0, 5.0), "female": (2.0, 14.0, 4.0)}
REFERENCE_WEIGHT_KG = {"male": 70.0, "female": 60.0}


def alert_level(units: Any, thresholds: Optional[Dict[str, float]] = None) -> str:
    """Return 'safe', 'moderate', 'high' or 'critical' for a unit count."""
    t = thresholds or ALERT_THRESHOLDS
    u = finite_nonnegative(units)
    if u >= t["critical"]:
        return "critical"
    if u >= t["high"]:
        return "high"
    if u >= t["moderate"]:
        return "moderate"
    return "safe"


def _recommendations(age: float, gender: str, weight_kg: float) -> List[str]:
    recs = [
        "Alternate every alcoholic drink with a glass of water.",
        "Eat before and while drinking.",
    ]
    if age < 25:
        recs.append("The brain keeps developing until about 25: drink less and less often.")
    elif age > 50:
        recs.append("Metabolism slows after 50: be more careful and check medication interactions.")
    if gender == "female":
        recs.append("Women generally eliminate alcohol more slowly than men.")
    if weight_kg < (65 if gender == "male" else 55):
        recs.append("Lower body weight means stronger effects: reduce quantities.")
    elif weight_kg > (90 if gender == "male" else 80):
        recs.append("A heavier body does not dilute alcohol much more: do not increase doses.")
    recs.append("At a festival, drink twice as much water as usual and get some sleep.")
    return recs


def personalized_limits(profile: Any = None) -> dict:
    """Daily, weekly and single-session unit limits for a body profile."""
    p = resolve_profile(profile)
    daily, weekly, session = BASE_LIMITS[p.gender]

    if p.age < 25:
        daily, weekly, session = daily * 0.8, weekly * 0.8, session * 0.8
    elif p.age > 65:
        daily, weekly, session = daily * 0.7, weekly * 0.7, session * 0.6

    reference = REFERENCE_WEIGHT_KG[p.gender]
    if p.weight_kg < reference * 0.8:
        factor = max(0.7, math.sqrt(p.weight_kg / reference))
        daily, weekly, session = daily * factor, weekly * factor, session * factor

    return {
        "daily_units": round(daily),
        "weekly_units": round(weekly),
        "session_units": round(session),
        "alert_levels": {
            "moderate": round(daily * 0.8),
            "high": round(session * 0.9),
            "critical": round(session * 1.2),
        },
        "recommendations": _recommendations(p.age, p.gender, p.weight_kg),
    }


def evaluate_risk(today_units: Any, weekly_units: Any, limits: dict, profile: Any = None) -> dict:
    """Risk level and guidance for today's and this week's consumption."""
    p = resolve_profile(profile)
    today = finite_nonnegative(today_units)
    week = finite_nonnegative(weekly_units)
    levels = limits["alert_levels"]

    if today >= levels["critical"]:
        advice = {
            "level": "critical",
            "title": "Dangerous consumption",
            "message": f"{today:g} units today is well beyond safe limits.",
            "recommendations": [
                "Stop drinking now.",
                "Drink water and eat something.",
                "Stay with friends you trust.",
                "If someone feels unwell, call emergency services (112).",
                "Do not drive for at least 12 hours.",
            ],
            "should_notify": True,
        }
    elif today >= levels["high"]:
        advice = {
            "level": "danger",
            "title": "High risk",
            "message": f"{today:g} units today: you are close to dangerous levels.",
            "recommendations": [
                "Slow down or stop.",
                "Drink water now.",
                "Do not drink alone.",
                "Plan a safe way home.",
            ],
            "should_notify": True,
        }
    elif today >= levels["moderate"]:
        advice = {
            "level": "warning",
            "title": "Watch your pace",
            "message": f"{today:g} units today: you are nearing your daily limit.",
            "recommendations": [
                "Slow down and alternate with water.",
                "Take a break of at least 30 minutes.",
                "Have a snack.",
            ],
            "should_notify": False,
        }
    elif week > limits["weekly_units"]:
        advice = {
            "level": "warning",
            "title": "Weekly limit exceeded",
            "message": f"{week:g} units this week is over the recommended {limits['weekly_units']} units.",
            "recommendations": [
                "Plan several alcohol-free days.",
                "Drink less over the next days.",
            ],
            "should_notify": False,
        }
    else:
        advice = {
            "level": "info",
            "title": "Within limits",
            "message": f"{today:g} units today: within recommendations.",
            "recommendations": ["Keep drinking water regularly.", "Keep this pace."],
            "should_notify": False,
        }

    if advice["level"] != "info":
        if p.age < 25:
            advice["recommendations"].insert(0, "Alcohol affects a developing brain more.")
        if p.gender == "female":
            advice["recommendations"].append("Elimination is slower for women: give it time.")
    return advice


def next_drink_recommendation(
    current_units: Any,
    last_drink_time: Any,
    limits: dict,
    elimination_rate: Any,
    as_of: datetime,
) -> dict:
    """Whether another drink is reasonable now, and how long to wait otherwise."""
    units = finite_nonnegative(current_units)
    rate = finite_positive(elimination_rate, default=0.15)
    session_limit = limits["session_units"]

    if units >= session_limit:
        return {
            "can_drink": False,
            "wait_minutes": math.ceil(min(MAX_WAIT_MINUTES, (units - session_limit + 1) / rate * 60)),
            "reasoning": "You have reached your limit for this session.",
            "alternatives": ["Sparkling water with lemon", "A mocktail", "A salty snack"],
        }

    now = epoch_seconds(as_of)
    last = epoch_seconds(last_drink_time)
    if now is not None and last is not None:
        wait = MIN_MINUTES_BETWEEN_DRINKS - (now - last) / 60.0
        if wait > 0:
            return {
                "can_drink": False,
                "wait_minutes": math.ceil(wait),
                "reasoning": f"Leave {MIN_MINUTES_BETWEEN_DRINKS} minutes between drinks for a steady pace.",
                "alternatives": ["Drink water meanwhile", "Go dance", "Get some fresh air"],
            }

    return {
        "can_drink": True,
        "wait_minutes": 0,
        "reasoning": "One more drink stays within a reasonable pace.",
        "alternatives": ["Pick a lighter drink", "Take a half pint instead of a pint", "Add a glass of water"],
    }
