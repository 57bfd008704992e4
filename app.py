"""Alcohol tracker Flask API.

Stateless JSON endpoints over the alcotrack core; nothing is stored.

Run from project root:
    python app.py
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any, List, Optional

from flask import Flask, jsonify, request

from alcotrack import calculations
from alcotrack.activity import ActivitySample, detect_sleep, sample_from_dict
from alcotrack.app_logging import configure_logging
from alcotrack.catalog import list_by_category
from alcotrack.coerce import finite_nonnegative, parse_timestamp
from alcotrack.drinks import DrinkEvent, compute_units, drink_from_dict, drink_to_dict
from alcotrack.group import group_session_average
from alcotrack.limits import alert_level, evaluate_risk, next_drink_recommendation, personalized_limits
from alcotrack.session import Session

configure_logging()
logger = logging.getLogger("alcotrack.api")

app = Flask(__name__)

MAX_RECORDS = 50_000


class PayloadError(ValueError):
    """A request body that cannot be interpreted at all."""


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise PayloadError("Request body must be a JSON object")
    return data


def _records(data: dict, key: str) -> List[dict]:
    raw = data.get(key, [])
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise PayloadError(f"'{key}' must be a list")
    if len(raw) > MAX_RECORDS:
        raise PayloadError(f"'{key}' has more than {MAX_RECORDS} records")
    return [r for r in raw if isinstance(r, dict)]


def _drinks(data: dict) -> List[DrinkEvent]:
    return [drink_from_dict(r) for r in _records(data, "drinks")]


def _activity(data: dict) -> List[ActivitySample]:
    return [sample_from_dict(r) for r in _records(data, "activity")]


def _as_of(data: dict) -> datetime:
    parsed = parse_timestamp(data.get("as_of"))
    return parsed if parsed is not None else datetime.now(timezone.utc)


def _user_id(data: dict) -> Optional[str]:
    value = data.get("user_id")
    return None if value is None else str(value)


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if isinstance(value, datetime) else None


@app.errorhandler(PayloadError)
def _payload_error(error: PayloadError):
    logger.warning("Rejected payload on %s: %s", request.path, error)
    return jsonify({"error": str(error)}), 400


@app.route("/healthz")
def healthz():
    return jsonify({"ok": True})


@app.route("/api/catalog")
def api_catalog():
    return jsonify({"by_category": list_by_category()})


@app.route("/api/units", methods=["POST"])
def api_units():
    data = _json_body()
    return jsonify({"units": compute_units(data.get("volume_cl"), data.get("strength_percent"))})


@app.route("/api/session", methods=["POST"])
def api_session():
    data = _json_body()
    as_of = _as_of(data)
    session = Session.current(_drinks(data), _user_id(data), _activity(data), as_of=as_of)
    return jsonify({
        "drinks": [drink_to_dict(d) for d in session.drinks],
        "drink_count": len(session.drinks),
        "start_time": _iso(session.start_time),
        "total_units": session.total_units,
        "speed": session.speed,
    })


@app.route("/api/bac", methods=["POST"])
def api_bac():
    data = _json_body()
    as_of = _as_of(data)
    profile = data.get("profile")
    resolved = calculations.resolve_profile(profile)
    session = Session.current(_drinks(data), _user_id(data), _activity(data), as_of=as_of)

    remaining = session.remaining_units(as_of)
    advanced = session.advanced_bac(as_of, profile)
    limits = personalized_limits(profile)
    return jsonify({
        "as_of": as_of.isoformat(),
        "session_units": session.total_units,
        "remaining_units": remaining,
        "speed": session.speed,
        "bac": session.bac(as_of, resolved.weight_kg, resolved.is_male),
        "advanced_bac": advanced,
        "alert_level": alert_level(remaining),
        "next_drink": next_drink_recommendation(
            session.remaining_units(as_of, profile),
            session.last_drink_time,
            limits,
            advanced["elimination_rate"],
            as_of,
        ),
    })


@app.route("/api/sleep", methods=["POST"])
def api_sleep():
    data = _json_body()
    min_hours = data.get("min_hours")
    if min_hours is None:
        return jsonify(detect_sleep(_activity(data)))
    return jsonify(detect_sleep(_activity(data), min_hours))


@app.route("/api/group", methods=["POST"])
def api_group():
    data = _json_body()
    members = data.get("members", [])
    if not isinstance(members, list):
        raise PayloadError("'members' must be a list")
    result = group_session_average(_drinks(data), members)
    result["session_start_time"] = _iso(result["session_start_time"])
    return jsonify(result)


@app.route("/api/limits", methods=["POST"])
def api_limits():
    data = _json_body()
    profile = data.get("profile")
    limits = personalized_limits(profile)
    risk = evaluate_risk(
        finite_nonnegative(data.get("today_units")),
        finite_nonnegative(data.get("weekly_units")),
        limits,
        profile,
    )
    return jsonify({"limits": limits, "risk": risk})


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1")
