"""
Alcohol tracker CLI demo. Run from project root: python -m alcotrack.main
Builds a sample evening, prints session units, pace and BAC, and optionally saves a graph.
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone

from alcotrack.app_logging import configure_logging
from alcotrack.catalog import drink_from_preset
from alcotrack.graph import save_bac_graph
from alcotrack.limits import alert_level
from alcotrack.session import Session

logger = logging.getLogger(__name__)

DEMO_USER = "demo"

# (minutes before now, preset id)
DEMO_EVENING = [
    (28 * 60, "pint"),  # yesterday, ends up in an earlier session
    (150, "pint"),
    (110, "mojito"),
    (70, "glass"),
    (30, "shot"),
]


def demo_drinks(now: datetime):
    return [drink_from_preset(preset, DEMO_USER, now - timedelta(minutes=ago)) for ago, preset in DEMO_EVENING]


def main():
    parser = argparse.ArgumentParser(description="Alcohol tracker: session units, pace and BAC")
    parser.add_argument("--weight", type=float, default=70.0, help="Body weight (kg)")
    parser.add_argument("--female", action="store_true", help="Female (default male)")
    parser.add_argument("--graph", type=str, metavar="FILE", help="Save BAC graph to FILE (e.g. bac_graph.png)")
    args = parser.parse_args()
    configure_logging()

    now = datetime.now(timezone.utc)
    session = Session.current(demo_drinks(now), DEMO_USER, as_of=now)
    is_male = not args.female
    logger.debug("Demo session has %d drinks", len(session.drinks))

    remaining = session.remaining_units(now)
    speed = session.speed
    bac = session.bac(now, weight_kg=args.weight, is_male=is_male)
    advanced = session.advanced_bac(now, {"weight_kg": args.weight, "gender": "male" if is_male else "female"})

    print(f"Session: {len(session.drinks)} drinks, {session.total_units} units, {remaining} units left")
    print(f"Pace: {speed['pattern']} ({speed['average_time_between_drinks']} min between drinks)")
    print(f"BAC: {bac['blood_alcohol']:.2f} g/L blood, {bac['breath_alcohol']:.2f} mg/L breath")
    print(f"Sober in about {advanced['time_to_sober']:.1f}h (alert level: {alert_level(remaining)})")

    if args.graph:
        path = save_bac_graph(session, output_path=args.graph, weight_kg=args.weight, is_male=is_male)
        print(f"Graph saved: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
