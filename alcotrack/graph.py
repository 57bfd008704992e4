"""
Blood alcohol over time. Produces an image file or returns data for any frontend.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Tuple

from alcotrack import calculations
from alcotrack.session import Session

DRIVING_LIMIT_G_PER_L = 0.5


def curve_data(
    session: Session,
    weight_kg: float = calculations.DEFAULT_WEIGHT_KG,
    is_male: bool = True,
    step_minutes: float = 15.0,
    max_hours: float = 12.0,
    end: Optional[datetime] = None,
) -> List[Tuple[datetime, float]]:
    """(time, blood alcohol g/L) from the session's first drink onward."""
    start = session.start_time
    if not isinstance(start, datetime):
        return []
    if end is None:
        end = start + timedelta(hours=max_hours)
    speed_factor = session.speed["speed_factor"]
    units = calculations.units_curve(session.drinks, start, end, step_minutes=step_minutes)
    return [
        (t, calculations.estimate_bac(u, weight_kg, is_male, speed_factor)["blood_alcohol"])
        for t, u in units
    ]


def save_bac_graph(
    session: Session,
    output_path: str = "bac_graph.png",
    weight_kg: float = calculations.DEFAULT_WEIGHT_KG,
    is_male: bool = True,
    step_minutes: float = 15.0,
    max_hours: float = 12.0,
    title: str = "Blood alcohol over time",
) -> str:
    """
    Plot the session's blood-alcohol curve against clock time and save it.

    Drink times are marked along the curve and the stretch above the driving
    limit is shaded. Returns the path to the saved file.
    """
    from matplotlib import dates as mdates
    from matplotlib.figure import Figure

    points = curve_data(session, weight_kg, is_male, step_minutes=step_minutes, max_hours=max_hours)
    times = [t for t, _ in points]
    values = [v for _, v in points]
    drink_times = [d.timestamp for d in session.drinks if isinstance(d.timestamp, datetime)]

    fig = Figure(figsize=(11, 4.5))
    ax = fig.add_subplot()
    if points:
        ax.plot(times, values, color="#7c3aed", linewidth=1.8, label="Estimated BAC")
        ax.fill_between(
            times,
            values,
            DRIVING_LIMIT_G_PER_L,
            where=[v > DRIVING_LIMIT_G_PER_L for v in values],
            color="#dc2626",
            alpha=0.25,
            label="Over driving limit",
        )
        ax.vlines(drink_times, 0, max(values + [DRIVING_LIMIT_G_PER_L]) * 0.08, color="#374151", label="Drinks")
        ax.xaxis.set_major_formatter(mdates.DateFormatter("%H:%M"))
        fig.autofmt_xdate()
    else:
        ax.text(0.5, 0.5, "No drinks in this session", ha="center", va="center", transform=ax.transAxes)
    ax.axhline(DRIVING_LIMIT_G_PER_L, color="#dc2626", linestyle=":", linewidth=1)
    ax.set_ylabel("g/L")
    ax.set_ylim(0, max(values + [DRIVING_LIMIT_G_PER_L]) * 1.15)
    ax.set_title(f"{title} (limit {DRIVING_LIMIT_G_PER_L} g/L)")
    if points:
        ax.legend(loc="best", frameon=False)

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out, dpi=120, bbox_inches="tight")
    return output_path
