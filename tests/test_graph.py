"""Tests for the blood-alcohol curve and its image."""

from datetime import timedelta

from alcotrack.graph import curve_data, save_bac_graph
from alcotrack.session import Session


def test_curve_starts_at_first_drink_and_returns_to_zero(make_drink, now):
    session = Session.current(
        [make_drink(minutes_ago=60, volume_cl=50), make_drink(minutes_ago=0)],
        "marie",
        as_of=now,
    )
    # 2 units from the first drink take about 13.3h to clear.
    points = curve_data(session, 70, True, step_minutes=30, max_hours=14)
    assert points[0][0] == now - timedelta(minutes=60)
    assert len(points) == 29
    assert max(v for _, v in points) > 0
    assert points[-1][1] == 0.0


def test_empty_session_has_no_curve():
    assert curve_data(Session(user_id="marie")) == []


def test_save_bac_graph(make_drink, now, tmp_path):
    session = Session.current([make_drink(minutes_ago=30)], "marie", as_of=now)
    out = tmp_path / "plots" / "bac.png"
    path = save_bac_graph(session, output_path=str(out))
    assert path == str(out)
    assert out.stat().st_size > 0


def test_save_bac_graph_empty_session(tmp_path):
    out = tmp_path / "empty.png"
    save_bac_graph(Session(user_id="marie"), output_path=str(out))
    assert out.exists()


def test_curve_tail_before_full_elimination(make_drink, now):
    session = Session.current([make_drink(minutes_ago=60, volume_cl=50), make_drink(minutes_ago=0)], "marie", as_of=now)
    points = curve_data(session, 70, True, step_minutes=30, max_hours=12)
    assert len(points) == 25
    assert points[-1][1] > 0


def test_save_bac_graph_over_the_limit(make_drink, now, tmp_path):
    drinks = [make_drink(minutes_ago=m, volume_cl=50) for m in (120, 90, 60, 30)]
    session = Session.current(drinks, "marie", as_of=now)
    out = tmp_path / "heavy.png"
    save_bac_graph(session, output_path=str(out), weight_kg=55, is_male=False)
    assert out.read_bytes()[:4] == b"\x89PNG"
