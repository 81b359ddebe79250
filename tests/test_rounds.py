from datetime import date

import pytest
from pydantic import ValidationError

from analytics.rounds import HoleEntry, RoundEntry, build_round, resolve_weather, score_holes
from models import WeatherReading


def _holes(count=18, strokes=None):
    pars = [4, 4, 3, 5, 4, 4, 3, 4, 5] * 2
    return [
        HoleEntry(hole=i + 1, par=pars[i], strokes=strokes[i] if strokes else pars[i])
        for i in range(count)
    ]


def test_score_holes_applies_triple_bogey():
    holes = [
        HoleEntry(hole=1, par=4, strokes=5),
        HoleEntry(hole=2, par=3, strokes=None),
        HoleEntry(hole=3, par=5, strokes=0),
    ]
    scores = score_holes(holes, 18)
    assert [s.strokes for s in scores] == [5, 6, 8]


def test_score_holes_truncates_to_round_length():
    assert len(score_holes(_holes(), 9)) == 9


def test_hole_entry_rejects_more_than_twenty_strokes():
    with pytest.raises(ValidationError):
        HoleEntry(hole=1, par=4, strokes=21)
    assert HoleEntry(hole=1, par=4, strokes=20).strokes == 20


def test_round_entry_length():
    entry = RoundEntry(course_id="c1", date=date(2026, 4, 1), holes=_holes())
    assert entry.holes_played == 18
    with pytest.raises(ValidationError):
        RoundEntry(course_id="c1", date=date(2026, 4, 1), holes=[], round_length=12)


def test_resolve_weather():
    reading = WeatherReading(weather="Windy", temp_c=10.0, wind_speed_kph=30.0)
    assert resolve_weather(None, reading) == "Windy"
    assert resolve_weather("Other", reading) == "Windy"
    assert resolve_weather("Rainy", reading) == "Rainy"
    assert resolve_weather(None, None) == "Other"
    assert resolve_weather("Sunny", None) == "Sunny"


def test_build_round_derives_totals():
    entry = RoundEntry(course_id="c1", date=date(2026, 4, 1), weather="Sunny", holes=_holes())
    r = build_round(entry, "p1")

    assert r.user_id == "p1"
    assert r.total_par == 72
    assert r.total_strokes == 72
    assert r.holes_played == 18
    assert r.score_to_par == 0
    assert r.weather == "Sunny"
    assert r.temp_c is None
    assert len(r.hole_scores) == 18


def test_build_nine_hole_round_with_weather():
    entry = RoundEntry(course_id="c1", date=date(2026, 4, 1), weather="Other",
                       holes=_holes(), round_length=9)
    reading = WeatherReading(weather="Rainy", temp_c=8.2, wind_speed_kph=14.5)
    r = build_round(entry, "p1", reading)

    assert r.holes_played == 9
    assert r.total_par == 36
    assert r.total_strokes == 36
    assert r.weather == "Rainy"
    assert r.temp_c == 8.2
    assert r.wind_speed_kph == 14.5
