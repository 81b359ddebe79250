from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from models.hole_score import HoleScore
from models.round import Round
from models.weather import WeatherReading

# Unplayed or blank holes are scored as a triple bogey.
TRIPLE_BOGEY = 3
OTHER_WEATHER = "Other"


class HoleEntry(BaseModel):
    """One hole as submitted from a scorecard."""
    hole: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=6)
    distance: Optional[int] = Field(None, ge=0)
    stroke_index: Optional[int] = Field(None, ge=1, le=18)
    strokes: Optional[int] = Field(None, ge=0, le=20)


class RoundEntry(BaseModel):
    """A round as submitted by a player, before totals are derived."""
    course_id: str
    date: date
    weather: Optional[str] = None
    wind_conditions: Optional[str] = None
    holes: List[HoleEntry]
    round_length: Optional[int] = None

    @field_validator('round_length')
    @classmethod
    def validate_round_length(cls, v):
        if v is not None and v not in (9, 18):
            raise ValueError(f"round_length must be 9 or 18, got {v}")
        return v

    @property
    def holes_played(self) -> int:
        return self.round_length or 18


def score_holes(holes: List[HoleEntry], holes_played: int) -> List[HoleScore]:
    """Hole scores for the first `holes_played` holes, filling blanks with par + 3."""
    return [
        HoleScore(
            hole_number=h.hole,
            par=h.par,
            distance=h.distance,
            stroke_index=h.stroke_index,
            strokes=h.strokes if h.strokes is not None and h.strokes > 0 else h.par + TRIPLE_BOGEY,
        )
        for h in holes[:holes_played]
    ]


def resolve_weather(manual: Optional[str], reading: Optional[WeatherReading]) -> str:
    """A looked-up category only replaces a blank or 'Other' manual choice."""
    if reading is not None and (not manual or manual == OTHER_WEATHER):
        return reading.weather
    return manual or OTHER_WEATHER


def build_round(
    entry: RoundEntry,
    user_id: str,
    reading: Optional[WeatherReading] = None,
) -> Round:
    """
    Turn a submitted scorecard into a round ready to store.

    Totals are always derived from the scored holes; temperature and wind
    come only from the weather lookup.
    """
    scores = score_holes(entry.holes, entry.holes_played)
    return Round(
        user_id=user_id,
        course_id=entry.course_id,
        date_of_round=entry.date,
        weather=resolve_weather(entry.weather, reading),
        wind_conditions=entry.wind_conditions or None,
        temp_c=reading.temp_c if reading else None,
        wind_speed_kph=reading.wind_speed_kph if reading else None,
        total_strokes=sum(s.strokes for s in scores),
        total_par=sum(s.par for s in scores),
        holes_played=entry.holes_played,
        hole_scores=scores,
    )
