"""Administrative report rows and CSV export."""

from __future__ import annotations

import datetime as dt
import re
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.course import Course
from models.profile import Profile
from models.round import Round
from models.squad import SquadMember, squad_player_ids

from .common import mean

MAX_REPORT_DAYS = 60
PRESET_DAYS = (7, 14, 30, 60)
DEFAULT_PRESET_DAYS = 30
DEFAULT_SQUAD_NAME = "AllPlayers"
UNKNOWN_PLAYER = "Unknown Player"
UNKNOWN_COURSE = "Unknown Course"

CSV_HEADERS = [
    "Player Name",
    "Date",
    "Course",
    "Score",
    "Par",
    "Weather",
    "Wind (kph)",
    "Temp (C)",
]

MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


class ReportRow(BaseModel):
    """One flattened round, ready for display or export."""
    id: Optional[str] = None
    player_name: str
    date: str = ""
    raw_date: Optional[dt.date] = None
    course_name: str = ""
    score: Optional[int] = None
    par: Optional[int] = None
    weather: Optional[str] = None
    wind_speed_kph: Optional[float] = None
    temp_c: Optional[float] = None


class ReportFilters(BaseModel):
    """
    Caller-supplied report scope.

    Either `days` (one of the presets) or a custom `start_date`/`end_date`
    pair is used; a custom range takes precedence. A custom range may not
    reach further back than 60 days before `as_of`.
    """
    model_config = ConfigDict(frozen=True)

    squad_id: Optional[str] = None
    days: int = DEFAULT_PRESET_DAYS
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    weather: Optional[str] = None
    as_of: date = Field(default_factory=date.today)

    @field_validator('days')
    @classmethod
    def validate_days(cls, v):
        if v not in PRESET_DAYS:
            raise ValueError(f"days must be one of {PRESET_DAYS}, got {v}")
        return v

    @model_validator(mode='after')
    def validate_custom_range(self):
        earliest = self.as_of - timedelta(days=MAX_REPORT_DAYS)
        for value in (self.start_date, self.end_date):
            if value is not None and value < earliest:
                raise ValueError(f"report dates may not be earlier than {earliest.isoformat()}")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    @property
    def is_custom(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def date_bounds(self) -> tuple:
        """Inclusive (start, end) dates. The start never reaches past the 60-day window; end may be open."""
        if self.is_custom:
            start = self.start_date or self.as_of - timedelta(days=MAX_REPORT_DAYS)
            return start, self.end_date
        return self.as_of - timedelta(days=self.days), None


def format_display_date(value: Optional[date]) -> str:
    """Day, abbreviated month and year, e.g. 5 Mar 2026."""
    if value is None:
        return ""
    return f"{value.day} {MONTH_ABBREVIATIONS[value.month - 1]} {value.year}"


def filter_rounds(
    rounds: Iterable[Round],
    filters: ReportFilters,
    members: Iterable[SquadMember] = (),
) -> List[Round]:
    """Apply squad, date range and exact weather filters, keeping input order."""
    filtered = list(rounds)

    if filters.squad_id:
        player_ids = set(squad_player_ids(filters.squad_id, members))
        filtered = [r for r in filtered if r.user_id in player_ids]

    start, end = filters.date_bounds()
    if start is not None:
        filtered = [r for r in filtered if r.date_of_round and r.date_of_round >= start]
    if end is not None:
        filtered = [r for r in filtered if r.date_of_round and r.date_of_round <= end]

    if filters.weather:
        filtered = [r for r in filtered if r.weather == filters.weather]

    return filtered


def build_report_rows(
    rounds: Iterable[Round],
    profiles: Iterable[Profile],
    courses: Iterable[Course],
) -> List[ReportRow]:
    """Join each round with its player and course. Unknown references get placeholder names."""
    profile_index = {p.id: p for p in profiles}
    course_index = {c.id: c for c in courses}

    rows = []
    for round_obj in rounds:
        player = profile_index.get(round_obj.user_id)
        course = course_index.get(round_obj.course_id)
        rows.append(ReportRow(
            id=round_obj.id,
            player_name=(player.full_name if player else None) or UNKNOWN_PLAYER,
            course_name=(course.name if course else None) or UNKNOWN_COURSE,
            date=format_display_date(round_obj.date_of_round),
            raw_date=round_obj.date_of_round,
            score=round_obj.total_strokes,
            par=round_obj.total_par,
            weather=round_obj.weather,
            wind_speed_kph=round_obj.wind_speed_kph,
            temp_c=round_obj.temp_c,
        ))
    return rows


def report_insights(rows: Sequence[ReportRow]) -> Dict[str, Any]:
    """
    Headline figures for a report.

    Scores, temperatures and winds are taken from rows with a positive
    score only; total rounds and unique players count every row.
    """
    scored = [r for r in rows if r.score is not None and r.score > 0]
    if not scored:
        return {
            "total_rounds": 0,
            "avg_score": None,
            "best_score": None,
            "worst_score": None,
            "unique_players": 0,
            "avg_temp": None,
            "avg_wind": None,
        }

    scores = [r.score for r in scored]
    return {
        "total_rounds": len(rows),
        "avg_score": mean(scores, places=1),
        "best_score": min(scores),
        "worst_score": max(scores),
        "unique_players": len({r.player_name for r in rows}),
        "avg_temp": mean([r.temp_c for r in scored if r.temp_c is not None], places=1),
        "avg_wind": mean([r.wind_speed_kph for r in scored if r.wind_speed_kph is not None], places=1),
    }


# ================================================================
# CSV
# ================================================================

def _quote(value: Optional[str]) -> str:
    text = value or ""
    return '"' + text.replace('"', '""') + '"'


def _number(value: Optional[float]) -> str:
    if value is None:
        return ""
    # 12.0 is written as 12
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def csv_line(row: ReportRow) -> str:
    return ",".join([
        _quote(row.player_name),
        _quote(row.date),
        _quote(row.course_name),
        _number(row.score),
        _number(row.par),
        _quote(row.weather),
        _number(row.wind_speed_kph),
        _number(row.temp_c),
    ])


def export_to_csv(rows: Iterable[ReportRow]) -> str:
    """
    Serialize report rows.

    String fields are always double-quoted; numeric fields are bare and empty
    when missing. Lines are joined with a single newline and there is no
    trailing newline, so an empty report is just the header.
    """
    return "\n".join([",".join(CSV_HEADERS)] + [csv_line(row) for row in rows])


def sanitize_squad_name(name: Optional[str]) -> str:
    cleaned = re.sub(r"\s+", "-", name or DEFAULT_SQUAD_NAME)
    return re.sub(r"[^a-zA-Z0-9-]", "", cleaned)


def report_filename(squad_name: Optional[str], on_date: date) -> str:
    return f"PGC-Report-{sanitize_squad_name(squad_name)}-{on_date.isoformat()}.csv"
