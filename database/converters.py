"""Conversion between asyncpg database rows and Pydantic domain models.

Centralizes all mapping logic between the hosted tables and the flat
record models.
"""

from typing import List, Optional
from uuid import UUID

from models import (
    AdminSquad,
    Course,
    CourseHole,
    HoleScore,
    Profile,
    Round,
    Squad,
    SquadMember,
)


def _str_id(value) -> Optional[str]:
    return str(value) if value is not None else None


def _float(value) -> Optional[float]:
    # NUMERIC columns arrive as Decimal
    return float(value) if value is not None else None


def to_uuid(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value else None


# ================================================================
# Row -> Model (reads)
# ================================================================

def profile_from_row(row) -> Profile:
    """profiles row -> Profile model."""
    return Profile(
        id=_str_id(row["id"]),
        full_name=row["full_name"],
        email=row["email"],
        role=row["role"],
        handicap_index=_float(row["handicap_index"]),
        home_club=row["home_club"],
        approval_status=row["approval_status"] or "pending",
        created_at=row["created_at"],
    )


def course_hole_from_row(row) -> CourseHole:
    """course_holes row -> CourseHole model."""
    return CourseHole(
        course_id=_str_id(row["course_id"]),
        hole_number=row["hole_number"],
        par=row["par"],
        stroke_index=row["stroke_index"],
        distance_yards=row["distance_yards"],
    )


def course_from_rows(course_row, hole_rows: Optional[list] = None) -> Course:
    """courses row + course_holes rows -> Course model."""
    holes = sorted(
        [course_hole_from_row(r) for r in hole_rows or []],
        key=lambda h: h.hole_number,
    )
    return Course(
        id=_str_id(course_row["id"]),
        name=course_row["name"],
        location=course_row["location"],
        par=course_row["par"],
        rating=_float(course_row["rating"]),
        slope=course_row["slope"],
        course_type=course_row["course_type"],
        tee_color=course_row["tees"],
        holes=holes,
    )


def hole_score_from_row(row) -> HoleScore:
    """round_scores row -> HoleScore model."""
    return HoleScore(
        round_id=_str_id(row["round_id"]),
        hole_number=row["hole_number"],
        par=row["par"],
        distance=row["distance"],
        strokes=row["strokes"],
    )


def round_from_rows(round_row, score_rows: Optional[list] = None) -> Round:
    """rounds row (+ optional round_scores rows) -> Round model."""
    hole_scores = sorted(
        [hole_score_from_row(r) for r in score_rows or []],
        key=lambda hs: hs.hole_number or 0,
    )
    return Round(
        id=_str_id(round_row["id"]),
        user_id=_str_id(round_row["user_id"]),
        course_id=_str_id(round_row["course_id"]),
        date_of_round=round_row["date_of_round"],
        total_strokes=round_row["total_strokes"],
        total_par=round_row["total_par"],
        holes_played=round_row["holes_played"],
        weather=round_row["weather"],
        wind_conditions=round_row["wind_conditions"],
        temp_c=_float(round_row["temp_c"]),
        wind_speed_kph=_float(round_row["wind_speed_kph"]),
        is_home=round_row["is_home"],
        hole_scores=hole_scores,
    )


def squad_from_row(row) -> Squad:
    return Squad(id=str(row["id"]), name=row["name"])


def squad_member_from_row(row) -> SquadMember:
    return SquadMember(squad_id=str(row["squad_id"]), user_id=str(row["user_id"]))


def admin_squad_from_row(row) -> AdminSquad:
    return AdminSquad(
        id=_str_id(row["id"]),
        admin_id=str(row["admin_id"]),
        squad_id=str(row["squad_id"]),
        created_at=row["created_at"],
    )


# ================================================================
# Model -> Row (writes)
# ================================================================

def course_to_row(course: Course) -> dict:
    """Course -> dict for courses INSERT."""
    return {
        "name": course.name,
        "location": course.location,
        "par": course.get_par(),
        "rating": course.rating,
        "slope": course.slope,
        "course_type": course.course_type,
        "tees": course.tee_color,
    }


def course_hole_to_row(hole: CourseHole, course_id: UUID) -> tuple:
    """CourseHole -> tuple for course_holes INSERT (for executemany)."""
    return (course_id, hole.hole_number, hole.par, hole.stroke_index, hole.distance_yards)


def round_to_row(round_: Round) -> dict:
    """Round -> dict for rounds INSERT."""
    return {
        "user_id": to_uuid(round_.user_id),
        "course_id": to_uuid(round_.course_id),
        "date_of_round": round_.date_of_round,
        "weather": round_.weather,
        "wind_conditions": round_.wind_conditions,
        "temp_c": round_.temp_c,
        "wind_speed_kph": round_.wind_speed_kph,
        "total_strokes": round_.total_strokes,
        "total_par": round_.total_par,
        "score_to_par": round_.score_to_par,
        "holes_played": round_.holes_played,
    }


def hole_scores_to_rows(scores: List[HoleScore], round_id: UUID) -> List[tuple]:
    """HoleScores -> tuples for round_scores INSERT."""
    return [
        (round_id, hs.hole_number, hs.par, hs.distance, hs.strokes)
        for hs in scores
    ]
