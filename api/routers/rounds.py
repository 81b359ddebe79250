"""Round API endpoints."""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from database.db_manager import DatabaseManager
from database.exceptions import IntegrityError
from analytics.rounds import RoundEntry, build_round
from api.dependencies import get_current_profile, get_db, get_weather_lookup
from api.schemas import RoundSummaryResponse
from models import Course, Profile, Round
from services.weather import WeatherLookup

log = logging.getLogger(__name__)

router = APIRouter()


def summarize_round(r: Round, course: Optional[Course] = None) -> RoundSummaryResponse:
    """Project a full Round model into a lightweight summary."""
    return RoundSummaryResponse(
        id=r.id,
        user_id=r.user_id,
        course_id=r.course_id,
        course_name=course.name if course else None,
        date_of_round=r.date_of_round,
        total_strokes=r.total_strokes,
        total_par=r.total_par,
        score_to_par=r.score_to_par,
        holes_played=r.holes_played,
        weather=r.weather,
        temp_c=r.temp_c,
        wind_speed_kph=r.wind_speed_kph,
    )


async def _get_round_or_404(db: DatabaseManager, round_id: str) -> Round:
    try:
        round_ = await db.rounds.get_round(round_id)
    except ValueError:
        round_ = None
    if not round_:
        raise HTTPException(404, "Round not found")
    return round_


@router.get("/user/{user_id}", response_model=List[RoundSummaryResponse])
async def get_rounds_for_user(
    user_id: str,
    limit: int = Query(100, ge=1, le=500),
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    try:
        rounds = await db.rounds.list_rounds(user_id=user_id, limit=limit)
    except ValueError:
        raise HTTPException(404, "User not found")
    courses = {c.id: c for c in await db.courses.list_courses()}
    return [summarize_round(r, courses.get(r.course_id)) for r in rounds]


@router.get("/{round_id}", response_model=Round)
async def get_round(
    round_id: str,
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    return await _get_round_or_404(db, round_id)


@router.post("", status_code=201, response_model=RoundSummaryResponse)
async def create_round(
    entry: RoundEntry,
    db: DatabaseManager = Depends(get_db),
    weather: WeatherLookup = Depends(get_weather_lookup),
    profile: Profile = Depends(get_current_profile),
):
    """
    Save a scorecard for the caller.

    Weather is looked up from the course location; the lookup is
    best-effort and a failure simply leaves temperature and wind empty.
    """
    try:
        course = await db.courses.get_course(entry.course_id)
    except ValueError:
        course = None
    if not course:
        raise HTTPException(404, "Course not found")

    reading = await asyncio.to_thread(weather.fetch, entry.date, course.location)
    if reading is None:
        log.info("No weather for %s on %s", course.location, entry.date)

    round_ = build_round(entry, profile.id, reading)
    try:
        created = await db.rounds.create_round(round_)
    except IntegrityError as e:
        raise HTTPException(400, str(e))
    return summarize_round(created, course)


@router.delete("/{round_id}", status_code=204)
async def delete_round(
    round_id: str,
    db: DatabaseManager = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """A round may be deleted by the player who owns it or by an admin."""
    round_ = await _get_round_or_404(db, round_id)
    if round_.user_id != profile.id and not profile.is_admin:
        raise HTTPException(403, "You do not have permission to delete this round")
    if not await db.rounds.delete_round(round_id):
        raise HTTPException(404, "Round not found")
