"""Personal statistics endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Response

from analytics import environmental_breakdown, performance_summary, scoring_stats, venue_performance
from analytics.scoring import par_average_rating
from analytics.visualizations import (
    CHARTS,
    figure_to_png,
    plot_environmental_breakdown,
    plot_par_type_averages,
    plot_score_trend,
    plot_scoring_distribution,
)
from database.db_manager import DatabaseManager
from api.dependencies import get_current_profile, get_db
from api.schemas import PlayerStatsResponse
from models import Profile

router = APIRouter()


async def load_player(db: DatabaseManager, user_id: str) -> Profile:
    try:
        profile = await db.profiles.get_profile(user_id)
    except ValueError:
        profile = None
    if not profile:
        raise HTTPException(404, "User not found")
    return profile


@router.get("/{user_id}", response_model=PlayerStatsResponse)
async def get_player_stats(
    user_id: str,
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    profile = await load_player(db, user_id)
    rounds = await db.rounds.list_rounds(user_id=user_id)
    scores = await db.rounds.hole_scores_for_user(user_id)
    courses = await db.courses.list_courses()

    scoring = scoring_stats(scores)
    for par in (3, 4, 5):
        scoring[f"par{par}_rating"] = par_average_rating(par, scoring[f"par{par}_avg"])

    return PlayerStatsResponse(
        player_id=profile.id,
        full_name=profile.display_name,
        handicap_index=profile.handicap_index,
        performance=performance_summary(rounds),
        scoring=scoring,
        environment=environmental_breakdown(rounds, courses),
        venues=venue_performance(rounds, courses),
    )


@router.get("/{user_id}/charts/{chart}")
async def get_player_chart(
    user_id: str,
    chart: str,
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    """PNG rendering of one of the personal statistics charts."""
    if chart not in CHARTS:
        raise HTTPException(404, f"Unknown chart: {chart}")
    await load_player(db, user_id)

    rounds = await db.rounds.list_rounds(user_id=user_id)
    if chart == "score_trend":
        fig = plot_score_trend(rounds)[0]
    elif chart == "environment":
        fig = plot_environmental_breakdown(rounds, await db.courses.list_courses())[0]
    else:
        scores = await db.rounds.hole_scores_for_user(user_id)
        if chart == "scoring_distribution":
            fig = plot_scoring_distribution(scores)[0]
        else:
            fig = plot_par_type_averages(scores)[0]
    return Response(content=figure_to_png(fig), media_type="image/png")
