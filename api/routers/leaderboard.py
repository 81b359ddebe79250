"""Club-wide leaderboard and handicap rankings."""

from fastapi import APIRouter, Depends, Response

from analytics import build_leaderboard, handicap_rankings
from analytics.leaderboard import all_players, handicap_summary, leaderboard_summary
from analytics.visualizations import figure_to_png, plot_leaderboard
from database.db_manager import DatabaseManager
from api.dependencies import get_current_profile, get_db
from api.schemas import LeaderboardResponse, RankingsResponse
from models import Profile

router = APIRouter()


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    profiles = await db.profiles.list_profiles()
    rounds = await db.rounds.list_rounds()
    entries = build_leaderboard(profiles, rounds)
    return LeaderboardResponse(entries=entries, **leaderboard_summary(entries))


@router.get("/leaderboard/players")
async def get_all_players(
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    """Unranked view, including players who have not posted a round."""
    profiles = await db.profiles.list_profiles()
    return all_players(profiles, await db.rounds.list_rounds())


@router.get("/leaderboard/chart")
async def get_leaderboard_chart(
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    profiles = await db.profiles.list_profiles()
    entries = build_leaderboard(profiles, await db.rounds.list_rounds())
    fig = plot_leaderboard(entries)[0]
    return Response(content=figure_to_png(fig), media_type="image/png")


@router.get("/rankings", response_model=RankingsResponse)
async def get_rankings(
    db: DatabaseManager = Depends(get_db),
    _: Profile = Depends(get_current_profile),
):
    rankings = handicap_rankings(await db.profiles.list_profiles())
    return RankingsResponse(rankings=rankings, **handicap_summary(rankings))
