"""Team selection simulator endpoints (admin only)."""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from analytics import simulate_team, squad_projections
from analytics.simulator import MatchCondition, MatchFormat, VenueType, select_top_players
from database.db_manager import DatabaseManager
from api.dependencies import get_db, require_admin
from api.schemas import SimulatorResponse
from models import Identity, squad_player_ids

router = APIRouter()


@router.get("", response_model=SimulatorResponse)
async def simulate(
    squad_id: str = Query(...),
    match_format: MatchFormat = Query(MatchFormat.THREE_HOME, alias="format"),
    condition: MatchCondition = Query(MatchCondition.CALM),
    venue: VenueType = Query(VenueType.LINKS),
    selected: Optional[List[str]] = Query(None),
    db: DatabaseManager = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    """
    Project a team score for a squad.

    Without an explicit `selected` list the best-ranked players for the
    format are picked automatically.
    """
    try:
        squad = await db.squads.get_squad(squad_id)
    except ValueError:
        squad = None
    if not squad:
        raise HTTPException(404, "Squad not found")

    player_ids = squad_player_ids(squad.id, await db.squads.list_members(squad.id))
    profiles = await db.profiles.get_profiles(player_ids)
    rounds = await db.rounds.list_rounds(user_ids=player_ids)
    courses = await db.courses.list_courses()

    players = squad_projections(player_ids, profiles, rounds, courses, venue, match_format)
    if selected:
        # Squad ranking order, each player at most once.
        wanted = set(selected)
        chosen = [p.id for p in players if p.id in wanted]
    else:
        chosen = select_top_players(players, match_format)

    by_id = {p.id: p for p in players}
    team = simulate_team([by_id[s] for s in chosen], match_format, condition, venue)
    return SimulatorResponse(players=players, selected=chosen, team=team)
