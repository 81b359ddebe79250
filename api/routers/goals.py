"""Personal goal endpoints for the calling player."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from database.db_manager import DatabaseManager
from analytics.goals import (
    GoalStats,
    create_goal,
    goal_stats,
    goal_summary,
    recent_goal_rounds,
    refresh_goals,
    suggested_target,
)
from api.dependencies import get_current_profile, get_db, get_goal_store
from api.schemas import GoalResponse
from models import GoalType, Profile
from services.goal_store import GoalStore

router = APIRouter()


class CreateGoalRequest(BaseModel):
    type: GoalType
    target_value: float = Field(..., gt=0)


class GoalStatsResponse(BaseModel):
    stats: Optional[GoalStats] = None
    suggested_targets: Dict[GoalType, Optional[float]]


async def _current_stats(db: DatabaseManager, user_id: str) -> Optional[GoalStats]:
    rounds = recent_goal_rounds(await db.rounds.list_rounds(user_id=user_id))
    scores = await db.rounds.get_hole_scores([r.id for r in rounds])
    return goal_stats(rounds, scores)


@router.get("", response_model=List[GoalResponse])
async def list_goals(
    db: DatabaseManager = Depends(get_db),
    store: GoalStore = Depends(get_goal_store),
    profile: Profile = Depends(get_current_profile),
):
    """The caller's goals with current values refreshed from their latest rounds."""
    goals = refresh_goals(store.load(profile.id), await _current_stats(db, profile.id))
    store.save(profile.id, goals)
    return [goal_summary(g) for g in goals]


@router.get("/stats", response_model=GoalStatsResponse)
async def get_goal_stats(
    db: DatabaseManager = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    stats = await _current_stats(db, profile.id)
    return GoalStatsResponse(
        stats=stats,
        suggested_targets={t: suggested_target(t, stats) for t in GoalType},
    )


@router.post("", status_code=201, response_model=GoalResponse)
async def add_goal(
    req: CreateGoalRequest,
    db: DatabaseManager = Depends(get_db),
    store: GoalStore = Depends(get_goal_store),
    profile: Profile = Depends(get_current_profile),
):
    goal = create_goal(req.type, req.target_value, await _current_stats(db, profile.id))
    store.save(profile.id, store.load(profile.id) + [goal])
    return goal_summary(goal)


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(
    goal_id: str,
    store: GoalStore = Depends(get_goal_store),
    profile: Profile = Depends(get_current_profile),
):
    goals = store.load(profile.id)
    remaining = [g for g in goals if g.id != goal_id]
    if len(remaining) == len(goals):
        raise HTTPException(404, "Goal not found")
    store.save(profile.id, remaining)
