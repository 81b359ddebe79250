from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from models.goal import GOAL_TYPE_CONFIG, Goal, GoalType
from models.hole_score import HoleScore
from models.round import Round

from .common import mean, most_recent_first, round_to, valid_rounds
from .scoring import par_type_averages, valid_hole_scores

GOAL_ROUNDS = 10
# Lower-is-better progress starts counting at 1.5x the target.
BASELINE_FACTOR = 1.5


class GoalStats(BaseModel):
    par3_avg: Optional[float] = None
    par4_avg: Optional[float] = None
    par5_avg: Optional[float] = None
    score_avg: Optional[float] = None
    birdies_per_round: Optional[float] = None
    pars_per_round: Optional[float] = None


def recent_goal_rounds(rounds: Iterable[Round], limit: int = GOAL_ROUNDS) -> List[Round]:
    """The rounds goal statistics are measured over: the player's latest `limit` rounds."""
    return most_recent_first(rounds)[:limit]


def goal_stats(rounds: List[Round], scores: Iterable[HoleScore]) -> Optional[GoalStats]:
    """
    Statistics tracked by goals, over the given rounds and their hole scores.

    Birdies and pars per round divide by every round passed in, including
    rounds without hole-by-hole scores. No rounds gives None.
    """
    if not rounds:
        return None

    round_ids = {r.id for r in rounds}
    holes = [s for s in valid_hole_scores(scores) if s.round_id in round_ids]
    averages = par_type_averages(holes)

    birdies = sum(1 for s in holes if s.to_par() <= -1)
    pars = sum(1 for s in holes if s.to_par() == 0)
    round_count = len(rounds)

    return GoalStats(
        par3_avg=averages[3],
        par4_avg=averages[4],
        par5_avg=averages[5],
        score_avg=mean([r.total_strokes for r in valid_rounds(rounds)], places=1),
        birdies_per_round=round_to(birdies / round_count, 1),
        pars_per_round=round_to(pars / round_count, 1),
    )


STAT_FOR_GOAL: Dict[GoalType, str] = {
    GoalType.PAR3_AVERAGE: "par3_avg",
    GoalType.PAR4_AVERAGE: "par4_avg",
    GoalType.PAR5_AVERAGE: "par5_avg",
    GoalType.SCORE_AVERAGE: "score_avg",
    GoalType.BIRDIES_PER_ROUND: "birdies_per_round",
    GoalType.PARS_PER_ROUND: "pars_per_round",
}


def stat_for_goal(goal_type: GoalType, stats: Optional[GoalStats]) -> Optional[float]:
    if stats is None:
        return None
    return getattr(stats, STAT_FOR_GOAL[GoalType(goal_type)])


def is_goal_met(goal: Goal) -> bool:
    if goal.current_value is None:
        return False
    if goal.config.lower_is_better:
        return goal.current_value <= goal.target_value
    return goal.current_value >= goal.target_value


def goal_progress(goal: Goal) -> float:
    """Percentage towards the target, 0..100. No current value is 0."""
    current, target = goal.current_value, goal.target_value
    if current is None:
        return 0
    if is_goal_met(goal):
        return 100

    if goal.config.lower_is_better:
        baseline = target * BASELINE_FACTOR
        progress = (baseline - current) / (baseline - target) * 100
    else:
        progress = current / target * 100
    return max(0, min(100, progress))


def goal_status_color(goal: Goal) -> str:
    if goal.current_value is None:
        return "#6B7280"
    if is_goal_met(goal):
        return "#22C55E"
    progress = goal_progress(goal)
    if progress >= 75:
        return "#C9A227"
    if progress >= 50:
        return "#F59E0B"
    return "#EF4444"


def suggested_target(goal_type: GoalType, stats: Optional[GoalStats]) -> Optional[float]:
    """5% better for averages, 20% more for per-round counts."""
    current = stat_for_goal(goal_type, stats)
    if current is None:
        return None
    factor = 0.95 if GOAL_TYPE_CONFIG[GoalType(goal_type)].lower_is_better else 1.2
    return round_to(current * factor, 1)


def create_goal(goal_type: GoalType, target_value: float, stats: Optional[GoalStats]) -> Goal:
    """New goal seeded with the current stat. A non-positive target raises ValidationError."""
    return Goal(
        id=uuid.uuid4().hex,
        type=goal_type,
        target_value=target_value,
        current_value=stat_for_goal(goal_type, stats),
    )


def refresh_goals(goals: Iterable[Goal], stats: Optional[GoalStats]) -> List[Goal]:
    """Copies of the goals with current values taken from fresh stats."""
    return [
        goal.model_copy(update={"current_value": stat_for_goal(goal.type, stats)})
        for goal in goals
    ]


def goal_summary(goal: Goal) -> Dict[str, object]:
    return {
        "id": goal.id,
        "type": goal.type.value,
        "label": goal.config.label,
        "target_value": goal.target_value,
        "current_value": goal.current_value,
        "progress": goal_progress(goal),
        "is_met": is_goal_met(goal),
        "color": goal_status_color(goal),
    }
