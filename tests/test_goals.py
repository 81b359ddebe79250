from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from analytics.goals import (
    GoalStats,
    create_goal,
    goal_progress,
    goal_stats,
    goal_status_color,
    goal_summary,
    is_goal_met,
    recent_goal_rounds,
    refresh_goals,
    stat_for_goal,
    suggested_target,
)
from models import Goal, GoalType, HoleScore, Round
from services.goal_store import InMemoryGoalStore, JsonFileGoalStore


def _goal(goal_type, target, current=None):
    return Goal(id="g", type=goal_type, target_value=target, current_value=current)


def _rounds_with_scores():
    rounds = [
        Round(id="r1", user_id="p1", date_of_round=date(2026, 4, 2), total_strokes=78),
        Round(id="r2", user_id="p1", date_of_round=date(2026, 4, 1), total_strokes=83),
    ]
    scores = [
        HoleScore(round_id="r1", par=3, strokes=2),   # birdie
        HoleScore(round_id="r1", par=4, strokes=4),   # par
        HoleScore(round_id="r1", par=5, strokes=5),   # par
        HoleScore(round_id="r2", par=3, strokes=4),
        HoleScore(round_id="r2", par=4, strokes=3),   # birdie
        HoleScore(round_id="other", par=4, strokes=1),
    ]
    return rounds, scores


# ================================================================
# Stats
# ================================================================

def test_goal_stats():
    rounds, scores = _rounds_with_scores()
    stats = goal_stats(rounds, scores)

    assert stats.par3_avg == 3.0
    assert stats.par4_avg == 3.5
    assert stats.par5_avg == 5.0
    assert stats.score_avg == 80.5
    assert stats.birdies_per_round == 1.0
    assert stats.pars_per_round == 1.0


def test_goal_stats_without_rounds():
    assert goal_stats([], []) is None
    assert stat_for_goal(GoalType.SCORE_AVERAGE, None) is None


def test_recent_goal_rounds_keeps_latest_ten():
    rounds = [Round(id=str(i), date_of_round=date(2026, 1, 1) + timedelta(days=i), total_strokes=80)
              for i in range(15)]
    recent = recent_goal_rounds(rounds)
    assert len(recent) == 10
    assert recent[0].id == "14"


# ================================================================
# Progress
# ================================================================

def test_lower_is_better_progress():
    met = _goal(GoalType.SCORE_AVERAGE, 80, 79.5)
    assert is_goal_met(met)
    assert goal_progress(met) == 100

    halfway = _goal(GoalType.SCORE_AVERAGE, 80, 100)
    assert not is_goal_met(halfway)
    assert goal_progress(halfway) == pytest.approx(50)

    far = _goal(GoalType.SCORE_AVERAGE, 80, 130)
    assert goal_progress(far) == 0


def test_higher_is_better_progress():
    goal = _goal(GoalType.BIRDIES_PER_ROUND, 2, 1.5)
    assert goal_progress(goal) == pytest.approx(75)
    assert goal_progress(_goal(GoalType.BIRDIES_PER_ROUND, 2, 2.5)) == 100


def test_progress_without_current_value():
    goal = _goal(GoalType.PAR4_AVERAGE, 4.5)
    assert goal_progress(goal) == 0
    assert not is_goal_met(goal)
    assert goal_status_color(goal) == "#6B7280"


def test_goal_status_colors():
    assert goal_status_color(_goal(GoalType.PARS_PER_ROUND, 8, 9)) == "#22C55E"
    assert goal_status_color(_goal(GoalType.PARS_PER_ROUND, 8, 6)) == "#C9A227"
    assert goal_status_color(_goal(GoalType.PARS_PER_ROUND, 8, 4)) == "#F59E0B"
    assert goal_status_color(_goal(GoalType.PARS_PER_ROUND, 8, 2)) == "#EF4444"


def test_suggested_target():
    stats = GoalStats(score_avg=80.0, birdies_per_round=1.5)
    assert suggested_target(GoalType.SCORE_AVERAGE, stats) == 76.0
    assert suggested_target(GoalType.BIRDIES_PER_ROUND, stats) == 1.8
    assert suggested_target(GoalType.PAR3_AVERAGE, stats) is None


def test_create_and_refresh_goals():
    goal = create_goal(GoalType.SCORE_AVERAGE, 78, GoalStats(score_avg=82.0))
    assert goal.current_value == 82.0
    assert len(goal.id) == 32

    refreshed = refresh_goals([goal], GoalStats(score_avg=77.5))
    assert refreshed[0].current_value == 77.5
    assert goal.current_value == 82.0

    with pytest.raises(ValidationError):
        create_goal(GoalType.SCORE_AVERAGE, -1, None)


def test_goal_summary():
    summary = goal_summary(_goal(GoalType.BIRDIES_PER_ROUND, 2, 1))
    assert summary["label"] == "Birdies per Round"
    assert summary["type"] == "birdies_per_round"
    assert summary["progress"] == pytest.approx(50)
    assert summary["is_met"] is False


# ================================================================
# Stores
# ================================================================

def test_in_memory_goal_store():
    store = InMemoryGoalStore()
    assert store.load("p1") == []
    store.save("p1", [_goal(GoalType.SCORE_AVERAGE, 80)])
    assert len(store.load("p1")) == 1
    assert store.load("p2") == []


def test_json_file_goal_store_round_trip(tmp_path):
    store = JsonFileGoalStore(str(tmp_path / "goals"))
    goals = [_goal(GoalType.SCORE_AVERAGE, 80, 82.5), _goal(GoalType.PARS_PER_ROUND, 9)]
    store.save("user/../1", goals)

    loaded = JsonFileGoalStore(str(tmp_path / "goals")).load("user/../1")
    assert loaded == goals
    assert all(p.parent == tmp_path / "goals" for p in (tmp_path / "goals").iterdir())


def test_json_file_goal_store_corrupt_file(tmp_path):
    store = JsonFileGoalStore(str(tmp_path))
    (tmp_path / "p1.json").write_text("[{\"id\": 1}]", encoding="utf-8")
    assert store.load("p1") == []
