from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from models.profile import Profile
from models.round import Round

from .common import mean, most_recent_first, round_to, valid_rounds

TREND_THRESHOLD = 2
TREND_MIN_ROUNDS = 4
RECENT_ROUNDS_LIMIT = 20

IMPROVING = "improving"
DECLINING = "declining"
STABLE = "stable"


def _scores_by_player(rounds: Iterable[Round]) -> Dict[str, List[Round]]:
    by_player: Dict[str, List[Round]] = {}
    for round_obj in valid_rounds(rounds):
        by_player.setdefault(round_obj.user_id, []).append(round_obj)
    return by_player


def performance_trend(
    rounds: Iterable[Round], limit: int = RECENT_ROUNDS_LIMIT
) -> Optional[str]:
    """
    Compare the recent half of a player's last `limit` rounds with the older half.

    Returns "improving" when the recent mean is more than 2 strokes lower,
    "declining" when more than 2 strokes higher, otherwise "stable".
    Fewer than 4 valid rounds gives None.
    """
    recent_rounds = valid_rounds(most_recent_first(rounds))[:limit]
    if len(recent_rounds) < TREND_MIN_ROUNDS:
        return None

    scores = [r.total_strokes for r in recent_rounds]
    half = len(scores) // 2
    recent_avg = mean(scores[:half])
    older_avg = mean(scores[half:])

    if recent_avg < older_avg - TREND_THRESHOLD:
        return IMPROVING
    if recent_avg > older_avg + TREND_THRESHOLD:
        return DECLINING
    return STABLE


def player_summary(profile: Profile, rounds: Iterable[Round]) -> Dict[str, Any]:
    """Round count, best and average score for one player's rounds."""
    player_rounds = valid_rounds(rounds)
    scores = [r.total_strokes for r in player_rounds]
    return {
        "player_id": profile.id,
        "full_name": profile.display_name,
        "handicap_index": profile.handicap_index,
        "rounds_played": len(scores),
        "best_score": min(scores) if scores else None,
        "avg_score": mean(scores, places=1),
        "trend": performance_trend(player_rounds),
    }


def all_players(profiles: Iterable[Profile], rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """Unranked view: every profile, including players without rounds."""
    by_player = _scores_by_player(rounds)
    return [player_summary(p, by_player.get(p.id, [])) for p in profiles]


def build_leaderboard(profiles: Iterable[Profile], rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """
    Rank players by best gross score, lowest first.

    Players with no valid rounds are left out. Players with the same best
    score keep their relative input order.
    """
    entries = [e for e in all_players(profiles, rounds) if e["best_score"] is not None]
    ranked = sorted(entries, key=lambda e: e["best_score"])
    for index, entry in enumerate(ranked, start=1):
        entry["rank"] = index
    return ranked


def leaderboard_summary(leaderboard: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "ranked_players": len(leaderboard),
        "total_rounds": sum(e["rounds_played"] for e in leaderboard),
        "best_score": leaderboard[0]["best_score"] if leaderboard else None,
    }


def performance_summary(
    rounds: Iterable[Round], limit: int = RECENT_ROUNDS_LIMIT
) -> Dict[str, Any]:
    """Average, best, worst and trend over a player's most recent rounds."""
    recent = valid_rounds(most_recent_first(rounds)[:limit])
    scores = [r.total_strokes for r in recent]
    return {
        "average_score": mean(scores, places=1),
        "best_score": min(scores) if scores else None,
        "worst_score": max(scores) if scores else None,
        "total_rounds": len(scores),
        "trend": performance_trend(recent, limit=limit),
    }


# ================================================================
# Handicap rankings
# ================================================================

def handicap_category(handicap: Optional[float]) -> Optional[str]:
    if handicap is None:
        return None
    if handicap <= 0:
        return "Plus"
    if handicap <= 5:
        return "Cat 1"
    if handicap <= 10:
        return "Cat 2"
    if handicap <= 18:
        return "Cat 3"
    if handicap <= 28:
        return "Cat 4"
    return "Cat 5"


def handicap_rankings(profiles: Iterable[Profile]) -> List[Dict[str, Any]]:
    """Profiles ordered by handicap index ascending, unknown handicaps last."""
    profiles = list(profiles)
    known = sorted(
        (p for p in profiles if p.handicap_index is not None),
        key=lambda p: p.handicap_index,
    )
    unknown = [p for p in profiles if p.handicap_index is None]
    return [
        {
            "rank": index,
            "player_id": p.id,
            "full_name": p.full_name or "Unknown",
            "handicap_index": p.handicap_index,
            "home_club": p.home_club,
            "category": handicap_category(p.handicap_index),
        }
        for index, p in enumerate(known + unknown, start=1)
    ]


def handicap_summary(rankings: List[Dict[str, Any]]) -> Dict[str, Any]:
    handicaps = [r["handicap_index"] for r in rankings if r["handicap_index"] is not None]
    return {
        "players": len(rankings),
        "best_handicap": min(handicaps) if handicaps else None,
        "average_handicap": round_to(sum(handicaps) / len(handicaps), 1) if handicaps else None,
    }
