from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from models.hole_score import HoleScore

from .common import mean

# (key, label) in display order, best to worst.
SCORE_BUCKETS = [
    ("eagle", "Eagles+"),
    ("birdie", "Birdies"),
    ("par", "Pars"),
    ("bogey", "Bogeys"),
    ("double", "Double+"),
]

BUCKET_COLORS = {
    "eagle": "#9333EA",
    "birdie": "#22C55E",
    "par": "#C9A227",
    "bogey": "#F97316",
    "double": "#EF4444",
}

PAR_TYPES = (3, 4, 5)


def valid_hole_scores(scores: Iterable[HoleScore]) -> List[HoleScore]:
    return [s for s in scores if s.is_valid()]


def score_bucket(to_par: int) -> str:
    """Five-way classification; anything worse than bogey is a double."""
    if to_par <= -2:
        return "eagle"
    if to_par == -1:
        return "birdie"
    if to_par == 0:
        return "par"
    if to_par == 1:
        return "bogey"
    return "double"


def par_type_averages(scores: Iterable[HoleScore]) -> Dict[int, Optional[float]]:
    """Mean strokes on par 3s, 4s and 5s (two decimals). Missing groups are None."""
    by_par: Dict[int, List[int]] = {par: [] for par in PAR_TYPES}
    for score in valid_hole_scores(scores):
        if score.par in by_par:
            by_par[score.par].append(score.strokes)
    return {par: mean(strokes, places=2) for par, strokes in by_par.items()}


def scoring_distribution(scores: Iterable[HoleScore]) -> List[Dict[str, Any]]:
    """
    Share of holes in each scoring bucket.

    Output rows (one per bucket, best first):
    - key / label / color
    - count: holes in the bucket
    - percentage: count / total * 100, or 0.0 when no holes were counted
    """
    counts = {key: 0 for key, _ in SCORE_BUCKETS}
    total = 0
    for score in valid_hole_scores(scores):
        counts[score_bucket(score.to_par())] += 1
        total += 1

    return [
        {
            "key": key,
            "label": label,
            "color": BUCKET_COLORS[key],
            "count": counts[key],
            "percentage": (counts[key] / total * 100.0) if total else 0.0,
        }
        for key, label in SCORE_BUCKETS
    ]


def scoring_stats(scores: Iterable[HoleScore]) -> Dict[str, Any]:
    """Par-type averages and distribution for a player's hole-by-hole scores."""
    scores = list(scores)
    averages = par_type_averages(scores)
    distribution = scoring_distribution(scores)
    return {
        "par3_avg": averages[3],
        "par4_avg": averages[4],
        "par5_avg": averages[5],
        "distribution": distribution,
        "total_holes": sum(row["count"] for row in distribution),
    }


def par_average_rating(par: int, average: Optional[float]) -> Optional[str]:
    """Qualitative label for a par-type average."""
    if average is None:
        return None
    if average <= par:
        return "Excellent"
    if average <= par + 0.2:
        return "Great"
    if average <= par + 0.5:
        return "Good"
    return "Needs work"
