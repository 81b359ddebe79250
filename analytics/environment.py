from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from models.course import Course
from models.round import Round

from .common import mean, valid_rounds

OTHER_LABEL = "Other"

COURSE_TYPE_COLORS = {
    "Links": "#3B82F6",
    "Parkland": "#22C55E",
    "Heathland": "#A855F7",
    "Desert": "#F59E0B",
    "Mountain": "#6366F1",
    OTHER_LABEL: "#6B7280",
}

WEATHER_COLORS = {
    "Sunny": "#F59E0B",
    "Cloudy": "#6B7280",
    "Windy": "#3B82F6",
    "Rainy": "#6366F1",
    "Calm": "#22C55E",
    "Cold": "#06B6D4",
    "Hot": "#EF4444",
    OTHER_LABEL: "#9CA3AF",
}


def _course_index(courses: Iterable[Course]) -> Dict[str, Course]:
    return {c.id: c for c in courses if c.id is not None}


def _group_scores(
    rounds: Iterable[Round], label_for: Callable[[Round], Optional[str]]
) -> Dict[str, List[int]]:
    """Group valid totals by label; rounds without a label land in OTHER_LABEL."""
    groups: Dict[str, List[int]] = {}
    for round_obj in valid_rounds(rounds):
        label = label_for(round_obj) or OTHER_LABEL
        groups.setdefault(label, []).append(round_obj.total_strokes)
    return groups


def _breakdown_rows(
    groups: Dict[str, List[int]], colors: Mapping[str, str]
) -> List[Dict[str, Any]]:
    rows = [
        {
            "label": label,
            "avg_score": mean(scores, places=1),
            "round_count": len(scores),
            "color": colors.get(label, colors[OTHER_LABEL]),
        }
        for label, scores in groups.items()
    ]
    # Best performance first; equal means keep first-seen order.
    return sorted(rows, key=lambda row: row["avg_score"])


def course_type_breakdown(
    rounds: Iterable[Round], courses: Iterable[Course]
) -> List[Dict[str, Any]]:
    """Average score per course type, best first."""
    index = _course_index(courses)

    def label_for(round_obj: Round) -> Optional[str]:
        course = index.get(round_obj.course_id)
        return course.course_type if course else None

    return _breakdown_rows(_group_scores(rounds, label_for), COURSE_TYPE_COLORS)


def weather_breakdown(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """Average score per recorded weather category, best first."""
    return _breakdown_rows(
        _group_scores(rounds, lambda r: r.weather), WEATHER_COLORS
    )


def environmental_breakdown(
    rounds: Iterable[Round], courses: Iterable[Course]
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Performance by condition, along two independent dimensions.

    Every valid round appears in exactly one bucket of each list, so the
    round counts of either list sum to the number of valid rounds.
    """
    rounds = list(rounds)
    return {
        "by_course_type": course_type_breakdown(rounds, courses),
        "by_weather": weather_breakdown(rounds),
    }


def venue_performance(
    rounds: Iterable[Round], courses: Iterable[Course]
) -> List[Dict[str, Any]]:
    """Average score per course played, best first. Rounds at unknown courses are skipped."""
    index = _course_index(courses)
    by_course: Dict[str, List[int]] = {}
    for round_obj in valid_rounds(rounds):
        course = index.get(round_obj.course_id)
        if not course or not course.name:
            continue
        by_course.setdefault(course.name, []).append(round_obj.total_strokes)

    rows = [
        {
            "course_name": name,
            "avg_score": mean(scores, places=1),
            "round_count": len(scores),
        }
        for name, scores in by_course.items()
    ]
    return sorted(rows, key=lambda row: row["avg_score"])
