from __future__ import annotations

import io
from typing import Any, Dict, Iterable, List, Optional, Sequence

from models.course import Course
from models.hole_score import HoleScore
from models.round import Round

from .common import most_recent_first, valid_rounds
from .environment import environmental_breakdown
from .scoring import par_type_averages, scoring_distribution

PGC_GREEN = "#0D4D2B"
PGC_GOLD = "#C9A227"


def _load_plt():
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "matplotlib is required for visualizations. Install it with: pip install matplotlib"
        ) from exc
    return plt


def _default_labels(rounds: Sequence[Round]) -> list[str]:
    labels: list[str] = []
    for index, round_obj in enumerate(rounds, start=1):
        if round_obj.date_of_round:
            labels.append(round_obj.date_of_round.isoformat())
        else:
            labels.append(f"R{index}")
    return labels


def _apply_sparse_xticks(ax, labels: Sequence[str], max_labels: int = 12) -> None:
    """
    Keep x-axis readable when there are many rounds.

    Shows at most `max_labels` ticks while preserving order.
    """
    count = len(labels)
    if count <= max_labels:
        ax.set_xticks(range(count))
        ax.set_xticklabels(labels, rotation=45, ha="right")
        return

    step = max(1, count // max_labels)
    tick_positions = list(range(0, count, step))
    if tick_positions[-1] != count - 1:
        tick_positions.append(count - 1)

    tick_labels = [labels[i] for i in tick_positions]
    ax.set_xticks(tick_positions)
    ax.set_xticklabels(tick_labels, rotation=45, ha="right")


def figure_to_png(fig) -> bytes:
    """Render a figure to PNG bytes and release it."""
    plt = _load_plt()
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=150)
    plt.close(fig)
    return buffer.getvalue()


def plot_score_trend(rounds: Iterable[Round], labels: Optional[Sequence[str]] = None):
    """Line chart: gross score per round, oldest first."""
    plt = _load_plt()
    ordered = list(reversed(valid_rounds(most_recent_first(rounds))))
    x_labels = list(labels) if labels is not None else _default_labels(ordered)
    values = [r.total_strokes for r in ordered]
    x = list(range(len(x_labels)))

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(x, values, marker="o", color=PGC_GREEN)
    ax.set_title("Score Trend")
    ax.set_xlabel("Round")
    ax.set_ylabel("Total Score")
    _apply_sparse_xticks(ax, x_labels)
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()
    return fig, ax


def plot_scoring_distribution(scores: Iterable[HoleScore]):
    """Bar chart: percentage of holes in each scoring bucket."""
    plt = _load_plt()
    rows = scoring_distribution(scores)
    labels = [row["label"] for row in rows]
    percentages = [row["percentage"] for row in rows]
    colors = [row["color"] for row in rows]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar(labels, percentages, color=colors)
    ax.set_title("Scoring Distribution")
    ax.set_xlabel("Result")
    ax.set_ylabel("Percent Of Holes")
    ax.set_ylim(0, 100)
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()
    return fig, ax


def plot_par_type_averages(scores: Iterable[HoleScore]):
    """Bar chart: average strokes on par 3s, 4s and 5s against par."""
    plt = _load_plt()
    averages = par_type_averages(scores)
    pars = [par for par, avg in averages.items() if avg is not None]
    values = [averages[par] for par in pars]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar([f"Par {par}" for par in pars], values, color=PGC_GREEN, label="Average")
    ax.scatter([f"Par {par}" for par in pars], pars, color=PGC_GOLD, zorder=3, label="Par")
    ax.set_title("Average Strokes By Hole Par")
    ax.set_xlabel("Hole Type")
    ax.set_ylabel("Average Strokes")
    ax.legend(loc="upper left")
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()
    return fig, ax


def _plot_breakdown(ax, rows: List[Dict[str, Any]], title: str) -> None:
    labels = [row["label"] for row in rows]
    values = [row["avg_score"] for row in rows]
    ax.barh(labels, values, color=[row["color"] for row in rows])
    ax.invert_yaxis()
    for index, row in enumerate(rows):
        ax.annotate(f"{row['round_count']} rds", (row["avg_score"], index),
                    xytext=(4, 0), textcoords="offset points", va="center", fontsize=8)
    ax.set_title(title)
    ax.set_xlabel("Average Score")
    ax.grid(axis="x", alpha=0.2)


def plot_environmental_breakdown(rounds: Iterable[Round], courses: Iterable[Course]):
    """
    Two panels:
    - average score by course type
    - average score by weather
    """
    plt = _load_plt()
    breakdown = environmental_breakdown(rounds, courses)

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 5))
    _plot_breakdown(ax1, breakdown["by_course_type"], "By Course Type")
    _plot_breakdown(ax2, breakdown["by_weather"], "By Weather")
    fig.tight_layout()
    return fig, ax1, ax2


def plot_leaderboard(leaderboard: Sequence[Dict[str, Any]], top: int = 10):
    """Horizontal bars: best and average score for the top of a leaderboard."""
    plt = _load_plt()
    rows = list(leaderboard)[:top]
    names = [f"{row['rank']}. {row['full_name']}" for row in rows]
    y = list(range(len(rows)))

    fig, ax = plt.subplots(figsize=(10, max(3, len(rows) * 0.5 + 1)))
    ax.barh([i - 0.2 for i in y], [row["best_score"] for row in rows],
            height=0.4, color=PGC_GOLD, label="Best")
    ax.barh([i + 0.2 for i in y], [row["avg_score"] for row in rows],
            height=0.4, color=PGC_GREEN, label="Average")
    ax.set_yticks(y)
    ax.set_yticklabels(names)
    ax.invert_yaxis()
    ax.set_title("Leaderboard")
    ax.set_xlabel("Score")
    ax.legend(loc="lower right")
    ax.grid(axis="x", alpha=0.2)
    fig.tight_layout()
    return fig, ax


CHARTS = ("score_trend", "scoring_distribution", "par_averages", "environment")
