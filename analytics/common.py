from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from models.round import Round


def round_to(value: float, places: int = 1) -> float:
    """Round half up (towards +inf), so 78.25 -> 78.3 regardless of float bankers' rounding."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def mean(values: Sequence[float], places: Optional[int] = None) -> Optional[float]:
    """Arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    result = sum(values) / len(values)
    return round_to(result, places) if places is not None else result


def valid_rounds(rounds: Iterable[Round]) -> List[Round]:
    """Rounds with a positive stroke total, in input order."""
    return [r for r in rounds if r.has_valid_score()]


def most_recent_first(rounds: Iterable[Round]) -> List[Round]:
    """Sort by date descending; undated rounds go last. Stable for equal dates."""
    rounds = list(rounds)
    dated = [r for r in rounds if r.date_of_round is not None]
    undated = [r for r in rounds if r.date_of_round is None]
    return sorted(dated, key=lambda r: r.date_of_round, reverse=True) + undated
