from pydantic import Field
from typing import Optional

from .base import ClubRecord


class HoleScore(ClubRecord):
    """A player's strokes on a single hole of a round."""

    round_id: Optional[str] = None
    hole_number: Optional[int] = Field(None, ge=1, le=18)
    par: Optional[int] = Field(None, ge=3, le=6)
    stroke_index: Optional[int] = Field(None, ge=1, le=18)
    distance: Optional[int] = Field(None, ge=0)
    # The store rejects strokes < 1, but unplayed holes can arrive as 0.
    strokes: Optional[int] = Field(None, ge=0, le=20)

    def is_valid(self) -> bool:
        """Counted by aggregates only with a positive stroke count and a known par."""
        return self.strokes is not None and self.strokes > 0 and self.par is not None

    def to_par(self) -> Optional[int]:
        """Score relative to par (+2, -1, etc.)."""
        if not self.is_valid():
            return None
        return self.strokes - self.par

