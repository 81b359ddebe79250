from datetime import date
from pydantic import Field, field_validator
from typing import List, Optional

from .base import ClubRecord
from .hole_score import HoleScore


class Round(ClubRecord):
    """One completed outing by one player at one course on one date."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    course_id: Optional[str] = None
    date_of_round: Optional[date] = None
    total_strokes: Optional[int] = None
    total_par: Optional[int] = None
    holes_played: Optional[int] = None
    weather: Optional[str] = None
    wind_conditions: Optional[str] = None
    temp_c: Optional[float] = None
    wind_speed_kph: Optional[float] = None
    is_home: Optional[bool] = None
    hole_scores: List[HoleScore] = Field(default_factory=list)

    @field_validator('holes_played')
    @classmethod
    def validate_holes_played(cls, v):
        if v is not None and v not in (9, 18):
            raise ValueError(f"holes_played must be 9 or 18, got {v}")
        return v

    def has_valid_score(self) -> bool:
        """Rounds without a positive total are left out of every scoring aggregate."""
        return self.total_strokes is not None and self.total_strokes > 0

    @property
    def score_to_par(self) -> Optional[int]:
        if self.total_strokes is None or self.total_par is None:
            return None
        return self.total_strokes - self.total_par
