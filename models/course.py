from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from .base import ClubRecord


KNOWN_COURSE_TYPES = (
    "Links",
    "Parkland",
    "Heathland",
    "Heath",
    "Desert",
    "Resort",
    "Cliffside",
)


class CourseHole(BaseModel):
    """Par and stroke index for a single hole of a course."""
    model_config = ConfigDict(validate_assignment=True)

    course_id: Optional[str] = None
    hole_number: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=6)
    stroke_index: Optional[int] = Field(None, ge=1, le=18)
    distance_yards: Optional[int] = Field(None, ge=0)


class Course(ClubRecord):
    """Golf course with its ratings and hole layout."""

    id: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    par: Optional[int] = Field(None, ge=27, le=80)
    rating: Optional[float] = Field(None, ge=30.0, le=85.0)
    slope: Optional[int] = Field(None, ge=55, le=155)
    course_type: Optional[str] = None
    tee_color: Optional[str] = None
    holes: List[CourseHole] = Field(default_factory=list)

    @field_validator('course_type', mode='before')
    @classmethod
    def blank_course_type_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def get_hole(self, number: int) -> Optional[CourseHole]:
        """Get a hole by its number (1-18)."""
        for hole in self.holes:
            if hole.hole_number == number:
                return hole
        return None

    @property
    def calculated_par(self) -> Optional[int]:
        """Par summed from the hole layout."""
        if not self.holes:
            return None
        return sum(h.par for h in self.holes)

    def get_par(self) -> Optional[int]:
        """Explicit par if set, otherwise calculated from holes."""
        return self.par if self.par is not None else self.calculated_par
