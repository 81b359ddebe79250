from enum import Enum
from pydantic import Field
from typing import Dict, NamedTuple, Optional

from .base import ClubRecord


class GoalType(str, Enum):
    PAR3_AVERAGE = "par3_average"
    PAR4_AVERAGE = "par4_average"
    PAR5_AVERAGE = "par5_average"
    SCORE_AVERAGE = "score_average"
    BIRDIES_PER_ROUND = "birdies_per_round"
    PARS_PER_ROUND = "pars_per_round"


class GoalTypeConfig(NamedTuple):
    label: str
    lower_is_better: bool


GOAL_TYPE_CONFIG: Dict[GoalType, GoalTypeConfig] = {
    GoalType.PAR3_AVERAGE: GoalTypeConfig("Par 3 Average", True),
    GoalType.PAR4_AVERAGE: GoalTypeConfig("Par 4 Average", True),
    GoalType.PAR5_AVERAGE: GoalTypeConfig("Par 5 Average", True),
    GoalType.SCORE_AVERAGE: GoalTypeConfig("Score Average", True),
    GoalType.BIRDIES_PER_ROUND: GoalTypeConfig("Birdies per Round", False),
    GoalType.PARS_PER_ROUND: GoalTypeConfig("Pars per Round", False),
}


class Goal(ClubRecord):
    """A personal target for one tracked statistic."""
    id: str
    type: GoalType
    target_value: float = Field(..., gt=0)
    current_value: Optional[float] = None

    @property
    def config(self) -> GoalTypeConfig:
        return GOAL_TYPE_CONFIG[self.type]
