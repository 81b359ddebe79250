from .base import ClubRecord
from .course import Course, CourseHole
from .goal import GOAL_TYPE_CONFIG, Goal, GoalType
from .hole_score import HoleScore
from .profile import ApprovalStatus, Profile
from .role import Identity, Role, parse_role
from .round import Round
from .squad import AdminSquad, Squad, SquadMember, squad_player_ids
from .weather import WeatherReading

__all__ = [
    "ClubRecord",
    "Course",
    "CourseHole",
    "GOAL_TYPE_CONFIG",
    "Goal",
    "GoalType",
    "HoleScore",
    "ApprovalStatus",
    "Profile",
    "Identity",
    "Role",
    "parse_role",
    "Round",
    "AdminSquad",
    "Squad",
    "SquadMember",
    "squad_player_ids",
    "WeatherReading",
]
