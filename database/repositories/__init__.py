from .audit_repo import AuditLogRepositoryDB
from .course_repo import CourseRepositoryDB
from .profile_repo import ProfileRepositoryDB
from .round_repo import RoundRepositoryDB
from .squad_repo import SquadRepositoryDB

__all__ = [
    "AuditLogRepositoryDB",
    "CourseRepositoryDB",
    "ProfileRepositoryDB",
    "RoundRepositoryDB",
    "SquadRepositoryDB",
]
