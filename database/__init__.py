from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.repositories import (
    AuditLogRepositoryDB,
    CourseRepositoryDB,
    ProfileRepositoryDB,
    RoundRepositoryDB,
    SquadRepositoryDB,
)
from database.exceptions import (
    DatabaseError,
    DependentRecordsError,
    DuplicateError,
    IntegrityError,
    NotFoundError,
)

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "AuditLogRepositoryDB",
    "CourseRepositoryDB",
    "ProfileRepositoryDB",
    "RoundRepositoryDB",
    "SquadRepositoryDB",
    "DatabaseError",
    "DependentRecordsError",
    "DuplicateError",
    "IntegrityError",
    "NotFoundError",
]
