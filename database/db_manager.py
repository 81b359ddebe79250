import asyncpg

from database.repositories import (
    AuditLogRepositoryDB,
    CourseRepositoryDB,
    ProfileRepositoryDB,
    RoundRepositoryDB,
    SquadRepositoryDB,
)


class DatabaseManager:
    """
    Bundles one repository per table group over a shared asyncpg pool.

    Raw SQL throughout (no ORM) to keep behavior explicit.
    """

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool
        self.profiles = ProfileRepositoryDB(pool)
        self.courses = CourseRepositoryDB(pool)
        self.rounds = RoundRepositoryDB(pool)
        self.squads = SquadRepositoryDB(pool)
        self.audit = AuditLogRepositoryDB(pool)
