class DatabaseError(Exception):
    """Base for all database errors."""


class NotFoundError(DatabaseError):
    """Entity not found."""


class DuplicateError(DatabaseError):
    """Unique constraint violation or a clashing name."""


class IntegrityError(DatabaseError):
    """Foreign key or check constraint violation."""


class DependentRecordsError(DatabaseError):
    """Entity still referenced by other records and cannot be removed."""

    def __init__(self, message: str, count: int = 0):
        super().__init__(message)
        self.count = count
