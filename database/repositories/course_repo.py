"""CRUD operations for courses and course_holes."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import Course
from database.converters import course_from_rows, course_hole_to_row, course_to_row
from database.exceptions import DependentRecordsError, DuplicateError, IntegrityError, NotFoundError


class CourseRepositoryDB:
    """Async CRUD for courses and their hole layouts."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Private helpers
    # ================================================================

    async def _assemble(self, conn, course_row) -> Course:
        hole_rows = await conn.fetch(
            "SELECT * FROM course_holes WHERE course_id = $1 ORDER BY hole_number",
            course_row["id"],
        )
        return course_from_rows(course_row, hole_rows)

    # ================================================================
    # Read
    # ================================================================

    async def get_course(self, course_id: str) -> Optional[Course]:
        """Get a Course with its holes by ID."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM courses WHERE id = $1", UUID(course_id)
            )
            if not row:
                return None
            return await self._assemble(conn, row)

    async def list_courses(self) -> List[Course]:
        """All courses ordered by name. Hole layouts are not loaded."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch("SELECT * FROM courses ORDER BY name")
            return [course_from_rows(r) for r in rows]

    async def search_courses(self, query: str) -> List[Course]:
        """Search courses by name or location substring."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM courses
                   WHERE name ILIKE $1 OR location ILIKE $1
                   ORDER BY name LIMIT 20""",
                f"%{query}%",
            )
            return [course_from_rows(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_course(self, course: Course) -> Course:
        """Insert a Course and its holes in one transaction."""
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row_data = course_to_row(course)
                    course_row = await conn.fetchrow(
                        """INSERT INTO courses (name, location, par, rating, slope, course_type, tees)
                           VALUES ($1, $2, $3, $4, $5, $6, $7) RETURNING *""",
                        row_data["name"], row_data["location"], row_data["par"],
                        row_data["rating"], row_data["slope"],
                        row_data["course_type"], row_data["tees"],
                    )
                    if course.holes:
                        await conn.executemany(
                            """INSERT INTO course_holes
                               (course_id, hole_number, par, stroke_index, distance_yards)
                               VALUES ($1, $2, $3, $4, $5)""",
                            [course_hole_to_row(h, course_row["id"]) for h in course.holes],
                        )
                    return await self._assemble(conn, course_row)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Course already exists: {e}") from e
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e

    # ================================================================
    # Update
    # ================================================================

    async def update_course(self, course_id: str, **fields) -> Course:
        """
        Update top-level course fields.

        Renaming to a name another course already uses raises DuplicateError.
        """
        allowed = {"name", "location", "par", "rating", "slope", "course_type", "tees"}
        updates = {k: v for k, v in fields.items() if k in allowed}

        async with self._pool.acquire() as conn:
            existing = await conn.fetchrow(
                "SELECT * FROM courses WHERE id = $1", UUID(course_id)
            )
            if not existing:
                raise NotFoundError("Course not found")
            if not updates:
                return await self._assemble(conn, existing)

            if updates.get("name"):
                duplicate = await conn.fetchval(
                    "SELECT id FROM courses WHERE name = $1 AND id <> $2",
                    updates["name"], UUID(course_id),
                )
                if duplicate:
                    raise DuplicateError("A course with this name already exists")

            set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
            values = [UUID(course_id)] + list(updates.values())
            row = await conn.fetchrow(
                f"UPDATE courses SET {set_clause}, updated_at = NOW() WHERE id = $1 RETURNING *",
                *values,
            )
            return await self._assemble(conn, row)

    # ================================================================
    # Delete
    # ================================================================

    async def delete_course(self, course_id: str) -> bool:
        """
        Delete a course and its holes (CASCADE). Returns True if deleted.

        Refuses with DependentRecordsError while any round references it.
        """
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                count = await conn.fetchval(
                    "SELECT COUNT(*) FROM rounds WHERE course_id = $1", UUID(course_id)
                )
                if count:
                    plural = "" if count == 1 else "s"
                    raise DependentRecordsError(
                        f"Cannot delete this course. It has {count} round{plural} "
                        "associated with it. Edit the course instead.",
                        count=count,
                    )
                result = await conn.execute(
                    "DELETE FROM courses WHERE id = $1", UUID(course_id)
                )
                return result == "DELETE 1"
