"""CRUD operations for rounds and round_scores."""

import asyncpg
from datetime import date
from typing import Iterable, List, Optional
from uuid import UUID

from models import HoleScore, Round
from database.converters import (
    hole_score_from_row,
    hole_scores_to_rows,
    round_from_rows,
    round_to_row,
)
from database.exceptions import DuplicateError, IntegrityError


class RoundRepositoryDB:
    """Async CRUD for rounds and their hole-by-hole scores."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_round(self, round_id: str) -> Optional[Round]:
        """Get a Round with its hole scores."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM rounds WHERE id = $1", UUID(round_id)
            )
            if not row:
                return None
            score_rows = await conn.fetch(
                "SELECT * FROM round_scores WHERE round_id = $1 ORDER BY hole_number",
                row["id"],
            )
            return round_from_rows(row, score_rows)

    async def list_rounds(
        self,
        *,
        user_id: Optional[str] = None,
        user_ids: Optional[Iterable[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[Round]:
        """
        Rounds without hole scores, most recent first.

        Every filter is optional; dates are inclusive.
        """
        clauses: List[str] = []
        values: list = []

        def add(clause: str, value) -> None:
            values.append(value)
            clauses.append(clause.format(n=len(values)))

        if user_id:
            add("user_id = ${n}", UUID(user_id))
        if user_ids is not None:
            add("user_id = ANY(${n}::uuid[])", [UUID(u) for u in user_ids])
        if start_date:
            add("date_of_round >= ${n}", start_date)
        if end_date:
            add("date_of_round <= ${n}", end_date)

        query = "SELECT * FROM rounds"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY date_of_round DESC"
        if limit:
            values.append(limit)
            query += f" LIMIT ${len(values)}"

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(query, *values)
            return [round_from_rows(r) for r in rows]

    async def get_hole_scores(self, round_ids: Iterable[str]) -> List[HoleScore]:
        ids = [UUID(r) for r in round_ids]
        if not ids:
            return []
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM round_scores
                   WHERE round_id = ANY($1::uuid[])
                   ORDER BY round_id, hole_number""",
                ids,
            )
            return [hole_score_from_row(r) for r in rows]

    async def hole_scores_for_user(self, user_id: str) -> List[HoleScore]:
        """Every hole score across a player's rounds."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT rs.* FROM round_scores rs
                   JOIN rounds r ON r.id = rs.round_id
                   WHERE r.user_id = $1""",
                UUID(user_id),
            )
            return [hole_score_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def create_round(self, round_: Round) -> Round:
        """Insert a round and its hole scores in one transaction."""
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row_data = round_to_row(round_)
                    round_row = await conn.fetchrow(
                        """INSERT INTO rounds
                           (user_id, course_id, date_of_round, weather, wind_conditions,
                            temp_c, wind_speed_kph, total_strokes, total_par,
                            score_to_par, holes_played)
                           VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
                           RETURNING *""",
                        row_data["user_id"], row_data["course_id"],
                        row_data["date_of_round"], row_data["weather"],
                        row_data["wind_conditions"], row_data["temp_c"],
                        row_data["wind_speed_kph"], row_data["total_strokes"],
                        row_data["total_par"], row_data["score_to_par"],
                        row_data["holes_played"],
                    )
                    if round_.hole_scores:
                        await conn.executemany(
                            """INSERT INTO round_scores
                               (round_id, hole_number, par, distance, strokes)
                               VALUES ($1, $2, $3, $4, $5)""",
                            hole_scores_to_rows(round_.hole_scores, round_row["id"]),
                        )
                    score_rows = await conn.fetch(
                        "SELECT * FROM round_scores WHERE round_id = $1 ORDER BY hole_number",
                        round_row["id"],
                    )
                    return round_from_rows(round_row, score_rows)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(str(e)) from e
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e

    # ================================================================
    # Delete
    # ================================================================

    async def delete_round(self, round_id: str) -> bool:
        """Delete a round and its hole scores. Returns True if deleted."""
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(
                    "DELETE FROM round_scores WHERE round_id = $1", UUID(round_id)
                )
                result = await conn.execute(
                    "DELETE FROM rounds WHERE id = $1", UUID(round_id)
                )
                return result == "DELETE 1"
