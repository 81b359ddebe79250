"""CRUD operations for the profiles table."""

import asyncpg
from typing import Iterable, List, Optional
from uuid import UUID

from models import ApprovalStatus, Profile, Role
from database.converters import profile_from_row
from database.exceptions import DuplicateError, NotFoundError


class ProfileRepositoryDB:
    """Async CRUD for member profiles."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM profiles WHERE id = $1", UUID(user_id)
            )
            return profile_from_row(row) if row else None

    async def list_profiles(
        self, *, approval_status: Optional[ApprovalStatus] = None
    ) -> List[Profile]:
        """All profiles ordered by name, optionally filtered by approval status."""
        async with self._pool.acquire() as conn:
            if approval_status is not None:
                rows = await conn.fetch(
                    "SELECT * FROM profiles WHERE approval_status = $1 ORDER BY full_name",
                    ApprovalStatus(approval_status).value,
                )
            else:
                rows = await conn.fetch("SELECT * FROM profiles ORDER BY full_name")
            return [profile_from_row(r) for r in rows]

    async def get_profiles(self, user_ids: Iterable[str]) -> List[Profile]:
        ids = [UUID(u) for u in user_ids]
        if not ids:
            return []
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM profiles WHERE id = ANY($1::uuid[]) ORDER BY full_name",
                ids,
            )
            return [profile_from_row(r) for r in rows]

    # ================================================================
    # Update
    # ================================================================

    async def update_profile(self, user_id: str, **fields) -> Optional[Profile]:
        """Update self-service fields (full_name, email, handicap_index, home_club)."""
        allowed = {"full_name", "email", "handicap_index", "home_club"}
        updates = {k: v for k, v in fields.items() if k in allowed}
        if not updates:
            return await self.get_profile(user_id)

        set_clause = ", ".join(f"{k} = ${i+2}" for i, k in enumerate(updates))
        values = [UUID(user_id)] + list(updates.values())

        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"UPDATE profiles SET {set_clause} WHERE id = $1 RETURNING *",
                    *values,
                )
                return profile_from_row(row) if row else None
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Email already in use: {e}") from e

    async def set_role(self, user_id: str, role: Role) -> Profile:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "UPDATE profiles SET role = $2 WHERE id = $1 RETURNING *",
                UUID(user_id), Role(role).value,
            )
            if not row:
                raise NotFoundError(f"User {user_id} not found")
            return profile_from_row(row)

    async def set_approval_status(self, user_id: str, status: ApprovalStatus) -> Profile:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "UPDATE profiles SET approval_status = $2 WHERE id = $1 RETURNING *",
                UUID(user_id), ApprovalStatus(status).value,
            )
            if not row:
                raise NotFoundError(f"User {user_id} not found")
            return profile_from_row(row)
