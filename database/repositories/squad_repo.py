"""Read access to squads, squad_members and admin_squads."""

import asyncpg
from typing import List, Optional
from uuid import UUID

from models import AdminSquad, Squad, SquadMember
from database.converters import admin_squad_from_row, squad_from_row, squad_member_from_row


class SquadRepositoryDB:
    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def list_squads(self) -> List[Squad]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch("SELECT id, name FROM squads ORDER BY name")
            return [squad_from_row(r) for r in rows]

    async def get_squad(self, squad_id: str) -> Optional[Squad]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT id, name FROM squads WHERE id = $1", UUID(squad_id)
            )
            return squad_from_row(row) if row else None

    async def list_members(self, squad_id: Optional[str] = None) -> List[SquadMember]:
        """Memberships of one squad, or of every squad when squad_id is None."""
        async with self._pool.acquire() as conn:
            if squad_id:
                rows = await conn.fetch(
                    "SELECT squad_id, user_id FROM squad_members WHERE squad_id = $1",
                    UUID(squad_id),
                )
            else:
                rows = await conn.fetch("SELECT squad_id, user_id FROM squad_members")
            return [squad_member_from_row(r) for r in rows]

    async def list_admin_squads(self, admin_id: str) -> List[AdminSquad]:
        """Squads an admin has been assigned to view."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM admin_squads WHERE admin_id = $1", UUID(admin_id)
            )
            return [admin_squad_from_row(r) for r in rows]
