"""Append-only writes to audit_log."""

import asyncpg
import json
import logging
from typing import Any, Dict, Optional
from uuid import UUID

log = logging.getLogger(__name__)


class AuditLogRepositoryDB:
    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def record(
        self,
        actor_id: str,
        action: str,
        target_user_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Insert an audit entry. Returns False instead of raising on failure.

        The audited action has already happened by the time this runs, so a
        failed insert is logged and reported, never propagated.
        """
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    """INSERT INTO audit_log (actor_id, action, target_user_id, details)
                       VALUES ($1, $2, $3, $4::jsonb)""",
                    UUID(actor_id), action, UUID(target_user_id),
                    json.dumps(details or {}, default=str),
                )
            return True
        except (asyncpg.PostgresError, OSError) as e:
            log.warning("Failed to log audit action %s for %s: %s", action, target_user_id, e)
            return False
