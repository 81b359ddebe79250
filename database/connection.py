import asyncpg
import logging
import time
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)

APPLICATION_NAME = "pgc-performance"
COMMAND_TIMEOUT = 30


class DatabasePool:
    """Owns the asyncpg pool shared by every repository."""

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(
        self,
        dsn: Optional[str] = None,
        *,
        min_size: int = 2,
        max_size: int = 10,
    ) -> None:
        """Open the pool once at startup. Without a DSN, asyncpg reads the PG* environment variables."""
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=COMMAND_TIMEOUT,
            server_settings={"application_name": APPLICATION_NAME},
        )
        log.info("Database pool ready (min=%d, max=%d)", min_size, max_size)

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None
            log.info("Database pool closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError(
                "Database pool not initialized. Call await db.initialize() first."
            )
        return self._pool

    async def health_check(self) -> Dict[str, Any]:
        """Round-trip a trivial query; reports reachability and latency in ms."""
        started = time.perf_counter()
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except (asyncpg.PostgresError, OSError, RuntimeError) as exc:
            log.warning("Database health check failed: %s", exc)
            return {"database": False, "latency_ms": None}
        latency = round((time.perf_counter() - started) * 1000, 1)
        return {"database": True, "latency_ms": latency}


db = DatabasePool()
