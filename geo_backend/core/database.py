"""
asyncpg connection pool shared by the mention store and score persistence.

The pool is a module-level singleton: the FastAPI lifespan opens it with
init_db() and closes it with close_db(); anything that runs outside the app
(tests, scripts) gets it lazily through get_db_pool().

Pool sizing and the statement timeout come from Settings
(db_pool_min_size, db_pool_max_size, db_command_timeout).

Helpers:
    execute_query      -> all rows          (conn.fetch)
    execute_query_one  -> one row or None   (conn.fetchrow)
    execute_command    -> status string     (conn.execute)
    execute_many       -> batch write       (conn.executemany)

Multi-statement writes that must be atomic acquire a connection themselves
and open a transaction:

    pool = await get_db_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            await conn.execute(...)
"""

import logging
from typing import Any, List, Optional

import asyncpg
from asyncpg import Pool

from geo_backend.core.config import get_settings

logger = logging.getLogger(__name__)


# =============================================================================
# Global Pool Singleton
# =============================================================================

_pool: Optional[Pool] = None


# =============================================================================
# Pool Lifecycle Functions
# =============================================================================

async def init_db() -> Pool:
    """
    Create the pool if it does not exist yet and return it.

    Raises:
        asyncpg.PostgresError: The server rejected the connection.
        OSError: The database host is unreachable.
    """
    global _pool

    if _pool is None:
        settings = get_settings()
        _pool = await asyncpg.create_pool(
            dsn=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )
        logger.debug(
            f"Created asyncpg pool ({settings.db_pool_min_size}-{settings.db_pool_max_size} connections)"
        )

    return _pool


async def get_db_pool() -> Pool:
    """Return the pool, creating it on first use."""
    if _pool is None:
        await init_db()

    assert _pool is not None, "Pool should be initialized after init_db()"

    return _pool


async def close_db() -> None:
    """Close the pool; a no-op when it was never opened."""
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None


# =============================================================================
# Statement Helpers
# =============================================================================

async def execute_query(query: str, *args: Any) -> List[asyncpg.Record]:
    """
    Run a SELECT and return every row.

    Args:
        query: SQL with $1, $2, ... placeholders.
        *args: Values bound to the placeholders.

    Example:
        rows = await execute_query(
            "SELECT * FROM mentions_llm WHERE brand_id = $1 AND collected_at >= $2",
            brand_id, since,
        )
    """
    pool = await get_db_pool()

    async with pool.acquire() as conn:
        return await conn.fetch(query, *args)


async def execute_query_one(query: str, *args: Any) -> Optional[asyncpg.Record]:
    """Run a SELECT and return its first row, or None when nothing matched."""
    pool = await get_db_pool()

    async with pool.acquire() as conn:
        return await conn.fetchrow(query, *args)


async def execute_command(query: str, *args: Any) -> str:
    """
    Run a single write statement.

    Returns:
        asyncpg's status tag, e.g. 'INSERT 0 1'.
    """
    pool = await get_db_pool()

    async with pool.acquire() as conn:
        return await conn.execute(query, *args)


async def execute_many(query: str, args_list: List[tuple]) -> None:
    """Run one write statement once per argument tuple."""
    pool = await get_db_pool()

    async with pool.acquire() as conn:
        await conn.executemany(query, args_list)
