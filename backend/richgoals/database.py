"""psycopg pool lifecycle and the per-request store dependencies."""

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException
from loguru import logger
from psycopg import AsyncConnection
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from .config import settings
from .services.profile_store import PostgresProfileStore

pool: AsyncConnectionPool | None = None


def _build_pool() -> AsyncConnectionPool:
    return AsyncConnectionPool(
        conninfo=settings.database_url,
        open=False,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        kwargs={
            "autocommit": True,
            "row_factory": dict_row,
            "application_name": settings.app_name,
        },
    )


async def init_db_pool() -> None:
    global pool

    # Goal coaching needs no database, so the API still boots without one.
    if not settings.database_url:
        logger.warning("DATABASE_URL is not set; profile and goal endpoints will return 500")
        return

    pool = _build_pool()
    await pool.open()
    logger.info(
        f"Database pool opened (min_size={settings.db_pool_min_size}, max_size={settings.db_pool_max_size})"
    )


async def close_db_pool() -> None:
    global pool

    if pool is None:
        return

    await pool.close()
    pool = None
    logger.info("Database pool closed")


async def get_db_connection() -> AsyncIterator[AsyncConnection]:
    if pool is None:
        raise HTTPException(status_code=500, detail="DATABASE_URL is not configured")

    async with pool.connection() as connection:
        yield connection


async def get_profile_store(
    connection: AsyncConnection = Depends(get_db_connection),
) -> PostgresProfileStore:
    """One `user_profiles` store per request, bound to that request's connection."""
    return PostgresProfileStore(connection)
