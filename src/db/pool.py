"""Async Postgres connection pool.

The bot and service workflows share one async pool (psycopg3). Every new pooled connection runs the
session setup from `src.db.connection` before it is handed out.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from dotenv import load_dotenv
from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from src.db.connection import SESSION_SETUP_SQL, require_database_url


async def configure_session(conn: AsyncConnection) -> None:
    """Apply the session setup statements to a freshly opened pooled connection."""

    async with conn.cursor() as cur:
        for statement in SESSION_SETUP_SQL:
            await cur.execute(statement, prepare=False)
    # `SET` starts a transaction when autocommit is disabled; commit so the pool doesn't see INTRANS.
    await conn.commit()


def create_pool(
        database_url: str | None = None,
        *,
        min_size: int = 1,
        max_size: int | None = None,
        timeout: float = 30.0,
) -> AsyncConnectionPool:
    """Create an async DB pool.

    Notes:
        - The returned pool is created with `open=False`. Call `await pool.open()` at startup.
        - If `database_url` is omitted, the function loads `.env` and reads `DATABASE_URL`.
    """

    if database_url is None:
        load_dotenv(".env")
        database_url = require_database_url()

    return AsyncConnectionPool(
        conninfo=database_url,
        min_size=min_size,
        max_size=max_size,
        timeout=timeout,
        open=False,
        configure=configure_session,
    )


@asynccontextmanager
async def get_conn(pool: AsyncConnectionPool) -> AsyncIterator[AsyncConnection]:
    """Acquire a pooled connection."""

    async with pool.connection() as conn:
        yield conn
