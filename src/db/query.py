"""Safe DB query helpers.

These helpers never interpolate user values into SQL; all values are passed via `params`. DB errors
are not swallowed (caller decides how to handle them).
"""

from __future__ import annotations

from typing import Any, LiteralString, cast

from psycopg import AsyncConnection
from psycopg.rows import dict_row


async def fetch_all_dicts(
        conn: AsyncConnection, sql: str, params: tuple[Any, ...] = ()
) -> list[dict[str, Any]]:
    """Execute a query and return every row as a column-name keyed dict."""

    async with conn.cursor(row_factory=dict_row) as cur:
        await cur.execute(cast(LiteralString, sql), params)
        return await cur.fetchall()


async def fetch_one_dict(
        conn: AsyncConnection, sql: str, params: tuple[Any, ...] = ()
) -> dict[str, Any] | None:
    """Execute a query and return the first row as a dict, or `None` if there is no row."""

    async with conn.cursor(row_factory=dict_row) as cur:
        await cur.execute(cast(LiteralString, sql), params)
        return await cur.fetchone()


async def execute_rowcount(conn: AsyncConnection, sql: str, params: tuple[Any, ...] = ()) -> int:
    """Execute a statement and return the number of affected rows (`0` if unknown)."""

    async with conn.cursor() as cur:
        await cur.execute(cast(LiteralString, sql), params)
        return max(cur.rowcount, 0)
