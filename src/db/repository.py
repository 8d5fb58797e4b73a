"""Content-addressed string repository.

Records are keyed by the SHA-256 content hash of their value. The primary key on `strings.id`
together with `ON CONFLICT DO NOTHING` guarantees at most one record per value, even when two
creations of the same value race each other.
"""

from __future__ import annotations

from typing import Any

from psycopg import AsyncConnection

from src.analysis.analyzer import Properties
from src.db.query import execute_rowcount, fetch_all_dicts, fetch_one_dict
from src.filters.schema import FilterSpec
from src.sql.builder import (
    build_delete_query,
    build_find_query,
    build_get_query,
    build_insert_query,
)
from src.strings.schema import StringRecord


def record_from_row(row: dict[str, Any]) -> StringRecord:
    """Convert a `strings` row (as returned by `dict_row`) into a StringRecord."""

    return StringRecord(
        id=row["id"],
        value=row["value"],
        properties=Properties(
            length=row["length"],
            is_palindrome=row["is_palindrome"],
            unique_characters=row["unique_characters"],
            word_count=row["word_count"],
            content_hash=row["id"],
            character_frequency=row["character_frequency"],
        ),
        created_at=row["created_at"],
    )


async def insert_if_absent(
        conn: AsyncConnection, value: str, properties: Properties
) -> StringRecord | None:
    """Insert a new record; return `None` if a record with the same content hash exists."""

    query = build_insert_query(value, properties)
    async with conn.transaction():
        row = await fetch_one_dict(conn, query.sql, query.params)
    if row is None:
        return None
    return record_from_row(row)


async def get_by_id(conn: AsyncConnection, record_id: str) -> StringRecord | None:
    """Fetch a single record by content hash."""

    query = build_get_query(record_id)
    async with conn.transaction():
        row = await fetch_one_dict(conn, query.sql, query.params)
    if row is None:
        return None
    return record_from_row(row)


async def find_matching(conn: AsyncConnection, spec: FilterSpec) -> list[StringRecord]:
    """Fetch every record satisfying all populated predicates of `spec`."""

    query = build_find_query(spec)
    async with conn.transaction():
        rows = await fetch_all_dicts(conn, query.sql, query.params)
    return [record_from_row(row) for row in rows]


async def delete_by_id(conn: AsyncConnection, record_id: str) -> bool:
    """Delete a record by content hash; return whether a record was deleted."""

    query = build_delete_query(record_id)
    async with conn.transaction():
        deleted = await execute_rowcount(conn, query.sql, query.params)
    return deleted > 0
