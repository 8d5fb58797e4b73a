"""Deterministic SQL builder.

The builder converts a validated `FilterSpec` into a parameterized SQL query. Identifiers (columns,
tables, operators) are strictly allowlisted; only values become bound parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from psycopg.types.json import Jsonb

from src.analysis.analyzer import Properties
from src.filters.schema import FilterSpec
from src.sql.columns import PREDICATE_COLUMNS, RECORD_COLUMNS, STRINGS_TABLE


class SQLBuilderError(ValueError):
    """Raised when a FilterSpec cannot be converted into deterministic SQL."""


@dataclass(frozen=True)
class BuiltQuery:
    """A parameterized SQL query ready for execution."""

    sql: str
    params: tuple[Any, ...]


def _select_list(alias: str) -> str:
    return ", ".join(f"{alias}.{column}" for column in RECORD_COLUMNS)


def _where_and(clauses: list[str]) -> str:
    if not clauses:
        return ""
    return "WHERE " + " AND ".join(clauses)


def _build_predicates(spec: FilterSpec, *, table_alias: str) -> tuple[list[str], list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []

    for field, (column, operator) in PREDICATE_COLUMNS.items():
        value = getattr(spec, field)
        if value is None:
            continue
        clauses.append(f"{table_alias}.{column} {operator} %s")
        params.append(value)

    if spec.contains_character is not None:
        # Case-insensitive containment without LIKE/regex metacharacter escaping.
        clauses.append(f"strpos(lower({table_alias}.value), lower(%s)) > 0")
        params.append(spec.contains_character)

    return clauses, params


def build_find_query(spec: FilterSpec) -> BuiltQuery:
    """Build the record-selection query for a consistent FilterSpec.

    Raises:
        SQLBuilderError: If `min_length > max_length` (callers must run the conflict check first).
    """

    if spec.has_conflict():
        raise SQLBuilderError("min_length must be <= max_length")

    clauses, params = _build_predicates(spec, table_alias="s")
    sql = (
        f"SELECT {_select_list('s')} FROM {STRINGS_TABLE} s {_where_and(clauses)} "
        "ORDER BY s.created_at DESC, s.id"
    )
    return BuiltQuery(sql=" ".join(sql.split()), params=tuple(params))


def build_get_query(record_id: str) -> BuiltQuery:
    """Build a single-record lookup by content hash."""

    return BuiltQuery(
        sql=f"SELECT {_select_list('s')} FROM {STRINGS_TABLE} s WHERE s.id = %s",
        params=(record_id,),
    )


def build_insert_query(value: str, properties: Properties) -> BuiltQuery:
    """Build an insert-if-absent statement returning the stored row (no row on duplicate id)."""

    columns = (
        "id",
        "value",
        "length",
        "is_palindrome",
        "unique_characters",
        "word_count",
        "character_frequency",
    )
    placeholders = ", ".join(["%s"] * len(columns))
    sql = (
        f"INSERT INTO {STRINGS_TABLE} ({', '.join(columns)}) VALUES ({placeholders}) "
        f"ON CONFLICT (id) DO NOTHING RETURNING {', '.join(RECORD_COLUMNS)}"
    )
    params = (
        properties.content_hash,
        value,
        properties.length,
        properties.is_palindrome,
        properties.unique_characters,
        properties.word_count,
        Jsonb(properties.character_frequency),
    )
    return BuiltQuery(sql=sql, params=params)


def build_delete_query(record_id: str) -> BuiltQuery:
    """Build a delete-by-content-hash statement."""

    return BuiltQuery(sql=f"DELETE FROM {STRINGS_TABLE} WHERE id = %s", params=(record_id,))
