"""Shared Postgres connection helpers.

`created_at` timestamps are rendered as UTC, so every DB session (sync or pooled) runs the same
session setup statements.
"""

from __future__ import annotations

import os

import psycopg

SESSION_SETUP_SQL: tuple[str, ...] = (
    "SET TIME ZONE 'UTC'",
    "SET application_name = 'string-analyzer'",
)


def require_database_url() -> str:
    """Read `DATABASE_URL` from the environment or raise a clear error."""

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL is required (set it in .env or environment)")
    return database_url


def connect_utc(database_url: str, *, autocommit: bool = False) -> psycopg.Connection:
    """Open a synchronous connection (used by migrations and tests) with the session set up."""

    conn = psycopg.connect(database_url, autocommit=autocommit)
    for statement in SESSION_SETUP_SQL:
        conn.execute(statement, prepare=False)
    return conn
