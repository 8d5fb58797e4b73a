"""String workflows: create, get, list, natural-language filter, delete.

Each workflow validates its input, runs the pure analysis/filter layer, and only then touches the
repository. Errors are raised as `StringServiceError` subclasses (or the filter layer's
`FilterFieldError` / `FilterConflictError`); mapping them to user-facing replies is the transport's
job.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from psycopg_pool import AsyncConnectionPool

from src.analysis.analyzer import analyze, content_hash
from src.db import repository
from src.db.pool import get_conn
from src.filters.rules_parser import parse_natural_language_with_rules
from src.filters.schema import ensure_consistent
from src.filters.structured import parse_structured
from src.strings.schema import (
    InterpretedQuery,
    NaturalLanguageResult,
    StringListResult,
    StringRecord,
)

logger = logging.getLogger(__name__)


class StringServiceError(Exception):
    """Base class for workflow-level rejections."""


class InvalidStringValueError(StringServiceError):
    """Raised when a value cannot be stored."""


class StringAlreadyExistsError(StringServiceError):
    """Raised when a value with the same content hash is already stored."""

    def __init__(self) -> None:
        super().__init__("String already exists in the system")


class StringNotFoundError(StringServiceError):
    """Raised when no record matches the content hash of the requested value."""

    def __init__(self) -> None:
        super().__init__("String does not exist in the system")


class UnparseableQueryError(StringServiceError):
    """Raised when a natural-language query is missing or blank."""

    def __init__(self) -> None:
        super().__init__("Unable to parse natural language query")


def _validate_value(value: str) -> None:
    if not value:
        raise InvalidStringValueError("value cannot be empty")
    # Postgres TEXT cannot hold NUL characters.
    if "\x00" in value:
        raise InvalidStringValueError("value cannot contain NUL characters")
    # Lone surrogates cannot be encoded as UTF-8 for the database.
    if any("\ud800" <= ch <= "\udfff" for ch in value):
        raise InvalidStringValueError("value cannot contain unpaired surrogate characters")


async def create_string(pool: AsyncConnectionPool, value: str) -> StringRecord:
    """Analyze and store `value`.

    Raises:
        InvalidStringValueError: If the value is empty or contains NUL or unpaired surrogate
            characters.
        StringAlreadyExistsError: If the same value is already stored.
    """

    _validate_value(value)
    properties = analyze(value)

    async with get_conn(pool) as conn:
        record = await repository.insert_if_absent(conn, value, properties)

    if record is None:
        raise StringAlreadyExistsError()

    logger.info("created id=%s length=%d", record.id, properties.length)
    return record


async def get_string(pool: AsyncConnectionPool, value: str) -> StringRecord:
    """Fetch the stored record for `value`.

    Raises:
        StringNotFoundError: If `value` was never stored.
    """

    async with get_conn(pool) as conn:
        record = await repository.get_by_id(conn, content_hash(value))

    if record is None:
        raise StringNotFoundError()
    return record


async def list_strings(pool: AsyncConnectionPool, params: Mapping[str, str]) -> StringListResult:
    """List stored strings matching structured query parameters.

    Raises:
        FilterFieldError: If a recognized parameter is malformed.
        FilterConflictError: If `min_length > max_length`.
    """

    spec = parse_structured(params)

    async with get_conn(pool) as conn:
        records = await repository.find_matching(conn, spec)

    return StringListResult(data=records, count=len(records), filters_applied=spec.applied())


async def filter_by_natural_language(
        pool: AsyncConnectionPool, query: str
) -> NaturalLanguageResult:
    """List stored strings matching a natural-language phrase.

    A phrase in which no rule is recognized runs unfiltered.

    Raises:
        UnparseableQueryError: If the query is blank.
        FilterConflictError: If the phrase implies `min_length > max_length`.
    """

    if not query or not query.strip():
        raise UnparseableQueryError()

    parsed = parse_natural_language_with_rules(query)
    spec = ensure_consistent(parsed.filters)

    if not parsed.matched_rules:
        logger.info("no phrase rule matched; running unfiltered")

    async with get_conn(pool) as conn:
        records = await repository.find_matching(conn, spec)

    return NaturalLanguageResult(
        data=records,
        count=len(records),
        interpreted_query=InterpretedQuery(original=query, parsed_filters=spec.applied()),
    )


async def delete_string(pool: AsyncConnectionPool, value: str) -> None:
    """Delete the stored record for `value`.

    Raises:
        StringNotFoundError: If `value` was never stored.
    """

    async with get_conn(pool) as conn:
        deleted = await repository.delete_by_id(conn, content_hash(value))

    if not deleted:
        raise StringNotFoundError()

    logger.info("deleted id=%s", content_hash(value))
