"""Structured (query parameter) filter parser.

Parameters arrive as raw strings. Each recognized parameter is validated independently; the first
malformed one raises `FilterFieldError` naming it. Unknown parameters are ignored so that clients can
send extra keys without breaking.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from src.filters.schema import FilterSpec, ensure_consistent

_INTEGER_RE = re.compile(r"[+-]?\d+")

_INTEGER_FIELDS: tuple[str, ...] = ("min_length", "max_length", "word_count")


class FilterFieldError(ValueError):
    """Raised when a single query parameter fails type/shape validation."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        self.message = message or f"Invalid value for {field}"
        super().__init__(self.message)


def _parse_bool(field: str, raw: str) -> bool:
    value = raw.lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise FilterFieldError(field)


def _parse_int(field: str, raw: str) -> int:
    value = raw.strip()
    # `int()` alone would also accept "1_000" and non-ASCII digits.
    if not _INTEGER_RE.fullmatch(value) or not value.isascii():
        raise FilterFieldError(field)
    try:
        return int(value)
    except ValueError:
        raise FilterFieldError(field) from None


def _parse_character(field: str, raw: str) -> str:
    if len(raw) != 1:
        raise FilterFieldError(field, f"{field} must be a single character")
    return raw


def parse_structured(params: Mapping[str, str]) -> FilterSpec:
    """Parse raw query parameters into a consistent FilterSpec.

    Raises:
        FilterFieldError: If a recognized parameter is malformed.
        FilterConflictError: If `min_length > max_length`.
    """

    fields: dict[str, Any] = {}

    if "is_palindrome" in params:
        fields["is_palindrome"] = _parse_bool("is_palindrome", params["is_palindrome"])

    for name in _INTEGER_FIELDS:
        if name in params:
            fields[name] = _parse_int(name, params[name])

    if "contains_character" in params:
        fields["contains_character"] = _parse_character(
            "contains_character", params["contains_character"]
        )

    return ensure_consistent(FilterSpec(**fields))
