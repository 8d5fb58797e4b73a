"""Allowlisted SQL identifiers.

All column names and operators referenced in generated SQL must come from these mappings; no
user-provided identifier should ever be interpolated into SQL.
"""

from __future__ import annotations

STRINGS_TABLE = "strings"

# FilterSpec field -> (column, operator). `contains_character` is handled separately.
PREDICATE_COLUMNS: dict[str, tuple[str, str]] = {
    "is_palindrome": ("is_palindrome", "="),
    "min_length": ("length", ">="),
    "max_length": ("length", "<="),
    "word_count": ("word_count", "="),
}

RECORD_COLUMNS: tuple[str, ...] = (
    "id",
    "value",
    "length",
    "is_palindrome",
    "unique_characters",
    "word_count",
    "character_frequency",
    "created_at",
)
