"""Deterministic string analyzer.

`analyze` never fails for a `str` input (including the empty string) and has no side effects. The
content hash doubles as the record identifier, so it must only depend on the value itself.
"""

from __future__ import annotations

import hashlib
from collections import Counter

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Properties(BaseModel):
    """Computed properties of a stored string (immutable once created)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    length: int = Field(ge=0)
    is_palindrome: bool
    unique_characters: int = Field(ge=0)
    word_count: int = Field(ge=0)
    content_hash: str = Field(pattern=r"^[0-9a-f]{64}$")
    character_frequency: dict[str, int]

    @model_validator(mode="after")
    def validate_frequency(self) -> Properties:
        """Validate that the frequency map agrees with `length` and `unique_characters`."""

        if len(self.character_frequency) != self.unique_characters:
            raise ValueError("unique_characters must equal the number of frequency map keys")
        if sum(self.character_frequency.values()) != self.length:
            raise ValueError("character_frequency counts must sum to length")
        return self


def content_hash(value: str) -> str:
    """Return the lowercase hex SHA-256 digest of the UTF-8 encoding of `value`.

    Lone surrogates (which cannot come from decoded UTF-8 text, but can exist in a Python `str`) are
    passed through instead of failing the encode.
    """

    return hashlib.sha256(value.encode("utf-8", errors="surrogatepass")).hexdigest()


def count_words(value: str) -> int:
    """Count whitespace-delimited tokens; `0` for an empty or all-whitespace string."""

    trimmed = value.strip()
    if not trimmed:
        return 0
    return len(trimmed.split())


def is_palindrome(value: str) -> bool:
    # Case-fold only: whitespace and punctuation are significant.
    folded = value.lower()
    return folded == folded[::-1]


def analyze(value: str) -> Properties:
    """Compute all properties of `value`."""

    frequency = dict(Counter(value))
    return Properties(
        length=len(value),
        is_palindrome=is_palindrome(value),
        unique_characters=len(frequency),
        word_count=count_words(value),
        content_hash=content_hash(value),
        character_frequency=frequency,
    )
