"""Text normalization for deterministic phrase matching."""

from __future__ import annotations


def normalize_text(text: str) -> str:
    """Normalize a natural-language query for rules-based parsing.

    Normalization is only lower-casing. Whitespace and punctuation are kept as-is, so the fixed
    phrases must appear exactly (e.g. "longer than 5" with single spaces).
    """

    return (text or "").lower()
