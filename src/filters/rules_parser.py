"""Rules-based English phrase parser.

This parser is intentionally small and deterministic:
    - it only recognizes a fixed, ordered list of phrase rules,
    - every rule that matches writes its field(s); rules are independent and non-exclusive,
    - when two rules write the same field, the rule evaluated later wins,
    - unrecognized input yields an empty FilterSpec (the parser never raises).

The min/max conflict check is left to the caller (`src.filters.schema.ensure_consistent`).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.filters.normalize import normalize_text
from src.filters.schema import FilterSpec

_LONGER_THAN_RE = re.compile(r"longer than (\d+)")
_SHORTER_THAN_RE = re.compile(r"shorter than (\d+)")
_LETTER_RE = re.compile(r"letter ([a-z])")


@dataclass(frozen=True)
class PhraseRule:
    """A named rule mapping a normalized query to zero or more filter fields."""

    name: str
    apply: Callable[[str], dict[str, Any]]


@dataclass(frozen=True)
class NaturalLanguageParse:
    """Parsed filters plus the names of the rules that fired, in evaluation order."""

    filters: FilterSpec
    matched_rules: tuple[str, ...]


def _contains_any(*phrases: str) -> Callable[[str], bool]:
    return lambda text: any(phrase in text for phrase in phrases)


def _when(predicate: Callable[[str], bool], **fields: Any) -> Callable[[str], dict[str, Any]]:
    def apply(text: str) -> dict[str, Any]:
        return dict(fields) if predicate(text) else {}

    return apply


def _integer_bound(
        pattern: re.Pattern[str], field: str, offset: int
) -> Callable[[str], dict[str, Any]]:
    # "longer than N" / "shorter than N" are strict; bounds in FilterSpec are inclusive.
    def apply(text: str) -> dict[str, Any]:
        match = pattern.search(text)
        if not match:
            return {}
        try:
            bound = int(match.group(1))
        except ValueError:
            # Beyond the interpreter's int-from-string digit limit; the rule does not fire.
            return {}
        return {field: bound + offset}

    return apply


def _letter(text: str) -> dict[str, Any]:
    match = _LETTER_RE.search(text)
    if not match:
        return {}
    return {"contains_character": match.group(1)}


# Order is the tie-break: "two word" overrides "single word", "first vowel" overrides "letter X".
RULES: tuple[PhraseRule, ...] = (
    PhraseRule("palindrome", _when(_contains_any("palindrome", "palindromic"), is_palindrome=True)),
    PhraseRule("single_word", _when(_contains_any("single word"), word_count=1)),
    PhraseRule("two_word", _when(_contains_any("two word"), word_count=2)),
    PhraseRule("longer_than", _integer_bound(_LONGER_THAN_RE, "min_length", 1)),
    PhraseRule("shorter_than", _integer_bound(_SHORTER_THAN_RE, "max_length", -1)),
    PhraseRule("letter", _letter),
    PhraseRule("first_vowel", _when(_contains_any("first vowel"), contains_character="a")),
)


def parse_natural_language_with_rules(query: str) -> NaturalLanguageParse:
    """Parse a phrase into a FilterSpec and report which rules matched."""

    text = normalize_text(query)
    fields: dict[str, Any] = {}
    matched: list[str] = []

    for rule in RULES:
        updates = rule.apply(text)
        if not updates:
            continue
        fields.update(updates)
        matched.append(rule.name)

    return NaturalLanguageParse(filters=FilterSpec(**fields), matched_rules=tuple(matched))


def parse_natural_language(query: str) -> FilterSpec:
    """Parse a phrase into a FilterSpec (convenience wrapper)."""

    return parse_natural_language_with_rules(query).filters
