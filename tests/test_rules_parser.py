"""Tests for the deterministic rules-based phrase parser."""

from __future__ import annotations

import pytest

from src.filters.normalize import normalize_text
from src.filters.rules_parser import (
    RULES,
    parse_natural_language,
    parse_natural_language_with_rules,
)
from src.filters.schema import FilterConflictError, FilterSpec, ensure_consistent


def test_palindrome() -> None:
    assert parse_natural_language("show palindrome words") == FilterSpec(is_palindrome=True)
    assert parse_natural_language("Palindromic strings") == FilterSpec(is_palindrome=True)


def test_longer_than_is_strict() -> None:
    assert parse_natural_language("words longer than 5") == FilterSpec(min_length=6)


def test_shorter_than_is_strict() -> None:
    assert parse_natural_language("strings shorter than 5") == FilterSpec(max_length=4)


def test_single_word_palindromes() -> None:
    spec = parse_natural_language("all single word palindromic strings")
    assert spec == FilterSpec(is_palindrome=True, word_count=1)


def test_two_word_overrides_single_word() -> None:
    spec = parse_natural_language("single word or two word strings")
    assert spec.word_count == 2


def test_letter() -> None:
    spec = parse_natural_language("strings containing the letter Z")
    assert spec == FilterSpec(contains_character="z")


def test_first_vowel_overrides_letter() -> None:
    spec = parse_natural_language("strings with the letter z and the first vowel")
    assert spec.contains_character == "a"


def test_combined_rules() -> None:
    parsed = parse_natural_language_with_rules(
        "Palindromic strings longer than 2 and shorter than 10 containing the letter m"
    )
    assert parsed.filters == FilterSpec(
        is_palindrome=True,
        min_length=3,
        max_length=9,
        contains_character="m",
    )
    assert parsed.matched_rules == ("palindrome", "longer_than", "shorter_than", "letter")


@pytest.mark.parametrize("query", ["", "   ", "show me everything", "longer than many"])
def test_unrecognized_phrases_yield_empty_spec(query: str) -> None:
    parsed = parse_natural_language_with_rules(query)
    assert parsed.filters.is_empty()
    assert parsed.matched_rules == ()


def test_conflict_is_left_to_the_caller() -> None:
    spec = parse_natural_language("longer than 10 and shorter than 5")
    assert spec == FilterSpec(min_length=11, max_length=4)
    with pytest.raises(FilterConflictError):
        ensure_consistent(spec)


def test_shorter_than_zero_is_representable() -> None:
    assert parse_natural_language("shorter than 0").max_length == -1


def test_phrases_match_after_lower_casing_only() -> None:
    assert parse_natural_language("SINGLE WORD") == FilterSpec(word_count=1)
    assert parse_natural_language("longer  than 5").is_empty()
    assert normalize_text("  Longer\tThan 3 ") == "  longer\tthan 3 "


def test_oversized_numbers_do_not_fire_length_rules() -> None:
    digits = "9" * 5000
    parsed = parse_natural_language_with_rules(f"palindromes longer than {digits}")
    assert parsed.filters == FilterSpec(is_palindrome=True)
    assert parsed.matched_rules == ("palindrome",)
    assert parse_natural_language(f"shorter than {digits}").is_empty()


def test_rule_order_is_stable() -> None:
    assert [rule.name for rule in RULES] == [
        "palindrome",
        "single_word",
        "two_word",
        "longer_than",
        "shorter_than",
        "letter",
        "first_vowel",
    ]
