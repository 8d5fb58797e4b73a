"""Tests for the string workflows, with the repository replaced by an in-memory store."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import pytest

from src.analysis.analyzer import Properties, content_hash
from src.filters.schema import FilterConflictError, FilterSpec
from src.filters.structured import FilterFieldError
from src.strings.schema import StringRecord
from src.strings.service import (
    InvalidStringValueError,
    StringAlreadyExistsError,
    StringNotFoundError,
    UnparseableQueryError,
    create_string,
    delete_string,
    filter_by_natural_language,
    get_string,
    list_strings,
)


def _matches(record: StringRecord, spec: FilterSpec) -> bool:
    props = record.properties
    if spec.is_palindrome is not None and props.is_palindrome != spec.is_palindrome:
        return False
    if spec.min_length is not None and props.length < spec.min_length:
        return False
    if spec.max_length is not None and props.length > spec.max_length:
        return False
    if spec.word_count is not None and props.word_count != spec.word_count:
        return False
    if (
            spec.contains_character is not None
            and spec.contains_character.lower() not in record.value.lower()
    ):
        return False
    return True


class _MemoryRepository:
    def __init__(self) -> None:
        self.records: dict[str, StringRecord] = {}

    async def insert_if_absent(
            self, _conn: Any, value: str, properties: Properties
    ) -> StringRecord | None:
        if properties.content_hash in self.records:
            return None
        record = StringRecord(
            id=properties.content_hash,
            value=value,
            properties=properties,
            created_at=datetime.now(timezone.utc),
        )
        self.records[record.id] = record
        return record

    async def get_by_id(self, _conn: Any, record_id: str) -> StringRecord | None:
        return self.records.get(record_id)

    async def find_matching(self, _conn: Any, spec: FilterSpec) -> list[StringRecord]:
        return [r for r in self.records.values() if _matches(r, spec)]

    async def delete_by_id(self, _conn: Any, record_id: str) -> bool:
        return self.records.pop(record_id, None) is not None


@pytest.fixture
def repo(monkeypatch: pytest.MonkeyPatch) -> _MemoryRepository:
    memory = _MemoryRepository()

    @asynccontextmanager
    async def _fake_get_conn(_pool: Any):
        yield object()

    monkeypatch.setattr("src.strings.service.get_conn", _fake_get_conn)
    for name in ("insert_if_absent", "get_by_id", "find_matching", "delete_by_id"):
        monkeypatch.setattr(f"src.db.repository.{name}", getattr(memory, name))
    return memory


_POOL: Any = object()


@pytest.mark.asyncio
async def test_create_returns_record_keyed_by_hash(repo: _MemoryRepository) -> None:
    record = await create_string(_POOL, "biscuits")

    assert record.id == content_hash("biscuits")
    assert record.value == "biscuits"
    assert record.properties.length == 8
    assert record.id in repo.records


@pytest.mark.asyncio
async def test_create_rejects_duplicates(repo: _MemoryRepository) -> None:
    await create_string(_POOL, "hello")
    with pytest.raises(StringAlreadyExistsError):
        await create_string(_POOL, "hello")


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["", "nul\x00char", "lone\ud800surrogate"])
async def test_create_rejects_unstorable_values(repo: _MemoryRepository, value: str) -> None:
    with pytest.raises(InvalidStringValueError):
        await create_string(_POOL, value)
    assert repo.records == {}


@pytest.mark.asyncio
async def test_whitespace_only_value_is_stored(repo: _MemoryRepository) -> None:
    record = await create_string(_POOL, "   ")
    assert record.properties.word_count == 0


@pytest.mark.asyncio
async def test_get_and_delete(repo: _MemoryRepository) -> None:
    await create_string(_POOL, "food")

    record = await get_string(_POOL, "food")
    assert record.value == "food"

    await delete_string(_POOL, "food")
    with pytest.raises(StringNotFoundError):
        await get_string(_POOL, "food")
    with pytest.raises(StringNotFoundError):
        await delete_string(_POOL, "food")


@pytest.mark.asyncio
async def test_list_with_structured_filters(repo: _MemoryRepository) -> None:
    for value in ("madam", "hello", "hello world", "averylongword"):
        await create_string(_POOL, value)

    everything = await list_strings(_POOL, {})
    assert everything.count == 4
    assert everything.filters_applied == {}

    palindromes = await list_strings(_POOL, {"is_palindrome": "true"})
    assert [r.value for r in palindromes.data] == ["madam"]
    assert palindromes.filters_applied == {"is_palindrome": True}

    long_words = await list_strings(_POOL, {"min_length": "10", "word_count": "1"})
    assert [r.value for r in long_words.data] == ["averylongword"]

    with_w = await list_strings(_POOL, {"contains_character": "W"})
    assert sorted(r.value for r in with_w.data) == ["averylongword", "hello world"]


@pytest.mark.asyncio
async def test_list_propagates_filter_errors(repo: _MemoryRepository) -> None:
    with pytest.raises(FilterFieldError):
        await list_strings(_POOL, {"min_length": "abc"})
    with pytest.raises(FilterConflictError):
        await list_strings(_POOL, {"min_length": "10", "max_length": "5"})


@pytest.mark.asyncio
async def test_natural_language_filter(repo: _MemoryRepository) -> None:
    for value in ("madam", "racecar", "hello", "a nut for a jar of tuna"):
        await create_string(_POOL, value)

    result = await filter_by_natural_language(_POOL, "all single word palindromic strings")

    assert sorted(r.value for r in result.data) == ["madam", "racecar"]
    assert result.count == 2
    assert result.interpreted_query.original == "all single word palindromic strings"
    assert result.interpreted_query.parsed_filters == {"is_palindrome": True, "word_count": 1}


@pytest.mark.asyncio
async def test_natural_language_without_matches_runs_unfiltered(repo: _MemoryRepository) -> None:
    await create_string(_POOL, "hello")

    result = await filter_by_natural_language(_POOL, "show me everything")

    assert result.count == 1
    assert result.interpreted_query.parsed_filters == {}


@pytest.mark.asyncio
async def test_natural_language_conflict(repo: _MemoryRepository) -> None:
    with pytest.raises(FilterConflictError):
        await filter_by_natural_language(_POOL, "longer than 10 and shorter than 5")


@pytest.mark.asyncio
async def test_blank_natural_language_query(repo: _MemoryRepository) -> None:
    with pytest.raises(UnparseableQueryError):
        await filter_by_natural_language(_POOL, "   ")
