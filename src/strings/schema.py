"""Stored record and workflow result models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.analysis.analyzer import Properties


class StringRecord(BaseModel):
    """A stored string keyed by its content hash."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    value: str
    properties: Properties
    created_at: datetime


class StringListResult(BaseModel):
    """Result of a structured listing."""

    model_config = ConfigDict(extra="forbid")

    data: list[StringRecord]
    count: int
    filters_applied: dict[str, Any] = Field(default_factory=dict)


class InterpretedQuery(BaseModel):
    """The natural-language query as received and the filters derived from it."""

    model_config = ConfigDict(extra="forbid")

    original: str
    parsed_filters: dict[str, Any] = Field(default_factory=dict)


class NaturalLanguageResult(BaseModel):
    """Result of a natural-language filter."""

    model_config = ConfigDict(extra="forbid")

    data: list[StringRecord]
    count: int
    interpreted_query: InterpretedQuery
