"""FilterSpec schema (Pydantic model).

This schema is the contract between the filter parsers (structured/natural-language) and the
deterministic SQL builder. Each field is an independent, optional predicate; populated predicates
are combined with logical AND.

The min/max ordering invariant is not a model validator: natural-language parsing is total and may
produce a contradictory spec, which callers reject with `FilterConflictError` via
`ensure_consistent`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FilterConflictError(ValueError):
    """Raised when a field-wise valid filter set is jointly unsatisfiable."""

    def __init__(self, message: str = "Query parsed but resulted in conflicting filters") -> None:
        super().__init__(message)


class FilterSpec(BaseModel):
    """A normalized set of optional predicates over stored strings."""

    model_config = ConfigDict(extra="forbid")

    is_palindrome: bool | None = None
    min_length: int | None = None
    max_length: int | None = None
    word_count: int | None = None
    contains_character: str | None = Field(default=None, min_length=1, max_length=1)

    def is_empty(self) -> bool:
        """Whether no predicate is populated (the spec matches every record)."""

        return not self.applied()

    def applied(self) -> dict[str, Any]:
        """Return only the populated predicates, keyed by field name."""

        return self.model_dump(exclude_none=True)

    def has_conflict(self) -> bool:
        """Whether both length bounds are set and `min_length > max_length`."""

        return (
                self.min_length is not None
                and self.max_length is not None
                and self.min_length > self.max_length
        )


def ensure_consistent(spec: FilterSpec) -> FilterSpec:
    """Return `spec` unchanged if it is satisfiable.

    Raises:
        FilterConflictError: If `min_length > max_length`.
    """

    if spec.has_conflict():
        raise FilterConflictError()
    return spec
