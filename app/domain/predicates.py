"""
Typed predicate clauses over ``SaleRecord`` attributes.

A ``Predicate`` is a conjunction of clauses. Clauses only name record
attributes; each store decides how to evaluate them (the in-memory
repository calls ``matches``, the SQL repository compiles them).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from app.domain.models import SaleRecord


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any

    def matches(self, record: SaleRecord) -> bool:
        return getattr(record, self.field) == self.value


@dataclass(frozen=True)
class InSet:
    """Membership test; collection-valued attributes match on any element."""

    field: str
    values: frozenset

    def matches(self, record: SaleRecord) -> bool:
        actual = getattr(record, self.field)
        if isinstance(actual, (tuple, list, set, frozenset)):
            return not self.values.isdisjoint(actual)
        return actual in self.values


@dataclass(frozen=True)
class Range:
    """Inclusive bounds, either of which may be open."""

    field: str
    lower: Optional[Any] = None
    upper: Optional[Any] = None

    def __post_init__(self):
        if self.lower is None and self.upper is None:
            raise ValueError(f"Range on {self.field!r} needs at least one bound")

    def matches(self, record: SaleRecord) -> bool:
        actual = getattr(record, self.field)
        if self.lower is not None and actual < self.lower:
            return False
        if self.upper is not None and actual > self.upper:
            return False
        return True


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match on any of ``fields``."""

    fields: tuple[str, ...]
    needle: str

    def matches(self, record: SaleRecord) -> bool:
        needle = self.needle.lower()
        return any(needle in str(getattr(record, f)).lower() for f in self.fields)


Clause = Union[Equals, InSet, Range, Contains]


@dataclass(frozen=True)
class Predicate:
    clauses: tuple[Clause, ...] = ()

    def matches(self, record: SaleRecord) -> bool:
        return all(clause.matches(record) for clause in self.clauses)
