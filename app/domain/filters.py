"""
Filter criteria for the sales listing.

Multi-select values arrive comma-joined at the HTTP boundary and are split
into frozensets here; from this point inward nothing deals with strings of
joined values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from app.domain.errors import InvalidQueryError
from app.domain.predicates import Clause, Contains, InSet, Predicate, Range

SEARCH_FIELDS = ("customer_name", "phone_number")
MAX_AGE = 150


def split_multi(raw: Optional[str]) -> frozenset[str]:
    """Split a comma-joined value list, trimming blanks."""
    if not raw:
        return frozenset()
    return frozenset(v.strip() for v in raw.split(",") if v.strip())


def parse_age(name: str, raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        raise InvalidQueryError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise InvalidQueryError(f"{name} must not be negative")
    if value > MAX_AGE:
        raise InvalidQueryError(f"{name} must be <= {MAX_AGE}")
    return value


def parse_date(name: str, raw: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or date-time into a naive UTC datetime.

    Date-only values mean midnight; no end-of-day extension is applied.
    """
    if raw is None or not raw.strip():
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        raise InvalidQueryError(f"{name} is not a valid ISO-8601 date: {raw!r}") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass(frozen=True)
class FilterCriteria:
    """Optional, independent constraints; empty fields constrain nothing."""

    search: Optional[str] = None
    regions: frozenset[str] = frozenset()
    genders: frozenset[str] = frozenset()
    categories: frozenset[str] = frozenset()
    tags: frozenset[str] = frozenset()
    payment_methods: frozenset[str] = frozenset()
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def __post_init__(self):
        if self.min_age is not None and self.max_age is not None and self.min_age > self.max_age:
            raise InvalidQueryError("minAge must not be greater than maxAge")
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise InvalidQueryError("startDate must not be after endDate")

    @classmethod
    def from_query_params(
        cls,
        *,
        search: Optional[str] = None,
        customer_region: Optional[str] = None,
        gender: Optional[str] = None,
        product_category: Optional[str] = None,
        tags: Optional[str] = None,
        payment_method: Optional[str] = None,
        min_age: Optional[str] = None,
        max_age: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> FilterCriteria:
        """Build criteria from raw transport values, rejecting malformed ones."""
        return cls(
            search=search.strip() if search and search.strip() else None,
            regions=split_multi(customer_region),
            genders=split_multi(gender),
            categories=split_multi(product_category),
            tags=split_multi(tags),
            payment_methods=split_multi(payment_method),
            min_age=parse_age("minAge", min_age),
            max_age=parse_age("maxAge", max_age),
            start_date=parse_date("startDate", start_date),
            end_date=parse_date("endDate", end_date),
        )

    def to_predicate(self) -> Predicate:
        clauses: list[Clause] = []

        if self.search:
            clauses.append(Contains(SEARCH_FIELDS, self.search))

        for field_name, values in (
            ("customer_region", self.regions),
            ("gender", self.genders),
            ("product_category", self.categories),
            ("tags", self.tags),
            ("payment_method", self.payment_methods),
        ):
            if values:
                clauses.append(InSet(field_name, values))

        if self.min_age is not None or self.max_age is not None:
            clauses.append(Range("age", self.min_age, self.max_age))

        if self.start_date is not None or self.end_date is not None:
            clauses.append(Range("date", self.start_date, self.end_date))

        return Predicate(tuple(clauses))
