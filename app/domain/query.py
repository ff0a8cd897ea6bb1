"""Sorting, pagination and defaults for the sales listing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.domain.errors import InvalidQueryError
from app.domain.filters import FilterCriteria

# Secondary sort key applied after every ordering so pages never overlap.
TIE_BREAK_FIELD = "transaction_id"

# Largest offset a 64-bit SQL integer parameter can carry.
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class Ordering:
    field: str
    descending: bool


class SortKey(str, Enum):
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    QUANTITY_DESC = "quantity-desc"
    QUANTITY_ASC = "quantity-asc"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"

    @property
    def ordering(self) -> Ordering:
        return _ORDERINGS[self]

    @classmethod
    def resolve(cls, value: Optional[str], default: SortKey) -> SortKey:
        """Unknown or missing values fall back to ``default``."""
        if not value:
            return default
        try:
            return cls(value.strip())
        except ValueError:
            return default


_ORDERINGS = {
    SortKey.DATE_DESC: Ordering("date", descending=True),
    SortKey.DATE_ASC: Ordering("date", descending=False),
    SortKey.QUANTITY_DESC: Ordering("quantity", descending=True),
    SortKey.QUANTITY_ASC: Ordering("quantity", descending=False),
    SortKey.NAME_ASC: Ordering("customer_name", descending=False),
    SortKey.NAME_DESC: Ordering("customer_name", descending=True),
}


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    def __post_init__(self):
        if self.page < 1:
            raise InvalidQueryError("page must be >= 1")
        if self.limit < 1:
            raise InvalidQueryError("limit must be >= 1")
        if self.offset > MAX_OFFSET:
            raise InvalidQueryError("page is out of range")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class QueryDefaults:
    """Values used when the caller omits sort or pagination parameters."""

    sort_by: SortKey = SortKey.DATE_DESC
    page: int = 1
    limit: int = 10
    max_limit: int = 100

    @classmethod
    def from_settings(cls, settings) -> QueryDefaults:
        return cls(
            sort_by=SortKey.resolve(settings.DEFAULT_SORT, SortKey.DATE_DESC),
            page=settings.DEFAULT_PAGE,
            limit=settings.DEFAULT_PAGE_SIZE,
            max_limit=settings.MAX_PAGE_SIZE,
        )


def _parse_positive_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or not str(raw).strip():
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise InvalidQueryError(f"{name} must be a positive integer") from None
    if value < 1:
        raise InvalidQueryError(f"{name} must be a positive integer")
    return value


@dataclass(frozen=True)
class SalesQuery:
    criteria: FilterCriteria
    sort_by: SortKey
    page: PageRequest

    @classmethod
    def from_params(
        cls,
        criteria: FilterCriteria,
        sort_by: Optional[str],
        page: Optional[str],
        limit: Optional[str],
        defaults: QueryDefaults,
    ) -> SalesQuery:
        page_number = _parse_positive_int("page", page, defaults.page)
        page_size = _parse_positive_int("limit", limit, defaults.limit)
        if page_size > defaults.max_limit:
            raise InvalidQueryError(f"limit must be <= {defaults.max_limit}")
        return cls(
            criteria=criteria,
            sort_by=SortKey.resolve(sort_by, defaults.sort_by),
            page=PageRequest(page=page_number, limit=page_size),
        )
