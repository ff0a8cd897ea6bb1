"""
In-memory sales repository.
Evaluates predicates in Python; used as the test double for the SQL store.
"""

from __future__ import annotations

from typing import Iterable, Optional

from app.domain.models import SaleRecord, SalesSummary, SearchResult
from app.domain.predicates import Equals, Predicate
from app.domain.query import TIE_BREAK_FIELD, Ordering


class InMemorySalesRepository:
    def __init__(self, records: Iterable[SaleRecord] = ()):
        self._records = list(records)

    def search(
        self, predicate: Predicate, ordering: Ordering, offset: int, limit: int
    ) -> SearchResult:
        matched = [r for r in self._records if predicate.matches(r)]

        # Two stable sorts: tie-break first, then the requested key.
        matched.sort(key=lambda r: getattr(r, TIE_BREAK_FIELD))
        matched.sort(key=lambda r: getattr(r, ordering.field), reverse=ordering.descending)

        return SearchResult(
            records=matched[offset : offset + limit],
            total=len(matched),
            summary=SalesSummary.of(matched),
        )

    def get_by_id(self, transaction_id: int) -> Optional[SaleRecord]:
        clause = Equals("transaction_id", transaction_id)
        return next((r for r in self._records if clause.matches(r)), None)

    def distinct_values(self, field: str) -> list[str]:
        values: set[str] = set()
        for record in self._records:
            value = getattr(record, field)
            if isinstance(value, tuple):
                values.update(value)
            else:
                values.add(value)
        return sorted(values)
