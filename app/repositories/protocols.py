"""Repository protocol definitions used by domain services."""

from __future__ import annotations

from typing import Optional, Protocol

from app.domain.models import SaleRecord, SearchResult
from app.domain.predicates import Predicate
from app.domain.query import Ordering


class SalesRepositoryProtocol(Protocol):
    """Contract for sales data access.

    ``search`` must return a page, a total and a summary that all describe
    the same match set; ties in ``ordering`` are broken by transaction id.
    """

    def search(
        self, predicate: Predicate, ordering: Ordering, offset: int, limit: int
    ) -> SearchResult: ...

    def get_by_id(self, transaction_id: int) -> Optional[SaleRecord]: ...

    def distinct_values(self, field: str) -> list[str]: ...
