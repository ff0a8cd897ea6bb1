"""Sales listing business logic."""

from __future__ import annotations

from app.core.logging import api_logger
from app.domain.errors import SaleNotFoundError
from app.domain.models import FilterOptions, SaleRecord, SalesPage
from app.domain.query import QueryDefaults, SalesQuery
from app.repositories.protocols import SalesRepositoryProtocol
from app.repositories.sales_repository import SqlSalesRepository


class SalesService:
    """Service for the sales listing, filter options and single-record lookup."""

    def __init__(
        self,
        repository: SalesRepositoryProtocol | None = None,
        defaults: QueryDefaults | None = None,
    ):
        self.repository = repository or SqlSalesRepository()
        self.defaults = defaults or QueryDefaults()

    def list_sales(self, query: SalesQuery) -> SalesPage:
        """Run a listing query; summary and total cover every match, not just the page."""
        predicate = query.criteria.to_predicate()
        result = self.repository.search(
            predicate,
            query.sort_by.ordering,
            offset=query.page.offset,
            limit=query.page.limit,
        )
        api_logger.debug(
            "Sales listing",
            clauses=len(predicate.clauses),
            sort_by=query.sort_by.value,
            page=query.page.page,
            total=result.total,
        )
        return SalesPage(
            records=result.records,
            total=result.total,
            page=query.page.page,
            limit=query.page.limit,
            summary=result.summary,
        )

    def get_sale(self, transaction_id: int) -> SaleRecord:
        record = self.repository.get_by_id(transaction_id)
        if record is None:
            raise SaleNotFoundError(transaction_id)
        return record

    def get_filter_options(self) -> FilterOptions:
        return FilterOptions(
            customer_regions=self.repository.distinct_values("customer_region"),
            genders=self.repository.distinct_values("gender"),
            product_categories=self.repository.distinct_values("product_category"),
            payment_methods=self.repository.distinct_values("payment_method"),
            tags=self.repository.distinct_values("tags"),
        )
