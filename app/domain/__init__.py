"""
Domain models, filter criteria and predicates.
Independent of storage and transport.
"""

from .errors import InvalidQueryError, SaleNotFoundError, SalesQueryError, StoreUnavailableError
from .filters import FilterCriteria
from .models import FilterOptions, SaleRecord, SalesPage, SalesSummary, SearchResult
from .predicates import Contains, Equals, InSet, Predicate, Range
from .query import Ordering, PageRequest, QueryDefaults, SalesQuery, SortKey

__all__ = [
    "Contains",
    "Equals",
    "FilterCriteria",
    "FilterOptions",
    "InSet",
    "InvalidQueryError",
    "Ordering",
    "PageRequest",
    "Predicate",
    "QueryDefaults",
    "Range",
    "SaleNotFoundError",
    "SaleRecord",
    "SalesPage",
    "SalesQuery",
    "SalesQueryError",
    "SalesSummary",
    "SearchResult",
    "SortKey",
    "StoreUnavailableError",
]
