"""
Domain models for the sales records dataset.
Independent of storage and transport.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Sequence


@dataclass(frozen=True)
class SaleRecord:
    """One transaction line, immutable once loaded."""

    transaction_id: int
    date: datetime
    customer_id: str
    customer_name: str
    phone_number: str
    gender: str
    age: int
    customer_region: str
    customer_type: str
    product_id: str
    product_name: str
    brand: str
    product_category: str
    quantity: int
    price_per_unit: Decimal
    discount_percentage: Decimal
    total_amount: Decimal
    final_amount: Decimal
    payment_method: str
    order_status: str
    delivery_type: str
    store_id: str
    store_location: str
    salesperson_id: str
    employee_name: str
    tags: tuple[str, ...] = ()

    @property
    def discount(self) -> Decimal:
        """Amount taken off the pre-discount total."""
        return self.total_amount - self.final_amount


@dataclass(frozen=True)
class SalesSummary:
    """Aggregates over every record matching a query."""

    total_units_sold: int
    total_amount: Decimal
    total_discount: Decimal

    @classmethod
    def empty(cls) -> SalesSummary:
        return cls(total_units_sold=0, total_amount=Decimal(0), total_discount=Decimal(0))

    @classmethod
    def of(cls, records: Sequence[SaleRecord]) -> SalesSummary:
        return cls(
            total_units_sold=sum(r.quantity for r in records),
            total_amount=sum((r.total_amount for r in records), Decimal(0)),
            total_discount=sum((r.discount for r in records), Decimal(0)),
        )


@dataclass(frozen=True)
class SearchResult:
    """What a repository returns for one listing query."""

    records: list[SaleRecord]
    total: int
    summary: SalesSummary


@dataclass(frozen=True)
class SalesPage:
    """A page of matching records plus totals over the whole match set."""

    records: list[SaleRecord]
    total: int
    page: int
    limit: int
    summary: SalesSummary

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit)


@dataclass(frozen=True)
class FilterOptions:
    """Distinct values used to populate the dashboard filter choices."""

    customer_regions: list[str] = field(default_factory=list)
    genders: list[str] = field(default_factory=list)
    product_categories: list[str] = field(default_factory=list)
    payment_methods: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
