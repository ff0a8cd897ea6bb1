"""
Sales repository backed by SQLAlchemy.
Compiles domain predicates into SQL and runs the listing reads in one
transaction so page, total and summary describe the same rows.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import and_, func, or_, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from app.core.config import settings
from app.core.logging import db_logger
from app.domain.errors import StoreUnavailableError
from app.domain.models import SaleRecord, SalesSummary, SearchResult
from app.domain.predicates import Clause, Contains, Equals, InSet, Predicate, Range
from app.domain.query import TIE_BREAK_FIELD, Ordering
from app.infra.db import get_engine, read_transaction
from app.infra.schema import SALE_COLUMNS, sale_tags, sales

TAGS_FIELD = "tags"


def _column(field: str) -> ColumnElement:
    try:
        return sales.c[field]
    except KeyError:
        raise ValueError(f"Unknown sales field: {field}") from None


def compile_clause(clause: Clause) -> ColumnElement:
    """Translate one predicate clause into a SQL boolean expression."""
    if isinstance(clause, Equals):
        return _column(clause.field) == clause.value

    if isinstance(clause, InSet):
        values = sorted(clause.values)
        if clause.field == TAGS_FIELD:
            return (
                select(sale_tags.c.transaction_id)
                .where(
                    sale_tags.c.transaction_id == sales.c.transaction_id,
                    sale_tags.c.tag.in_(values),
                )
                .exists()
            )
        return _column(clause.field).in_(values)

    if isinstance(clause, Range):
        column = _column(clause.field)
        bounds = []
        if clause.lower is not None:
            bounds.append(column >= clause.lower)
        if clause.upper is not None:
            bounds.append(column <= clause.upper)
        return and_(*bounds)

    if isinstance(clause, Contains):
        needle = clause.needle.lower()
        return or_(
            *(func.lower(_column(f)).contains(needle, autoescape=True) for f in clause.fields)
        )

    raise TypeError(f"Unsupported clause: {clause!r}")


def compile_predicate(predicate: Predicate) -> list[ColumnElement]:
    return [compile_clause(clause) for clause in predicate.clauses]


def _to_record(row: Mapping[str, Any], tags: Sequence[str]) -> SaleRecord:
    values = {name: row[name] for name in SALE_COLUMNS}
    for name in ("price_per_unit", "discount_percentage", "total_amount", "final_amount"):
        values[name] = Decimal(str(values[name]))
    return SaleRecord(**values, tags=tuple(sorted(tags)))


class SqlSalesRepository:
    """
    Repository for the ``sales`` / ``sale_tags`` tables.
    Wraps every SQLAlchemy failure in StoreUnavailableError.
    """

    def __init__(self, engine: Optional[Engine] = None, timeout_ms: Optional[int] = None):
        self.engine = engine or get_engine()
        self.timeout_ms = settings.DB_STATEMENT_TIMEOUT_MS if timeout_ms is None else timeout_ms

    def search(
        self, predicate: Predicate, ordering: Ordering, offset: int, limit: int
    ) -> SearchResult:
        """
        Fetch one ordered page plus count and aggregates over the full match set.

        Args:
            predicate: conjunction of clauses to match
            ordering: primary sort; transaction id ascending breaks ties
            offset: rows to skip
            limit: page size

        Returns:
            SearchResult for the page
        """
        conditions = compile_predicate(predicate)
        sort_column = _column(ordering.field)

        page_stmt = (
            select(sales)
            .where(*conditions)
            .order_by(
                sort_column.desc() if ordering.descending else sort_column.asc(),
                _column(TIE_BREAK_FIELD).asc(),
            )
            .offset(offset)
            .limit(limit)
        )
        summary_stmt = select(
            func.count().label("total"),
            func.coalesce(func.sum(sales.c.quantity), 0).label("total_units_sold"),
            func.coalesce(func.sum(sales.c.total_amount), 0).label("total_amount"),
            func.coalesce(
                func.sum(sales.c.total_amount - sales.c.final_amount), 0
            ).label("total_discount"),
        ).where(*conditions)

        try:
            with read_transaction(self.engine, self.timeout_ms) as conn:
                rows = conn.execute(page_stmt).mappings().all()
                tags = self._tags_for(conn, [row["transaction_id"] for row in rows])
                agg = conn.execute(summary_stmt).mappings().one()
        except SQLAlchemyError as exc:
            db_logger.error("Sales search failed", exc=exc, clauses=len(conditions))
            raise StoreUnavailableError("Sales store is unavailable") from exc

        return SearchResult(
            records=[_to_record(row, tags[row["transaction_id"]]) for row in rows],
            total=int(agg["total"]),
            summary=SalesSummary(
                total_units_sold=int(agg["total_units_sold"]),
                total_amount=Decimal(str(agg["total_amount"])),
                total_discount=Decimal(str(agg["total_discount"])),
            ),
        )

    def get_by_id(self, transaction_id: int) -> Optional[SaleRecord]:
        stmt = select(sales).where(compile_clause(Equals("transaction_id", transaction_id)))
        try:
            with read_transaction(self.engine, self.timeout_ms) as conn:
                row = conn.execute(stmt).mappings().first()
                if row is None:
                    return None
                tags = self._tags_for(conn, [transaction_id])
        except SQLAlchemyError as exc:
            db_logger.error("Sale lookup failed", exc=exc, transaction_id=transaction_id)
            raise StoreUnavailableError("Sales store is unavailable") from exc
        return _to_record(row, tags[transaction_id])

    def distinct_values(self, field: str) -> list[str]:
        column = sale_tags.c.tag if field == TAGS_FIELD else _column(field)
        stmt = select(column).distinct()
        try:
            with read_transaction(self.engine, self.timeout_ms) as conn:
                values = conn.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            db_logger.error("Distinct lookup failed", exc=exc, field=field)
            raise StoreUnavailableError("Sales store is unavailable") from exc
        # sorted in Python so the order does not depend on the database collation
        return sorted(v for v in values if v is not None)

    @staticmethod
    def _tags_for(conn: Connection, transaction_ids: Sequence[int]) -> dict[int, list[str]]:
        tags: dict[int, list[str]] = defaultdict(list)
        if not transaction_ids:
            return tags
        stmt = select(sale_tags.c.transaction_id, sale_tags.c.tag).where(
            sale_tags.c.transaction_id.in_(transaction_ids)
        )
        for transaction_id, tag in conn.execute(stmt):
            tags[transaction_id].append(tag)
        return tags
