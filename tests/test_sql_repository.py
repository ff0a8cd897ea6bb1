from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.domain.errors import StoreUnavailableError
from app.domain.predicates import Equals, InSet, Predicate, Range
from app.domain.query import Ordering
from app.repositories.sales_repository import SqlSalesRepository, compile_clause

NEWEST_FIRST = Ordering("date", descending=True)


@pytest.fixture
def broken_repository():
    # no schema created, so every read fails
    engine = create_engine("sqlite://", poolclass=StaticPool)
    yield SqlSalesRepository(engine)
    engine.dispose()


def test_page_rows_carry_their_tags(sql_repository):
    result = sql_repository.search(Predicate(), NEWEST_FIRST, offset=0, limit=10)
    tags = {r.transaction_id: r.tags for r in result.records}
    assert tags[1] == ("casual", "organic")
    assert tags[5] == ()


def test_amounts_come_back_as_decimals(sql_repository):
    sale = sql_repository.get_by_id(3)
    assert isinstance(sale.total_amount, Decimal)
    assert sale.total_amount == Decimal("300")
    assert sale.discount == Decimal("30")


def test_search_combines_tag_and_scalar_clauses(sql_repository):
    predicate = Predicate(
        (
            InSet("tags", frozenset({"organic"})),
            Range("age", 30, None),
        )
    )
    result = sql_repository.search(predicate, NEWEST_FIRST, offset=0, limit=10)
    assert [r.transaction_id for r in result.records] == [4]
    assert result.summary.total_units_sold == 3


def test_missing_record_returns_none(sql_repository):
    assert sql_repository.get_by_id(404) is None


def test_unknown_field_is_rejected():
    with pytest.raises(ValueError):
        compile_clause(Equals("no_such_column", 1))


def test_store_failures_are_wrapped(broken_repository):
    with pytest.raises(StoreUnavailableError):
        broken_repository.search(Predicate(), NEWEST_FIRST, offset=0, limit=10)
    with pytest.raises(StoreUnavailableError):
        broken_repository.get_by_id(1)
    with pytest.raises(StoreUnavailableError):
        broken_repository.distinct_values("gender")
