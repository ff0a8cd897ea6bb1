from __future__ import annotations

import pytest

from app.domain.errors import InvalidQueryError
from app.domain.filters import FilterCriteria
from app.domain.query import Ordering, PageRequest, QueryDefaults, SalesQuery, SortKey


@pytest.mark.parametrize(
    "key, ordering",
    [
        ("date-desc", Ordering("date", True)),
        ("date-asc", Ordering("date", False)),
        ("quantity-desc", Ordering("quantity", True)),
        ("quantity-asc", Ordering("quantity", False)),
        ("name-asc", Ordering("customer_name", False)),
        ("name-desc", Ordering("customer_name", True)),
    ],
)
def test_sort_keys_resolve_to_orderings(key, ordering):
    assert SortKey.resolve(key, SortKey.DATE_DESC).ordering == ordering


@pytest.mark.parametrize("value", [None, "", "price-desc", "DATE-DESC"])
def test_unknown_sort_key_falls_back_to_default(value):
    assert SortKey.resolve(value, SortKey.DATE_DESC) is SortKey.DATE_DESC


def test_page_offset():
    assert PageRequest(page=1, limit=10).offset == 0
    assert PageRequest(page=3, limit=25).offset == 50


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (-2, 10)])
def test_page_request_rejects_non_positive(page, limit):
    with pytest.raises(InvalidQueryError):
        PageRequest(page=page, limit=limit)


def test_defaults_apply_when_params_missing():
    query = SalesQuery.from_params(FilterCriteria(), None, None, None, QueryDefaults())
    assert query.sort_by is SortKey.DATE_DESC
    assert query.page == PageRequest(page=1, limit=10)


def test_explicit_params_override_defaults():
    defaults = QueryDefaults(sort_by=SortKey.NAME_ASC, page=1, limit=20, max_limit=50)
    query = SalesQuery.from_params(FilterCriteria(), "quantity-asc", "2", "50", defaults)
    assert query.sort_by is SortKey.QUANTITY_ASC
    assert query.page.offset == 50


@pytest.mark.parametrize(
    "page, limit",
    [
        ("0", None),
        ("abc", None),
        (None, "-5"),
        (None, "ten"),
        (None, "101"),
        ("99999999999999999999", "10"),
    ],
)
def test_bad_pagination_is_rejected(page, limit):
    with pytest.raises(InvalidQueryError):
        SalesQuery.from_params(FilterCriteria(), None, page, limit, QueryDefaults())


def test_defaults_from_settings():
    class _Settings:
        DEFAULT_SORT = "name-desc"
        DEFAULT_PAGE = 1
        DEFAULT_PAGE_SIZE = 25
        MAX_PAGE_SIZE = 200

    defaults = QueryDefaults.from_settings(_Settings())
    assert defaults == QueryDefaults(SortKey.NAME_DESC, 1, 25, 200)


def test_page_offset_must_fit_a_sql_integer():
    last = 2**63 // 10
    assert PageRequest(page=last, limit=10).offset == (last - 1) * 10
    with pytest.raises(InvalidQueryError):
        PageRequest(page=last + 2, limit=10)
