from __future__ import annotations

from datetime import date

import pytest

from analytics.query import QueryValidationError, TopBottomQuery, build_query, normalize_query
from core.settings import AnalyticsDefaults

DEFAULTS = AnalyticsDefaults(metric="units", limit=500, include_zero=True)


def test_scope_filter_is_required():
    with pytest.raises(QueryValidationError, match="must provide one of"):
        build_query()


def test_blank_scope_filter_counts_as_missing():
    with pytest.raises(QueryValidationError, match="must provide one of"):
        build_query(product_type_name="  ", product_type_no="")


def test_both_scope_filters_are_rejected():
    with pytest.raises(QueryValidationError, match="only one of"):
        build_query(product_type_name="Sweater", product_type_no="253")


@pytest.mark.parametrize("limit", ["0", "10001", "-5"])
def test_limit_out_of_range(limit):
    with pytest.raises(QueryValidationError, match="limit must be between 1 and 10000"):
        build_query(product_type_name="Sweater", limit=limit)


@pytest.mark.parametrize("limit", ["1", "10000"])
def test_limit_bounds_are_inclusive(limit):
    assert build_query(product_type_name="Sweater", limit=limit).limit == int(limit)


def test_non_integer_values_are_rejected():
    with pytest.raises(QueryValidationError, match="limit must be an integer"):
        build_query(product_type_name="Sweater", limit="ten")
    with pytest.raises(QueryValidationError, match="productTypeNo must be an integer"):
        build_query(product_type_no="abc")


@pytest.mark.parametrize("value", ["invalid", "2023-13-01", "2023-02-30", "2023/01/01"])
def test_malformed_dates(value):
    with pytest.raises(QueryValidationError, match="ISO format"):
        build_query(product_type_name="Sweater", start_date=value)


def test_date_range_order():
    with pytest.raises(QueryValidationError, match="startDate"):
        build_query(product_type_name="Sweater", start_date="2023-12-31", end_date="2023-01-01")


def test_unknown_metric():
    with pytest.raises(QueryValidationError, match="metric"):
        build_query(product_type_name="Sweater", metric="margin")


def test_full_query_is_parsed():
    query = build_query(
        product_type_no="253",
        start_date="2023-01-01",
        end_date="2023-12-31",
        sales_channel_id="2",
        metric="Revenue",
        limit="100",
        include_zero="false",
    )
    assert query == TopBottomQuery(
        product_type_no=253,
        start_date=date(2023, 1, 1),
        end_date=date(2023, 12, 31),
        sales_channel_id=2,
        metric="revenue",
        limit=100,
        include_zero=False,
    )


@pytest.mark.parametrize("raw,expected", [(None, None), ("false", False), ("0", False), ("true", True), ("yes", True)])
def test_include_zero_parsing(raw, expected):
    assert build_query(product_type_name="Sweater", include_zero=raw).include_zero is expected


def test_normalize_applies_defaults():
    query = normalize_query(TopBottomQuery(product_type_name="Sweater"), DEFAULTS)
    assert (query.metric, query.limit, query.include_zero) == ("units", 500, True)


def test_normalize_clamps_limit_and_keeps_explicit_values():
    query = normalize_query(
        TopBottomQuery(product_type_name="Sweater", metric="revenue", limit=50000, include_zero=False),
        DEFAULTS,
    )
    assert (query.metric, query.limit, query.include_zero) == ("revenue", 10000, False)
    assert normalize_query(TopBottomQuery(product_type_name="Sweater", limit=0), DEFAULTS).limit == 1
