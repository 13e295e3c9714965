from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from analytics import repository
from analytics.query import TopBottomQuery


def _query(**overrides) -> TopBottomQuery:
    base = {"product_type_name": "Sweater", "metric": "units", "limit": 500, "include_zero": True}
    base.update(overrides)
    return TopBottomQuery(**base)


def test_include_zero_switches_join_type():
    sql, _ = repository.build_top_bottom_sql(_query(include_zero=True))
    assert "LEFT JOIN transactions_train" in sql

    sql, _ = repository.build_top_bottom_sql(_query(include_zero=False))
    assert "INNER JOIN transactions_train" in sql
    assert "LEFT JOIN" not in sql


def test_parameters_follow_placeholder_order():
    sql, params = repository.build_top_bottom_sql(
        _query(
            product_type_name=None,
            product_type_no=253,
            start_date=date(2023, 1, 1),
            end_date=date(2023, 12, 31),
            sales_channel_id=2,
            limit=100,
        )
    )

    assert params == [253, date(2023, 1, 1), date(2023, 12, 31), 2, 100]
    assert "a.product_type_no = $1" in sql
    assert "t.t_dat >= $2::date" in sql
    # End date is inclusive.
    assert "t.t_dat <= $3::date" in sql
    assert "t.sales_channel_id = $4" in sql
    assert "r.rn_desc <= $5" in sql and "r.rn_asc <= $5" in sql


def test_metric_selects_rank_column():
    sql, _ = repository.build_top_bottom_sql(_query(metric="revenue"))
    assert "ORDER BY a.revenue DESC" in sql

    sql, _ = repository.build_top_bottom_sql(_query(metric="units"))
    assert "ORDER BY a.units_sold DESC" in sql


@pytest.mark.asyncio
async def test_fetch_splits_rows_by_kind(monkeypatch):
    rows = [
        {"kind": "top", "rn": 1, "article_id": 108775015, "units_sold": 12, "revenue": Decimal("49.50"),
         "virality_score": 100.0, "prod_name": "Strap top", "product_type_name": "Vest top",
         "product_group_name": "Garment Upper body", "colour_group_name": "Black",
         "department_name": "Jersey Basic", "detail_desc": None},
        {"kind": "bottom", "rn": 1, "article_id": 118458003, "units_sold": 0, "revenue": Decimal("0"),
         "virality_score": 0.0, "prod_name": None, "product_type_name": "Vest top",
         "product_group_name": None, "colour_group_name": None,
         "department_name": None, "detail_desc": None},
    ]
    captured = {}

    async def _fake_fetch_all(sql, *args):
        captured["args"] = args
        return rows

    monkeypatch.setattr(repository.db, "fetch_all", _fake_fetch_all)

    result = await repository.fetch_top_bottom(_query(limit=1))

    assert captured["args"] == ("Sweater", 1)
    assert [e.article_id for e in result.top] == ["108775015"]
    assert [e.article_id for e in result.bottom] == ["118458003"]
    assert result.top[0].revenue == Decimal("49.50")
    assert result.bottom[0].prod_name == "Unknown"
    assert result.bottom[0].has_sales is False
