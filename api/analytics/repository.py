"""
Top/bottom seller SQL (raw).

One statement does the whole aggregation:
- filter articles by product type (name or number)
- count units and sum revenue per article from `transactions_train`
  (LEFT JOIN keeps zero-sales articles, INNER JOIN drops them)
- number rows twice with ROW_NUMBER(): descending for top, ascending for bottom
- min-max normalize the ranking metric into a 0-100 virality score
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from core import db

from .models import RankedEntity, TopBottomResult
from .query import TopBottomQuery

# Whitelist: the metric name is interpolated into SQL.
RANK_COLUMNS = {
    "units": "units_sold",
    "revenue": "revenue",
}

_DISPLAY_COLUMNS = """
      COALESCE(ar.prod_name, 'Unknown') AS prod_name,
      ar.product_type_name,
      ar.product_group_name,
      ar.colour_group_name,
      ar.department_name,
      ar.detail_desc
"""


def build_top_bottom_sql(query: TopBottomQuery) -> tuple[str, list[Any]]:
    """
    Render the SQL and its positional parameters for a normalized query.
    """
    rank_column = RANK_COLUMNS.get(query.metric or "units", "units_sold")
    params: list[Any] = []

    def param(value: Any) -> str:
        params.append(value)
        return f"${len(params)}"

    article_filters: list[str] = []
    if query.product_type_name:
        article_filters.append(f"a.product_type_name = {param(query.product_type_name)}")
    if query.product_type_no is not None:
        article_filters.append(f"a.product_type_no = {param(query.product_type_no)}")
    article_where = f"WHERE {' AND '.join(article_filters)}" if article_filters else ""

    tx_filters: list[str] = []
    if query.start_date is not None:
        tx_filters.append(f"t.t_dat >= {param(query.start_date)}::date")
    if query.end_date is not None:
        # Inclusive end date.
        tx_filters.append(f"t.t_dat <= {param(query.end_date)}::date")
    if query.sales_channel_id is not None:
        tx_filters.append(f"t.sales_channel_id = {param(query.sales_channel_id)}")
    tx_filter = f"AND {' AND '.join(tx_filters)}" if tx_filters else ""

    join_type = "LEFT JOIN" if query.include_zero else "INNER JOIN"
    limit_param = param(int(query.limit or 1))

    sql = f"""
    WITH filtered_articles AS (
      SELECT a.article_id
      FROM articles a
      {article_where}
    ),
    agg AS (
      SELECT
        fa.article_id,
        COUNT(t.article_id) AS units_sold,
        COALESCE(SUM(t.price::numeric), 0) AS revenue
      FROM filtered_articles fa
      {join_type} transactions_train t
        ON fa.article_id = t.article_id
        {tx_filter}
      GROUP BY fa.article_id
    ),
    stats AS (
      SELECT
        MIN(a.{rank_column}) AS min_metric,
        MAX(a.{rank_column}) AS max_metric
      FROM agg a
    ),
    ranked AS (
      SELECT
        a.article_id,
        a.units_sold,
        a.revenue,
        ROW_NUMBER() OVER (
          ORDER BY a.{rank_column} DESC, a.units_sold DESC, a.revenue DESC, a.article_id ASC
        ) AS rn_desc,
        ROW_NUMBER() OVER (
          ORDER BY a.{rank_column} ASC, a.revenue ASC, a.units_sold ASC, a.article_id ASC
        ) AS rn_asc,
        CASE
          WHEN s.max_metric = s.min_metric THEN 100.0
          ELSE LEAST(100.0, GREATEST(0.0,
            100.0 * (a.{rank_column}::numeric - s.min_metric::numeric)
                  / NULLIF(s.max_metric::numeric - s.min_metric::numeric, 0)
          ))
        END AS virality_score
      FROM agg a
      CROSS JOIN stats s
    )
    SELECT
      'top' AS kind,
      r.rn_desc AS rn,
      r.article_id,
      r.units_sold,
      r.revenue,
      r.virality_score::float8 AS virality_score,
      {_DISPLAY_COLUMNS}
    FROM ranked r
    JOIN articles ar ON ar.article_id = r.article_id
    WHERE r.rn_desc <= {limit_param}

    UNION ALL

    SELECT
      'bottom' AS kind,
      r.rn_asc AS rn,
      r.article_id,
      r.units_sold,
      r.revenue,
      r.virality_score::float8 AS virality_score,
      {_DISPLAY_COLUMNS}
    FROM ranked r
    JOIN articles ar ON ar.article_id = r.article_id
    WHERE r.rn_asc <= {limit_param}

    ORDER BY kind DESC, rn ASC
    """
    return sql, params


def row_to_entity(row: dict[str, Any]) -> RankedEntity:
    revenue = row.get("revenue")
    return RankedEntity(
        article_id=str(row["article_id"]),
        prod_name=str(row.get("prod_name") or "Unknown"),
        product_type_name=str(row.get("product_type_name") or ""),
        units_sold=int(row.get("units_sold") or 0),
        revenue=revenue if isinstance(revenue, Decimal) else Decimal(str(revenue or 0)),
        virality_score=float(row.get("virality_score") or 0.0),
        product_group_name=row.get("product_group_name"),
        colour_group_name=row.get("colour_group_name"),
        department_name=row.get("department_name"),
        detail_desc=row.get("detail_desc"),
    )


async def fetch_top_bottom(query: TopBottomQuery) -> TopBottomResult[RankedEntity]:
    """
    Fetch top and bottom sellers for a normalized query.
    """
    sql, params = build_top_bottom_sql(query)
    rows = await db.fetch_all(sql, *params)

    top: list[RankedEntity] = []
    bottom: list[RankedEntity] = []
    for row in rows:
        entity = row_to_entity(row)
        if row["kind"] == "top":
            top.append(entity)
        else:
            bottom.append(entity)
    return TopBottomResult(top=top, bottom=bottom)
