"""
Top/bottom ranking.

The repository does the heavy aggregation in SQL. This layer applies query
defaults, enforces the ordering contract and the zero-sales policy, and turns
data-source failures into `AggregationError`.
"""

from __future__ import annotations

import logging

from core.settings import AnalyticsDefaults, analytics_defaults

from . import repository
from .models import RankedEntity, TopBottomResult
from .query import TopBottomQuery, normalize_query, validate_scope

logger = logging.getLogger(__name__)


class AggregationError(RuntimeError):
    pass


def order_entities(
    entities: list[RankedEntity],
    *,
    metric: str,
    descending: bool,
    limit: int,
    include_zero: bool,
) -> list[RankedEntity]:
    """
    Sort by metric and cut to `limit`.

    `sorted` is stable, so ties keep the data source's order and repeated calls
    on the same data give the same ranking.
    """
    if not include_zero:
        entities = [e for e in entities if e.has_sales]
    ordered = sorted(entities, key=lambda e: e.metric_value(metric), reverse=descending)
    return ordered[:limit]


async def rank(
    query: TopBottomQuery,
    *,
    defaults: AnalyticsDefaults | None = None,
) -> TopBottomResult[RankedEntity]:
    validate_scope(query)
    normalized = normalize_query(query, defaults or analytics_defaults())

    try:
        raw = await repository.fetch_top_bottom(normalized)
    except Exception as exc:
        logger.exception("top_bottom_query_failed params=%s", normalized.log_context())
        raise AggregationError("Failed to fetch top/bottom sellers") from exc

    metric = normalized.metric or "units"
    limit = int(normalized.limit or 1)
    include_zero = bool(normalized.include_zero)

    return TopBottomResult(
        top=order_entities(raw.top, metric=metric, descending=True, limit=limit, include_zero=include_zero),
        bottom=order_entities(raw.bottom, metric=metric, descending=False, limit=limit, include_zero=include_zero),
    )
