"""
Top/bottom query parsing and validation.

`build_query()` turns raw query-string values into a `TopBottomQuery`.
`normalize_query()` fills in defaults before the query reaches SQL.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, replace
from datetime import date

from core.settings import MAX_ANALYTICS_LIMIT, AnalyticsDefaults

METRICS = ("units", "revenue")
MIN_LIMIT = 1
MAX_LIMIT = MAX_ANALYTICS_LIMIT

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_FALSE_VALUES = {"false", "0", "no", "off"}


class QueryValidationError(ValueError):
    pass


@dataclass(frozen=True)
class TopBottomQuery:
    product_type_name: str | None = None
    product_type_no: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    sales_channel_id: int | None = None
    metric: str | None = None
    limit: int | None = None
    include_zero: bool | None = None

    def log_context(self) -> dict:
        return {k: (v.isoformat() if isinstance(v, date) else v) for k, v in asdict(self).items()}


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _parse_int(name: str, raw: str | None) -> int | None:
    if _blank(raw):
        return None
    try:
        return int(raw.strip())
    except ValueError:
        raise QueryValidationError(f"{name} must be an integer")


def _parse_date(name: str, raw: str | None) -> date | None:
    if _blank(raw):
        return None
    value = raw.strip()
    if not _ISO_DATE.match(value):
        raise QueryValidationError(f"{name} must be in ISO format (YYYY-MM-DD)")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise QueryValidationError(f"{name} must be in ISO format (YYYY-MM-DD)")


def _parse_bool(raw: str | None) -> bool | None:
    if _blank(raw):
        return None
    return raw.strip().lower() not in _FALSE_VALUES


def validate_scope(query: TopBottomQuery) -> None:
    """
    Exactly one of product type name / number narrows the ranking.
    """
    has_name = bool((query.product_type_name or "").strip())
    has_no = query.product_type_no is not None
    if not has_name and not has_no:
        raise QueryValidationError("must provide one of productTypeName or productTypeNo")
    if has_name and has_no:
        raise QueryValidationError("must provide only one of productTypeName or productTypeNo")


def validate_limit(limit: int | None) -> None:
    if limit is not None and not (MIN_LIMIT <= limit <= MAX_LIMIT):
        raise QueryValidationError(f"limit must be between {MIN_LIMIT} and {MAX_LIMIT}")


def build_query(
    *,
    product_type_name: str | None = None,
    product_type_no: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    sales_channel_id: str | None = None,
    metric: str | None = None,
    limit: str | None = None,
    include_zero: str | None = None,
) -> TopBottomQuery:
    """
    Parse and validate raw query-string values.

    Raises `QueryValidationError` with a client-facing message.
    """
    query = TopBottomQuery(
        product_type_name=None if _blank(product_type_name) else product_type_name.strip(),
        product_type_no=_parse_int("productTypeNo", product_type_no),
        start_date=_parse_date("startDate", start_date),
        end_date=_parse_date("endDate", end_date),
        sales_channel_id=_parse_int("salesChannelId", sales_channel_id),
        metric=None if _blank(metric) else metric.strip().lower(),
        limit=_parse_int("limit", limit),
        include_zero=_parse_bool(include_zero),
    )

    validate_scope(query)
    validate_limit(query.limit)

    if query.metric is not None and query.metric not in METRICS:
        raise QueryValidationError(f"metric must be one of: {', '.join(METRICS)}")

    if query.start_date and query.end_date and query.start_date > query.end_date:
        raise QueryValidationError("startDate must not be after endDate")

    return query


def normalize_query(query: TopBottomQuery, defaults: AnalyticsDefaults) -> TopBottomQuery:
    """
    Apply defaults and clamp the limit into range.
    """
    limit = query.limit if query.limit is not None else defaults.limit
    return replace(
        query,
        metric=query.metric if query.metric in METRICS else defaults.metric,
        limit=min(max(limit, MIN_LIMIT), MAX_LIMIT),
        include_zero=defaults.include_zero if query.include_zero is None else query.include_zero,
    )
