"""
Analytics API endpoints.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from images.resolvers import ImageResolver

from . import service
from .query import QueryValidationError, build_query
from .ranking import AggregationError
from .schemas import ArticleSalesResponse, TopBottomResponse

router = APIRouter()


def get_image_resolver(request: Request) -> ImageResolver:
    resolver = getattr(request.app.state, "image_resolver", None)
    if resolver is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Image resolver is not initialized.",
        )
    return resolver


def get_resolve_concurrency(request: Request) -> int:
    return int(getattr(request.app.state, "image_resolve_concurrency", 0) or 0)


@router.get("/analytics/top-bottom")
async def top_bottom(
    product_type_name: str | None = Query(default=None, alias="productTypeName", max_length=200),
    product_type_no: str | None = Query(default=None, alias="productTypeNo"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    sales_channel_id: str | None = Query(default=None, alias="salesChannelId"),
    metric: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    include_zero: str | None = Query(default=None, alias="includeZero"),
    resolver: ImageResolver = Depends(get_image_resolver),
    max_concurrency: int = Depends(get_resolve_concurrency),
) -> dict:
    """
    Top and bottom sellers for one product type, each with an image URL when
    it could be resolved.
    """
    try:
        query = build_query(
            product_type_name=product_type_name,
            product_type_no=product_type_no,
            start_date=start_date,
            end_date=end_date,
            sales_channel_id=sales_channel_id,
            metric=metric,
            limit=limit,
            include_zero=include_zero,
        )
        result = await service.rank_and_enrich(query, resolver, max_concurrency=max_concurrency)
    except QueryValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except AggregationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    response = TopBottomResponse(
        top=[ArticleSalesResponse.from_entity(e) for e in result.top],
        bottom=[ArticleSalesResponse.from_entity(e) for e in result.bottom],
    )
    return response.to_payload()


@router.get("/analytics/health")
def analytics_health() -> dict:
    return {
        "status": "ok",
        "service": "analytics",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
