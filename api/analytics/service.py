"""
Top/bottom sellers with image URLs.

Flow:
1) Rank articles (SQL aggregation + ordering contract)
2) Resolve image URLs for top and bottom concurrently
3) Reassemble in ranked order; articles whose image failed keep their place
   without an `image_url`
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import fields

from core.settings import AnalyticsDefaults
from images.batch import ImageOutcome, resolve_batch
from images.resolvers import ImageResolver

from . import ranking
from .models import EnrichedEntity, RankedEntity, TopBottomResult
from .query import TopBottomQuery

logger = logging.getLogger(__name__)


def _attach(entity: RankedEntity, outcome: ImageOutcome) -> EnrichedEntity:
    base = {f.name: getattr(entity, f.name) for f in fields(RankedEntity)}
    return EnrichedEntity(**base, image_key=outcome.key, image_url=outcome.url)


async def enrich(
    entities: Sequence[RankedEntity],
    resolver: ImageResolver,
    *,
    ttl_seconds: int | None = None,
    limiter: asyncio.Semaphore | None = None,
) -> list[EnrichedEntity]:
    """
    Attach image URLs to `entities`. Same length, same order.
    """
    outcomes = await resolve_batch(
        [e.article_id for e in entities],
        resolver,
        ttl_seconds=ttl_seconds,
        limiter=limiter,
    )
    return [_attach(entity, outcome) for entity, outcome in zip(entities, outcomes)]


async def rank_and_enrich(
    query: TopBottomQuery,
    resolver: ImageResolver,
    *,
    max_concurrency: int = 0,
    ttl_seconds: int | None = None,
    defaults: AnalyticsDefaults | None = None,
) -> TopBottomResult[EnrichedEntity]:
    """
    Rank articles for `query` and attach image URLs.

    Validation and aggregation errors propagate. Image failures only show up
    as entities without `image_url`.
    `max_concurrency` caps in-flight resolutions across both lists (0 = no cap).
    """
    ranked = await ranking.rank(query, defaults=defaults)

    limiter = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None
    top, bottom = await asyncio.gather(
        enrich(ranked.top, resolver, ttl_seconds=ttl_seconds, limiter=limiter),
        enrich(ranked.bottom, resolver, ttl_seconds=ttl_seconds, limiter=limiter),
    )

    missing = sum(1 for e in (*top, *bottom) if e.image_url is None)
    logger.info(
        "top_bottom_complete top=%s bottom=%s images_missing=%s strategy=%s",
        len(top),
        len(bottom),
        missing,
        resolver.strategy,
    )
    return TopBottomResult(top=top, bottom=bottom)
