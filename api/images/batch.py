"""
Batch image URL resolution.

Every article is resolved concurrently. A failure for one article becomes a
failed `ImageOutcome` at that article's position; it never fails the batch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from contextlib import nullcontext
from dataclasses import dataclass

from .resolvers import ImageResolver, ResolvedImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageOutcome:
    article_id: str
    key: str | None = None
    image: ResolvedImage | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.image is not None

    @property
    def url(self) -> str | None:
        return self.image.url if self.image is not None else None


async def _resolve_one(
    article_id: int | str,
    resolver: ImageResolver,
    *,
    ttl_seconds: int | None,
    limiter: asyncio.Semaphore | None,
) -> ImageOutcome:
    article = str(article_id)
    key: str | None = None
    try:
        key = resolver.key_for(article_id)
        async with limiter if limiter is not None else nullcontext():
            image = await resolver.resolve(key, ttl_seconds)
    except Exception as exc:
        # One broken image must not take down the ranking response.
        logger.warning(
            "image_resolve_failed article_id=%s key=%s strategy=%s error=%s",
            article,
            key,
            resolver.strategy,
            exc,
        )
        return ImageOutcome(article_id=article, key=key, error=str(exc) or exc.__class__.__name__)
    return ImageOutcome(article_id=article, key=key, image=image)


async def resolve_batch(
    article_ids: Sequence[int | str],
    resolver: ImageResolver,
    *,
    ttl_seconds: int | None = None,
    limiter: asyncio.Semaphore | None = None,
) -> list[ImageOutcome]:
    """
    Resolve image URLs for `article_ids`, preserving input order.

    `limiter` caps how many resolutions run at once; share one semaphore
    between batches to cap them together.
    """
    if not article_ids:
        return []
    return list(
        await asyncio.gather(
            *(
                _resolve_one(article_id, resolver, ttl_seconds=ttl_seconds, limiter=limiter)
                for article_id in article_ids
            )
        )
    )
