from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from analytics.models import RankedEntity
from images.resolvers import ImageResolutionError, ImageResolver, ResolvedImage


class FakeResolver(ImageResolver):
    """Direct-style resolver that can fail or stall for chosen keys."""

    strategy = "fake"

    def __init__(self, *, failing: set[str] | None = None, delays: dict[str, float] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.failing = failing or set()
        self.delays = delays or {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def resolve(self, key: str, ttl_seconds: int | None = None) -> ResolvedImage:
        self.calls.append(key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
            if key in self.failing:
                raise ImageResolutionError(f"no such key {key}")
            return ResolvedImage(key=key, url=f"http://images.test/{key}")
        finally:
            self.in_flight -= 1


def make_entity(article_id: str, *, units: int = 0, revenue: str | int = 0) -> RankedEntity:
    return RankedEntity(
        article_id=article_id,
        prod_name=f"Product {article_id}",
        product_type_name="Sweater",
        units_sold=units,
        revenue=Decimal(str(revenue)),
    )


@pytest.fixture
def fake_resolver() -> FakeResolver:
    return FakeResolver()
