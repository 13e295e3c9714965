"""
Ranking result types.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Generic, TypeVar


@dataclass(frozen=True)
class RankedEntity:
    article_id: str
    prod_name: str
    product_type_name: str
    units_sold: int
    revenue: Decimal
    virality_score: float = 0.0
    product_group_name: str | None = None
    colour_group_name: str | None = None
    department_name: str | None = None
    detail_desc: str | None = None

    def metric_value(self, metric: str) -> Decimal:
        if metric == "revenue":
            return self.revenue
        return Decimal(self.units_sold)

    @property
    def has_sales(self) -> bool:
        return self.units_sold > 0 or self.revenue > 0


@dataclass(frozen=True)
class EnrichedEntity(RankedEntity):
    image_key: str | None = None
    # None means the image URL could not be resolved for this article.
    image_url: str | None = None


E = TypeVar("E", bound=RankedEntity)


@dataclass(frozen=True)
class TopBottomResult(Generic[E]):
    top: list[E]
    bottom: list[E]
