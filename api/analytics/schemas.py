"""
Pydantic schemas for analytics responses (camelCase on the wire).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .models import EnrichedEntity


class ArticleSalesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    article_id: str = Field(..., alias="articleId")
    prod_name: str = Field(..., alias="prodName")
    product_type_name: str = Field(..., alias="productTypeName")
    units_sold: int = Field(..., ge=0, alias="unitsSold")
    revenue: float = Field(..., ge=0)
    virality_score: float = Field(..., alias="viralityScore")
    image_key: str | None = Field(default=None, alias="imageKey")
    product_group_name: str | None = Field(default=None, alias="productGroupName")
    colour_group_name: str | None = Field(default=None, alias="colourGroupName")
    department_name: str | None = Field(default=None, alias="departmentName")
    detail_desc: str | None = Field(default=None, alias="detailDesc")
    # Left unset (and omitted from the payload) when the image could not be resolved.
    image_url: str | None = Field(default=None, alias="imageUrl")

    @classmethod
    def from_entity(cls, entity: EnrichedEntity) -> "ArticleSalesResponse":
        data = {
            "article_id": entity.article_id,
            "prod_name": entity.prod_name,
            "product_type_name": entity.product_type_name,
            "units_sold": entity.units_sold,
            "revenue": float(entity.revenue),
            "virality_score": entity.virality_score,
            "image_key": entity.image_key,
            "product_group_name": entity.product_group_name,
            "colour_group_name": entity.colour_group_name,
            "department_name": entity.department_name,
            "detail_desc": entity.detail_desc,
        }
        if entity.image_url is not None:
            data["image_url"] = entity.image_url
        return cls(**data)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)


class TopBottomResponse(BaseModel):
    top: list[ArticleSalesResponse]
    bottom: list[ArticleSalesResponse]

    def to_payload(self) -> dict:
        return {
            "top": [item.to_payload() for item in self.top],
            "bottom": [item.to_payload() for item in self.bottom],
        }
