"""Deal request/response schemas for API contracts."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dealboard.models.enums import DealStatus
from dealboard.schemas.activities import ActivityRecord

DEFAULT_AVATAR_COLOR = "#3B82F6"
DEFAULT_TAG_COLOR = "#6366F1"
HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


class ProductLineInput(BaseModel):
    product_name: str = Field(min_length=1, max_length=255)
    quantity: int = Field(default=1, ge=0)
    unit_price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)


class TagInput(BaseModel):
    tag: str = Field(min_length=1, max_length=64)
    color: str = Field(default=DEFAULT_TAG_COLOR, pattern=HEX_COLOR)


class DealWriteRequest(BaseModel):
    deal_code: str | None = Field(default=None, max_length=64)
    stage_id: str = Field(min_length=1, max_length=36)
    client_name: str = Field(min_length=1, max_length=255)
    client_initials: str | None = Field(default=None, max_length=2)
    avatar_color: str = Field(default=DEFAULT_AVATAR_COLOR, pattern=HEX_COLOR)
    interested_products: str = Field(default="", max_length=10000)
    estimated_budget: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    margin: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    status: DealStatus = DealStatus.UNPAID
    shipping_date: date | None = None
    notes: str | None = Field(default=None, max_length=10000)
    products: list[ProductLineInput] = Field(default_factory=list)
    tags: list[TagInput] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, tags: list[TagInput]) -> list[TagInput]:
        seen: set[str] = set()
        unique = []
        for item in tags:
            if item.tag in seen:
                continue
            seen.add(item.tag)
            unique.append(item)
        return unique


class ProductLineRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    deal_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    order_index: int


class TagRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    deal_id: str
    tag: str
    color: str


class DealDetail(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    deal_code: str
    stage_id: str
    client_name: str
    client_initials: str
    avatar_color: str
    interested_products: str
    estimated_budget: Decimal
    margin: Decimal
    status: DealStatus
    shipping_date: date | None = None
    notes: str | None = None
    order_index: int
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
    products: tuple[ProductLineRecord, ...] = ()
    tags: tuple[TagRecord, ...] = ()
    activities: tuple[ActivityRecord, ...] = ()
