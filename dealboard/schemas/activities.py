"""Activity records and inbound integration payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from dealboard.models.enums import ActivityType


class ActivityRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    deal_id: str
    activity_type: ActivityType
    title: str
    description: str | None = None
    metadata: dict[str, Any] | None = Field(default=None, validation_alias=AliasChoices("metadata_", "metadata"))
    created_at: datetime


class _IntegrationEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deal_id: str | None = Field(default=None, alias="dealId")


class GmailEvent(_IntegrationEvent):
    subject: str | None = None
    sender: str | None = Field(default=None, alias="from")
    preview: str | None = None
    thread_id: str | None = Field(default=None, alias="threadId")


class TwilioEvent(_IntegrationEvent):
    body: str | None = None
    sender: str | None = Field(default=None, alias="from")
    direction: str | None = None
    sid: str | None = None


class ShopifyEvent(_IntegrationEvent):
    order_id: str | int | None = Field(default=None, alias="orderId")
    order_name: str | None = Field(default=None, alias="orderName")
    customer: str | None = None
    total_price: str | int | float | None = Field(default=None, alias="totalPrice")
    fulfillment_status: str | None = Field(default=None, alias="fulfillmentStatus")


class NoteCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=10000)
