"""Board projection response schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from dealboard.orchestration.notifications import NotificationLevel
from dealboard.schemas.deals import DealDetail


class StageColumnResponse(BaseModel):
    id: str
    name: str
    order_index: int
    color: str
    deals: list[DealDetail]
    total_value: Decimal
    deal_count: int


class BoardSummaryResponse(BaseModel):
    total_pipeline: Decimal
    total_margin: Decimal
    deal_count: int


class BoardResponse(BaseModel):
    stages: list[StageColumnResponse]
    summary: BoardSummaryResponse
    pending_drag_id: str | None = None


class DragStartRequest(BaseModel):
    deal_id: str = Field(min_length=1, max_length=36)


class MoveRequest(BaseModel):
    deal_id: str = Field(min_length=1, max_length=36)
    target_stage_id: str = Field(min_length=1, max_length=36)


class MoveResponse(BaseModel):
    outcome: str
    board: BoardResponse


class NotificationResponse(BaseModel):
    level: NotificationLevel
    title: str
    description: str
    created_at: datetime
