"""Pipeline stage response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StageRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    order_index: int
    color: str
