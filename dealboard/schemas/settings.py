"""Integration settings schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dealboard.models.enums import IntegrationType


class IntegrationSettingItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    integration_type: IntegrationType
    enabled: bool = False
    api_key: str = Field(default="", max_length=512)


class IntegrationSettingsUpdate(BaseModel):
    integrations: list[IntegrationSettingItem] = Field(min_length=1)
