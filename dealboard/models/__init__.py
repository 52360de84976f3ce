"""SQLAlchemy model package for the deal board schema."""

from dealboard.models.activity import DealActivity
from dealboard.models.base import Base
from dealboard.models.deal import Deal, DealProduct, DealTag
from dealboard.models.enums import ActivityType, DealStatus, IntegrationType
from dealboard.models.integration_setting import IntegrationSetting
from dealboard.models.pipeline_stage import PipelineStage

__all__ = [
    "ActivityType",
    "Base",
    "Deal",
    "DealActivity",
    "DealProduct",
    "DealStatus",
    "DealTag",
    "IntegrationSetting",
    "IntegrationType",
    "PipelineStage",
]
