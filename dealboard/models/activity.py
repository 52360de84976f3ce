"""Deal activity model module."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin
from dealboard.models.enums import ActivityType


class DealActivity(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    __tablename__ = "deal_activities"
    __table_args__ = (Index("idx_deal_activities_deal_type_created", "deal_id", "activity_type", "created_at"),)

    deal_id: Mapped[str] = mapped_column(ForeignKey("deals.id", ondelete="CASCADE"), nullable=False)
    activity_type: Mapped[ActivityType] = mapped_column(
        Enum(ActivityType, values_callable=lambda e: [m.value for m in e], native_enum=False, length=16),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    # `metadata` is reserved on declarative classes.
    metadata_: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON)

    deal = relationship("Deal", back_populates="activities")
