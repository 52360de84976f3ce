"""Pipeline stage model module."""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, CreatedAtMixin, UUIDPrimaryKeyMixin


class PipelineStage(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    __tablename__ = "pipeline_stages"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#6B7280")

    deals = relationship("Deal", back_populates="stage")
