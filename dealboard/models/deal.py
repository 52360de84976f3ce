"""Deal model module with its owned product lines and tags."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import AuditMixin, Base, CreatedAtMixin, UUIDPrimaryKeyMixin
from dealboard.models.enums import DealStatus


class Deal(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "deals"
    __table_args__ = (Index("idx_deals_stage_order", "stage_id", "order_index"),)

    deal_code: Mapped[str] = mapped_column(String(64), nullable=False)
    stage_id: Mapped[str] = mapped_column(ForeignKey("pipeline_stages.id", ondelete="RESTRICT"), nullable=False)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_initials: Mapped[str] = mapped_column(String(2), nullable=False, default="")
    avatar_color: Mapped[str] = mapped_column(String(7), nullable=False, default="#3B82F6")
    interested_products: Mapped[str] = mapped_column(Text, nullable=False, default="")
    estimated_budget: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    margin: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    status: Mapped[DealStatus] = mapped_column(
        Enum(DealStatus, values_callable=lambda e: [m.value for m in e], native_enum=False, length=16),
        nullable=False,
        default=DealStatus.UNPAID,
    )
    shipping_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by: Mapped[str | None] = mapped_column(String(64))

    stage = relationship("PipelineStage", back_populates="deals")
    products = relationship(
        "DealProduct",
        back_populates="deal",
        order_by="DealProduct.order_index",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    tags = relationship("DealTag", back_populates="deal", cascade="all, delete-orphan", passive_deletes=True)
    activities = relationship(
        "DealActivity",
        back_populates="deal",
        order_by="DealActivity.created_at.desc()",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class DealProduct(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    __tablename__ = "deal_products"

    deal_id: Mapped[str] = mapped_column(ForeignKey("deals.id", ondelete="CASCADE"), nullable=False, index=True)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    total_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    deal = relationship("Deal", back_populates="products")


class DealTag(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    __tablename__ = "deal_tags"

    deal_id: Mapped[str] = mapped_column(ForeignKey("deals.id", ondelete="CASCADE"), nullable=False, index=True)
    tag: Mapped[str] = mapped_column(String(64), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#6366F1")

    deal = relationship("Deal", back_populates="tags")
