"""Per-user integration settings model module."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from dealboard.models.base import AuditMixin, Base, UUIDPrimaryKeyMixin
from dealboard.models.enums import IntegrationType


class IntegrationSetting(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "integration_settings"
    __table_args__ = (UniqueConstraint("user_id", "integration_type", name="uq_integration_settings_user_type"),)

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    integration_type: Mapped[IntegrationType] = mapped_column(
        Enum(IntegrationType, values_callable=lambda e: [m.value for m in e], native_enum=False, length=16),
        nullable=False,
    )
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    api_key: Mapped[str | None] = mapped_column(String(512))
    config: Mapped[dict[str, Any] | None] = mapped_column(JSON)
