"""Per-user integration settings."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from dealboard.core.exceptions import BackendError
from dealboard.models import IntegrationSetting, IntegrationType
from dealboard.schemas.settings import IntegrationSettingItem
from dealboard.services.base_service import BaseService


class SettingsService(BaseService):
    """Reads and upserts integration toggles keyed by (user_id, integration_type)."""

    def _rows_for(self, user_id: str) -> dict[IntegrationType, IntegrationSetting]:
        try:
            rows = self.db.scalars(select(IntegrationSetting).where(IntegrationSetting.user_id == user_id)).all()
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc
        return {row.integration_type: row for row in rows}

    def list_for_user(self, user_id: str) -> list[IntegrationSettingItem]:
        """Return one entry per integration type, defaults filled in for unsaved ones."""
        saved = self._rows_for(user_id)
        items = []
        for integration_type in IntegrationType:
            row = saved.get(integration_type)
            if row is None:
                items.append(IntegrationSettingItem(integration_type=integration_type))
            else:
                items.append(
                    IntegrationSettingItem(
                        integration_type=integration_type,
                        enabled=row.enabled,
                        api_key=row.api_key or "",
                    )
                )
        return items

    def upsert_many(self, user_id: str, items: list[IntegrationSettingItem]) -> list[IntegrationSettingItem]:
        saved = self._rows_for(user_id)
        now = datetime.now(timezone.utc)
        for item in items:
            row = saved.get(item.integration_type)
            if row is None:
                row = IntegrationSetting(user_id=user_id, integration_type=item.integration_type)
                self.db.add(row)
                saved[item.integration_type] = row
            row.enabled = item.enabled
            row.api_key = item.api_key or None
            row.updated_at = now
        self.commit()
        return self.list_for_user(user_id)
