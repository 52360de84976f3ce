from __future__ import annotations

from dealboard.models import IntegrationType
from dealboard.schemas.settings import IntegrationSettingItem
from dealboard.services.settings_service import SettingsService


def test_unsaved_integrations_default_to_disabled(session_factory):
    with SettingsService(session_factory()) as service:
        items = service.list_for_user("user-1")

    assert [item.integration_type for item in items] == list(IntegrationType)
    assert all(item.enabled is False and item.api_key == "" for item in items)


def test_upsert_updates_existing_rows_per_user(session_factory):
    with SettingsService(session_factory()) as service:
        service.upsert_many(
            "user-1",
            [IntegrationSettingItem(integration_type=IntegrationType.SHOPIFY, enabled=True, api_key="shp_1")],
        )
        items = service.upsert_many(
            "user-1",
            [IntegrationSettingItem(integration_type=IntegrationType.SHOPIFY, enabled=False, api_key="shp_2")],
        )
        other = service.list_for_user("user-2")

    shopify = next(item for item in items if item.integration_type == IntegrationType.SHOPIFY)
    assert (shopify.enabled, shopify.api_key) == (False, "shp_2")
    assert all(item.enabled is False for item in other)
