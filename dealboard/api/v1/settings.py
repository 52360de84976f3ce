"""Per-user integration settings endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from dealboard.api.deps import get_db, require_user_id
from dealboard.core.exceptions import BackendError
from dealboard.schemas.settings import IntegrationSettingItem, IntegrationSettingsUpdate
from dealboard.services.settings_service import SettingsService

router = APIRouter(tags=["settings"])


@router.get("/settings/integrations", response_model=list[IntegrationSettingItem])
def read_integrations(
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
) -> list[IntegrationSettingItem]:
    try:
        return SettingsService(db).list_for_user(user_id)
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load settings") from exc


@router.put("/settings/integrations", response_model=list[IntegrationSettingItem])
def save_integrations(
    payload: IntegrationSettingsUpdate,
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
) -> list[IntegrationSettingItem]:
    try:
        return SettingsService(db).upsert_many(user_id, payload.integrations)
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save settings") from exc
