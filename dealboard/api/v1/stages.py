"""Pipeline stage endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from dealboard.api.deps import get_store
from dealboard.core.exceptions import BackendError
from dealboard.schemas.stages import StageRecord
from dealboard.services.deal_store import DealStoreClient

router = APIRouter(tags=["stages"])


@router.get("/stages", response_model=list[StageRecord])
def list_stages(store: DealStoreClient = Depends(get_store)) -> list[StageRecord]:
    try:
        return store.list_stages()
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load stages") from exc
