"""Deal CRUD endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from dealboard.api.deps import get_db, get_store, get_user_id
from dealboard.core.exceptions import BackendError, NotFoundError
from dealboard.schemas.activities import ActivityRecord, NoteCreateRequest
from dealboard.schemas.deals import DealDetail, DealWriteRequest
from dealboard.services.activity_service import ActivityService
from dealboard.services.deal_store import DealStoreClient

router = APIRouter(tags=["deals"])


def _save_failed() -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save deal")


@router.get("/deals", response_model=list[DealDetail])
def list_deals(store: DealStoreClient = Depends(get_store)) -> list[DealDetail]:
    try:
        return store.list_deals()
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load deals") from exc


@router.post("/deals", response_model=DealDetail, status_code=status.HTTP_201_CREATED)
def create_deal(
    payload: DealWriteRequest,
    store: DealStoreClient = Depends(get_store),
    user_id: str | None = Depends(get_user_id),
) -> DealDetail:
    try:
        return store.create_deal(payload, created_by=user_id)
    except BackendError as exc:
        raise _save_failed() from exc


@router.get("/deals/{deal_id}", response_model=DealDetail)
def get_deal(deal_id: str, store: DealStoreClient = Depends(get_store)) -> DealDetail:
    try:
        deal = store.get_deal(deal_id)
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load deal") from exc
    if deal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Deal not found: {deal_id}")
    return deal


@router.put("/deals/{deal_id}", response_model=DealDetail)
def save_deal(deal_id: str, payload: DealWriteRequest, store: DealStoreClient = Depends(get_store)) -> DealDetail:
    try:
        return store.save_deal(deal_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except BackendError as exc:
        raise _save_failed() from exc


@router.delete("/deals/{deal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_deal(deal_id: str, store: DealStoreClient = Depends(get_store)) -> Response:
    try:
        store.delete_deal(deal_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete deal") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/deals/{deal_id}/notes", response_model=ActivityRecord, status_code=status.HTTP_201_CREATED)
def add_note(
    deal_id: str,
    payload: NoteCreateRequest,
    store: DealStoreClient = Depends(get_store),
    db: Session = Depends(get_db),
) -> ActivityRecord:
    if store.get_deal(deal_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Deal not found: {deal_id}")
    try:
        return ActivityService(db).record_note(deal_id, payload)
    except BackendError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add note") from exc
