"""Inbound integration webhooks (Gmail, Twilio, Shopify) for API v1.

Each integration exposes the same two verbs: ``GET ?dealId=`` lists the
latest activities of that type for a deal, ``POST`` appends one activity
mapped from the integration's payload.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PayloadValidationError
from sqlalchemy.orm import Session

from dealboard.api.deps import get_db, get_settings
from dealboard.core.config import Config
from dealboard.core.exceptions import BackendError, ValidationError
from dealboard.models import ActivityType
from dealboard.schemas.activities import ActivityRecord, GmailEvent, ShopifyEvent, TwilioEvent
from dealboard.schemas.common import ErrorEnvelope
from dealboard.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["integrations"])

Recorder = Callable[[ActivityService, BaseModel], ActivityRecord]

INTEGRATIONS: dict[ActivityType, tuple[str, type[BaseModel], Recorder]] = {
    ActivityType.GMAIL: ("Gmail", GmailEvent, ActivityService.record_gmail),
    ActivityType.TWILIO: ("Twilio", TwilioEvent, ActivityService.record_twilio),
    ActivityType.SHOPIFY: ("Shopify", ShopifyEvent, ActivityService.record_shopify),
}


ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorEnvelope},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorEnvelope},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorEnvelope(error=message).model_dump())


def _register(activity_type: ActivityType, label: str, event_model: type[BaseModel], record: Recorder) -> None:
    path = f"/integrations/{activity_type.value}"

    def list_activities(
        deal_id: str | None = Query(default=None, alias="dealId"),
        db: Session = Depends(get_db),
        cfg: Config = Depends(get_settings),
    ):
        if not deal_id:
            return _error(status.HTTP_400_BAD_REQUEST, "Deal ID is required")
        try:
            activities = ActivityService(db).list_recent(deal_id, activity_type, limit=cfg.ACTIVITY_FEED_LIMIT)
        except BackendError:
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to fetch {label} activities")
        return {"activities": [item.model_dump(mode="json") for item in activities]}

    async def ingest_event(request: Request, db: Session = Depends(get_db)):
        try:
            body = await request.json()
            event = event_model.model_validate(body)
        except (ValueError, PayloadValidationError):
            return _error(status.HTTP_400_BAD_REQUEST, "Missing required fields")

        try:
            activity = await asyncio.to_thread(record, ActivityService(db), event)
        except ValidationError as exc:
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))
        except BackendError:
            logger.error(
                "integration.event_failed",
                extra={"event": "integration.event_failed", "integration": activity_type.value},
            )
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to process {label} event")
        return {"activity": activity.model_dump(mode="json")}

    router.add_api_route(
        path,
        list_activities,
        methods=["GET"],
        name=f"list_{activity_type.value}_activities",
        responses=ERROR_RESPONSES,
    )
    router.add_api_route(
        path,
        ingest_event,
        methods=["POST"],
        name=f"ingest_{activity_type.value}_event",
        responses=ERROR_RESPONSES,
    )


for _activity_type, (_label, _event_model, _record) in INTEGRATIONS.items():
    _register(_activity_type, _label, _event_model, _record)
