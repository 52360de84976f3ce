"""Activity ingest: maps integration payloads to append-only deal activities."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from dealboard.core.exceptions import BackendError, ValidationError
from dealboard.models import ActivityType, DealActivity
from dealboard.schemas.activities import ActivityRecord, GmailEvent, NoteCreateRequest, ShopifyEvent, TwilioEvent
from dealboard.services.base_service import BaseService
from dealboard.utils.validators import sanitize_text

logger = logging.getLogger(__name__)


def _received_at() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require(*values: Any) -> None:
    for value in values:
        if not value or (isinstance(value, str) and not value.strip()):
            raise ValidationError("Missing required fields")


class ActivityService(BaseService):
    """Service for reading and appending deal activities."""

    def list_recent(self, deal_id: str, activity_type: ActivityType, limit: int = 10) -> list[ActivityRecord]:
        try:
            rows = self.db.scalars(
                select(DealActivity)
                .where(DealActivity.deal_id == deal_id, DealActivity.activity_type == activity_type)
                .order_by(DealActivity.created_at.desc())
                .limit(limit)
            ).all()
        except SQLAlchemyError as exc:
            logger.exception(
                "activity.list_failed",
                extra={"event": "activity.list_failed", "deal_id": deal_id, "activity_type": activity_type.value},
            )
            raise BackendError(str(exc)) from exc
        return [ActivityRecord.model_validate(row) for row in rows]

    def record(
        self,
        deal_id: str,
        activity_type: ActivityType,
        title: str,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ActivityRecord:
        activity = DealActivity(
            deal_id=deal_id,
            activity_type=activity_type,
            title=sanitize_text(title, max_len=500),
            description=description,
            metadata_=metadata,
        )
        self.db.add(activity)
        self.commit()
        self.db.refresh(activity)
        logger.info(
            "activity.recorded",
            extra={"event": "activity.recorded", "deal_id": deal_id, "activity_type": activity_type.value},
        )
        return ActivityRecord.model_validate(activity)

    def record_gmail(self, event: GmailEvent) -> ActivityRecord:
        _require(event.deal_id, event.subject)
        return self.record(
            deal_id=event.deal_id,
            activity_type=ActivityType.GMAIL,
            title=event.subject,
            description=event.preview,
            metadata={"from": event.sender, "threadId": event.thread_id, "timestamp": _received_at()},
        )

    def record_twilio(self, event: TwilioEvent) -> ActivityRecord:
        _require(event.deal_id, event.body)
        return self.record(
            deal_id=event.deal_id,
            activity_type=ActivityType.TWILIO,
            title="SMS received" if event.direction == "inbound" else "SMS sent",
            description=event.body,
            metadata={
                "from": event.sender,
                "direction": event.direction,
                "sid": event.sid,
                "timestamp": _received_at(),
            },
        )

    def record_shopify(self, event: ShopifyEvent) -> ActivityRecord:
        _require(event.deal_id, event.order_id)
        return self.record(
            deal_id=event.deal_id,
            activity_type=ActivityType.SHOPIFY,
            title=f"Order {event.order_name or event.order_id}",
            description=f"Order by {event.customer} - ${event.total_price}",
            metadata={
                "orderId": event.order_id,
                "orderName": event.order_name,
                "customer": event.customer,
                "totalPrice": event.total_price,
                "fulfillmentStatus": event.fulfillment_status,
                "timestamp": _received_at(),
            },
        )

    def record_note(self, deal_id: str, note: NoteCreateRequest) -> ActivityRecord:
        return self.record(
            deal_id=deal_id,
            activity_type=ActivityType.NOTE,
            title=note.title,
            description=sanitize_text(note.description) or None,
        )
