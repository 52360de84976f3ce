"""Deal store client: stateless query/mutation wrapper over the database.

Every call opens and closes its own session from the injected factory, so a
single client instance can be shared by the board synchronizer, the change
feed and request handlers running on worker threads.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from dealboard.core.exceptions import BackendError, NotFoundError
from dealboard.models import Deal, DealProduct, DealTag, PipelineStage
from dealboard.schemas.deals import DealDetail, DealWriteRequest
from dealboard.schemas.stages import StageRecord
from dealboard.utils.ids import generate_deal_code
from dealboard.utils.validators import derive_initials, sanitize_text

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _build_products(payload: DealWriteRequest) -> list[DealProduct]:
    return [
        DealProduct(
            product_name=sanitize_text(line.product_name, max_len=255),
            quantity=line.quantity,
            unit_price=line.unit_price,
            total_price=line.quantity * line.unit_price,
            order_index=index,
        )
        for index, line in enumerate(payload.products)
    ]


def _build_tags(payload: DealWriteRequest) -> list[DealTag]:
    return [DealTag(tag=sanitize_text(item.tag, max_len=64), color=item.color) for item in payload.tags]


def _scalar_fields(payload: DealWriteRequest) -> dict:
    return {
        "stage_id": payload.stage_id,
        "client_name": sanitize_text(payload.client_name, max_len=255),
        "client_initials": derive_initials(payload.client_name, payload.client_initials),
        "avatar_color": payload.avatar_color,
        "interested_products": sanitize_text(payload.interested_products),
        "estimated_budget": payload.estimated_budget,
        "margin": payload.margin,
        "status": payload.status,
        "shipping_date": payload.shipping_date,
        "notes": sanitize_text(payload.notes) or None,
    }


class DealStoreClient:
    """Query and mutation capabilities the board and API need from the database."""

    def __init__(self, session_factory: sessionmaker[Session], deal_code_prefix: str = "MON") -> None:
        self._session_factory = session_factory
        self._deal_code_prefix = deal_code_prefix

    @contextmanager
    def _session(self, operation: str) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception(
                "deal_store.operation_failed",
                extra={"event": "deal_store.operation_failed", "operation": operation},
            )
            raise BackendError(f"{operation} failed: {exc}") from exc
        finally:
            session.close()

    @staticmethod
    def _detail_query():
        return select(Deal).options(
            selectinload(Deal.products),
            selectinload(Deal.tags),
            selectinload(Deal.activities),
        )

    def _load_detail(self, session: Session, deal_id: str) -> DealDetail | None:
        deal = session.scalars(
            self._detail_query().where(Deal.id == deal_id).execution_options(populate_existing=True)
        ).first()
        return DealDetail.model_validate(deal) if deal is not None else None

    def list_stages(self) -> list[StageRecord]:
        with self._session("list_stages") as session:
            rows = session.scalars(select(PipelineStage).order_by(PipelineStage.order_index)).all()
            return [StageRecord.model_validate(row) for row in rows]

    def list_deals(self) -> list[DealDetail]:
        with self._session("list_deals") as session:
            rows = session.scalars(self._detail_query().order_by(Deal.order_index, Deal.created_at)).all()
            return [DealDetail.model_validate(row) for row in rows]

    def get_deal(self, deal_id: str) -> DealDetail | None:
        with self._session("get_deal") as session:
            return self._load_detail(session, deal_id)

    def update_stage(self, deal_id: str, stage_id: str, updated_at: datetime | None = None) -> None:
        """Move one deal to another stage; anything short of one updated row is an error."""
        with self._session("update_stage") as session:
            if session.get(PipelineStage, stage_id) is None:
                raise BackendError(f"Unknown stage: {stage_id}")
            deal = session.get(Deal, deal_id)
            if deal is None:
                raise BackendError(f"No deal updated for id: {deal_id}")
            deal.stage_id = stage_id
            deal.updated_at = updated_at or _utcnow()
            session.commit()

    def create_deal(self, payload: DealWriteRequest, created_by: str | None = None) -> DealDetail:
        with self._session("create_deal") as session:
            deal = Deal(
                deal_code=sanitize_text(payload.deal_code, max_len=64) or generate_deal_code(self._deal_code_prefix),
                order_index=0,
                created_by=created_by,
                **_scalar_fields(payload),
            )
            deal.products = _build_products(payload)
            deal.tags = _build_tags(payload)
            session.add(deal)
            session.commit()
            logger.info("deal.created", extra={"event": "deal.created", "deal_id": deal.id})
            return self._load_detail(session, deal.id)

    def save_deal(self, deal_id: str, payload: DealWriteRequest) -> DealDetail:
        """Update a deal and replace its product lines and tags wholesale.

        The field update, the child delete and the child insert are three
        separate commits; a failure after the delete leaves the deal without
        lines or tags.
        """
        with self._session("save_deal") as session:
            deal = session.scalars(
                select(Deal).options(selectinload(Deal.products), selectinload(Deal.tags)).where(Deal.id == deal_id)
            ).first()
            if deal is None:
                raise NotFoundError(f"Deal not found: {deal_id}")

            if payload.deal_code:
                deal.deal_code = sanitize_text(payload.deal_code, max_len=64)
            for field, value in _scalar_fields(payload).items():
                setattr(deal, field, value)
            deal.updated_at = _utcnow()
            session.commit()

            deal.products.clear()
            deal.tags.clear()
            session.commit()

            deal.products.extend(_build_products(payload))
            deal.tags.extend(_build_tags(payload))
            session.commit()

            logger.info("deal.saved", extra={"event": "deal.saved", "deal_id": deal_id})
            return self._load_detail(session, deal_id)

    def delete_deal(self, deal_id: str) -> None:
        with self._session("delete_deal") as session:
            deal = session.get(Deal, deal_id)
            if deal is None:
                raise NotFoundError(f"Deal not found: {deal_id}")
            session.delete(deal)
            session.commit()
            logger.info("deal.deleted", extra={"event": "deal.deleted", "deal_id": deal_id})
