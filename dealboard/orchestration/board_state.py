"""Board state synchronizer.

Holds the in-memory projection of stages and their deals that the board
renders. Drag moves are applied optimistically as a tentative projection,
then either committed (the write landed) or discarded by rebuilding the whole
projection from the database. Remote changes are never patched in; they
trigger the same full reload.

The projection is an immutable tuple of ``StageColumn`` values and is only
ever replaced by a single reference assignment, so a reader never sees a deal
in two columns or totals that disagree with the deal lists.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol

from dealboard.core.exceptions import LoadError, PersistError
from dealboard.orchestration.notifications import NotificationCenter
from dealboard.schemas.deals import DealDetail
from dealboard.schemas.stages import StageRecord
from dealboard.utils.validators import coerce_decimal

logger = logging.getLogger(__name__)


class BoardStore(Protocol):
    def list_stages(self) -> list[StageRecord]: ...

    def list_deals(self) -> list[DealDetail]: ...

    def update_stage(self, deal_id: str, stage_id: str, updated_at: datetime | None = None) -> None: ...


@dataclass(frozen=True)
class StageColumn:
    stage: StageRecord
    deals: tuple[DealDetail, ...]
    total_value: Decimal
    deal_count: int

    @classmethod
    def build(cls, stage: StageRecord, deals: Iterable[DealDetail]) -> "StageColumn":
        deals = tuple(deals)
        total = sum((coerce_decimal(deal.estimated_budget) for deal in deals), Decimal("0"))
        return cls(stage=stage, deals=deals, total_value=total, deal_count=len(deals))

    def without(self, deal: DealDetail) -> "StageColumn":
        return replace(
            self,
            deals=tuple(item for item in self.deals if item.id != deal.id),
            total_value=self.total_value - coerce_decimal(deal.estimated_budget),
            deal_count=self.deal_count - 1,
        )

    def with_deal(self, deal: DealDetail) -> "StageColumn":
        return replace(
            self,
            deals=self.deals + (deal,),
            total_value=self.total_value + coerce_decimal(deal.estimated_budget),
            deal_count=self.deal_count + 1,
        )


Projection = tuple[StageColumn, ...]


@dataclass(frozen=True)
class BoardSummary:
    total_pipeline: Decimal
    total_margin: Decimal
    deal_count: int


def build_projection(
    stages: Iterable[StageRecord], deals: Iterable[DealDetail]
) -> tuple[Projection, list[DealDetail]]:
    """Partition deals across stages; returns the projection and the deals no stage claimed."""
    stages = sorted(stages, key=lambda stage: stage.order_index)
    by_stage: dict[str, list[DealDetail]] = {stage.id: [] for stage in stages}
    orphans: list[DealDetail] = []
    for deal in deals:
        bucket = by_stage.get(deal.stage_id)
        if bucket is None:
            orphans.append(deal)
        else:
            bucket.append(deal)
    projection = tuple(StageColumn.build(stage, by_stage[stage.id]) for stage in stages)
    return projection, orphans


def summarize(projection: Projection) -> BoardSummary:
    return BoardSummary(
        total_pipeline=sum((column.total_value for column in projection), Decimal("0")),
        total_margin=sum(
            (coerce_decimal(deal.margin) for column in projection for deal in column.deals), Decimal("0")
        ),
        deal_count=sum(column.deal_count for column in projection),
    )


class DragOutcome(str, enum.Enum):
    NOT_FOUND = "not_found"
    UNCHANGED = "unchanged"
    MOVED = "moved"
    RECONCILED = "reconciled"


@dataclass(frozen=True)
class TentativeMove:
    """A stage move applied to the projection but not yet confirmed by the database."""

    deal: DealDetail
    target_stage_id: str
    base: Projection
    applied: Projection

    @property
    def origin_stage_id(self) -> str:
        return self.deal.stage_id


def stage_move(base: Projection, deal: DealDetail, target_stage_id: str) -> TentativeMove:
    moved = deal.model_copy(update={"stage_id": target_stage_id})
    columns = []
    for column in base:
        if column.stage.id == deal.stage_id:
            column = column.without(deal)
        elif column.stage.id == target_stage_id:
            column = column.with_deal(moved)
        columns.append(column)
    return TentativeMove(deal=deal, target_stage_id=target_stage_id, base=base, applied=tuple(columns))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BoardSynchronizer:
    """Optimistic projection of the pipeline board with reload-based reconciliation."""

    def __init__(
        self,
        store: BoardStore,
        notifications: NotificationCenter | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._notifications = notifications or NotificationCenter()
        self._clock = clock
        self._projection: Projection = ()
        self._pending_drag: DealDetail | None = None

    @property
    def projection(self) -> Projection:
        return self._projection

    @property
    def pending_drag(self) -> DealDetail | None:
        return self._pending_drag

    @property
    def notifications(self) -> NotificationCenter:
        return self._notifications

    def summary(self) -> BoardSummary:
        return summarize(self._projection)

    def find_deal(self, deal_id: str) -> DealDetail | None:
        for column in self._projection:
            for deal in column.deals:
                if deal.id == deal_id:
                    return deal
        return None

    async def load(self) -> Projection:
        """Rebuild the projection from the database.

        The current projection stays in place until both fetches succeed.
        """
        try:
            stages, deals = await asyncio.gather(
                asyncio.to_thread(self._store.list_stages),
                asyncio.to_thread(self._store.list_deals),
            )
        except Exception as exc:
            logger.exception("board.load.failed", extra={"event": "board.load.failed"})
            self._notifications.error("Failed to load pipeline data")
            raise LoadError("Failed to load pipeline data") from exc

        projection, orphans = build_projection(stages, deals)
        if orphans:
            logger.warning(
                "board.load.orphaned_deals",
                extra={
                    "event": "board.load.orphaned_deals",
                    "deal_ids": [deal.id for deal in orphans],
                    "stage_ids": sorted({deal.stage_id for deal in orphans}),
                },
            )
        self._projection = projection
        logger.debug(
            "board.load.completed",
            extra={"event": "board.load.completed", "stages": len(projection), "deals": len(deals) - len(orphans)},
        )
        return projection

    def begin_drag(self, deal_id: str) -> DealDetail | None:
        deal = self.find_deal(deal_id)
        if deal is not None:
            self._pending_drag = deal
        return deal

    def cancel_drag(self) -> None:
        self._pending_drag = None

    async def complete_drag(self, deal_id: str, target_stage_id: str) -> DragOutcome:
        """Drop a deal onto a stage column."""
        deal = self.find_deal(deal_id)
        self._pending_drag = None
        if deal is None:
            logger.warning("board.drag.deal_not_found", extra={"event": "board.drag.deal_not_found", "deal_id": deal_id})
            return DragOutcome.NOT_FOUND
        if deal.stage_id == target_stage_id:
            return DragOutcome.UNCHANGED

        move = stage_move(self._projection, deal, target_stage_id)
        self._apply(move)
        try:
            await self._persist(move)
        except PersistError:
            await self._discard(move)
            self._notifications.error("Failed to move deal")
            return DragOutcome.RECONCILED

        self._commit(move)
        self._notifications.success("Deal moved successfully")
        return DragOutcome.MOVED

    def _apply(self, move: TentativeMove) -> None:
        self._projection = move.applied

    async def _persist(self, move: TentativeMove) -> None:
        try:
            await asyncio.to_thread(self._store.update_stage, move.deal.id, move.target_stage_id, self._clock())
        except Exception as exc:
            logger.warning(
                "board.move.persist_failed",
                extra={
                    "event": "board.move.persist_failed",
                    "deal_id": move.deal.id,
                    "from_stage_id": move.origin_stage_id,
                    "to_stage_id": move.target_stage_id,
                    "reason": str(exc),
                },
            )
            raise PersistError(str(exc)) from exc

    def _commit(self, move: TentativeMove) -> None:
        logger.info(
            "board.move.committed",
            extra={
                "event": "board.move.committed",
                "deal_id": move.deal.id,
                "from_stage_id": move.origin_stage_id,
                "to_stage_id": move.target_stage_id,
            },
        )

    async def _discard(self, move: TentativeMove) -> None:
        try:
            await self.load()
        except LoadError:
            if self._projection is move.applied:
                self._projection = move.base
                logger.warning(
                    "board.move.restored_snapshot",
                    extra={"event": "board.move.restored_snapshot", "deal_id": move.deal.id},
                )
