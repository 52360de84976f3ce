from __future__ import annotations

import asyncio
import logging
import threading
from decimal import Decimal

import pytest

from conftest import NOW, make_deal, make_stage
from dealboard.core.exceptions import BackendError, LoadError
from dealboard.orchestration.board_state import BoardSynchronizer, DragOutcome, build_projection
from dealboard.orchestration.notifications import NotificationLevel


class FakeStore:
    def __init__(self, stages, deals) -> None:
        self.stages = list(stages)
        self.deals = {deal.id: deal for deal in deals}
        self.updates: list[tuple] = []
        self.list_calls = 0
        self.fail_list = False
        self.fail_update = False
        self.on_update = None

    def list_stages(self):
        if self.fail_list:
            raise BackendError("stages unavailable")
        return list(self.stages)

    def list_deals(self):
        self.list_calls += 1
        if self.fail_list:
            raise BackendError("deals unavailable")
        return list(self.deals.values())

    def update_stage(self, deal_id, stage_id, updated_at=None):
        self.updates.append((deal_id, stage_id, updated_at))
        if self.on_update is not None:
            self.on_update()
        if self.fail_update:
            raise BackendError("write failed")
        if stage_id not in {stage.id for stage in self.stages} or deal_id not in self.deals:
            raise BackendError("no row updated")
        self.deals[deal_id] = self.deals[deal_id].model_copy(update={"stage_id": stage_id})


class GatedStore(FakeStore):
    """Holds the next deal fetch back until released; the snapshot is taken before blocking."""

    def __init__(self, stages, deals) -> None:
        super().__init__(stages, deals)
        self.hold_next = False
        self.started = threading.Event()
        self.release = threading.Event()

    def list_deals(self):
        snapshot = super().list_deals()
        if self.hold_next:
            self.hold_next = False
            self.started.set()
            self.release.wait(timeout=5)
        return snapshot


def _two_stage_store(*deals):
    return FakeStore([make_stage("b", 1), make_stage("a", 0)], deals)


def _columns(board):
    return {column.stage.id: column for column in board.projection}


def _loaded(store):
    board = BoardSynchronizer(store, clock=lambda: NOW)
    asyncio.run(board.load())
    return board


def test_load_orders_stages_and_computes_totals():
    store = FakeStore(
        [make_stage("b", 1), make_stage("a", 0), make_stage("c", 2)],
        [make_deal("1", "a", "100.50"), make_deal("2", "a", "49.50"), make_deal("3", "b", "10")],
    )
    board = _loaded(store)

    assert [column.stage.id for column in board.projection] == ["a", "b", "c"]
    for column in board.projection:
        assert column.total_value == sum((deal.estimated_budget for deal in column.deals), Decimal("0"))
        assert column.deal_count == len(column.deals)
    columns = _columns(board)
    assert columns["a"].total_value == Decimal("150.00")
    assert columns["c"].deal_count == 0


def test_load_drops_and_logs_deals_without_a_stage(caplog):
    store = _two_stage_store(make_deal("1", "a", "5"), make_deal("ghost", "archived", "999"))
    with caplog.at_level(logging.WARNING, logger="dealboard.orchestration.board_state"):
        board = _loaded(store)

    assert board.find_deal("ghost") is None
    assert board.summary().deal_count == 1
    assert any(getattr(record, "event", None) == "board.load.orphaned_deals" for record in caplog.records)


def test_load_failure_keeps_previous_projection_and_notifies():
    store = _two_stage_store(make_deal("1", "a", "5"))
    board = _loaded(store)
    before = board.projection

    store.fail_list = True
    with pytest.raises(LoadError):
        asyncio.run(board.load())

    assert board.projection is before
    notes = board.notifications.drain()
    assert [(note.level, note.description) for note in notes] == [
        (NotificationLevel.ERROR, "Failed to load pipeline data")
    ]


def test_begin_drag_records_pending_deal_and_ignores_unknown_ids():
    board = _loaded(_two_stage_store(make_deal("1", "a", "5")))

    assert board.begin_drag("missing") is None
    assert board.pending_drag is None

    board.begin_drag("1")
    assert board.pending_drag.id == "1"


def test_drop_on_same_stage_is_a_no_op():
    store = _two_stage_store(make_deal("1", "a", "100"))
    board = _loaded(store)
    before = board.projection

    outcome = asyncio.run(board.complete_drag("1", "a"))

    assert outcome is DragOutcome.UNCHANGED
    assert board.projection is before
    assert store.updates == []


def test_drop_of_unknown_deal_is_a_no_op():
    store = _two_stage_store(make_deal("1", "a", "100"))
    board = _loaded(store)
    before = board.projection

    assert asyncio.run(board.complete_drag("nope", "b")) is DragOutcome.NOT_FOUND
    assert board.projection is before
    assert store.updates == []


def test_successful_move_updates_both_columns_by_budget():
    store = _two_stage_store(make_deal("1", "a", "100"))
    board = _loaded(store)
    board.begin_drag("1")

    outcome = asyncio.run(board.complete_drag("1", "b"))

    assert outcome is DragOutcome.MOVED
    columns = _columns(board)
    assert (columns["a"].total_value, columns["a"].deal_count) == (Decimal("0"), 0)
    assert (columns["b"].total_value, columns["b"].deal_count) == (Decimal("100"), 1)
    assert columns["b"].deals[0].stage_id == "b"
    assert board.pending_drag is None
    assert store.updates == [("1", "b", NOW)]
    assert store.list_calls == 1
    assert [note.description for note in board.notifications.drain()] == ["Deal moved successfully"]


def test_move_leaves_other_columns_untouched():
    store = FakeStore(
        [make_stage("a", 0), make_stage("b", 1), make_stage("c", 2)],
        [make_deal("1", "a", "10"), make_deal("2", "c", "7")],
    )
    board = _loaded(store)
    untouched = _columns(board)["c"]

    asyncio.run(board.complete_drag("1", "b"))

    assert _columns(board)["c"] is untouched


def test_optimistic_state_is_visible_before_write_completes():
    store = _two_stage_store(make_deal("1", "a", "100"))
    board = _loaded(store)
    seen = {}

    def snapshot():
        columns = _columns(board)
        seen["a"] = [deal.id for deal in columns["a"].deals]
        seen["b"] = [deal.id for deal in columns["b"].deals]
        seen["totals"] = (columns["a"].total_value, columns["b"].total_value)

    store.on_update = snapshot
    asyncio.run(board.complete_drag("1", "b"))

    assert seen == {"a": [], "b": ["1"], "totals": (Decimal("0"), Decimal("100"))}


def test_failed_write_reloads_once_and_matches_fresh_load():
    store = _two_stage_store(make_deal("1", "a", "100"), make_deal("2", "b", "3"))
    board = _loaded(store)
    store.fail_update = True

    outcome = asyncio.run(board.complete_drag("1", "b"))

    assert outcome is DragOutcome.RECONCILED
    assert store.list_calls == 2
    fresh, _ = build_projection(store.list_stages(), store.list_deals())
    assert board.projection == fresh
    columns = _columns(board)
    assert [deal.id for deal in columns["a"].deals] == ["1"]
    assert columns["b"].total_value == Decimal("3")
    assert board.notifications.drain()[-1].description == "Failed to move deal"


def test_failed_write_picks_up_concurrent_remote_changes():
    store = _two_stage_store(make_deal("1", "a", "100"))
    board = _loaded(store)
    store.fail_update = True

    def remote_insert():
        store.deals["2"] = make_deal("2", "b", "40")

    store.on_update = remote_insert
    asyncio.run(board.complete_drag("1", "b"))

    columns = _columns(board)
    assert [deal.id for deal in columns["b"].deals] == ["2"]
    assert columns["a"].deal_count == 1


def test_move_to_unknown_stage_is_reconciled():
    store = _two_stage_store(make_deal("1", "a", "100"))
    board = _loaded(store)

    outcome = asyncio.run(board.complete_drag("1", "nowhere"))

    assert outcome is DragOutcome.RECONCILED
    assert board.find_deal("1").stage_id == "a"


def test_failed_reconcile_restores_snapshot_from_before_the_move():
    store = _two_stage_store(make_deal("1", "a", "100"))
    board = _loaded(store)
    before = board.projection

    def backend_down():
        store.fail_list = True

    store.fail_update = True
    store.on_update = backend_down
    outcome = asyncio.run(board.complete_drag("1", "b"))

    assert outcome is DragOutcome.RECONCILED
    assert board.projection is before


def test_summary_totals_pipeline_and_margin():
    store = _two_stage_store(make_deal("1", "a", "100", margin="20"), make_deal("2", "b", "50.25", margin="5.75"))
    board = _loaded(store)

    summary = board.summary()

    assert summary.total_pipeline == Decimal("150.25")
    assert summary.total_margin == Decimal("25.75")
    assert summary.deal_count == 2


def _counts(board):
    return {stage_id: column.deal_count for stage_id, column in _columns(board).items()}


def test_overlapping_loads_last_to_finish_wins():
    store = GatedStore([make_stage("a", 0), make_stage("b", 1)], [make_deal("1", "a", "100")])
    board = _loaded(store)
    seen = {}

    async def scenario():
        store.hold_next = True
        slow = asyncio.create_task(board.load())
        await asyncio.to_thread(store.started.wait, 5)

        store.deals["1"] = store.deals["1"].model_copy(update={"stage_id": "b"})
        await board.load()
        seen["fast"] = _counts(board)

        store.release.set()
        await slow

    asyncio.run(scenario())

    assert seen["fast"] == {"a": 0, "b": 1}
    assert _counts(board) == {"a": 1, "b": 0}


def test_remote_load_during_pending_write_is_superseded_by_next_load():
    store = GatedStore([make_stage("a", 0), make_stage("b", 1)], [make_deal("1", "a", "100")])
    board = _loaded(store)
    slow_done = threading.Event()
    seen = {}

    def while_writing():
        seen["mid"] = _counts(board)
        store.release.set()
        slow_done.wait(timeout=5)
        seen["after_slow_load"] = _counts(board)

    async def scenario():
        store.hold_next = True
        slow = asyncio.create_task(board.load())
        slow.add_done_callback(lambda task: slow_done.set())
        await asyncio.to_thread(store.started.wait, 5)

        store.on_update = while_writing
        outcome = await board.complete_drag("1", "b")
        await slow
        return outcome

    outcome = asyncio.run(scenario())

    assert outcome is DragOutcome.MOVED
    assert seen == {"mid": {"a": 0, "b": 1}, "after_slow_load": {"a": 1, "b": 0}}
    assert store.deals["1"].stage_id == "b"

    asyncio.run(board.load())
    assert _counts(board) == {"a": 0, "b": 1}
