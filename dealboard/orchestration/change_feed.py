"""Change feed turning committed writes into debounced board reloads.

Writes to the watched tables are detected through SQLAlchemy session events
on the store's session factory. A notification carries no row data; it only
says the projection is stale. Bursts (a deal edit touches three tables in
three commits) are coalesced into one reload.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from itertools import chain

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session, sessionmaker

from dealboard.core.exceptions import LoadError

logger = logging.getLogger(__name__)

WATCHED_TABLES = frozenset({"deals", "deal_products", "deal_tags"})
_TOUCHED_KEY = "dealboard.touched_tables"

Invalidate = Callable[[frozenset[str]], Awaitable[object]]


class ChangeFeed:
    """Coalescing invalidation signal for the board synchronizer."""

    def __init__(
        self,
        on_invalidate: Invalidate,
        loop: asyncio.AbstractEventLoop | None = None,
        debounce_seconds: float = 0.25,
        watched_tables: Iterable[str] = WATCHED_TABLES,
    ) -> None:
        self._on_invalidate = on_invalidate
        self._loop = loop or asyncio.get_running_loop()
        self._debounce_seconds = debounce_seconds
        self._watched = frozenset(watched_tables)
        self._pending: set[str] = set()
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self._session_factory: sessionmaker[Session] | None = None

    def attach(self, session_factory: sessionmaker[Session]) -> None:
        """Listen for committed writes made through sessions of this factory."""
        if self._session_factory is not None:
            raise RuntimeError("ChangeFeed is already attached")
        event.listen(session_factory, "after_flush", self._after_flush)
        event.listen(session_factory, "after_commit", self._after_commit)
        event.listen(session_factory, "after_rollback", self._after_rollback)
        self._session_factory = session_factory

    def detach(self) -> None:
        if self._session_factory is None:
            return
        event.remove(self._session_factory, "after_flush", self._after_flush)
        event.remove(self._session_factory, "after_commit", self._after_commit)
        event.remove(self._session_factory, "after_rollback", self._after_rollback)
        self._session_factory = None

    def _after_flush(self, session: Session, flush_context) -> None:
        touched = session.info.setdefault(_TOUCHED_KEY, set())
        for obj in chain(session.new, session.dirty, session.deleted):
            touched.add(inspect(obj).mapper.local_table.name)

    def _after_commit(self, session: Session) -> None:
        touched = session.info.pop(_TOUCHED_KEY, None)
        if touched:
            self.publish(touched)

    def _after_rollback(self, session: Session) -> None:
        session.info.pop(_TOUCHED_KEY, None)

    def publish(self, tables: Iterable[str]) -> None:
        """Report changed tables; safe to call from any thread."""
        relevant = self._watched.intersection(tables)
        if not relevant or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._schedule, relevant)

    def _schedule(self, tables: frozenset[str]) -> None:
        self._pending.update(tables)
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._loop.call_later(self._debounce_seconds, self._fire)

    def _fire(self) -> None:
        self._timer = None
        tables = frozenset(self._pending)
        self._pending.clear()
        task = self._loop.create_task(self._invalidate(tables))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _invalidate(self, tables: frozenset[str]) -> None:
        logger.debug("board.invalidated", extra={"event": "board.invalidated", "tables": sorted(tables)})
        try:
            await self._on_invalidate(tables)
        except LoadError:
            logger.warning("board.invalidation.reload_failed", extra={"event": "board.invalidation.reload_failed"})

    async def flush(self) -> None:
        """Run any pending invalidation now and wait for in-flight reloads."""
        await asyncio.sleep(0)
        if self._timer is not None:
            self._timer.cancel()
            self._fire()
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending.clear()
        for task in self._tasks:
            task.cancel()
        self.detach()
