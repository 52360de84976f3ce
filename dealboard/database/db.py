"""Database engine and session factory management."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from dealboard.core.config import get_config

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """Create an engine for the given URL (defaults to the configured one)."""
    config = get_config()
    url = database_url or config.DATABASE_URL
    kwargs: dict = {"echo": config.DEBUG if echo is None else echo, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # Store calls run on worker threads.
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(pool_recycle=3600, pool_size=10, max_overflow=20)

    engine = create_engine(url, **kwargs)
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Context-manager wrapper for safe DB session lifecycle."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def verify_database_connection(engine: Engine) -> bool:
    """Verify DB connectivity during startup."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as exc:  # pragma: no cover - exercised in deployment.
        logger.error(
            "database.connection_failed",
            extra={"event": "database.connection_failed", "reason": str(exc)},
        )
        return False
