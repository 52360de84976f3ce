"""Application entrypoint for the deal board API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.orm import Session, sessionmaker

from dealboard.api.v1.router import get_api_router
from dealboard.core.config import Config, get_config
from dealboard.core.exceptions import LoadError
from dealboard.core.logging_config import configure_logging
from dealboard.core.startup import validate_startup_config
from dealboard.database.db import build_engine, build_session_factory
from dealboard.orchestration.board_state import BoardSynchronizer
from dealboard.orchestration.change_feed import ChangeFeed
from dealboard.orchestration.notifications import NotificationCenter
from dealboard.services.deal_store import DealStoreClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: Config = app.state.config
    configure_logging()

    engine = None
    session_factory = app.state.session_factory
    if session_factory is None:
        engine = build_engine(cfg.DATABASE_URL)
        validate_startup_config(cfg, engine)
        session_factory = build_session_factory(engine)
        app.state.session_factory = session_factory

    store = DealStoreClient(session_factory, deal_code_prefix=cfg.DEAL_CODE_PREFIX)
    board = BoardSynchronizer(store, NotificationCenter(maxlen=cfg.NOTIFICATION_BUFFER_SIZE))
    change_feed = ChangeFeed(lambda tables: board.load(), debounce_seconds=cfg.BOARD_RELOAD_DEBOUNCE_SECONDS)
    change_feed.attach(session_factory)
    app.state.store = store
    app.state.board = board
    app.state.change_feed = change_feed

    try:
        await board.load()
    except LoadError:
        logger.warning("startup.board.initial_load_failed", extra={"event": "startup.board.initial_load_failed"})

    try:
        yield
    finally:
        change_feed.close()
        if engine is not None:
            app.state.session_factory = None
            engine.dispose()


def create_app(config: Config | None = None, session_factory: sessionmaker[Session] | None = None) -> FastAPI:
    """Create the FastAPI application; tests inject their own session factory."""
    cfg = config or get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, lifespan=lifespan)
    app.state.config = cfg
    app.state.session_factory = session_factory
    app.include_router(get_api_router(cfg.API_PREFIX))

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Expose ASGI app for `uvicorn dealboard.main:app`.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    cfg = get_config()
    uvicorn.run("dealboard.main:app", host=cfg.API_HOST, port=cfg.API_PORT)
