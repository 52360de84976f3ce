"""Schema upgrade and seed data for the deal board database."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from dealboard.core.config import get_config
from dealboard.core.logging_config import configure_logging
from dealboard.database.db import build_engine, build_session_factory, session_scope
from dealboard.models import PipelineStage

PROJECT_ROOT = Path(__file__).resolve().parents[2]

logger = logging.getLogger(__name__)

DEFAULT_PIPELINE_STAGES = [
    {"name": "Lead", "order_index": 0, "color": "#3B82F6"},
    {"name": "Qualified", "order_index": 1, "color": "#F59E0B"},
    {"name": "Proposal", "order_index": 2, "color": "#8B5CF6"},
    {"name": "Negotiation", "order_index": 3, "color": "#EC4899"},
    {"name": "Closed", "order_index": 4, "color": "#10B981"},
]


def _build_alembic_config(database_url: str) -> AlembicConfig:
    cfg = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def seed_default_stages(session_factory: sessionmaker[Session]) -> int:
    """Insert the default stages into an empty stage table; returns rows inserted."""
    with session_scope(session_factory) as session:
        existing = session.scalar(select(func.count()).select_from(PipelineStage)) or 0
        if existing:
            return 0
        session.add_all(PipelineStage(**stage) for stage in DEFAULT_PIPELINE_STAGES)
        session.commit()
    logger.info(
        "database.stages.seeded",
        extra={"event": "database.stages.seeded", "count": len(DEFAULT_PIPELINE_STAGES)},
    )
    return len(DEFAULT_PIPELINE_STAGES)


def init_db(database_url: str | None = None) -> None:
    config = get_config()
    active_url = database_url or config.DATABASE_URL
    command.upgrade(_build_alembic_config(active_url), "head")
    logger.info(
        "database.schema.upgraded",
        extra={"event": "database.schema.upgraded", "database_url_scheme": active_url.split("://", 1)[0]},
    )

    if config.SEED_DEFAULT_STAGES:
        engine = build_engine(active_url)
        try:
            seed_default_stages(build_session_factory(engine))
        finally:
            engine.dispose()


if __name__ == "__main__":
    configure_logging()
    init_db()
