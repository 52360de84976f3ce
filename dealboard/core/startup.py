"""Startup validation helpers."""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from dealboard.core.config import Config
from dealboard.database.db import verify_database_connection

logger = logging.getLogger(__name__)


def validate_startup_config(config: Config, engine: Engine) -> None:
    """Fail-fast connectivity check when the database is required."""
    database_ok = verify_database_connection(engine)
    if not database_ok and config.DB_CONNECTIVITY_REQUIRED:
        raise RuntimeError("Database connectivity check failed.")
    if not database_ok:
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": config.DATABASE_URL.split("://", 1)[0],
            "db_connectivity_required": config.DB_CONNECTIVITY_REQUIRED,
        },
    )
