"""Dependency providers for API handlers."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from dealboard.core.config import Config
from dealboard.database.db import session_scope
from dealboard.orchestration.board_state import BoardSynchronizer
from dealboard.services.deal_store import DealStoreClient


def get_settings(request: Request) -> Config:
    return request.app.state.config


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a request-scoped session from the application's session factory."""
    with session_scope(request.app.state.session_factory) as db:
        yield db


def get_store(request: Request) -> DealStoreClient:
    return request.app.state.store


def get_board(request: Request) -> BoardSynchronizer:
    return request.app.state.board


def get_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str | None:
    return x_user_id.strip() if x_user_id and x_user_id.strip() else None


def require_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    user_id = get_user_id(x_user_id)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not authenticated")
    return user_id
