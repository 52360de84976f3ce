"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from dealboard.api.v1 import board, deals, health, integrations, settings, stages


def get_api_router(prefix: str = "/api/v1") -> APIRouter:
    api_router = APIRouter(prefix=prefix)
    api_router.include_router(health.router)
    api_router.include_router(stages.router)
    api_router.include_router(board.router)
    api_router.include_router(deals.router)
    api_router.include_router(integrations.router)
    api_router.include_router(settings.router)
    return api_router
