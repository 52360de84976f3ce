from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
import uuid

import pytest
from fastapi.testclient import TestClient

from dealboard.database.db import build_engine, build_session_factory
from dealboard.main import create_app
from dealboard.models import Base, Deal, DealStatus, PipelineStage
from dealboard.schemas.deals import DealDetail
from dealboard.schemas.stages import StageRecord

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_stage(stage_id: str, order_index: int) -> StageRecord:
    return StageRecord(id=stage_id, name=stage_id.upper(), order_index=order_index, color="#3B82F6")


def make_deal(deal_id: str, stage_id: str, budget: str = "0", margin: str = "0") -> DealDetail:
    return DealDetail(
        id=deal_id,
        deal_code=f"MON-2026-{deal_id}",
        stage_id=stage_id,
        client_name=f"Client {deal_id}",
        client_initials="CL",
        avatar_color="#3B82F6",
        interested_products="",
        estimated_budget=Decimal(budget),
        margin=Decimal(margin),
        status=DealStatus.UNPAID,
        order_index=0,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def session_factory():
    tmp_root = Path(".test_tmp")
    tmp_root.mkdir(exist_ok=True)
    db_path = tmp_root / f"dealboard_test_{uuid.uuid4().hex}.db"
    engine = build_engine(f"sqlite:///{db_path}", echo=False)
    Base.metadata.create_all(bind=engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def board_data(session_factory):
    """Two stages (A then B) and one deal worth 100 sitting in A."""
    session = session_factory()
    try:
        session.add_all(
            [
                PipelineStage(id="stage-a", name="A", order_index=0, color="#3B82F6"),
                PipelineStage(id="stage-b", name="B", order_index=1, color="#10B981"),
            ]
        )
        session.commit()
        session.add(
            Deal(
                id="d1",
                deal_code="MON-2026-1",
                stage_id="stage-a",
                client_name="Acme Corp",
                client_initials="AC",
                estimated_budget=Decimal("100"),
                margin=Decimal("20"),
            )
        )
        session.commit()
    finally:
        session.close()
    return {"stage_a": "stage-a", "stage_b": "stage-b", "deal": "d1"}


@pytest.fixture
def client(session_factory, board_data):
    app = create_app(session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client
