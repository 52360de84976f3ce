"""Board projection and drag-and-drop endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from dealboard.api.deps import get_board
from dealboard.core.exceptions import LoadError
from dealboard.orchestration.board_state import BoardSynchronizer
from dealboard.schemas.board import (
    BoardResponse,
    BoardSummaryResponse,
    DragStartRequest,
    MoveRequest,
    MoveResponse,
    NotificationResponse,
    StageColumnResponse,
)

router = APIRouter(tags=["board"])


def board_response(board: BoardSynchronizer) -> BoardResponse:
    projection = board.projection
    summary = board.summary()
    pending = board.pending_drag
    return BoardResponse(
        stages=[
            StageColumnResponse(
                id=column.stage.id,
                name=column.stage.name,
                order_index=column.stage.order_index,
                color=column.stage.color,
                deals=list(column.deals),
                total_value=column.total_value,
                deal_count=column.deal_count,
            )
            for column in projection
        ],
        summary=BoardSummaryResponse(
            total_pipeline=summary.total_pipeline,
            total_margin=summary.total_margin,
            deal_count=summary.deal_count,
        ),
        pending_drag_id=pending.id if pending is not None else None,
    )


@router.get("/board", response_model=BoardResponse)
async def read_board(board: BoardSynchronizer = Depends(get_board)) -> BoardResponse:
    return board_response(board)


@router.post("/board/reload", response_model=BoardResponse)
async def reload_board(board: BoardSynchronizer = Depends(get_board)) -> BoardResponse:
    try:
        await board.load()
    except LoadError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return board_response(board)


@router.post("/board/drag")
async def begin_drag(payload: DragStartRequest, board: BoardSynchronizer = Depends(get_board)) -> dict:
    deal = board.begin_drag(payload.deal_id)
    return {"pending_drag_id": deal.id if deal is not None else None}


@router.delete("/board/drag", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_drag(board: BoardSynchronizer = Depends(get_board)) -> Response:
    board.cancel_drag()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/board/moves", response_model=MoveResponse)
async def move_deal(payload: MoveRequest, board: BoardSynchronizer = Depends(get_board)) -> MoveResponse:
    outcome = await board.complete_drag(payload.deal_id, payload.target_stage_id)
    return MoveResponse(outcome=outcome.value, board=board_response(board))


@router.get("/board/notifications", response_model=list[NotificationResponse])
async def drain_notifications(board: BoardSynchronizer = Depends(get_board)) -> list[NotificationResponse]:
    return [
        NotificationResponse(
            level=item.level,
            title=item.title,
            description=item.description,
            created_at=item.created_at,
        )
        for item in board.notifications.drain()
    ]
