"""Board API: full snapshot and aggregate counts."""

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_board_store
from app.application.services.board_store import BoardStore
from app.schemas.board import BoardResponse, BoardStatsResponse

router = APIRouter()


@router.get("", response_model=BoardResponse)
async def get_board(store: BoardStore = Depends(get_board_store)):
    """Return every column with its tasks in order, plus the board version."""
    snapshot = await store.snapshot()
    return snapshot.to_dict()


@router.get("/stats", response_model=BoardStatsResponse)
async def get_board_stats(store: BoardStore = Depends(get_board_store)):
    """Task counts per column, priority and category."""
    snapshot = await store.snapshot()
    return snapshot.stats()
