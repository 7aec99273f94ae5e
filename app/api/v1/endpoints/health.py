"""Health check endpoints: liveness and readiness probes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.v1.dependencies import get_board_store, get_broadcaster
from app.api.websocket import Broadcaster
from app.application.services.board_store import BoardStore
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Broadcast fan-out not running", "model": ReadinessErrorResponse}},
)
async def readiness_check(
    store: BoardStore = Depends(get_board_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> ReadinessResponse | JSONResponse:
    """Return 200 once the board is loaded and change events are being delivered; else 503."""
    if broadcaster.running:
        return ReadinessResponse(columns=store.columns)
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(
            message="Broadcast fan-out is not running",
        ).model_dump(),
    )
