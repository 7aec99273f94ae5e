"""WebSocket endpoint: single /ws that uses the sync gateway from app.state.

Each client gets board:init on connect, then every change event in commit
order. Inbound frames are JSON commands handled by the gateway.
"""

from fastapi import APIRouter, Depends, WebSocket

from app.api.v1.dependencies import get_board_store, get_broadcaster, get_ws_manager
from app.api.websocket import Broadcaster, ConnectionRegistry
from app.application.services.board_store import BoardStore
from app.schemas.websocket import WebSocketStatusResponse

router = APIRouter()


@router.websocket("")
async def websocket_endpoint(websocket: WebSocket):
    """Accept, register and snapshot the client; feed its frames to the gateway until it leaves."""
    gateway = websocket.app.state.sync_gateway
    connection = await gateway.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            await gateway.handle(connection, raw)
    finally:
        await gateway.disconnect(connection)


@router.get("/status", response_model=WebSocketStatusResponse)
async def websocket_status(
    registry: ConnectionRegistry = Depends(get_ws_manager),
    broadcaster: Broadcaster = Depends(get_broadcaster),
    store: BoardStore = Depends(get_board_store),
):
    """Number of connected clients and fan-out counters."""
    return WebSocketStatusResponse(
        total_connections=await registry.count(),
        published_events=broadcaster.published_count,
        board_version=store.version,
    )
