"""WebSocket API schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WebSocketStatusResponse(BaseModel):
    """Response for GET /ws/status (connection count)."""

    total_connections: int = Field(..., description="Number of active WebSocket connections")
    published_events: int = Field(..., description="Change events published since startup")
    board_version: int = Field(..., description="Current board version")


class InboundMessage(BaseModel):
    """Envelope of every client -> server WebSocket message."""

    model_config = ConfigDict(extra="ignore")

    type: str = Field(..., min_length=1)
    request_id: str | None = Field(default=None, max_length=128)
    data: dict[str, Any] = Field(default_factory=dict)
