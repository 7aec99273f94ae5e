"""Pydantic schemas for REST bodies/responses and WebSocket messages."""

from app.schemas.board import BoardResponse, BoardStatsResponse
from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse
from app.schemas.task import (
    AttachmentResponse,
    AttachmentUploadResponse,
    TaskCreateRequest,
    TaskDeleteRequest,
    TaskDeleteResponse,
    TaskMoveBody,
    TaskMoveRequest,
    TaskMoveResponse,
    TaskPatch,
    TaskResponse,
    TaskUpdateRequest,
    TaskWithColumnResponse,
)
from app.schemas.websocket import InboundMessage, WebSocketStatusResponse

__all__ = [
    "AttachmentResponse",
    "AttachmentUploadResponse",
    "BoardResponse",
    "BoardStatsResponse",
    "HealthResponse",
    "InboundMessage",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "TaskCreateRequest",
    "TaskDeleteRequest",
    "TaskDeleteResponse",
    "TaskMoveBody",
    "TaskMoveRequest",
    "TaskMoveResponse",
    "TaskPatch",
    "TaskResponse",
    "TaskUpdateRequest",
    "TaskWithColumnResponse",
    "WebSocketStatusResponse",
]
