"""Presentation-layer dependency injection.

Provides FastAPI Depends() getters for the services built in lifespan and
kept on app.state. Routes depend only on these, never on infra directly.
"""

from __future__ import annotations

from fastapi import Request

from app.api.websocket import Broadcaster, ConnectionRegistry
from app.application.interfaces.services import IStorageService
from app.application.services.board_store import BoardStore
from app.application.use_cases.attachments import AttachmentService
from app.application.use_cases.mutations import MutationProcessor


def get_board_store(request: Request) -> BoardStore:
    return request.app.state.board_store


def get_mutation_processor(request: Request) -> MutationProcessor:
    return request.app.state.mutation_processor


def get_attachment_service(request: Request) -> AttachmentService:
    return request.app.state.attachment_service


def get_storage(request: Request) -> IStorageService:
    return request.app.state.storage


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster


def get_ws_manager(request: Request) -> ConnectionRegistry:
    return request.app.state.ws_manager


def get_request_id(request: Request) -> str | None:
    """Request id set by RequestIDMiddleware (None outside HTTP middleware)."""
    return getattr(request.state, "request_id", None)
