"""Application DTOs: board snapshot and change events (no transport types)."""

from app.application.dtos.board import BoardSnapshot
from app.application.dtos.events import (
    ChangeEvent,
    PublishedEvent,
    TaskCreated,
    TaskDeleted,
    TaskMoved,
    TaskUpdated,
)

__all__ = [
    "BoardSnapshot",
    "ChangeEvent",
    "PublishedEvent",
    "TaskCreated",
    "TaskDeleted",
    "TaskMoved",
    "TaskUpdated",
]
