"""Application ports (protocols implemented outside the application layer)."""

from app.application.interfaces.services import IEventPublisher, IStorageService

__all__ = [
    "IEventPublisher",
    "IStorageService",
]
