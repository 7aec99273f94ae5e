"""Application layer: board store, mutation processor, use cases, ports.

Depends only on domain and protocol definitions (DIP). The WebSocket
fan-out and the storage backend implement the ports.
"""

from app.application.interfaces import IEventPublisher, IStorageService
from app.application.services.board_store import BoardStore
from app.application.use_cases.attachments import AttachmentService
from app.application.use_cases.mutations import MutationProcessor

__all__ = [
    "AttachmentService",
    "BoardStore",
    "IEventPublisher",
    "IStorageService",
    "MutationProcessor",
]
