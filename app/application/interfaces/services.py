"""Service interfaces (ports) for the application layer.

Protocols define contracts the application layer depends on; the
WebSocket fan-out and the storage backend implement them (DIP).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, BinaryIO, Protocol

if TYPE_CHECKING:
    from app.application.dtos.events import ChangeEvent


class IEventPublisher(Protocol):
    """Receives every committed change event, in commit order.

    publish is called inside the board store's critical section, so
    implementations must only enqueue in memory: no awaiting, no I/O.
    """

    def publish(self, event: ChangeEvent, request_id: str | None = None) -> None:
        """Queue the event for delivery to all observers."""


class IStorageService(Protocol):
    """Protocol for attachment blob storage."""

    async def save(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        content_type: str,
        max_size: int | None = None,
    ) -> int:
        """Store the blob under storage_ref; return its size in bytes."""
        ...

    def open(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream the stored blob."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete the blob. Returns True if deleted, False if not found."""
        ...

    async def exists(self, storage_ref: str) -> bool:
        """Return True if the blob exists."""
        ...
