"""WebSocket connection registry.

Holds the live connections that receive board change events. Use via
app.state.ws_manager (set in lifespan). Membership is lock-protected;
iteration always works on a copy taken under the lock, so connects and
disconnects during a broadcast never disturb it.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.api.websocket.connection import Connection


class ConnectionRegistry:
    """Set of currently-live connections.

    - add/remove are idempotent (no duplicate entries).
    - members/for_each operate on a membership snapshot.
    - count is lock-protected for concurrent access.
    """

    def __init__(self) -> None:
        """Initialize with no connections."""
        self._connections: set[Connection] = set()
        self._lock = asyncio.Lock()

    async def add(self, connection: Connection) -> None:
        """Register a connection for fan-out.

        Args:
            connection: Connection to track.
        """
        async with self._lock:
            self._connections.add(connection)

    async def remove(self, connection: Connection) -> bool:
        """Remove a connection (call on disconnect).

        Args:
            connection: Connection to remove.

        Returns:
            True if it was registered.
        """
        async with self._lock:
            if connection in self._connections:
                self._connections.remove(connection)
                return True
            return False

    async def remove_many(self, connections: Iterable[Connection]) -> None:
        """Remove several connections at once (e.g. ones found dead during fan-out)."""
        async with self._lock:
            self._connections.difference_update(connections)

    async def members(self) -> list[Connection]:
        """Return a copy of the current membership."""
        async with self._lock:
            return list(self._connections)

    async def for_each(
        self, fn: Callable[[Connection], Awaitable[None] | None]
    ) -> None:
        """Call fn for every connection registered at call time.

        The lock is not held while fn runs; fn may itself add or remove
        connections.
        """
        for connection in await self.members():
            result = fn(connection)
            if inspect.isawaitable(result):
                await result

    async def count(self) -> int:
        """Return the number of registered connections (lock-safe)."""
        async with self._lock:
            return len(self._connections)
