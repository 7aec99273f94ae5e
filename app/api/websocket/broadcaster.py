"""Broadcast fan-out of board change events.

publish() is called by the mutation processor from inside the board
store's critical section: it only appends to an in-memory FIFO. A single
dispatcher task (started in lifespan) takes events off that FIFO in commit
order and enqueues each one on every registered connection. Sockets are
written by the connections' own sender tasks, never here, so a stalled
client delays nobody and a failed delivery never reaches the mutator.
"""

from __future__ import annotations

import asyncio

from app.api.websocket.manager import ConnectionRegistry
from app.application.dtos.events import ChangeEvent, PublishedEvent
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class Broadcaster:
    """Delivers every published change event to every registered connection (IEventPublisher)."""

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry
        self._queue: asyncio.Queue[PublishedEvent] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self.published_count = 0
        self.delivered_count = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def publish(self, event: ChangeEvent, request_id: str | None = None) -> None:
        """Queue an event for fan-out. Never blocks, never raises for delivery problems."""
        self._queue.put_nowait(PublishedEvent(event, request_id))
        self.published_count += 1

    def start(self) -> None:
        """Start the dispatcher task (idempotent)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="board-fanout")
        logger.info("Broadcast fan-out started")

    async def stop(self) -> None:
        """Stop the dispatcher; events still queued are dropped."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Broadcast fan-out stopped")

    async def drain(self) -> None:
        """Wait until every event published so far has been handed to the connections."""
        await self._queue.join()

    async def deliver(self, item: PublishedEvent) -> int:
        """Enqueue one event on every current member; prune dead connections.

        Returns:
            Number of connections the event was queued for.
        """
        message = item.to_dict()
        members = await self.registry.members()
        delivered = 0
        for connection in members:
            if connection.enqueue_event(item.seq, message):
                delivered += 1
        dead = [c for c in members if c.closed]
        if dead:
            await self.registry.remove_many(dead)
            logger.info("Pruned %d dead connection(s) during fan-out", len(dead))
        self.delivered_count += delivered
        logger.debug(
            "Event %s seq %d queued for %d connection(s)",
            item.event.TYPE,
            item.seq,
            delivered,
        )
        return delivered

    async def _run(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                await self.deliver(item)
            except Exception:
                logger.exception("Fan-out of event seq %d failed", item.seq)
            finally:
                self._queue.task_done()
