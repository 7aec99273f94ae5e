"""One client connection: an ordered outbound queue drained by a single sender task.

The broadcaster and the gateway only ever enqueue; all socket writes for a
connection happen in its sender task. That keeps per-connection order
equal to enqueue order and stops a slow socket from holding up anyone else.

Events carry the board version they committed as (seq). A connection
drops events already contained in the last snapshot it was sent; those
can reach the queue because a connection is registered before its
snapshot is taken.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

from app.application.dtos.board import BoardSnapshot
from app.domain.exceptions import DeliveryFailure
from app.shared.telemetry.logging import get_logger
from app.shared.utils.generators import generate_cuid

logger = get_logger(__name__)

BOARD_INIT = "board:init"
BOARD_SYNC = "board:sync"

# Close code sent to a client whose outbound queue overflowed or whose send failed.
CLOSE_TRY_AGAIN_LATER = 1013


class MessageSocket(Protocol):
    """The part of a WebSocket a connection uses."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


def snapshot_message(
    snapshot: BoardSnapshot,
    message_type: str = BOARD_INIT,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Full-board message: {type, seq, data: {columns, version}}."""
    message: dict[str, Any] = {
        "type": message_type,
        "seq": snapshot.version,
        "data": snapshot.to_dict(),
    }
    if request_id is not None:
        message["request_id"] = request_id
    return message


class Connection:
    """A registered observer of the board."""

    def __init__(
        self,
        websocket: MessageSocket,
        *,
        queue_size: int = 256,
        send_timeout: float = 10.0,
        connection_id: str | None = None,
    ) -> None:
        self.id = connection_id or generate_cuid()
        self.websocket = websocket
        self._queue: asyncio.Queue[tuple[int | None, dict[str, Any]]] = asyncio.Queue(
            maxsize=queue_size
        )
        self._send_timeout = send_timeout
        self._floor = 0
        self._closed = False
        self._sender: asyncio.Task[None] | None = None
        self._closer: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        return f"Connection({self.id!r}, closed={self._closed})"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def snapshot_version(self) -> int:
        """Version of the newest snapshot queued for this connection."""
        return self._floor

    def start(self, snapshot: BoardSnapshot) -> None:
        """Start the sender: the initial snapshot goes out before anything queued."""
        if self._sender is not None:
            raise RuntimeError(f"Connection {self.id} already started")
        self._floor = max(self._floor, snapshot.version)
        self._sender = asyncio.create_task(
            self._run(snapshot_message(snapshot, BOARD_INIT)),
            name=f"ws-sender-{self.id}",
        )

    def enqueue_event(self, seq: int, message: dict[str, Any]) -> bool:
        """Queue a change event. Returns False if the connection is closed or overflowed."""
        return self._put((seq, message))

    def enqueue(self, message: dict[str, Any]) -> bool:
        """Queue an unsequenced message (error reply, pong)."""
        return self._put((None, message))

    def enqueue_snapshot(
        self, snapshot: BoardSnapshot, request_id: str | None = None
    ) -> bool:
        """Queue a resync snapshot; later events it already covers are dropped."""
        self._floor = max(self._floor, snapshot.version)
        return self._put((None, snapshot_message(snapshot, BOARD_SYNC, request_id)))

    async def stop(self) -> None:
        """Stop sending (client went away). Queued messages are discarded."""
        self._closed = True
        task = self._sender
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _put(self, item: tuple[int | None, dict[str, Any]]) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(item)
        except asyncio.QueueFull:
            self._fail(f"outbound queue full ({self._queue.maxsize} messages)")
            return False
        return True

    async def _run(self, initial: dict[str, Any]) -> None:
        try:
            await self._send(initial)
            while True:
                seq, message = await self._queue.get()
                if seq is not None and seq <= self._floor:
                    continue
                await self._send(message)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._fail(f"{type(e).__name__}: {e}")

    async def _send(self, message: dict[str, Any]) -> None:
        await asyncio.wait_for(self.websocket.send_json(message), timeout=self._send_timeout)

    def _fail(self, reason: str) -> None:
        """Mark the connection dead after a delivery failure and close the socket."""
        if self._closed:
            return
        self._closed = True
        failure = DeliveryFailure(self.id, reason)
        logger.warning("%s: %s", failure.message, reason)
        current = asyncio.current_task()
        if self._sender is not None and self._sender is not current:
            self._sender.cancel()
        self._closer = asyncio.create_task(
            self._close_socket(), name=f"ws-closer-{self.id}"
        )

    async def _close_socket(self) -> None:
        try:
            await self.websocket.close(code=CLOSE_TRY_AGAIN_LATER)
        except Exception as e:
            # Socket already gone; the receive loop will see the disconnect.
            logger.debug("Close of connection %s failed: %s", self.id, e)
