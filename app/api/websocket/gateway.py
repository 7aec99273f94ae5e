"""Client gateway: connection lifecycle and inbound message dispatch.

Inbound frames are JSON envelopes {"type", "request_id"?, "data"}. Board
mutations go to the mutation processor; their results reach every client
(the sender included) through the broadcaster. Rejections are answered
with an "error" message to the sender only.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any

from app.api.websocket.connection import Connection, MessageSocket
from app.api.websocket.manager import ConnectionRegistry
from app.application.services.board_store import BoardStore
from app.application.use_cases.mutations import MutationProcessor, parse_command
from app.domain.exceptions import TaskboardException, ValidationException
from app.schemas.task import (
    TaskCreateRequest,
    TaskDeleteRequest,
    TaskMoveRequest,
    TaskUpdateRequest,
)
from app.schemas.websocket import InboundMessage
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import to_iso, utc_now

logger = get_logger(__name__)

Handler = Callable[[Connection, dict[str, Any], str | None], Awaitable[None]]


def error_message(exc: TaskboardException, request_id: str | None = None) -> dict[str, Any]:
    """Error reply for the connection whose message was rejected."""
    return {"type": "error", **exc.to_dict(), "request_id": request_id}


def _request_id_of(raw: Any) -> str | None:
    if isinstance(raw, dict) and isinstance(raw.get("request_id"), str):
        return raw["request_id"]
    return None


class SyncGateway:
    """Owns client sessions: connect, dispatch inbound messages, disconnect."""

    def __init__(
        self,
        store: BoardStore,
        processor: MutationProcessor,
        registry: ConnectionRegistry,
        *,
        queue_size: int = 256,
        send_timeout: float = 10.0,
    ) -> None:
        self.store = store
        self.processor = processor
        self.registry = registry
        self.queue_size = queue_size
        self.send_timeout = send_timeout
        self._handlers: dict[str, Handler] = {
            "task:create": self._create,
            "task:update": self._update,
            "task:edit": self._update,
            "task:move": self._move,
            "task:delete": self._delete,
            "sync:board": self._sync,
            "ping": self._ping,
        }

    @property
    def message_types(self) -> list[str]:
        return sorted(self._handlers)

    async def connect(self, websocket: Any) -> Connection:
        """Accept the socket, register it, then send the initial board snapshot.

        The connection is registered before the snapshot is read, so no
        change committed in between can be missed; events the snapshot
        already contains are dropped by the connection.
        """
        await websocket.accept()
        return await self.open(websocket)

    async def open(self, socket: MessageSocket) -> Connection:
        """Register an already-accepted socket and start its sender."""
        connection = Connection(
            socket, queue_size=self.queue_size, send_timeout=self.send_timeout
        )
        await self.registry.add(connection)
        snapshot = await self.store.snapshot()
        connection.start(snapshot)
        logger.info(
            "Connection %s opened at board version %d (%d connected)",
            connection.id,
            snapshot.version,
            await self.registry.count(),
        )
        return connection

    async def disconnect(self, connection: Connection) -> None:
        """Deregister and stop a connection. Safe to call more than once."""
        removed = await self.registry.remove(connection)
        await connection.stop()
        if removed:
            logger.info(
                "Connection %s closed (%d connected)",
                connection.id,
                await self.registry.count(),
            )

    async def handle(self, connection: Connection, raw: str | bytes) -> None:
        """Process one inbound frame (text, or UTF-8 JSON in a binary frame).

        Never raises for bad input: rejections become an error message to
        this connection.
        """
        payload: Any = None
        try:
            try:
                payload = json.loads(raw)
            except ValueError:
                raise ValidationException("Message is not valid JSON") from None
            message = parse_command(InboundMessage, payload)
            handler = self._handlers.get(message.type)
            if handler is None:
                raise ValidationException(
                    f"Unknown message type: {message.type}",
                    field="type",
                    errors=[{"allowed": self.message_types}],
                )
            await handler(connection, message.data, message.request_id)
        except TaskboardException as e:
            connection.enqueue(error_message(e, _request_id_of(payload)))

    async def _create(
        self, connection: Connection, data: dict[str, Any], request_id: str | None
    ) -> None:
        await self.processor.create(parse_command(TaskCreateRequest, data), request_id)

    async def _update(
        self, connection: Connection, data: dict[str, Any], request_id: str | None
    ) -> None:
        await self.processor.update(parse_command(TaskUpdateRequest, data), request_id)

    async def _move(
        self, connection: Connection, data: dict[str, Any], request_id: str | None
    ) -> None:
        await self.processor.move(parse_command(TaskMoveRequest, data), request_id)

    async def _delete(
        self, connection: Connection, data: dict[str, Any], request_id: str | None
    ) -> None:
        await self.processor.delete(parse_command(TaskDeleteRequest, data), request_id)

    async def _sync(
        self, connection: Connection, data: dict[str, Any], request_id: str | None
    ) -> None:
        connection.enqueue_snapshot(await self.store.snapshot(), request_id)

    async def _ping(
        self, connection: Connection, data: dict[str, Any], request_id: str | None
    ) -> None:
        pong: dict[str, Any] = {"type": "pong", "timestamp": to_iso(utc_now())}
        if request_id is not None:
            pong["request_id"] = request_id
        connection.enqueue(pong)
