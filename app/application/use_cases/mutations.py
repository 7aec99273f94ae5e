"""Mutation processor: validate, apply to the board store, emit one change event.

Every successful mutation produces exactly one change event, published
from inside the store's critical section so observers see events in
commit order. Rejected mutations raise a TaskboardException and leave the
board untouched; nothing is published for them.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.application.dtos.events import (
    ChangeEvent,
    TaskCreated,
    TaskDeleted,
    TaskMoved,
    TaskUpdated,
)
from app.application.interfaces.services import IEventPublisher
from app.application.services.board_store import BoardStore
from app.domain.entities.task import Attachment, TaskEntity
from app.domain.exceptions import TaskboardException, ValidationException
from app.schemas.task import (
    TaskCreateRequest,
    TaskDeleteRequest,
    TaskMoveRequest,
    TaskUpdateRequest,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.sanitization import sanitize_text

logger = get_logger(__name__)

CommandT = TypeVar("CommandT", bound=BaseModel)
EventT = TypeVar("EventT", bound=ChangeEvent)


def parse_command(model: type[CommandT], data: Any) -> CommandT:
    """Validate a raw payload into a command model.

    Raises:
        ValidationException: payload is not an object or fails validation.
    """
    if not isinstance(data, dict):
        raise ValidationException("Request data must be an object", field="data")
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {"loc": [str(p) for p in err["loc"]], "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        first = errors[0]["loc"][0] if errors and errors[0]["loc"] else None
        raise ValidationException(
            f"Invalid {model.__name__} payload", field=first, errors=errors
        ) from None


def _require_text(value: str, field: str) -> str:
    text = sanitize_text(value)
    if not text:
        raise ValidationException(f"{field.capitalize()} must not be empty", field=field)
    return text


class MutationProcessor:
    """Applies create/update/move/delete (and attach) to the board store."""

    def __init__(self, store: BoardStore, publisher: IEventPublisher | None = None) -> None:
        self.store = store
        self.publisher = publisher

    async def create(
        self, command: TaskCreateRequest, request_id: str | None = None
    ) -> TaskCreated:
        """Create a task in command.column (default: the initial column)."""
        column = command.column or self.store.initial_column
        try:
            task = TaskEntity(
                id=command.id or "",
                title=_require_text(command.title, "title"),
                description=sanitize_text(command.description),
                priority=command.priority,
                category=command.category,
            )
            event = await self._apply(
                lambda on_commit: self.store.apply_create(column, task, on_commit),
                lambda seq, t: TaskCreated(seq=seq, task=t, column=column),
                request_id,
            )
        except TaskboardException as e:
            self._log_rejected("create", e, request_id)
            raise
        logger.info(
            "Task %s created in %r (seq %d)", event.task.id, column, event.seq
        )
        return event

    async def update(
        self, command: TaskUpdateRequest, request_id: str | None = None
    ) -> TaskUpdated:
        """Merge the command's patch into the task wherever it lives."""
        try:
            patch = command.changes()
            if "title" in patch:
                patch["title"] = _require_text(patch["title"], "title")
            if "description" in patch:
                patch["description"] = sanitize_text(patch["description"])
            event = await self._apply(
                lambda on_commit: self.store.apply_update(command.task_id, patch, on_commit),
                lambda seq, t: TaskUpdated(seq=seq, task=t, column=t.status),
                request_id,
            )
        except TaskboardException as e:
            self._log_rejected("update", e, request_id)
            raise
        logger.info(
            "Task %s updated (%s) (seq %d)",
            command.task_id,
            ", ".join(sorted(patch)) or "touch",
            event.seq,
        )
        return event

    async def move(
        self, command: TaskMoveRequest, request_id: str | None = None
    ) -> TaskMoved:
        """Move a task from command.from_column to the tail of command.to_column."""
        try:
            event = await self._apply(
                lambda on_commit: self.store.apply_move(
                    command.task_id, command.from_column, command.to_column, on_commit
                ),
                lambda seq, t: TaskMoved(
                    seq=seq,
                    task_id=t.id,
                    from_column=command.from_column,
                    to_column=command.to_column,
                    task=t,
                ),
                request_id,
            )
        except TaskboardException as e:
            self._log_rejected("move", e, request_id)
            raise
        logger.info(
            "Task %s moved %r -> %r (seq %d)",
            command.task_id,
            command.from_column,
            command.to_column,
            event.seq,
        )
        return event

    async def delete(
        self, command: TaskDeleteRequest, request_id: str | None = None
    ) -> TaskDeleted:
        """Remove a task from command.column."""
        try:
            event = await self._apply(
                lambda on_commit: self.store.apply_delete(
                    command.task_id, command.column, on_commit
                ),
                lambda seq, t: TaskDeleted(seq=seq, task_id=t.id, column=command.column),
                request_id,
            )
        except TaskboardException as e:
            self._log_rejected("delete", e, request_id)
            raise
        logger.info(
            "Task %s deleted from %r (seq %d)", command.task_id, command.column, event.seq
        )
        return event

    async def attach(
        self,
        task_id: str,
        column: str,
        attachment: Attachment,
        request_id: str | None = None,
    ) -> TaskUpdated:
        """Add an attachment reference to a task; observers get task:updated."""
        try:
            event = await self._apply(
                lambda on_commit: self.store.append_attachment(
                    task_id, column, attachment, on_commit
                ),
                lambda seq, t: TaskUpdated(seq=seq, task=t, column=column),
                request_id,
            )
        except TaskboardException as e:
            self._log_rejected("attach", e, request_id)
            raise
        logger.info(
            "Attachment %s (%s) added to task %s (seq %d)",
            attachment.id,
            attachment.name,
            task_id,
            event.seq,
        )
        return event

    async def _apply(
        self,
        mutate: Callable[[Callable[[int, TaskEntity], None]], Any],
        build: Callable[[int, TaskEntity], EventT],
        request_id: str | None,
    ) -> EventT:
        """Run one store mutation; build and publish its event at commit time."""
        produced: list[EventT] = []

        def on_commit(seq: int, task: TaskEntity) -> None:
            event = build(seq, task)
            produced.append(event)
            if self.publisher is not None:
                self.publisher.publish(event, request_id)

        await mutate(on_commit)
        return produced[0]

    @staticmethod
    def _log_rejected(kind: str, exc: TaskboardException, request_id: str | None) -> None:
        logger.info(
            "Rejected %s (request %s): %s %s",
            kind,
            request_id or "-",
            exc.error_code,
            exc.details,
        )
