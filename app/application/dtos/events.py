"""Change events produced by the mutation processor.

One event per successful mutation. Each event is self-describing: a
client replica can apply it without asking the server for anything else.
seq is the board version the mutation committed as, so events are totally
ordered and comparable with a snapshot's version.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from app.domain.entities.task import TaskEntity


@dataclass(frozen=True)
class ChangeEvent(ABC):
    """Base for the four change event kinds."""

    TYPE: ClassVar[str] = ""

    seq: int

    @abstractmethod
    def payload(self) -> dict[str, Any]:
        """The event-specific data object."""

    def to_dict(self, request_id: str | None = None) -> dict[str, Any]:
        """Wire message: {type, seq, data[, request_id]}."""
        message: dict[str, Any] = {
            "type": self.TYPE,
            "seq": self.seq,
            "data": self.payload(),
        }
        if request_id is not None:
            message["request_id"] = request_id
        return message


@dataclass(frozen=True)
class TaskCreated(ChangeEvent):
    TYPE: ClassVar[str] = "task:created"

    task: TaskEntity
    column: str

    def payload(self) -> dict[str, Any]:
        return {"task": self.task.to_dict(), "column": self.column}


@dataclass(frozen=True)
class TaskUpdated(ChangeEvent):
    TYPE: ClassVar[str] = "task:updated"

    task: TaskEntity
    column: str

    def payload(self) -> dict[str, Any]:
        return {"task": self.task.to_dict(), "column": self.column}


@dataclass(frozen=True)
class TaskMoved(ChangeEvent):
    """Task moved between columns.

    Carries the moved task too so replicas also pick up the new status and
    updated_at without a lookup.
    """

    TYPE: ClassVar[str] = "task:moved"

    task_id: str
    from_column: str
    to_column: str
    task: TaskEntity

    def payload(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "from_column": self.from_column,
            "to_column": self.to_column,
            "task": self.task.to_dict(),
        }


@dataclass(frozen=True)
class TaskDeleted(ChangeEvent):
    TYPE: ClassVar[str] = "task:deleted"

    task_id: str
    column: str

    def payload(self) -> dict[str, Any]:
        return {"task_id": self.task_id, "column": self.column}


@dataclass(frozen=True)
class PublishedEvent:
    """A change event plus the request id of the mutation that caused it."""

    event: ChangeEvent
    request_id: str | None = None

    @property
    def seq(self) -> int:
        return self.event.seq

    def to_dict(self) -> dict[str, Any]:
        return self.event.to_dict(self.request_id)
