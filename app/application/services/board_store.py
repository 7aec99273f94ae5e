"""Authoritative in-memory board store.

Owns every task and column. All reads and mutations go through one
asyncio.Lock, so a snapshot never observes a partially applied mutation
and mutations are totally ordered. The lock only ever covers in-memory
work; callers send to the network after it is released.

Each mutating operation accepts an on_commit hook that runs inside the
critical section with the new board version and a copy of the affected
task. The mutation processor uses it to enqueue the change event, which
fixes the event order to the commit order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from app.application.dtos.board import BoardSnapshot
from app.domain.entities.task import Attachment, TaskEntity
from app.domain.enums import Category, Priority
from app.domain.exceptions import (
    InvalidColumnException,
    TaskAlreadyExistsException,
    TaskNotFoundException,
    ValidationException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid

logger = get_logger(__name__)

CommitHook = Callable[[int, TaskEntity], None]

# Fields a patch may change. id, status, created_at and attachments are owned
# by the store (status only changes through a move).
UPDATABLE_FIELDS = frozenset({"title", "description", "priority", "category"})


class BoardStore:
    """Single owned board: ordered column names -> ordered task lists."""

    def __init__(self, columns: Iterable[str], initial_column: str) -> None:
        names = list(columns)
        if not names:
            raise ValueError("Board needs at least one column")
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate column names: {names}")
        if initial_column not in names:
            raise ValueError(f"Initial column {initial_column!r} not in {names}")
        self._columns: dict[str, list[TaskEntity]] = {name: [] for name in names}
        self._initial_column = initial_column
        self._version = 0
        self._lock = asyncio.Lock()

    # ---- Read-only properties (immutable after construction) ----

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    @property
    def initial_column(self) -> str:
        return self._initial_column

    @property
    def version(self) -> int:
        """Number of committed mutations."""
        return self._version

    def has_column(self, name: str) -> bool:
        return name in self._columns

    # ---- Reads ----

    async def snapshot(self) -> BoardSnapshot:
        """Return a detached, self-consistent copy of the whole board."""
        async with self._lock:
            return BoardSnapshot(
                columns={
                    name: [t.copy() for t in tasks]
                    for name, tasks in self._columns.items()
                },
                version=self._version,
            )

    async def find(self, task_id: str) -> tuple[TaskEntity, str] | None:
        """Return (task copy, column) or None when the id is not on the board."""
        async with self._lock:
            located = self._locate(task_id)
            if located is None:
                return None
            column, index = located
            return self._columns[column][index].copy(), column

    # ---- Mutations ----

    async def apply_create(
        self,
        column: str,
        task: TaskEntity,
        on_commit: CommitHook | None = None,
    ) -> TaskEntity:
        """Append task to the tail of column.

        Assigns an id when the task has none and stamps created_at.

        Raises:
            InvalidColumnException: column is not one of the board's columns.
            TaskAlreadyExistsException: the id is already on the board.
        """
        async with self._lock:
            self._require_column(column)
            new_task = task.copy()
            if not new_task.id:
                new_task.id = generate_cuid()
            existing = self._locate(new_task.id)
            if existing is not None:
                raise TaskAlreadyExistsException(new_task.id, existing[0])
            new_task.status = column
            new_task.created_at = utc_now()
            new_task.updated_at = None
            self._columns[column].append(new_task)
            return self._commit(new_task, on_commit)

    async def apply_update(
        self,
        task_id: str,
        patch: Mapping[str, Any],
        on_commit: CommitHook | None = None,
    ) -> tuple[TaskEntity, str]:
        """Merge patch into the task wherever it lives; set updated_at.

        Raises:
            ValidationException: patch names a field that cannot be updated,
                or would leave the task invalid (e.g. empty title).
            TaskNotFoundException: task_id is not on the board.
        """
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )
        async with self._lock:
            located = self._locate(task_id)
            if located is None:
                raise TaskNotFoundException(task_id)
            column, index = located
            current = self._columns[column][index]
            merged = current.copy()
            for name, value in patch.items():
                try:
                    if name == "priority":
                        value = Priority(value)
                    elif name == "category":
                        value = Category(value)
                except ValueError as e:
                    raise ValidationException(str(e), field=name) from e
                setattr(merged, name, value)
            merged.validate()
            merged.updated_at = utc_now()
            self._columns[column][index] = merged
            return self._commit(merged, on_commit), column

    async def apply_move(
        self,
        task_id: str,
        from_column: str,
        to_column: str,
        on_commit: CommitHook | None = None,
    ) -> TaskEntity:
        """Move a task from the source column to the tail of the target column.

        from_column == to_column with the task present is a successful no-op
        (position and timestamps unchanged).

        Raises:
            InvalidColumnException: either column is unknown.
            TaskNotFoundException: task_id is not in from_column.
        """
        async with self._lock:
            self._require_column(from_column)
            self._require_column(to_column)
            source = self._columns[from_column]
            index = self._index_in(source, task_id)
            if index is None:
                raise TaskNotFoundException(task_id, from_column)
            if from_column == to_column:
                return self._commit(source[index], on_commit)
            task = source.pop(index)
            task.status = to_column
            task.updated_at = utc_now()
            self._columns[to_column].append(task)
            return self._commit(task, on_commit)

    async def apply_delete(
        self,
        task_id: str,
        column: str,
        on_commit: CommitHook | None = None,
    ) -> TaskEntity:
        """Remove a task from column and return it.

        Raises:
            InvalidColumnException: column is unknown.
            TaskNotFoundException: task_id is not in column.
        """
        async with self._lock:
            self._require_column(column)
            tasks = self._columns[column]
            index = self._index_in(tasks, task_id)
            if index is None:
                raise TaskNotFoundException(task_id, column)
            removed = tasks.pop(index)
            return self._commit(removed, on_commit)

    async def append_attachment(
        self,
        task_id: str,
        column: str,
        attachment: Attachment,
        on_commit: CommitHook | None = None,
    ) -> TaskEntity:
        """Append an attachment reference to a task in column; set updated_at.

        Raises:
            InvalidColumnException: column is unknown.
            TaskNotFoundException: task_id is not in column.
        """
        async with self._lock:
            self._require_column(column)
            tasks = self._columns[column]
            index = self._index_in(tasks, task_id)
            if index is None:
                raise TaskNotFoundException(task_id, column)
            task = tasks[index]
            task.attachments = [*task.attachments, attachment]
            task.updated_at = utc_now()
            return self._commit(task, on_commit)

    # ---- Internals (caller holds the lock) ----

    def _commit(self, task: TaskEntity, on_commit: CommitHook | None) -> TaskEntity:
        self._version += 1
        committed = task.copy()
        if on_commit is not None:
            on_commit(self._version, committed)
        logger.debug("Board version %d committed (task %s)", self._version, task.id)
        return committed

    def _require_column(self, column: str) -> None:
        if column not in self._columns:
            raise InvalidColumnException(column, allowed=list(self._columns))

    @staticmethod
    def _index_in(tasks: list[TaskEntity], task_id: str) -> int | None:
        for i, t in enumerate(tasks):
            if t.id == task_id:
                return i
        return None

    def _locate(self, task_id: str) -> tuple[str, int] | None:
        for name, tasks in self._columns.items():
            index = self._index_in(tasks, task_id)
            if index is not None:
                return name, index
        return None
