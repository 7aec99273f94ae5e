"""Board snapshot DTO (detached copy of board state at one instant)."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any

from app.domain.entities.task import TaskEntity


@dataclass(frozen=True)
class BoardSnapshot:
    """Full, self-consistent copy of the board.

    columns holds every configured column in board order, each with
    detached task copies in column order. version is the number of
    mutations committed when the snapshot was taken; change events with
    seq <= version are already reflected here.
    """

    columns: dict[str, list[TaskEntity]]
    version: int

    def task_count(self) -> int:
        return sum(len(tasks) for tasks in self.columns.values())

    def counts(self) -> dict[str, int]:
        """Number of tasks per column."""
        return {name: len(tasks) for name, tasks in self.columns.items()}

    def tasks(self) -> list[TaskEntity]:
        return [t for tasks in self.columns.values() for t in tasks]

    def stats(self) -> dict[str, Any]:
        """Aggregate counts: total, per column, per priority, per category."""
        tasks = self.tasks()
        return {
            "total": len(tasks),
            "by_column": self.counts(),
            "by_priority": dict(Counter(t.priority.value for t in tasks)),
            "by_category": dict(Counter(t.category.value for t in tasks)),
            "version": self.version,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "columns": {
                name: [t.to_dict() for t in tasks]
                for name, tasks in self.columns.items()
            },
            "version": self.version,
        }
