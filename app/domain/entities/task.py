"""Task domain entity and attachment value object.

Pure data with its own validation; ownership and locking live in the
board store.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from app.domain.enums import Category, Priority
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import to_iso


@dataclass(frozen=True)
class Attachment:
    """Reference to a stored file embedded in a task.

    url is the retrieval locator handed to clients; storage_ref is the key
    inside the storage backend.
    """

    id: str
    name: str
    media_type: str
    size: int
    url: str
    storage_ref: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "media_type": self.media_type,
            "size": self.size,
            "url": self.url,
        }


@dataclass
class TaskEntity:
    """A task record living in exactly one column.

    status always equals the name of the column holding the task; the
    store keeps it in sync on create and move. Validation runs on
    construction.
    """

    id: str
    title: str
    status: str = ""
    description: str = ""
    priority: Priority = Priority.MEDIUM
    category: Category = Category.FEATURE
    attachments: list[Attachment] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate task rules. Raises ValidationException if invalid."""
        if not self.title or not self.title.strip():
            raise ValidationException("Task title is required", field="title")

    def copy(self) -> "TaskEntity":
        """Return a detached copy (the attachment list is not shared)."""
        return replace(self, attachments=list(self.attachments))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dict (enums as values, ISO timestamps)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "category": self.category.value,
            "status": self.status,
            "attachments": [a.to_dict() for a in self.attachments],
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }
