"""Task API schemas (REST bodies and WebSocket command payloads).

Command models accept the snake_case names used by this API plus the
camelCase names older board clients send (taskId, fromColumn, ...), and
ignore fields they do not know about.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.domain.enums import Category, Priority

_COMMAND_CONFIG = ConfigDict(
    extra="ignore",
    populate_by_name=True,
    str_strip_whitespace=True,
)


class TaskCreateRequest(BaseModel):
    """Create a task. column defaults to the board's initial column."""

    model_config = _COMMAND_CONFIG

    id: str | None = Field(default=None, max_length=64)
    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(default="", max_length=10_000)
    priority: Priority = Priority.MEDIUM
    category: Category = Category.FEATURE
    column: str | None = Field(
        default=None,
        validation_alias=AliasChoices("column", "status"),
        description="Target column; 'status' is accepted as an alias",
    )


class TaskPatch(BaseModel):
    """Partial update of a task's mutable fields (REST PATCH body)."""

    model_config = _COMMAND_CONFIG

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=10_000)
    priority: Priority | None = None
    category: Category | None = None

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent, without explicit nulls."""
        return {
            k: v
            for k, v in self.model_dump(
                include={"title", "description", "priority", "category"},
                exclude_unset=True,
            ).items()
            if v is not None
        }


class TaskUpdateRequest(TaskPatch):
    """Update command: task id plus a partial patch."""

    task_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("task_id", "taskId", "id"),
    )


class TaskMoveBody(BaseModel):
    """REST move body (task id comes from the path)."""

    model_config = _COMMAND_CONFIG

    from_column: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("from_column", "fromColumn")
    )
    to_column: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("to_column", "toColumn")
    )


class TaskMoveRequest(TaskMoveBody):
    """Move command."""

    task_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("task_id", "taskId")
    )


class TaskDeleteRequest(BaseModel):
    """Delete command."""

    model_config = _COMMAND_CONFIG

    task_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("task_id", "taskId")
    )
    column: str = Field(..., min_length=1)


class AttachmentResponse(BaseModel):
    """Attachment reference as exposed to clients."""

    id: str
    name: str
    media_type: str
    size: int
    url: str


class TaskResponse(BaseModel):
    """Task record."""

    id: str
    title: str
    description: str
    priority: Priority
    category: Category
    status: str
    attachments: list[AttachmentResponse]
    created_at: str | None
    updated_at: str | None


class TaskWithColumnResponse(BaseModel):
    """Task plus the column holding it."""

    task: TaskResponse
    column: str


class TaskMoveResponse(BaseModel):
    """Result of a move."""

    task_id: str
    from_column: str
    to_column: str
    task: TaskResponse


class AttachmentUploadResponse(BaseModel):
    """Result of an attachment upload."""

    attachment: AttachmentResponse
    task: TaskResponse
    column: str


class TaskDeleteResponse(BaseModel):
    """Result of a delete."""

    task_id: str
    column: str
