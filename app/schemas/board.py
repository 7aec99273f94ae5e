"""Board API schemas."""

from pydantic import BaseModel, Field

from app.schemas.task import TaskResponse


class BoardResponse(BaseModel):
    """Full board snapshot (GET /board)."""

    columns: dict[str, list[TaskResponse]]
    version: int = Field(..., description="Mutations committed when the snapshot was taken")


class BoardStatsResponse(BaseModel):
    """Aggregate task counts (GET /board/stats)."""

    total: int
    by_column: dict[str, int]
    by_priority: dict[str, int]
    by_category: dict[str, int]
    version: int
