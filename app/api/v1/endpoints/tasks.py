"""Task API: thin routes delegating to the MutationProcessor.

Writes made here are broadcast to WebSocket clients exactly like writes
made over the socket; the event's request_id is the HTTP request id.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_board_store,
    get_mutation_processor,
    get_request_id,
)
from app.application.services.board_store import BoardStore
from app.application.use_cases.mutations import MutationProcessor
from app.core.limiter import limit_writes
from app.domain.exceptions import TaskNotFoundException
from app.schemas.task import (
    TaskCreateRequest,
    TaskDeleteRequest,
    TaskDeleteResponse,
    TaskMoveBody,
    TaskMoveRequest,
    TaskMoveResponse,
    TaskPatch,
    TaskUpdateRequest,
    TaskWithColumnResponse,
)

router = APIRouter()


@router.post("", response_model=TaskWithColumnResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    body: TaskCreateRequest,
    request_id: Annotated[str | None, Depends(get_request_id)],
    processor: MutationProcessor = Depends(get_mutation_processor),
):
    """Create a task (default column: the board's initial column)."""
    event = await processor.create(body, request_id)
    return event.payload()


@router.get("/{task_id}", response_model=TaskWithColumnResponse)
async def get_task(task_id: str, store: BoardStore = Depends(get_board_store)):
    """Return one task and the column holding it."""
    located = await store.find(task_id)
    if located is None:
        raise TaskNotFoundException(task_id)
    task, column = located
    return {"task": task.to_dict(), "column": column}


@router.patch("/{task_id}", response_model=TaskWithColumnResponse)
@limit_writes
async def update_task(
    request: Request,
    task_id: str,
    body: TaskPatch,
    request_id: Annotated[str | None, Depends(get_request_id)],
    processor: MutationProcessor = Depends(get_mutation_processor),
):
    """Patch title, description, priority or category."""
    command = TaskUpdateRequest(task_id=task_id, **body.model_dump(exclude_unset=True))
    event = await processor.update(command, request_id)
    return event.payload()


@router.post("/{task_id}/move", response_model=TaskMoveResponse)
@limit_writes
async def move_task(
    request: Request,
    task_id: str,
    body: TaskMoveBody,
    request_id: Annotated[str | None, Depends(get_request_id)],
    processor: MutationProcessor = Depends(get_mutation_processor),
):
    """Move a task to the end of another column."""
    command = TaskMoveRequest(
        task_id=task_id, from_column=body.from_column, to_column=body.to_column
    )
    event = await processor.move(command, request_id)
    return event.payload()


@router.delete("/{task_id}", response_model=TaskDeleteResponse)
@limit_writes
async def delete_task(
    request: Request,
    task_id: str,
    request_id: Annotated[str | None, Depends(get_request_id)],
    column: str = Query(..., min_length=1),
    processor: MutationProcessor = Depends(get_mutation_processor),
):
    """Delete a task from the given column."""
    event = await processor.delete(
        TaskDeleteRequest(task_id=task_id, column=column), request_id
    )
    return event.payload()
