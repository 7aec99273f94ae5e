"""Attachment API: upload a file onto a task, stream stored files back."""

import mimetypes
from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from fastapi.responses import StreamingResponse

from app.api.v1.dependencies import get_attachment_service, get_request_id, get_storage
from app.application.interfaces.services import IStorageService
from app.application.use_cases.attachments import AttachmentService
from app.core.limiter import limit_upload
from app.domain.exceptions import ValidationException
from app.infrastructure.exceptions import StorageNotFoundError
from app.schemas.task import AttachmentUploadResponse

router = APIRouter()


@router.post(
    "/tasks/{task_id}/attachments",
    response_model=AttachmentUploadResponse,
    status_code=201,
)
@limit_upload
async def upload_attachment(
    request: Request,
    task_id: str,
    request_id: Annotated[str | None, Depends(get_request_id)],
    column: str = Query(..., min_length=1),
    file: UploadFile = File(...),
    attachment_svc: AttachmentService = Depends(get_attachment_service),
):
    """Store a file and attach it to the task; clients receive task:updated."""
    if not file.filename:
        raise ValidationException("Filename required", field="file")
    attachment, event = await attachment_svc.upload(
        task_id=task_id,
        column=column,
        file_data=file.file,
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
        request_id=request_id,
    )
    return {
        "attachment": attachment.to_dict(),
        "task": event.task.to_dict(),
        "column": event.column,
    }


@router.get("/attachments/{storage_ref:path}")
async def download_attachment(
    storage_ref: str,
    storage: IStorageService = Depends(get_storage),
):
    """Stream a stored attachment."""
    if not await storage.exists(storage_ref):
        raise StorageNotFoundError(storage_ref)
    media_type = mimetypes.guess_type(storage_ref)[0] or "application/octet-stream"
    return StreamingResponse(storage.open(storage_ref), media_type=media_type)
