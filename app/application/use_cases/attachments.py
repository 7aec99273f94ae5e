"""Attachment upload use case: store the blob, then attach its reference to the task."""

from __future__ import annotations

from typing import BinaryIO

from app.application.dtos.events import TaskUpdated
from app.application.interfaces.services import IStorageService
from app.application.use_cases.mutations import MutationProcessor
from app.domain.entities.task import Attachment
from app.domain.exceptions import (
    InvalidColumnException,
    TaskNotFoundException,
    ValidationException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import sanitize_filename, sanitize_text

logger = get_logger(__name__)


class AttachmentService:
    """Uploads attachments for tasks (storage + task record via the processor)."""

    def __init__(
        self,
        processor: MutationProcessor,
        storage: IStorageService,
        url_prefix: str,
        max_upload_size: int,
    ) -> None:
        self.processor = processor
        self.storage = storage
        self.url_prefix = url_prefix.rstrip("/")
        self.max_upload_size = max_upload_size

    async def upload(
        self,
        task_id: str,
        column: str,
        file_data: BinaryIO,
        filename: str,
        content_type: str,
        request_id: str | None = None,
    ) -> tuple[Attachment, TaskUpdated]:
        """Store file_data and append an attachment reference to the task.

        The task is checked before anything is written. If it disappears
        while the blob is being stored, the blob is removed again and
        TaskNotFoundException is raised.

        Raises:
            ValidationException: empty filename.
            InvalidColumnException: unknown column.
            TaskNotFoundException: task is not in column.
            StorageException: storage backend failure or oversized file.
        """
        if not filename:
            raise ValidationException("Filename required", field="file")
        store = self.processor.store
        if not store.has_column(column):
            raise InvalidColumnException(column, allowed=store.columns)
        located = await store.find(task_id)
        if located is None or located[1] != column:
            raise TaskNotFoundException(task_id, column)

        attachment_id = generate_cuid()
        safe_name = sanitize_filename(filename)
        storage_ref = f"{sanitize_filename(task_id)}/{attachment_id}-{safe_name}"
        size = await self.storage.save(
            file_data,
            storage_ref,
            content_type,
            max_size=self.max_upload_size,
        )
        attachment = Attachment(
            id=attachment_id,
            name=sanitize_text(filename) or safe_name,
            media_type=content_type,
            size=size,
            url=f"{self.url_prefix}/{storage_ref}",
            storage_ref=storage_ref,
        )
        try:
            event = await self.processor.attach(task_id, column, attachment, request_id)
        except (TaskNotFoundException, InvalidColumnException):
            await self.storage.delete(storage_ref)
            logger.info("Discarded %s: task %s gone before attach", storage_ref, task_id)
            raise
        return attachment, event
