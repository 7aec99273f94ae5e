"""Infrastructure exceptions for attachment storage.

Storage errors extend TaskboardException so the REST layer can map them
to HTTP responses consistently.
"""

from app.domain.exceptions import TaskboardException


class StorageException(TaskboardException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """Blob not found in storage."""

    def __init__(self, storage_ref: str) -> None:
        super().__init__(
            f"File not found: {storage_ref}",
            "STORAGE_NOT_FOUND",
            {"storage_ref": storage_ref},
        )


class StorageUploadError(StorageException):
    """Blob write failed."""

    def __init__(self, storage_ref: str, reason: str) -> None:
        super().__init__(
            f"Failed to store file: {storage_ref}",
            "STORAGE_UPLOAD_ERROR",
            {"storage_ref": storage_ref, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """Blob deletion failed."""

    def __init__(self, storage_ref: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {storage_ref}",
            "STORAGE_DELETE_ERROR",
            {"storage_ref": storage_ref, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Storage reference escapes the storage root."""

    def __init__(self, storage_ref: str) -> None:
        super().__init__(
            f"Invalid storage reference: {storage_ref}",
            "STORAGE_PERMISSION_ERROR",
            {"storage_ref": storage_ref},
        )


class StorageQuotaExceededError(StorageException):
    """Uploaded blob is larger than the configured maximum."""

    def __init__(self, storage_ref: str, max_size: int) -> None:
        super().__init__(
            f"File exceeds maximum size of {max_size} bytes",
            "STORAGE_TOO_LARGE",
            {"storage_ref": storage_ref, "max_size": max_size},
        )
