"""Local filesystem storage for task attachments, with path validation and atomic writes."""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path
from typing import BinaryIO

import aiofiles
import aiofiles.os

from app.infrastructure.exceptions import (
    StorageDeleteError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageQuotaExceededError,
    StorageUploadError,
)
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes use temp file + rename,
    so a reader never sees a half-written attachment.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(self, storage_root: str) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all files (created if missing).
        """
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref) from e
        if full_path == self.storage_root:
            raise StoragePermissionError(storage_ref)
        return full_path

    async def save(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        content_type: str,
        max_size: int | None = None,
    ) -> int:
        """Copy file_data to storage_ref in chunks; return bytes written.

        Raises:
            StorageQuotaExceededError: more than max_size bytes were supplied.
            StoragePermissionError: storage_ref escapes the storage root.
            StorageUploadError: any other write failure.
        """
        target_path = self._get_full_path(storage_ref)
        temp_path: str | None = None
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent,
                prefix=".tmp_",
                suffix=target_path.suffix,
            )
            os.close(temp_fd)
            size = 0
            async with aiofiles.open(temp_path, "wb") as f:
                while True:
                    chunk = file_data.read(self.CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if max_size is not None and size > max_size:
                        raise StorageQuotaExceededError(storage_ref, max_size)
                    await f.write(chunk)
            os.chmod(temp_path, 0o640)
            os.replace(temp_path, target_path)
            temp_path = None
            logger.debug("Stored %s (%d bytes, %s)", storage_ref, size, content_type)
            return size
        except StorageQuotaExceededError:
            raise
        except Exception as e:
            raise StorageUploadError(storage_ref, str(e)) from e
        finally:
            if temp_path is not None and Path(temp_path).exists():
                os.unlink(temp_path)

    async def open(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream file content.

        Raises:
            StorageNotFoundError: nothing stored under storage_ref.
        """
        file_path = self._get_full_path(storage_ref)
        if not file_path.is_file():
            raise StorageNotFoundError(storage_ref)
        async with aiofiles.open(file_path, "rb") as f:
            while True:
                chunk = await f.read(self.CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk

    async def delete(self, storage_ref: str) -> bool:
        """Delete a file and prune empty parent directories. Returns True if deleted."""
        file_path = self._get_full_path(storage_ref)
        try:
            if not file_path.exists():
                return False
            await aiofiles.os.remove(file_path)
            parent = file_path.parent
            while parent != self.storage_root:
                try:
                    if any(parent.iterdir()):
                        break
                    parent.rmdir()
                    parent = parent.parent
                except OSError:
                    break
            return True
        except Exception as e:
            raise StorageDeleteError(storage_ref, str(e)) from e

    async def exists(self, storage_ref: str) -> bool:
        """Return True if a file is stored under storage_ref."""
        return self._get_full_path(storage_ref).is_file()
