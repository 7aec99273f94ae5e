"""Storage service factory: creates the attachment storage backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.application.interfaces.services import IStorageService

if TYPE_CHECKING:
    from app.core.config import Settings


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_storage_service(settings: "Settings | None" = None) -> IStorageService:
        """Create storage service from settings.

        Args:
            settings: Application settings; if None, uses get_settings().

        Returns:
            LocalStorageService rooted at settings.storage_root.

        Raises:
            ValueError: storage_root is empty.
        """
        from app.core.config import get_settings
        from app.infrastructure.external.storage.local_storage import (
            LocalStorageService,
        )

        s = settings or get_settings()
        if not s.storage_root:
            raise ValueError("STORAGE_ROOT required for attachment storage")
        return LocalStorageService(storage_root=s.storage_root)
