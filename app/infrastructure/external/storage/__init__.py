"""Attachment storage backends."""

from app.infrastructure.external.storage.factory import StorageFactory
from app.infrastructure.external.storage.local_storage import LocalStorageService

__all__ = ["LocalStorageService", "StorageFactory"]
