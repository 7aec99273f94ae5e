"""Domain entities.

Pure domain models; no persistence or transport concerns.
"""

from app.domain.entities.task import Attachment, TaskEntity

__all__ = [
    "Attachment",
    "TaskEntity",
]
