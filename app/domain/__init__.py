"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import Attachment, TaskEntity
from app.domain.enums import Category, Priority
from app.domain.exceptions import (
    DeliveryFailure,
    InvalidColumnException,
    TaskAlreadyExistsException,
    TaskboardException,
    TaskNotFoundException,
    ValidationException,
)

__all__ = [
    # Entities
    "Attachment",
    "TaskEntity",
    # Enums
    "Category",
    "Priority",
    # Exceptions
    "DeliveryFailure",
    "InvalidColumnException",
    "TaskAlreadyExistsException",
    "TaskboardException",
    "TaskNotFoundException",
    "ValidationException",
]
