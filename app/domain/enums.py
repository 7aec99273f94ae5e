"""Domain enumerations for the task board.

Enums represent fixed sets of task attribute values.
"""

from enum import Enum


class Priority(str, Enum):
    """Task priority."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid priority values as strings."""
        return [p.value for p in cls]


class Category(str, Enum):
    """Kind of work a task represents."""

    BUG = "Bug"
    FEATURE = "Feature"
    ENHANCEMENT = "Enhancement"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid category values as strings."""
        return [c.value for c in cls]
