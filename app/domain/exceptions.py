"""Domain exceptions for the task board.

Defines domain-level exceptions that represent rejected mutations and
delivery problems. These exceptions are independent of transport: the
REST layer maps them to HTTP responses in exception handlers, the
WebSocket gateway turns them into error messages for the requester.
"""

from typing import Any


class TaskboardException(Exception):
    """Base exception for all task board errors.

    All custom exceptions inherit from this class so both gateways can
    report them the same way.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, task_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses and WebSocket error messages."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TaskboardException):
    """Raised when a request is malformed or misses required input.

    Raised before the board store is touched.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[Any] | None = None,
    ) -> None:
        """Initialize with message, optional field name and error list.

        Args:
            message: Description of the validation failure.
            field: Optional field that failed validation.
            errors: Optional structured errors (e.g. from pydantic).
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidColumnException(TaskboardException):
    """Raised when a referenced column is not one of the board's columns."""

    def __init__(self, column: str, allowed: list[str] | None = None) -> None:
        details: dict[str, Any] = {"column": column}
        if allowed is not None:
            details["allowed"] = allowed
        super().__init__(f"Invalid column: {column}", "INVALID_COLUMN", details)


class TaskNotFoundException(TaskboardException):
    """Raised when a task id is absent (from the board or the expected column)."""

    def __init__(self, task_id: str, column: str | None = None) -> None:
        """Initialize with the missing task id and the column searched, if any.

        Args:
            task_id: The task id that was not found.
            column: Column that was expected to hold it; None means the whole board.
        """
        details: dict[str, Any] = {"task_id": task_id}
        if column is not None:
            details["column"] = column
            message = f"Task {task_id} not found in column {column}"
        else:
            message = f"Task not found: {task_id}"
        super().__init__(message, "TASK_NOT_FOUND", details)


class TaskAlreadyExistsException(TaskboardException):
    """Raised when creating a task with an id that is already on the board."""

    def __init__(self, task_id: str, column: str) -> None:
        super().__init__(
            f"Task {task_id} already exists in column {column}",
            "TASK_ALREADY_EXISTS",
            {"task_id": task_id, "column": column},
        )


class DeliveryFailure(TaskboardException):
    """Raised when a message could not be delivered to one connection.

    Logged by the connection that failed; never surfaced to the mutator and
    never affects delivery to other connections.
    """

    def __init__(self, connection_id: str, reason: str) -> None:
        super().__init__(
            f"Delivery to connection {connection_id} failed",
            "DELIVERY_FAILURE",
            {"connection_id": connection_id, "reason": reason},
        )
