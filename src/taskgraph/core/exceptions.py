"""TaskGraph custom exception hierarchy."""

from typing import Any

from taskgraph.core.constants import ERROR_STATUS_CODES, ErrorKind


class TaskGraphError(Exception):
    """Base exception for all TaskGraph errors."""

    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def status_code(self) -> int:
        """HTTP status equivalent for this error's kind."""
        return ERROR_STATUS_CODES[self.kind]

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class ConfigurationError(TaskGraphError):
    """Raised when configuration is invalid or missing."""

    kind = ErrorKind.CONFIGURATION


class NotFoundError(TaskGraphError):
    """Raised when a requested task id has no matching node."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        task_id: str,
        message: str = "Task not found",
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["task_id"] = task_id
        super().__init__(message, details)
        self.task_id = task_id


class InvalidInputError(TaskGraphError):
    """Raised when a task value is malformed."""

    kind = ErrorKind.INVALID_INPUT


class DuplicateTaskError(InvalidInputError):
    """Raised when creating a task whose id already exists."""

    def __init__(self, task_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["task_id"] = task_id
        super().__init__("Task id already exists", details)
        self.task_id = task_id


class StoreUnavailableError(TaskGraphError):
    """Raised when a graph store transaction fails."""

    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
        self.operation = operation


class DataCorruptionError(TaskGraphError):
    """Raised when a graph row cannot be mapped to a Task."""

    kind = ErrorKind.DATA_CORRUPTION

    def __init__(
        self,
        field: str,
        value: Any = None,
        expected: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["field"] = field
        if expected:
            details["expected"] = expected
        details["actual"] = type(value).__name__
        super().__init__(f"Unmappable value for task field '{field}'", details)
        self.field = field
        self.value = value
