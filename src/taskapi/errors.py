"""Domain errors raised by the task store."""

from collections.abc import Iterable, Mapping
from typing import Any

from fastapi import status

# Location prefixes FastAPI adds to request validation errors.
_REQUEST_PARTS = {"body", "query", "path", "header", "cookie"}


def describe_validation_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    """Flatten pydantic error dicts into ``field: message; ...``."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in _REQUEST_PARTS]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or "Invalid input"


class TaskError(Exception):
    """Base class for errors that map onto an HTTP error envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(TaskError):
    """Input is malformed or out of range."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation Error"


class NotFound(TaskError):
    """Identifier does not resolve to an applicable task."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with ID {task_id} not found")
        self.task_id = task_id


class InvalidTransition(TaskError):
    """Status change is not allowed by the lifecycle graph."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid Transition"

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot change status from {current} to {target}")
        self.current = current
        self.target = target


class Internal(TaskError):
    """Unexpected failure, usually in the storage layer."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
