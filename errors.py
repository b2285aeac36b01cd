# errors.py
#
# Description:
# Error kinds shared by the store, the storage backend and the UI, plus a
# small tagged Result type so the UI can branch on the kind of failure
# instead of catching exceptions around every call.
#

from dataclasses import dataclass
from typing import Any, Callable, Optional


class TaskDeskError(Exception):
    """Base class for all expected application errors."""

    kind = "error"


class ValidationError(TaskDeskError):
    """An input failed a business rule (empty title, bad enum, past date...)."""

    kind = "validation"


class NotFoundError(TaskDeskError):
    """An operation referenced a task id that has no matching record."""

    kind = "not_found"

    def __init__(self, task_id: str, message: Optional[str] = None):
        super().__init__(message or f"No task found with id: {task_id}")
        self.task_id = task_id


class StorageError(TaskDeskError):
    """Reading, writing or copying the data file failed."""

    kind = "io"


@dataclass(frozen=True)
class Result:
    """Outcome of an operation: either a value or a TaskDeskError."""

    value: Any = None
    error: Optional[TaskDeskError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[str]:
        return self.error.kind if self.error else None

    @property
    def message(self) -> str:
        return str(self.error) if self.error else ""


def attempt(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Result:
    """
    Call func and wrap its outcome in a Result.

    Only TaskDeskError subclasses are captured; anything else is a bug and
    propagates to the caller.
    """
    try:
        return Result(value=func(*args, **kwargs))
    except TaskDeskError as exc:
        return Result(error=exc)
