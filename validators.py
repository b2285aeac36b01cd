# validators.py
#
# Description:
# Guards for user input. Each validator returns None when the value is
# acceptable and raises ValidationError with a readable message otherwise.
#

import datetime
import re
from enum import IntEnum
from typing import Optional, Sized, Type

from errors import ValidationError
from task_model import UTC, Difficulty, Priority, Status

TITLE_MIN_LENGTH = 3

UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def validate_not_empty(value: Optional[str], field_name: str) -> None:
    if not value or not value.strip():
        raise ValidationError(f"The {field_name} cannot be empty")


def validate_min_length(value: str, min_length: int, field_name: str) -> None:
    if len(value.strip()) < min_length:
        raise ValidationError(
            f"The {field_name} must be at least {min_length} characters long"
        )


def validate_title(title: Optional[str]) -> None:
    validate_not_empty(title, "title")
    validate_min_length(title, TITLE_MIN_LENGTH, "title")


def validate_enum(value: object, enum_cls: Type[IntEnum], enum_name: str) -> None:
    """Accept a member of enum_cls or one of its integer values."""
    valid_values = [member.value for member in enum_cls]
    # bool is an int subclass; True must not pass for 1.
    if isinstance(value, bool) or not isinstance(value, int) or value not in valid_values:
        raise ValidationError(
            f"Invalid {enum_name}: {value!r}. "
            f"Valid values: {', '.join(str(v) for v in valid_values)}"
        )


def validate_status(status: object) -> None:
    validate_enum(status, Status, "status")


def validate_difficulty(difficulty: object) -> None:
    validate_enum(difficulty, Difficulty, "difficulty")


def validate_priority(priority: object) -> None:
    validate_enum(priority, Priority, "priority")


def validate_due_date(
    due_at: Optional[datetime.datetime],
    now: Optional[datetime.datetime] = None,
) -> None:
    """A due date may be absent, but a concrete one cannot be in the past."""
    if due_at is None:
        return
    now = now if now is not None else datetime.datetime.now(UTC)
    if due_at.astimezone(UTC) < now:
        raise ValidationError("The due date cannot be in the past")


def validate_id(task_id: object) -> None:
    if not isinstance(task_id, str) or not UUID_V4_PATTERN.fullmatch(task_id):
        raise ValidationError(f"Invalid id: {task_id}")


def validate_range(value: float, minimum: float, maximum: float, field_name: str) -> None:
    if value < minimum or value > maximum:
        raise ValidationError(
            f"{field_name} must be between {minimum} and {maximum}, got: {value}"
        )


def validate_not_empty_collection(items: Optional[Sized], field_name: str) -> None:
    if not items:
        raise ValidationError(f"{field_name} cannot be empty")
