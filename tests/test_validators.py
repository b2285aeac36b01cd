import datetime
import uuid

import pytest

from errors import ValidationError
from task_model import Difficulty, Priority, Status, utc_now
from validators import (
    validate_difficulty,
    validate_due_date,
    validate_enum,
    validate_id,
    validate_min_length,
    validate_not_empty,
    validate_not_empty_collection,
    validate_priority,
    validate_range,
    validate_status,
    validate_title,
)


@pytest.mark.parametrize("value", ["", "   ", None])
def test_validate_not_empty_rejects_blank(value):
    with pytest.raises(ValidationError, match="title cannot be empty"):
        validate_not_empty(value, "title")


def test_validate_min_length_trims_first():
    validate_min_length("abc", 3, "title")
    with pytest.raises(ValidationError, match="at least 3 characters"):
        validate_min_length("  ab  ", 3, "title")


def test_validate_title():
    validate_title("Write report")
    with pytest.raises(ValidationError):
        validate_title("ab")
    with pytest.raises(ValidationError):
        validate_title("")


def test_validate_enum_accepts_members_and_values():
    validate_enum(Status.DONE, Status, "status")
    validate_enum(3, Status, "status")
    validate_status(Status.CANCELLED)
    validate_difficulty(Difficulty.HARD)
    validate_priority(4)


@pytest.mark.parametrize("value", [0, 5, "1", None, True, 2.0])
def test_validate_enum_rejects_unknown_values(value):
    with pytest.raises(ValidationError, match="Invalid status"):
        validate_status(value)


def test_validate_difficulty_and_priority_ranges():
    with pytest.raises(ValidationError):
        validate_difficulty(4)
    with pytest.raises(ValidationError):
        validate_priority(Priority.URGENT + 1)


def test_validate_due_date():
    validate_due_date(None)
    validate_due_date(utc_now() + datetime.timedelta(minutes=5))
    with pytest.raises(ValidationError, match="past"):
        validate_due_date(utc_now() - datetime.timedelta(milliseconds=1))


def test_validate_due_date_with_reference_time():
    now = datetime.datetime(2030, 1, 1, tzinfo=datetime.timezone.utc)
    validate_due_date(now, now=now)
    with pytest.raises(ValidationError):
        validate_due_date(now - datetime.timedelta(seconds=1), now=now)


def test_validate_due_date_accepts_naive_local_time():
    validate_due_date(datetime.datetime.now() + datetime.timedelta(hours=1))


def test_validate_id_accepts_uuid4():
    validate_id(str(uuid.uuid4()))
    validate_id(str(uuid.uuid4()).upper())


@pytest.mark.parametrize(
    "value",
    [
        "",
        "not-a-uuid",
        str(uuid.uuid1()),
        "123e4567-e89b-42d3-c456-426614174000",  # variant nibble c
        "123e4567-e89b-42d3-a456-42661417400",   # short last group
        str(uuid.uuid4()) + "\n",
        None,
        42,
    ],
)
def test_validate_id_rejects_other_shapes(value):
    with pytest.raises(ValidationError, match="Invalid id"):
        validate_id(value)


def test_validate_range():
    validate_range(5, 1, 10, "value")
    validate_range(1, 1, 10, "value")
    with pytest.raises(ValidationError, match="between 1 and 10"):
        validate_range(11, 1, 10, "value")


def test_validate_not_empty_collection():
    validate_not_empty_collection([1], "items")
    with pytest.raises(ValidationError):
        validate_not_empty_collection([], "items")
    with pytest.raises(ValidationError):
        validate_not_empty_collection(None, "items")
