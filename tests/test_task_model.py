import dataclasses
import datetime

import pytest

import task_model
from task_model import UTC, Difficulty, Priority, Status, Task
from validators import validate_id

from conftest import days_from_now, make_task


def test_create_uses_defaults_and_same_timestamps():
    task = task_model.create("Write report")

    validate_id(task.id)
    assert task.title == "Write report"
    assert task.description == ""
    assert task.status is Status.PENDING
    assert task.difficulty is Difficulty.EASY
    assert task.priority is Priority.MEDIUM
    assert task.due_at is None
    assert task.related_ids == ()
    assert task.deleted is False
    assert task.created_at == task.last_edited_at
    assert task.created_at.tzinfo is not None


def test_create_gives_unique_ids():
    ids = {task_model.create("Task").id for _ in range(50)}
    assert len(ids) == 50


def test_create_converts_integer_enums():
    task = task_model.create("Task", status=2, difficulty=1, priority=4)
    assert task.status is Status.IN_PROGRESS
    assert task.difficulty is Difficulty.HARD
    assert task.priority is Priority.URGENT


def test_task_is_frozen():
    task = task_model.create("Task")
    with pytest.raises(dataclasses.FrozenInstanceError):
        task.title = "Other"


@pytest.mark.parametrize(
    "transform, field, value",
    [
        (task_model.with_title, "title", "New title"),
        (task_model.with_description, "description", "Some details"),
        (task_model.with_status, "status", Status.DONE),
        (task_model.with_difficulty, "difficulty", Difficulty.HARD),
        (task_model.with_priority, "priority", Priority.HIGH),
    ],
)
def test_with_functions_change_one_field_and_refresh_edit_time(transform, field, value):
    original = task_model.create("Original")

    updated = transform(original, value)

    assert getattr(updated, field) == value
    assert updated.id == original.id
    assert updated.created_at == original.created_at
    assert updated.last_edited_at >= original.last_edited_at
    # The input is left alone.
    assert original.title == "Original"
    assert dataclasses.replace(updated, **{field: getattr(original, field)},
                               last_edited_at=original.last_edited_at) == original


def test_with_due_at_sets_and_clears():
    due = days_from_now(2)
    task = task_model.with_due_at(task_model.create("Task"), due)
    assert task.due_at == due

    cleared = task_model.with_due_at(task, None)
    assert cleared.due_at is None


def test_edit_time_never_goes_backwards():
    future = days_from_now(1)
    task = make_task(created_at=future)
    assert task_model.with_title(task, "Other").last_edited_at == future


def test_mark_deleted_and_restore():
    task = task_model.create("Task")
    deleted = task_model.mark_deleted(task)
    assert deleted.deleted is True
    assert task_model.is_deleted(deleted)

    restored = task_model.restore(deleted)
    assert restored.deleted is False
    assert restored.last_edited_at >= deleted.last_edited_at


def test_add_relation_is_idempotent():
    task = task_model.create("Task")
    related = task_model.add_relation(task, "other")
    assert related.related_ids == ("other",)

    again = task_model.add_relation(related, "other")
    assert again is related


def test_remove_relation_always_returns_new_task():
    task = task_model.add_relation(task_model.create("Task"), "other")

    removed = task_model.remove_relation(task, "other")
    assert removed.related_ids == ()

    absent = task_model.remove_relation(removed, "missing")
    assert absent is not removed
    assert absent.related_ids == ()
    assert absent.last_edited_at >= removed.last_edited_at


def test_is_overdue():
    assert task_model.is_overdue(make_task(due_at=days_from_now(-1)))
    assert not task_model.is_overdue(make_task(due_at=days_from_now(1)))
    assert not task_model.is_overdue(make_task())
    assert not task_model.is_overdue(make_task(due_at=days_from_now(-1), status=Status.DONE))


def test_is_overdue_accepts_reference_time():
    task = make_task(due_at=days_from_now(1))
    assert task_model.is_overdue(task, now=days_from_now(2))


def test_is_high_priority_ignores_status():
    assert task_model.is_high_priority(make_task(priority=Priority.HIGH))
    assert task_model.is_high_priority(make_task(priority=Priority.URGENT, status=Status.DONE))
    assert not task_model.is_high_priority(make_task(priority=Priority.MEDIUM))
    assert not task_model.is_high_priority(make_task(priority=Priority.LOW))


def test_labels():
    assert task_model.status_label(Status.IN_PROGRESS) == "In Progress"
    assert task_model.difficulty_label(Difficulty.HARD) == "Hard"
    assert task_model.priority_label(Priority.URGENT) == "Urgent"
    assert task_model.priority_label(3) == "High"
    assert task_model.status_label(42) == "Unknown"


def test_format_instant():
    assert task_model.format_instant(None) == task_model.NO_DATE
    moment = datetime.datetime(2026, 10, 18, 12, 0, tzinfo=UTC)
    assert "2026" in task_model.format_instant(moment)


def test_epoch_ms_conversion():
    assert task_model.from_epoch_ms(0) == datetime.datetime(1970, 1, 1, tzinfo=UTC)
    assert task_model.to_epoch_ms(task_model.from_epoch_ms(1700000000123)) == 1700000000123
    assert task_model.to_epoch_ms(None) is None
    assert task_model.from_epoch_ms(None) is None


def test_task_to_dict_shape():
    task = make_task(
        "Write report",
        status=Status.DONE,
        difficulty=Difficulty.MEDIUM,
        priority=Priority.HIGH,
        created_at=task_model.from_epoch_ms(1000),
        related_ids=("a", "b"),
    )

    data = task_model.task_to_dict(task)

    assert data == {
        "id": task.id,
        "title": "Write report",
        "description": "",
        "status": 3,
        "difficulty": 2,
        "priority": 3,
        "createdAt": 1000,
        "lastEditedAt": 1000,
        "dueAt": None,
        "relatedIds": ["a", "b"],
        "deleted": False,
    }


def test_task_from_dict_round_trip():
    task = task_model.add_relation(
        task_model.create("Task", "desc", Status.IN_PROGRESS, Difficulty.HARD, Priority.URGENT, days_from_now(3)),
        "other",
    )
    assert task_model.task_from_dict(task_model.task_to_dict(task)) == task


def test_task_from_dict_rejects_malformed_records():
    data = task_model.task_to_dict(task_model.create("Task"))

    with pytest.raises(KeyError):
        task_model.task_from_dict({k: v for k, v in data.items() if k != "title"})
    with pytest.raises(ValueError):
        task_model.task_from_dict(dict(data, status=9))
    with pytest.raises(TypeError):
        task_model.task_from_dict(dict(data, createdAt=None))


def test_task_defaults_last_edited_to_created():
    task = Task(title="Task")
    assert task.last_edited_at == task.created_at
