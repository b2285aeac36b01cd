# task_model.py
#
# Description:
# This file defines the Task record and the pure functions that produce new
# Task values from old ones. Nothing here touches the disk or validates
# business rules; the TaskManager does that before calling in.
#

import datetime
import uuid
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

UTC = datetime.timezone.utc

# Integer values are what gets written to the data file.
class Status(IntEnum):
    """Enumeration for task status."""
    PENDING = 1
    IN_PROGRESS = 2
    DONE = 3
    CANCELLED = 4

class Difficulty(IntEnum):
    """Enumeration for task difficulty. Lower value means harder."""
    HARD = 1
    MEDIUM = 2
    EASY = 3

class Priority(IntEnum):
    """Enumeration for task priority."""
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    URGENT = 4


STATUS_LABELS = {
    Status.PENDING: "Pending",
    Status.IN_PROGRESS: "In Progress",
    Status.DONE: "Done",
    Status.CANCELLED: "Cancelled",
}

DIFFICULTY_LABELS = {
    Difficulty.HARD: "Hard",
    Difficulty.MEDIUM: "Medium",
    Difficulty.EASY: "Easy",
}

PRIORITY_LABELS = {
    Priority.LOW: "Low",
    Priority.MEDIUM: "Medium",
    Priority.HIGH: "High",
    Priority.URGENT: "Urgent",
}

NO_DATE = "No date"


def truncate_ms(moment: datetime.datetime) -> datetime.datetime:
    """Drop sub-millisecond precision so instants survive epoch-ms encoding."""
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def to_utc(moment: datetime.datetime) -> datetime.datetime:
    """Normalize to an aware UTC datetime. Naive values are taken as local time."""
    return truncate_ms(moment.astimezone(UTC))


def utc_now() -> datetime.datetime:
    return truncate_ms(datetime.datetime.now(UTC))


@dataclass(frozen=True)
class Task:
    """
    Represents a single task. Instances are never mutated; every change
    produces a new Task through one of the module-level functions below.

    Attributes:
        id: A UUID v4 string, assigned at creation and never reassigned.
        title: The task title (at least 3 characters, enforced by the store).
        description: Free-form text, may be empty.
        status: The current state of the task.
        difficulty: How hard the task is.
        priority: How important the task is.
        created_at: UTC instant the task was created.
        last_edited_at: UTC instant of the last change, never before created_at.
        due_at: Optional UTC deadline.
        related_ids: Ids of related tasks. The relation is kept symmetric by
                     the TaskManager.
        deleted: Soft-delete flag.
    """
    title: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    status: Status = Status.PENDING
    difficulty: Difficulty = Difficulty.EASY
    priority: Priority = Priority.MEDIUM
    created_at: datetime.datetime = field(default_factory=utc_now)
    last_edited_at: Optional[datetime.datetime] = None
    due_at: Optional[datetime.datetime] = None
    related_ids: Tuple[str, ...] = ()
    deleted: bool = False

    def __post_init__(self):
        # Frozen, so go through object.__setattr__ for the derived default.
        if self.last_edited_at is None:
            object.__setattr__(self, "last_edited_at", self.created_at)


def create(
    title: str,
    description: str = "",
    status: Status = Status.PENDING,
    difficulty: Difficulty = Difficulty.EASY,
    priority: Priority = Priority.MEDIUM,
    due_at: Optional[datetime.datetime] = None,
) -> Task:
    """Build a brand new task with a fresh id and both timestamps set to now."""
    now = utc_now()
    return Task(
        title=title,
        description=description,
        status=Status(status),
        difficulty=Difficulty(difficulty),
        priority=Priority(priority),
        created_at=now,
        last_edited_at=now,
        due_at=to_utc(due_at) if due_at is not None else None,
    )


def _edit(task: Task, **changes: Any) -> Task:
    """Copy the task with the given changes and a refreshed last_edited_at."""
    edited_at = max(utc_now(), task.last_edited_at)
    return replace(task, last_edited_at=edited_at, **changes)


def with_title(task: Task, title: str) -> Task:
    return _edit(task, title=title)


def with_description(task: Task, description: str) -> Task:
    return _edit(task, description=description)


def with_status(task: Task, status: Status) -> Task:
    return _edit(task, status=Status(status))


def with_difficulty(task: Task, difficulty: Difficulty) -> Task:
    return _edit(task, difficulty=Difficulty(difficulty))


def with_priority(task: Task, priority: Priority) -> Task:
    return _edit(task, priority=Priority(priority))


def with_due_at(task: Task, due_at: Optional[datetime.datetime]) -> Task:
    return _edit(task, due_at=to_utc(due_at) if due_at is not None else None)


def mark_deleted(task: Task) -> Task:
    return _edit(task, deleted=True)


def restore(task: Task) -> Task:
    return _edit(task, deleted=False)


def add_relation(task: Task, other_id: str) -> Task:
    """Add other_id to the relations. Returns the task untouched if already there."""
    if other_id in task.related_ids:
        return task
    return _edit(task, related_ids=task.related_ids + (other_id,))


def remove_relation(task: Task, other_id: str) -> Task:
    """Remove other_id from the relations. Always stamps a new edit time."""
    return _edit(task, related_ids=tuple(i for i in task.related_ids if i != other_id))


# --- Predicates ---

def is_done(task: Task) -> bool:
    return task.status == Status.DONE


def is_deleted(task: Task) -> bool:
    return task.deleted


def is_overdue(task: Task, now: Optional[datetime.datetime] = None) -> bool:
    """True if the task has a due date, is not done, and the due date has passed."""
    if task.due_at is None or is_done(task):
        return False
    now = now if now is not None else utc_now()
    return now > task.due_at


def is_high_priority(task: Task) -> bool:
    return task.priority in (Priority.HIGH, Priority.URGENT)


# --- Display helpers ---

def status_label(status: int) -> str:
    return STATUS_LABELS.get(status, "Unknown")


def difficulty_label(difficulty: int) -> str:
    return DIFFICULTY_LABELS.get(difficulty, "Unknown")


def priority_label(priority: int) -> str:
    return PRIORITY_LABELS.get(priority, "Unknown")


def format_instant(moment: Optional[datetime.datetime]) -> str:
    """Format an instant in local time, or a placeholder when there is none."""
    if moment is None:
        return NO_DATE
    return moment.astimezone().strftime("%a %d %b %Y, %H:%M")


# --- Serialization (used by storage.JsonStorage) ---

def to_epoch_ms(moment: Optional[datetime.datetime]) -> Optional[int]:
    if moment is None:
        return None
    delta = to_utc(moment) - datetime.datetime(1970, 1, 1, tzinfo=UTC)
    return delta // datetime.timedelta(milliseconds=1)


def from_epoch_ms(value: Optional[int]) -> Optional[datetime.datetime]:
    if value is None:
        return None
    return datetime.datetime(1970, 1, 1, tzinfo=UTC) + datetime.timedelta(milliseconds=int(value))


def task_to_dict(task: Task) -> Dict[str, Any]:
    """Convert a task into the JSON-ready shape of the data file."""
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": int(task.status),
        "difficulty": int(task.difficulty),
        "priority": int(task.priority),
        "createdAt": to_epoch_ms(task.created_at),
        "lastEditedAt": to_epoch_ms(task.last_edited_at),
        "dueAt": to_epoch_ms(task.due_at),
        "relatedIds": list(task.related_ids),
        "deleted": task.deleted,
    }


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def task_from_dict(data: Dict[str, Any]) -> Task:
    """
    Rebuild a task from its data-file shape.

    Raises KeyError, TypeError or ValueError on malformed input; the caller
    decides what to do about it.
    """
    return Task(
        id=str(data["id"]),
        title=_text(data["title"]),
        description=_text(data.get("description")),
        status=Status(data["status"]),
        difficulty=Difficulty(data["difficulty"]),
        priority=Priority(data["priority"]),
        created_at=from_epoch_ms(int(data["createdAt"])),
        last_edited_at=from_epoch_ms(int(data["lastEditedAt"])),
        due_at=from_epoch_ms(data.get("dueAt")),
        related_ids=tuple(dict.fromkeys(str(i) for i in data.get("relatedIds", []))),
        deleted=bool(data.get("deleted", False)),
    )
