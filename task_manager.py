# task_manager.py
#
# Description:
# This file contains the core logic for managing tasks. The TaskManager owns
# the in-memory list of Task values for the lifetime of the process and
# handles creation, edits, soft/hard deletes, relations, filtering, sorting
# and statistics. It never touches the disk; the UI hands snapshots to
# storage.JsonStorage after every change.
#

import datetime
import locale
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import task_model
from errors import NotFoundError, ValidationError
from rules import Predicate, is_critical
from task_model import Difficulty, Priority, Status, Task
from validators import (
    validate_difficulty,
    validate_due_date,
    validate_id,
    validate_priority,
    validate_status,
    validate_title,
)

logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    """Criteria accepted by TaskManager.sort."""
    TITLE = "title"
    CREATED_AT = "created_at"
    DUE_AT = "due_at"
    DIFFICULTY = "difficulty"

    @classmethod
    def parse(cls, raw: Union["SortKey", str]) -> "SortKey":
        if isinstance(raw, cls):
            return raw
        aliases = {"createdAt": cls.CREATED_AT, "dueAt": cls.DUE_AT}
        try:
            return aliases.get(raw) or cls(raw)
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValidationError(f"Invalid sort criterion: {raw!r}. Valid values: {valid}") from None


@dataclass(frozen=True)
class Bucket:
    count: int
    percentage: int


@dataclass(frozen=True)
class TaskStatistics:
    """
    Summary of the store. total, by_status and by_difficulty cover active
    tasks only; deleted, high_priority and overdue are counted separately.
    """
    total: int
    by_status: Dict[Status, Bucket]
    by_difficulty: Dict[Difficulty, Bucket]
    deleted: int
    high_priority: int
    overdue: int


def _percentage(count: int, total: int) -> int:
    """Integer percentage rounded half-up; zero when there is nothing to divide."""
    if total == 0:
        return 0
    return (count * 200 + total) // (total * 2)


def _title_key(task: Task):
    # strxfrm rejects NUL characters.
    title = task.title.replace("\x00", "")
    return (locale.strxfrm(title.casefold()), locale.strxfrm(title))


def _due_key(task: Task):
    # Undated tasks go last whichever side of the comparison they are on.
    return (task.due_at is None, task.due_at or _NO_DUE_DATE)


_NO_DUE_DATE = datetime.datetime.min.replace(tzinfo=task_model.UTC)

_SORT_KEYS: Dict[SortKey, Callable[[Task], object]] = {
    SortKey.TITLE: _title_key,
    SortKey.DUE_AT: _due_key,
    SortKey.DIFFICULTY: lambda t: int(t.difficulty),
}


class TaskManager:
    """
    Handles all business logic for tasks.
    It holds the tasks in memory, in insertion order, and provides methods
    to manipulate them. Inputs are validated before anything changes.
    """
    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        """
        Initializes the TaskManager.

        Args:
            tasks: Initial tasks, typically what JsonStorage.load() returned.
        """
        self._tasks: List[Task] = list(tasks or [])

    # --- Collection basics ---

    def load(self, tasks: Iterable[Task]) -> None:
        """Replace every task wholesale. Persisted data is trusted as-is."""
        self._tasks = list(tasks)
        logger.debug("Loaded %d task(s) into the store", len(self._tasks))

    def count(self) -> int:
        return len(self._tasks)

    def list_all(self) -> Tuple[Task, ...]:
        """Snapshot of every task, soft-deleted ones included."""
        return tuple(self._tasks)

    def clear(self) -> None:
        self._tasks = []

    # --- CRUD ---

    def add(
        self,
        title: str,
        description: str = "",
        status: Status = Status.PENDING,
        difficulty: Difficulty = Difficulty.EASY,
        priority: Priority = Priority.MEDIUM,
        due_at: Optional[datetime.datetime] = None,
    ) -> Task:
        """
        Adds a new task.

        Args:
            title: The title of the new task (at least 3 characters).
            description: Optional longer text.
            status, difficulty, priority: Enum members or their integer values.
            due_at: Optional deadline, which cannot be in the past.

        Returns:
            The newly created Task.

        Raises:
            ValidationError: if any field breaks a rule. Nothing is added then.
        """
        validate_title(title)
        validate_status(status)
        validate_difficulty(difficulty)
        validate_priority(priority)
        validate_due_date(due_at)

        new_task = task_model.create(title, description, status, difficulty, priority, due_at)
        self._tasks.append(new_task)
        logger.debug("Added task %s (%r)", new_task.id, new_task.title)
        return new_task

    def find_by_id(self, task_id: str) -> Optional[Task]:
        """Retrieves an active task by its ID. Soft-deleted tasks are not returned."""
        for task in self._tasks:
            if task.id == task_id and not task.deleted:
                return task
        return None

    def _index_of(self, task_id: str) -> int:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        raise NotFoundError(task_id)

    def _update(self, task_id: str, transform: Callable[[Task], Task]) -> Task:
        """Apply transform to the task with this id (deleted or not) and store the result."""
        validate_id(task_id)
        index = self._index_of(task_id)
        self._tasks[index] = transform(self._tasks[index])
        return self._tasks[index]

    def set_title(self, task_id: str, title: str) -> Task:
        validate_title(title)
        return self._update(task_id, lambda t: task_model.with_title(t, title))

    def set_description(self, task_id: str, description: str) -> Task:
        return self._update(task_id, lambda t: task_model.with_description(t, description))

    def set_status(self, task_id: str, status: Status) -> Task:
        validate_status(status)
        return self._update(task_id, lambda t: task_model.with_status(t, status))

    def set_difficulty(self, task_id: str, difficulty: Difficulty) -> Task:
        validate_difficulty(difficulty)
        return self._update(task_id, lambda t: task_model.with_difficulty(t, difficulty))

    def set_priority(self, task_id: str, priority: Priority) -> Task:
        validate_priority(priority)
        return self._update(task_id, lambda t: task_model.with_priority(t, priority))

    def set_due_date(self, task_id: str, due_at: Optional[datetime.datetime]) -> Task:
        validate_due_date(due_at)
        return self._update(task_id, lambda t: task_model.with_due_at(t, due_at))

    def soft_delete(self, task_id: str) -> Task:
        task = self._update(task_id, task_model.mark_deleted)
        logger.debug("Soft-deleted task %s", task_id)
        return task

    def restore(self, task_id: str) -> Task:
        task = self._update(task_id, task_model.restore)
        logger.debug("Restored task %s", task_id)
        return task

    def hard_delete(self, task_id: str) -> bool:
        """
        Removes a task permanently.

        Relations pointing at the removed id are left in place on the other
        tasks; list_related skips ids that no longer resolve.

        Returns:
            True if a task was removed, False if no task had that id.
        """
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        removed = len(self._tasks) < before
        if removed:
            logger.debug("Permanently deleted task %s", task_id)
        return removed

    # --- Relations ---

    def relate(self, first_id: str, second_id: str) -> None:
        """
        Relates two active tasks to each other, on both sides.

        Raises:
            ValidationError: on malformed ids or when both ids are the same.
            NotFoundError: if either id is not an active task. Neither task
                           is changed in that case.
        """
        validate_id(first_id)
        validate_id(second_id)
        if first_id == second_id:
            raise ValidationError("A task cannot be related to itself")
        for task_id in (first_id, second_id):
            if self.find_by_id(task_id) is None:
                raise NotFoundError(task_id)

        self._update(first_id, lambda t: task_model.add_relation(t, second_id))
        self._update(second_id, lambda t: task_model.add_relation(t, first_id))

    def unrelate(self, first_id: str, second_id: str) -> None:
        """Removes the relation on both sides. A missing relation is not an error."""
        validate_id(first_id)
        validate_id(second_id)
        for task_id in (first_id, second_id):
            self._index_of(task_id)

        self._update(first_id, lambda t: task_model.remove_relation(t, second_id))
        self._update(second_id, lambda t: task_model.remove_relation(t, first_id))

    # --- Sorting ---

    def sort(self, criterion: Union[SortKey, str]) -> Tuple[Task, ...]:
        """
        Returns the active tasks in a new order; the store's own order is untouched.

        title ascending, created_at newest first, due_at soonest first with
        undated tasks last, difficulty hardest first.
        """
        key = SortKey.parse(criterion)
        active = self.list_active()
        if key is SortKey.CREATED_AT:
            return tuple(sorted(active, key=lambda t: t.created_at, reverse=True))
        return tuple(sorted(active, key=_SORT_KEYS[key]))

    # --- Queries and filters ---

    def list_active(self) -> Tuple[Task, ...]:
        return tuple(t for t in self._tasks if not t.deleted)

    def list_deleted(self) -> Tuple[Task, ...]:
        return tuple(t for t in self._tasks if t.deleted)

    def list_high_priority(self) -> Tuple[Task, ...]:
        return self.filter_by_predicate(task_model.is_high_priority)

    def list_overdue(self) -> Tuple[Task, ...]:
        return self.filter_by_predicate(task_model.is_overdue)

    def list_by_status(self, status: Status) -> Tuple[Task, ...]:
        validate_status(status)
        return self.filter_by_predicate(lambda t: t.status == status)

    def list_by_difficulty(self, difficulty: Difficulty) -> Tuple[Task, ...]:
        validate_difficulty(difficulty)
        return self.filter_by_predicate(lambda t: t.difficulty == difficulty)

    def list_related(self, task_id: str) -> Tuple[Task, ...]:
        """Active tasks related to task_id. Ids that no longer resolve are skipped."""
        validate_id(task_id)
        task = self.find_by_id(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return self.filter_by_predicate(lambda t: t.id in task.related_ids)

    def filter_by_predicate(self, predicate: Predicate) -> Tuple[Task, ...]:
        """Active tasks for which predicate(task) is true."""
        return tuple(t for t in self._tasks if not t.deleted and predicate(t))

    def list_critical(self) -> Tuple[Task, ...]:
        return self.filter_by_predicate(is_critical)

    def search(self, text: str) -> Tuple[Task, ...]:
        """Active tasks whose title contains text, ignoring case."""
        needle = text.casefold()
        return self.filter_by_predicate(lambda t: needle in t.title.casefold())

    # --- Statistics ---

    def statistics(self) -> TaskStatistics:
        active = self.list_active()
        total = len(active)

        by_status = {}
        for status in Status:
            count = sum(1 for t in active if t.status == status)
            by_status[status] = Bucket(count, _percentage(count, total))

        by_difficulty = {}
        for difficulty in Difficulty:
            count = sum(1 for t in active if t.difficulty == difficulty)
            by_difficulty[difficulty] = Bucket(count, _percentage(count, total))

        return TaskStatistics(
            total=total,
            by_status=by_status,
            by_difficulty=by_difficulty,
            deleted=len(self.list_deleted()),
            high_priority=len(self.list_high_priority()),
            overdue=len(self.list_overdue()),
        )
