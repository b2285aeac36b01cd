# rules.py
#
# Description:
# Reusable task predicates and the helpers to combine them. The store's
# filter_by_predicate accepts any of these, which is how "critical" tasks
# are listed without storing the classification anywhere.
#

import datetime
from typing import Callable, Optional

from task_model import Priority, Status, Task, is_high_priority, is_overdue

Predicate = Callable[[Task], bool]


def all_of(*predicates: Predicate) -> Predicate:
    """Combine predicates with AND."""
    return lambda task: all(p(task) for p in predicates)


def any_of(*predicates: Predicate) -> Predicate:
    """Combine predicates with OR."""
    return lambda task: any(p(task) for p in predicates)


def negate(predicate: Predicate) -> Predicate:
    return lambda task: not predicate(task)


def is_pending(task: Task) -> bool:
    return task.status == Status.PENDING


def is_in_progress(task: Task) -> bool:
    return task.status == Status.IN_PROGRESS


def is_done(task: Task) -> bool:
    return task.status == Status.DONE


def is_cancelled(task: Task) -> bool:
    return task.status == Status.CANCELLED


def has_description(task: Task) -> bool:
    return bool(task.description and task.description.strip())


def has_due_date(task: Task) -> bool:
    return task.due_at is not None


def relates_to(task_id: str) -> Predicate:
    return lambda task: task_id in task.related_ids


def is_critical(task: Task, now: Optional[datetime.datetime] = None) -> bool:
    """
    A task is critical when it is not done, is high priority, and is either
    overdue or flagged URGENT. Urgent tasks do not need a due date to qualify.
    """
    if is_done(task):
        return False
    urgent = task.priority == Priority.URGENT
    return is_high_priority(task) and (is_overdue(task, now) or urgent)
