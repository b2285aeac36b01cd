# reminder.py
#
# Description:
# This file contains the logic for the reminder system. It checks for active
# tasks that are overdue and lets the console show each of them once per
# session, above the main menu.
#

import datetime
from typing import List, Optional, Set

from task_manager import TaskManager
from task_model import Task, is_overdue


class ReminderManager:
    """Tracks which overdue tasks have already been announced."""

    def __init__(self, task_manager: TaskManager):
        """
        Initializes the ReminderManager.

        Args:
            task_manager: The TaskManager to read tasks from.
        """
        self.task_manager = task_manager
        self.notified_task_ids: Set[str] = set()

    def check_reminders(self, now: Optional[datetime.datetime] = None) -> List[Task]:
        """
        Returns active overdue tasks that have not been announced yet, and
        marks them as announced.
        """
        due_tasks = []
        for task in self.task_manager.list_active():
            if is_overdue(task, now) and task.id not in self.notified_task_ids:
                due_tasks.append(task)
                self.notified_task_ids.add(task.id)
        return due_tasks
