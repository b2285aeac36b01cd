# menus.py
#
# Description:
# This file defines the console menus. Keeping them in a separate file
# makes them easier to manage and reorder. Each entry is a MenuItem of
# (key, action, label, arg); the App calls its `action_<action>` method,
# passing `arg` when one is set.
#

from typing import Any, NamedTuple, Optional, Sequence

from task_manager import SortKey
from task_model import Status


class MenuItem(NamedTuple):
    key: str
    action: str
    label: str
    arg: Any = None


BACK = "0"

# Top-level menu
MAIN_MENU = [
    MenuItem("1", "view_tasks", "View tasks"),
    MenuItem("2", "search", "Search tasks"),
    MenuItem("3", "add_task", "Add task"),
    MenuItem("4", "statistics", "Statistics"),
    MenuItem("5", "critical_tasks", "Critical tasks"),
    MenuItem("6", "trash", "Deleted tasks"),
    MenuItem("7", "backup", "Back up data file"),
    MenuItem(BACK, "quit", "Exit"),
]

# "View tasks" sub-menu: filter by status or show in a sorted order
VIEW_MENU = [
    MenuItem("1", "show_tasks", "All", None),
    MenuItem("2", "show_tasks", "Pending", Status.PENDING),
    MenuItem("3", "show_tasks", "In progress", Status.IN_PROGRESS),
    MenuItem("4", "show_tasks", "Done", Status.DONE),
    MenuItem("5", "show_tasks", "Cancelled", Status.CANCELLED),
    MenuItem("6", "show_sorted", "Sorted by title", SortKey.TITLE),
    MenuItem("7", "show_sorted", "Newest first", SortKey.CREATED_AT),
    MenuItem("8", "show_sorted", "Sorted by due date", SortKey.DUE_AT),
    MenuItem("9", "show_sorted", "Hardest first", SortKey.DIFFICULTY),
    MenuItem(BACK, "back", "Back"),
]

# Actions on a single active task
DETAIL_MENU = [
    MenuItem("e", "edit_task", "Edit"),
    MenuItem("d", "delete_task", "Delete"),
    MenuItem("r", "relate_task", "Relate to another task"),
    MenuItem("u", "unrelate_task", "Remove a relation"),
    MenuItem(BACK, "back", "Back"),
]

# Actions on a soft-deleted task
TRASH_MENU = [
    MenuItem("r", "restore_task", "Restore"),
    MenuItem("p", "purge_task", "Delete permanently"),
    MenuItem(BACK, "back", "Back"),
]


def find_item(menu: Sequence[MenuItem], key: str) -> Optional[MenuItem]:
    key = key.strip().lower()
    for item in menu:
        if item.key == key:
            return item
    return None
