# ui.py
#
# Description:
# The interactive console. Menus are printed with rich, one line of input is
# read at a time, and every change goes through the TaskManager and is then
# written to disk through JsonStorage. Failures are shown and the loop goes
# on; nothing here is fatal except an unexpected exception.
#

import datetime
import logging
from typing import Callable, List, Optional, Sequence, Type

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

import task_model
from errors import Result, ValidationError, attempt
from menus import (
    BACK,
    DETAIL_MENU,
    MAIN_MENU,
    TRASH_MENU,
    VIEW_MENU,
    MenuItem,
    find_item,
)
from reminder import ReminderManager
from storage import JsonStorage
from task_manager import SortKey, TaskManager
from task_model import (
    DIFFICULTY_LABELS,
    PRIORITY_LABELS,
    STATUS_LABELS,
    Difficulty,
    Priority,
    Status,
    Task,
)

logger = logging.getLogger(__name__)

PRIORITY_STYLES = {
    Priority.LOW: "green",
    Priority.MEDIUM: "yellow",
    Priority.HIGH: "red",
    Priority.URGENT: "bold red",
}

STATUS_STYLES = {
    Status.PENDING: "white",
    Status.IN_PROGRESS: "cyan",
    Status.DONE: "dim",
    Status.CANCELLED: "dim strike",
}

ERROR_TITLES = {
    "validation": "Invalid input",
    "not_found": "Not found",
    "io": "Storage error",
}

SORT_TITLES = {
    SortKey.TITLE: "Tasks by title",
    SortKey.CREATED_AT: "Newest tasks",
    SortKey.DUE_AT: "Tasks by due date",
    SortKey.DIFFICULTY: "Tasks by difficulty",
}

DUE_DATE_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d")


def parse_due_date(text: str) -> Optional[datetime.datetime]:
    """
    Parse a local due date typed by the user. Blank means no due date.
    A date without a time means the end of that day.

    Raises:
        ValidationError: if the text matches none of the accepted formats.
    """
    text = text.strip()
    if not text:
        return None
    for fmt in DUE_DATE_FORMATS:
        try:
            parsed = datetime.datetime.strptime(text, fmt)
        except ValueError:
            continue
        if fmt == "%Y-%m-%d":
            parsed = parsed.replace(hour=23, minute=59)
        return parsed.astimezone()
    raise ValidationError(f"Invalid date: {text!r}. Use YYYY-MM-DD or YYYY-MM-DD HH:MM")


def parse_selection(text: str, size: int) -> Optional[int]:
    """Turn a 1-based menu number into a list index; None for 0, junk or out of range."""
    try:
        number = int(text.strip())
    except ValueError:
        return None
    if 1 <= number <= size:
        return number - 1
    return None


class App:
    """
    The menu-driven console.

    Args:
        task_manager: The in-memory store.
        storage: Where snapshots are written after each change.
        console: rich Console used for all output.
        read_line: Reads one line of input after showing a prompt. Defaults
                   to console.input; tests pass a scripted reader. Raising
                   EOFError ends the session.
    """
    def __init__(
        self,
        task_manager: TaskManager,
        storage: JsonStorage,
        console: Optional[Console] = None,
        read_line: Optional[Callable[[str], str]] = None,
    ):
        self.task_manager = task_manager
        self.storage = storage
        self.console = console or Console()
        self.read_line = read_line or self._console_input
        self.reminder_manager = ReminderManager(task_manager)
        self.running = True

    def _console_input(self, prompt: str) -> str:
        # Text, not markup: prompts contain literal brackets like "[Enter]".
        return self.console.input(Text(prompt, style="bold"))

    # --- Main loop ---

    def run(self) -> None:
        while self.running:
            self.show_reminders()
            self.render_menu("Task Manager", MAIN_MENU)
            try:
                choice = self.ask("\nOption")
            except EOFError:
                break
            item = find_item(MAIN_MENU, choice)
            if item is None:
                logger.debug("Ignoring unknown menu option %r", choice)
                continue
            try:
                self.dispatch(item)
            except EOFError:
                break
        self.running = False

    def dispatch(self, item: MenuItem, *args):
        handler = getattr(self, f"action_{item.action}")
        if item.arg is not None:
            args = args + (item.arg,)
        return handler(*args)

    # --- Input helpers ---

    def ask(self, prompt: str) -> str:
        return self.read_line(f"{prompt}: ")

    def choose(self, items: Sequence[Task], title: str) -> Optional[Task]:
        """Show a numbered list and return the picked task, if any."""
        if not items:
            self.console.print(f"[yellow]No tasks found[/yellow] ({title})")
            return None
        self.render_task_list(items, title)
        self.console.print(Text("[number] View details | [0] Back", style="dim"))
        index = parse_selection(self.ask("Option"), len(items))
        return items[index] if index is not None else None

    def choose_enum(self, enum_cls: Type, labels: dict, current=None):
        """Ask for an enum value by number; returns current when nothing valid is picked."""
        options = " | ".join(f"[{member.value}] {labels[member]}" for member in enum_cls)
        self.console.print(options, markup=False)
        raw = self.ask("Option").strip()
        try:
            return enum_cls(int(raw))
        except ValueError:
            return current

    def apply(self, func: Callable, *args) -> Result:
        """Run a store or storage call, printing the error if it fails."""
        result = attempt(func, *args)
        if not result.ok:
            logger.info("%s failed: %s", getattr(func, "__name__", func), result.message)
            self.show_error(result)
        return result

    def persist(self) -> bool:
        """Write the full snapshot. A failure is reported but does not stop the session."""
        result = attempt(self.storage.save, self.task_manager.list_all())
        if result.ok:
            self.console.print("[green]Changes saved[/green]")
            return True
        logger.error("Saving after a change failed: %s", result.message)
        self.show_error(result)
        return False

    # --- Rendering ---

    def render_menu(self, title: str, menu: Sequence[MenuItem]) -> None:
        body = Text()
        for item in menu:
            body.append(f"[{item.key}] ", style="bold cyan")
            body.append(f"{item.label}\n")
        self.console.print(Panel(body, title=title, border_style="cyan", expand=False))

    def render_task_list(self, tasks: Sequence[Task], title: str) -> None:
        table = Table(title=title, show_lines=False)
        table.add_column("#", justify="right")
        table.add_column("Title")
        table.add_column("Status")
        table.add_column("Priority")
        table.add_column("Due")
        for number, task in enumerate(tasks, start=1):
            table.add_row(
                str(number),
                Text(task.title),
                Text(task_model.status_label(task.status), style=STATUS_STYLES.get(task.status, "")),
                Text(task_model.priority_label(task.priority), style=PRIORITY_STYLES.get(task.priority, "")),
                task_model.format_instant(task.due_at),
            )
        self.console.print(table)

    def render_task(self, task: Task) -> None:
        related = [
            t.title for t in self.task_manager.list_all()
            if t.id in task.related_ids and not t.deleted
        ]
        content = Text()
        content.append(f"ID:          {task.id}\n", style="dim")
        content.append(f"Description: {task.description or '(no description)'}\n")
        content.append("Status:      ")
        content.append(f"{task_model.status_label(task.status)}\n", style=STATUS_STYLES.get(task.status, ""))
        content.append(f"Difficulty:  {task_model.difficulty_label(task.difficulty)}\n")
        content.append("Priority:    ")
        content.append(f"{task_model.priority_label(task.priority)}\n", style=PRIORITY_STYLES.get(task.priority, ""))
        content.append(f"Created:     {task_model.format_instant(task.created_at)}\n")
        content.append(f"Edited:      {task_model.format_instant(task.last_edited_at)}\n")
        content.append(f"Due:         {task_model.format_instant(task.due_at)}\n")
        content.append(f"Related:     {', '.join(related) if related else '(none)'}")
        if task_model.is_overdue(task):
            content.append("\nOVERDUE", style="bold red")
        self.console.print(Panel(content, title=Text(task.title), border_style="green", expand=False))

    def show_error(self, result: Result) -> None:
        title = ERROR_TITLES.get(result.kind, "Error")
        self.console.print(f"[red]{title}:[/red] ", Text(result.message))

    def show_reminders(self) -> None:
        for task in self.reminder_manager.check_reminders():
            self.console.print("[bold yellow]Reminder:[/bold yellow] ", Text(f"'{task.title}' is overdue!"))

    # --- Main menu actions ---

    def action_quit(self) -> None:
        self.running = False

    def action_view_tasks(self) -> None:
        while True:
            self.render_menu("View tasks", VIEW_MENU)
            choice = self.ask("Option")
            if choice.strip() == BACK:
                return
            item = find_item(VIEW_MENU, choice)
            if item is None:
                logger.debug("Ignoring unknown menu option %r", choice)
                continue
            self.dispatch(item)

    def action_show_tasks(self, status: Optional[Status] = None) -> None:
        if status is None:
            tasks, title = self.task_manager.list_active(), "All tasks"
        else:
            tasks = self.task_manager.list_by_status(status)
            title = f"{task_model.status_label(status)} tasks"
        self.open_from_list(tasks, title)

    def action_show_sorted(self, key: SortKey) -> None:
        self.open_from_list(self.task_manager.sort(key), SORT_TITLES[key])

    def action_search(self) -> None:
        text = self.ask("Title to search for")
        tasks = self.task_manager.search(text)
        self.open_from_list(tasks, f"Results ({len(tasks)})")

    def action_critical_tasks(self) -> None:
        self.open_from_list(self.task_manager.list_critical(), "Critical tasks")

    def action_add_task(self) -> None:
        self.console.print(Panel("New task", border_style="cyan", expand=False))
        title = self.ask("Title")
        description = self.ask("Description")
        self.console.print("Status:")
        status = self.choose_enum(Status, STATUS_LABELS, Status.PENDING)
        self.console.print("Difficulty:")
        difficulty = self.choose_enum(Difficulty, DIFFICULTY_LABELS, Difficulty.EASY)
        self.console.print("Priority:")
        priority = self.choose_enum(Priority, PRIORITY_LABELS, Priority.MEDIUM)
        due = self.apply(parse_due_date, self.ask("Due date (YYYY-MM-DD [HH:MM], blank for none)"))
        if not due.ok:
            return

        result = self.apply(
            self.task_manager.add, title, description, status, difficulty, priority, due.value
        )
        if result.ok:
            logger.info("Task %s added", result.value.id)
            self.console.print("[green]Task added[/green] ", Text(f"(id {result.value.id})"))
            self.persist()

    def action_statistics(self) -> None:
        stats = self.task_manager.statistics()

        table = Table(title=f"Statistics ({stats.total} active tasks)")
        table.add_column("Group")
        table.add_column("Value")
        table.add_column("Count", justify="right")
        table.add_column("%", justify="right")
        for status, bucket in stats.by_status.items():
            table.add_row("Status", task_model.status_label(status), str(bucket.count), f"{bucket.percentage}%")
        for difficulty, bucket in stats.by_difficulty.items():
            table.add_row(
                "Difficulty", task_model.difficulty_label(difficulty), str(bucket.count), f"{bucket.percentage}%"
            )
        self.console.print(table)
        self.console.print(f"Deleted tasks:  {stats.deleted}")
        self.console.print(f"High priority:  {stats.high_priority}")
        self.console.print(f"Overdue:        {stats.overdue}")

    def action_trash(self) -> None:
        task = self.choose(self.task_manager.list_deleted(), "Deleted tasks")
        if task is None:
            return
        self.render_task(task)
        self.render_menu("Deleted task", TRASH_MENU)
        item = find_item(TRASH_MENU, self.ask("Option"))
        if item is not None and item.key != BACK:
            self.dispatch(item, task.id)

    def action_backup(self) -> None:
        result = self.apply(self.storage.backup)
        if not result.ok:
            return
        if result.value is None:
            self.console.print("[yellow]There is no data file to back up yet[/yellow]")
        else:
            self.console.print("[green]Backup created:[/green] ", Text(str(result.value)))

    # --- Single task ---

    def open_from_list(self, tasks: Sequence[Task], title: str) -> None:
        task = self.choose(tasks, title)
        if task is not None:
            self.show_task_detail(task.id)

    def show_task_detail(self, task_id: str) -> None:
        while True:
            task = self.task_manager.find_by_id(task_id)
            if task is None:
                self.console.print("[red]Task not found[/red]")
                return
            self.render_task(task)
            self.render_menu("Actions", DETAIL_MENU)
            item = find_item(DETAIL_MENU, self.ask("Option"))
            if item is None or item.key == BACK:
                return
            if self.dispatch(item, task_id):
                return

    def _ask_edit(self, label: str, current: str) -> bool:
        self.console.print(f"{label} now: ", Text(current))
        return self.ask("[1] Edit | [Enter] Skip").strip() == "1"

    def action_edit_task(self, task_id: str) -> None:
        task = self.task_manager.find_by_id(task_id)
        if task is None:
            return
        changed: List[Result] = []

        if self._ask_edit("Title", task.title):
            changed.append(self.apply(self.task_manager.set_title, task_id, self.ask("New title")))

        if self._ask_edit("Description", task.description or "(empty)"):
            changed.append(self.apply(self.task_manager.set_description, task_id, self.ask("New description")))

        if self._ask_edit("Status", task_model.status_label(task.status)):
            status = self.choose_enum(Status, STATUS_LABELS)
            if status is not None:
                changed.append(self.apply(self.task_manager.set_status, task_id, status))

        if self._ask_edit("Difficulty", task_model.difficulty_label(task.difficulty)):
            difficulty = self.choose_enum(Difficulty, DIFFICULTY_LABELS)
            if difficulty is not None:
                changed.append(self.apply(self.task_manager.set_difficulty, task_id, difficulty))

        if self._ask_edit("Priority", task_model.priority_label(task.priority)):
            priority = self.choose_enum(Priority, PRIORITY_LABELS)
            if priority is not None:
                changed.append(self.apply(self.task_manager.set_priority, task_id, priority))

        if self._ask_edit("Due date", task_model.format_instant(task.due_at)):
            due = self.apply(parse_due_date, self.ask("New due date (blank to clear)"))
            if due.ok:
                changed.append(self.apply(self.task_manager.set_due_date, task_id, due.value))

        if any(r.ok for r in changed):
            logger.info("Task %s edited", task_id)
            self.persist()

    def action_delete_task(self, task_id: str) -> bool:
        if self.apply(self.task_manager.soft_delete, task_id).ok:
            logger.info("Task %s moved to deleted tasks", task_id)
            self.console.print("[green]Task deleted[/green] (it can be restored from Deleted tasks)")
            self.persist()
            return True
        return False

    def action_relate_task(self, task_id: str) -> None:
        task = self.task_manager.find_by_id(task_id)
        candidates = [
            t for t in self.task_manager.list_active()
            if t.id != task_id and t.id not in task.related_ids
        ]
        other = self.choose(candidates, "Relate to")
        if other is None:
            return
        if self.apply(self.task_manager.relate, task_id, other.id).ok:
            logger.info("Related tasks %s and %s", task_id, other.id)
            self.console.print("[green]Tasks related[/green]")
            self.persist()

    def action_unrelate_task(self, task_id: str) -> None:
        related = self.apply(self.task_manager.list_related, task_id)
        if not related.ok:
            return
        other = self.choose(related.value, "Remove relation with")
        if other is None:
            return
        if self.apply(self.task_manager.unrelate, task_id, other.id).ok:
            logger.info("Unrelated tasks %s and %s", task_id, other.id)
            self.console.print("[green]Relation removed[/green]")
            self.persist()

    def action_restore_task(self, task_id: str) -> None:
        if self.apply(self.task_manager.restore, task_id).ok:
            logger.info("Task %s restored", task_id)
            self.console.print("[green]Task restored[/green]")
            self.persist()

    def action_purge_task(self, task_id: str) -> None:
        if self.task_manager.hard_delete(task_id):
            logger.info("Task %s permanently deleted", task_id)
            self.console.print("[green]Task permanently deleted[/green]")
            self.persist()
