# tests/conftest.py

import datetime
import io
from pathlib import Path

import pytest
from rich.console import Console

from storage import JsonStorage
from task_manager import TaskManager
from task_model import Task, utc_now


class ScriptedInput:
    """
    Stand-in for App.read_line: returns the given lines in order and raises
    EOFError once they run out, like a closed stdin.
    """

    def __init__(self, *lines: str) -> None:
        self.lines = list(lines)
        self.prompts = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


def days_from_now(days: float) -> datetime.datetime:
    return utc_now() + datetime.timedelta(days=days)


def make_task(title: str = "Sample task", **fields) -> Task:
    """Build a Task directly, bypassing validation (e.g. for past due dates)."""
    return Task(title=title, **fields)


@pytest.fixture()
def manager() -> TaskManager:
    return TaskManager()


@pytest.fixture()
def storage(tmp_path: Path) -> JsonStorage:
    return JsonStorage(tmp_path / "tasks.json")


@pytest.fixture()
def console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None, force_terminal=False)


def output_of(console: Console) -> str:
    return console.file.getvalue()
