# main.py
import argparse
import locale
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from config import Settings
from errors import StorageError
from logging_setup import setup_logging
from storage import JsonStorage
from task_manager import TaskManager
from ui import App

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="taskdesk",
        description="TaskDesk: a menu-driven task manager backed by a JSON file.",
    )
    p.add_argument("--file", help="Path to the JSON data file (default: tasks.json or TASKDESK_FILE)")
    p.add_argument("--log-level", help="Console log level (default: WARNING or TASKDESK_LOG_LEVEL)")
    return p


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None, read_line=None) -> int:
    """Load tasks, run the console until the user exits, save, and return the exit code."""
    ns = build_parser().parse_args(argv)
    settings = Settings.from_env()
    data_file = Path(ns.file).expanduser() if ns.file else settings.data_file
    log_level = (ns.log_level or settings.log_level).upper()

    console = console or Console()
    try:
        setup_logging(log_dir=settings.log_dir, console_level=log_level)
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not set up logging:[/red] {e}")
        return 1
    try:
        # Title sorting follows the user's collation rules.
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.debug("Could not apply the user's collation locale, keeping the default")

    storage = JsonStorage(data_file)
    try:
        # Initialize backend components
        task_manager = TaskManager(storage.load())
        console.print(f"[bold]TaskDesk[/bold]: {task_manager.count()} task(s) loaded")

        app = App(task_manager, storage, console=console, read_line=read_line)
        try:
            app.run()
        except KeyboardInterrupt:
            console.print("\nInterrupted")

        # Save final state before exiting
        try:
            storage.save(task_manager.list_all())
            console.print("State saved")
        except StorageError as e:
            console.print(f"[red]Could not save tasks on exit:[/red] {e}")
    except Exception as e:
        logger.exception("Unhandled error, shutting down")
        console.print(f"[red]An error occurred:[/red] {e}")
        return 1

    console.print("Goodbye!")
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
