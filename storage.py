# storage.py
#
# Description:
# JSON file backend for the task list. The whole collection is read and
# written in one go; there is no partial update. Backups are plain copies
# of the data file with a timestamp in the name.
#

import datetime
import json
import logging
import re
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Union

from errors import StorageError
from task_model import UTC, Task, task_from_dict, task_to_dict

logger = logging.getLogger(__name__)


def backup_timestamp(moment: Optional[datetime.datetime] = None) -> str:
    """UTC ISO instant made safe for file names, e.g. 2026-10-18T09-30-00-123Z."""
    moment = (moment or datetime.datetime.now(UTC)).astimezone(UTC)
    iso = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return re.sub(r"[:.]", "-", iso)


class JsonStorage:
    """Loads and saves the full task list to a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, tasks: Iterable[Task]) -> None:
        """
        Overwrite the data file with every task, deleted ones included.

        Raises:
            StorageError: if the tasks cannot be serialized or written.
        """
        records = [task_to_dict(t) for t in tasks]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Could not save tasks to %s: %s", self.path, exc)
            raise StorageError(f"Could not save tasks to {self.path}") from exc
        logger.info("Saved %d task(s) to %s", len(records), self.path)

    def load(self) -> List[Task]:
        """
        Read every task from the data file.

        A missing file is the normal first-run case and gives an empty list.
        Any other failure (unreadable file, bad JSON, malformed records) is
        logged as a warning and also gives an empty list, so a damaged file
        never blocks startup.
        """
        if not self.exists():
            logger.info("No task file at %s, starting with an empty list", self.path)
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
            tasks = [task_from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError, OverflowError, RecursionError) as exc:
            logger.warning("Could not load tasks from %s, starting empty: %s", self.path, exc)
            return []
        logger.info("Loaded %d task(s) from %s", len(tasks), self.path)
        return tasks

    def backup_path(self, moment: Optional[datetime.datetime] = None) -> Path:
        name = f"{self.path.stem}_backup_{backup_timestamp(moment)}.json"
        return self.path.with_name(name)

    def backup(self) -> Optional[Path]:
        """
        Copy the data file next to itself under a timestamped name.

        Returns:
            The backup path, or None when there is no data file to copy.

        Raises:
            StorageError: if the copy fails.
        """
        if not self.exists():
            logger.info("No task file at %s, nothing to back up", self.path)
            return None
        target = self.backup_path()
        try:
            shutil.copyfile(self.path, target)
        except OSError as exc:
            logger.error("Could not back up %s: %s", self.path, exc)
            raise StorageError(f"Could not create a backup of {self.path}") from exc
        logger.info("Backup created: %s", target)
        return target
