# logging_setup.py
#
# Description:
# Logging configuration: a rich handler on stderr for the interactive
# session and a plain file handler that keeps everything for debugging.
# Call setup_logging() once, before the first log call.
#

import logging
from pathlib import Path
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

LOG_FILE_NAME = "taskdesk.log"


def setup_logging(
    *,
    log_dir: Union[str, Path] = ".taskdesk",
    console_level: Union[int, str] = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure the root logger and return the path of the log file.

    Console output stays quiet by default so log lines do not interleave
    with the menus; the file gets every record.
    """
    if isinstance(console_level, str) and not isinstance(logging.getLevelName(console_level), int):
        raise ValueError(f"Unknown level: {console_level!r}")

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    ch = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    ch.setLevel(console_level)
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
