# config.py
#
# Description:
# Settings loaded from environment variables. Command-line options in
# main.py take precedence over these.
#
#   TASKDESK_FILE       data file (default: tasks.json in the working directory)
#   TASKDESK_LOG_DIR    directory for taskdesk.log (default: .taskdesk)
#   TASKDESK_LOG_LEVEL  console log level (default: WARNING)
#

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKDESK"

DEFAULT_FILE = "tasks.json"
DEFAULT_LOG_DIR = ".taskdesk"
DEFAULT_LOG_LEVEL = "WARNING"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def _env_path(name: str, default: str) -> Path:
    return Path(_env(name, default)).expanduser()


@dataclass(frozen=True)
class Settings:
    data_file: Path
    log_dir: Path
    log_level: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            data_file=_env_path(_k("FILE"), DEFAULT_FILE),
            log_dir=_env_path(_k("LOG_DIR"), DEFAULT_LOG_DIR),
            log_level=_env(_k("LOG_LEVEL"), DEFAULT_LOG_LEVEL).upper(),
        )
