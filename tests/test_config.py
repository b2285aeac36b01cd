from pathlib import Path

from config import Settings


def test_defaults(monkeypatch):
    for name in ("TASKDESK_FILE", "TASKDESK_LOG_DIR", "TASKDESK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.data_file == Path("tasks.json")
    assert settings.log_dir == Path(".taskdesk")
    assert settings.log_level == "WARNING"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKDESK_FILE", str(tmp_path / "mine.json"))
    monkeypatch.setenv("TASKDESK_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("TASKDESK_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.data_file == tmp_path / "mine.json"
    assert settings.log_dir == tmp_path / "logs"
    assert settings.log_level == "DEBUG"


def test_blank_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("TASKDESK_FILE", "   ")
    assert Settings.from_env().data_file == Path("tasks.json")
