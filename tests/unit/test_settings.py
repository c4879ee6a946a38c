from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from fanlog.core.levels import LogLevel
from fanlog.core.settings import CoreSettings, Settings


def test_defaults() -> None:
    core = CoreSettings()
    assert core.min_level is LogLevel.INFO
    assert core.queue_capacity == 1000
    assert core.enqueue_timeout_seconds == 1.0
    assert core.flush_timeout_seconds == 5.0
    assert core.default_console is True
    assert core.file_directory is None
    assert core.enable_metrics is False


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FANLOG_CORE__MIN_LEVEL", "debug")
    monkeypatch.setenv("FANLOG_CORE__QUEUE_CAPACITY", "64")
    monkeypatch.setenv("FANLOG_CORE__DEFAULT_CONSOLE", "false")
    monkeypatch.setenv("FANLOG_CORE__FILE_DIRECTORY", "/var/log/app")

    core = Settings().core

    assert core.min_level is LogLevel.DEBUG
    assert core.queue_capacity == 64
    assert core.default_console is False
    assert core.file_directory == "/var/log/app"


def test_unknown_env_keys_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FANLOG_SOMETHING_ELSE", "1")
    assert Settings().core.queue_capacity == 1000


@pytest.mark.parametrize(
    "field, value",
    [
        ("queue_capacity", 0),
        ("enqueue_timeout_seconds", -1.0),
        ("flush_timeout_seconds", -0.1),
        ("min_level", "loud"),
        ("file_prefix", "   "),
    ],
)
def test_invalid_values_rejected(field: str, value: object) -> None:
    with pytest.raises(PydanticValidationError):
        CoreSettings(**{field: value})


def test_to_dict_uses_level_values() -> None:
    data = Settings(core=CoreSettings(min_level="error")).to_dict()
    assert data["core"]["min_level"] == int(LogLevel.ERROR)
    assert "file_directory" not in data["core"]
