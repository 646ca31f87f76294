# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_list.config import Settings
from todo_list.tasks.task_models import CompletionPolicy

_VARS = (
    "TODO_APP_NAME",
    "TODO_LOG_LEVEL",
    "TODO_DATA_DIR",
    "TODO_DB_PATH",
    "TODO_COMPLETION_POLICY",
    "TODO_REQUIRE_TITLE",
    "TODO_TRANSITION_MS",
    "TODO_CLEAR_SCREEN",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "todo"
    assert s.log_level == "WARNING"
    assert s.data_dir == Path(".local/todo")
    assert s.db_path == Path(".local/todo") / "todo.sqlite3"
    assert s.completion_policy is CompletionPolicy.DELETE
    assert s.require_title is False
    assert s.transition_seconds == pytest.approx(0.3)
    assert s.clear_screen is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TODO_COMPLETION_POLICY", "Retain")
    monkeypatch.setenv("TODO_REQUIRE_TITLE", "yes")
    monkeypatch.setenv("TODO_TRANSITION_MS", "0")
    monkeypatch.setenv("TODO_CLEAR_SCREEN", "off")

    s = Settings.from_env()

    assert s.db_path == tmp_path / "todo.sqlite3"
    assert s.completion_policy is CompletionPolicy.RETAIN
    assert s.require_title is True
    assert s.transition_seconds == 0.0
    assert s.clear_screen is False


def test_bad_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TODO_COMPLETION_POLICY", "archive")
    monkeypatch.setenv("TODO_TRANSITION_MS", "fast")
    monkeypatch.setenv("TODO_APP_NAME", "   ")

    s = Settings.from_env()

    assert s.completion_policy is CompletionPolicy.DELETE
    assert s.transition_seconds == pytest.approx(0.3)
    assert s.app_name == "todo"


def test_explicit_db_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_DB_PATH", str(tmp_path / "elsewhere.db"))
    assert Settings.from_env().db_path == tmp_path / "elsewhere.db"
