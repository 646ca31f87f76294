# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_list.cli.bootstrap import create_initial_state
from todo_list.core.state import AppState
from todo_list.tasks.task_models import CompletionPolicy
from todo_list.tasks.task_store import TodoStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the console.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo",
        log_level="WARNING",
        data_dir=tmp_path,
        db_path=tmp_path / "todo.sqlite3",
        completion_policy=CompletionPolicy.DELETE,
        require_title=False,
        transition_seconds=0.0,
        clear_screen=False,
    )


@pytest.fixture()
def store(tmp_path: Path) -> TodoStore:
    return TodoStore(tmp_path / "store.sqlite3")


@pytest.fixture()
def retain_store(tmp_path: Path) -> TodoStore:
    return TodoStore(tmp_path / "retain.sqlite3", completion_policy=CompletionPolicy.RETAIN)


@pytest.fixture()
def state(settings: SimpleNamespace) -> Iterator[AppState]:
    """
    AppState built through the real composition root.

    NOTE: We keep a real SQLite store here because its correctness is part of
    what we want to test.
    """
    st = create_initial_state(settings=settings)
    yield st
    st.close()


@pytest.fixture()
def retain_state(settings: SimpleNamespace) -> Iterator[AppState]:
    settings.completion_policy = CompletionPolicy.RETAIN
    st = create_initial_state(settings=settings)
    yield st
    st.close()
