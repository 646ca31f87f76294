# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todo_list.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "allowed"),
    [
        ("todo_list.tasks.task_store", logging.DEBUG, True),
        ("todo_list", logging.INFO, True),
        ("py.warnings", logging.INFO, False),
        ("py.warnings", logging.WARNING, True),
        ("rich", logging.WARNING, False),
        ("rich", logging.ERROR, True),
        ("todo_listish", logging.INFO, False),
    ],
)
def test_console_filter(name: str, level: int, allowed: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is allowed


def test_console_filter_thresholds_are_configurable() -> None:
    quiet = _ConsoleNoiseFilter("myapp", warnings_level=logging.ERROR, others_level=logging.CRITICAL)

    assert quiet.filter(_record("myapp.sub", logging.DEBUG)) is True
    assert quiet.filter(_record("todo_list", logging.INFO)) is False
    assert quiet.filter(_record("py.warnings", logging.WARNING)) is False
    assert quiet.filter(_record("rich", logging.ERROR)) is False
    assert quiet.filter(_record("rich", logging.CRITICAL)) is True


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.ERROR)
        logging.getLogger("todo_list.test").debug("hello file")
        for h in root.handlers:
            h.flush()

        assert log_file == tmp_path / "logs" / "todo.log"
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
