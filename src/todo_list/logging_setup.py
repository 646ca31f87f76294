# src/todo_list/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "todo_list"
LOG_FILE_NAME = "todo.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Decide which records may reach the terminal under the list.

    App records always pass (the handler level applies). Captured
    ``warnings.warn`` output passes from ``warnings_level`` up, anything
    else from ``others_level`` up.
    """

    def __init__(
        self,
        app: str = APP_LOGGER,
        *,
        warnings_level: int = logging.WARNING,
        others_level: int = logging.ERROR,
    ) -> None:
        super().__init__()
        self._app = app
        self._warnings_level = warnings_level
        self._others_level = others_level

    def _is_app(self, name: str) -> bool:
        return name == self._app or name.startswith(self._app + ".")

    def filter(self, record: logging.LogRecord) -> bool:
        if self._is_app(record.name):
            return True
        if record.name == "py.warnings":
            return record.levelno >= self._warnings_level
        return record.levelno >= self._others_level


def _console_handler(level: int, fmt: logging.Formatter) -> logging.Handler:
    # stderr, so log lines never end up inside a redirected list dump
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.addFilter(_ConsoleNoiseFilter())
    return handler


def _file_handler(path: Path, level: int, fmt: logging.Formatter) -> logging.Handler:
    handler = logging.FileHandler(str(path), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler and a full file log on the root logger.

    Replaces whatever handlers are already there, so calling it twice does not
    duplicate output. Returns the path of the log file.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(min(console_level, file_level))

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    root.addHandler(_console_handler(console_level, fmt))
    root.addHandler(_file_handler(log_file, file_level, fmt))

    logging.captureWarnings(True)
    logging.getLogger(__name__).debug("Logging to %s", log_file)
    return log_file
