# src/todo_list/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the view layer.

The console and the API helpers depend on Protocols instead of the concrete SQLite
store. This keeps storage swappable and makes testing easier.
"""

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.live_query import LiveQuery
    from ..tasks.task_models import StoreChange, TodoItem

StoreListener = Callable[["StoreChange"], None]
Unsubscribe = Callable[[], None]


class TaskRepo(Protocol):
    # Mutations
    def insert(self, title: str, timestamp: datetime | None = None) -> TodoItem: ...
    def toggle_completion(self, item_id: str) -> TodoItem | None: ...
    def delete(self, item_id: str) -> bool: ...

    # Reads
    def get(self, item_id: str) -> TodoItem | None: ...
    def count(self) -> int: ...
    def list_items(self) -> list[TodoItem]: ...
    def query_all(self) -> LiveQuery: ...

    # Change notification
    def subscribe(self, listener: StoreListener) -> Unsubscribe: ...

    def close(self) -> None: ...


class ConsoleIO(Protocol):
    """
    Connector-side port used by command handlers.

    emit: print a one-off line (notices, help)
    ask: prompt for a line of input (add form fields)
    redraw: render the list again from the current snapshot
    """

    def emit(self, text: str) -> None: ...
    def ask(self, prompt: str) -> str: ...
    def redraw(self) -> None: ...
