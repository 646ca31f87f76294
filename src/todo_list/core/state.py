# src/todo_list/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..tasks.live_query import LiveQuery
from .ports import TaskRepo


@dataclass
class AddItemForm:
    """Fields of the "new task" sheet. Due date defaults to now, like a date picker."""

    title: str = ""
    due: datetime = field(default_factory=datetime.now)

    def reset(self, now: datetime | None = None) -> None:
        self.title = ""
        self.due = now if now is not None else datetime.now()


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    store: TaskRepo
    items: LiveQuery

    form: AddItemForm = field(default_factory=AddItemForm)
    show_add_form: bool = False

    def close(self) -> None:
        self.items.close()
        self.store.close()
