# src/todo_list/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class CompletionPolicy(StrEnum):
    """
    What "mark complete" does to a record.

    Notes:
    - DELETE is the historical behavior: completing a task removes it, so the
      completed state is only ever seen during the removal transition.
    - RETAIN keeps completed tasks in the list (struck through) and lets them be
      toggled back.
    """

    DELETE = "delete"
    RETAIN = "retain"

    @classmethod
    def from_config(cls, raw: str | None) -> CompletionPolicy:
        if not raw:
            return cls.DELETE
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.DELETE


class ChangeKind(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"
    DELETED = "deleted"


def new_item_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class TodoItem:
    title: str
    timestamp: datetime = field(default_factory=datetime.now)
    is_completed: bool = False
    id: str = field(default_factory=new_item_id)


@dataclass(frozen=True, slots=True)
class StoreChange:
    """One committed mutation, delivered to store listeners after the commit."""

    kind: ChangeKind
    item: TodoItem
