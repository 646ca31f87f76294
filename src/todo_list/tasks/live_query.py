# src/todo_list/tasks/live_query.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..errors import StorageError
from .task_models import ChangeKind, StoreChange, TodoItem

if TYPE_CHECKING:
    from ..core.ports import TaskRepo

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResultChange:
    """
    Diff between two consecutive snapshots of a LiveQuery, keyed by record id.

    `removed` carries the records themselves since they are no longer in `items`.
    """

    items: list[TodoItem]
    inserted: list[str] = field(default_factory=list)
    removed: list[TodoItem] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    cause: StoreChange | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.inserted or self.removed or self.updated)


ResultObserver = Callable[[ResultChange], None]


class LiveQuery:
    """
    Reactive "all records" result set.

    Subscribes to the store on creation and refreshes its snapshot after every
    committed change; observers receive the new snapshot together with the diff.
    Consumers never re-query manually.
    """

    def __init__(self, repo: TaskRepo) -> None:
        self._repo = repo
        self._items: list[TodoItem] = repo.list_items()
        self._observers: list[ResultObserver] = []
        self._unsubscribe = repo.subscribe(self._on_store_change)
        self._closed = False

    # ---- sequence protocol ----

    @property
    def items(self) -> list[TodoItem]:
        return list(self._items)

    def ids(self) -> list[str]:
        return [i.id for i in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(list(self._items))

    def __getitem__(self, index: int) -> TodoItem:
        return self._items[index]

    # ---- observers ----

    def observe(self, observer: ResultObserver) -> Callable[[], None]:
        self._observers.append(observer)

        def _stop() -> None:
            with contextlib.suppress(ValueError):
                self._observers.remove(observer)

        return _stop

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._unsubscribe()
        self._observers.clear()

    # ---- refresh ----

    def _on_store_change(self, change: StoreChange) -> None:
        try:
            fresh = self._repo.list_items()
        except StorageError:
            logger.exception("LiveQuery refresh failed; keeping previous snapshot.")
            return

        fresh = self._keep_transient(self._items, fresh, change)
        diff = self._diff(self._items, fresh, change)
        self._items = fresh
        if diff.is_empty:
            return

        for observer in list(self._observers):
            try:
                observer(diff)
            except Exception:
                logger.exception("LiveQuery observer failed (%s).", change.kind.value)

    @staticmethod
    def _keep_transient(
        old: list[TodoItem], fresh: list[TodoItem], cause: StoreChange
    ) -> list[TodoItem]:
        """
        Toggle-then-delete commits once, so the UPDATED notification already finds the
        row gone. Keep the updated record at its old position until DELETED arrives.
        """
        if cause.kind is not ChangeKind.UPDATED:
            return fresh
        old_ids = [i.id for i in old]
        if cause.item.id not in old_ids or any(i.id == cause.item.id for i in fresh):
            return fresh

        fresh_ids = {i.id for i in fresh}
        pos = sum(1 for i in old_ids[: old_ids.index(cause.item.id)] if i in fresh_ids)
        return fresh[:pos] + [cause.item] + fresh[pos:]

    @staticmethod
    def _diff(old: list[TodoItem], new: list[TodoItem], cause: StoreChange) -> ResultChange:
        old_by_id = {i.id: i for i in old}
        new_by_id = {i.id: i for i in new}

        inserted = [i.id for i in new if i.id not in old_by_id]
        removed = [i for i in old if i.id not in new_by_id]
        updated = [i.id for i in new if i.id in old_by_id and old_by_id[i.id] != i]

        return ResultChange(items=list(new), inserted=inserted, removed=removed, updated=updated, cause=cause)
