# src/todo_list/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

from ..core.ports import StoreListener, Unsubscribe
from ..errors import StorageError
from .live_query import LiveQuery
from .task_models import ChangeKind, CompletionPolicy, StoreChange, TodoItem, new_item_id

logger = logging.getLogger(__name__)


class TodoStore:
    """
    SQLite to-do store with synchronous change notification.

    Schema:
    - seq: autoincrement insertion sequence, defines the natural list order
    - id: UUID string, the record identity (unique)
    - timestamp: ISO-8601 text, round-trips naive and aware datetimes exactly

    Every mutation commits before listeners are called, so a listener that re-reads
    the store always sees the new state.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(
        self,
        db_path: str | Path = "todo.sqlite3",
        *,
        completion_policy: CompletionPolicy = CompletionPolicy.DELETE,
    ) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self.completion_policy = completion_policy
        self._listeners: list[StoreListener] = []
        self._ensure_schema()
        try:
            total = self.count()
        except StorageError:
            total = -1
        logger.info(
            "TodoStore ready db=%s total=%s policy=%s",
            self._db_path,
            total,
            self.completion_policy.value,
        )

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        self._listeners.clear()

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _connect(self, action: str) -> Iterator[sqlite3.Connection]:
        """Open a short-lived connection; sqlite errors surface as StorageError."""
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open task database {self._db_path}: {e}") from e
        try:
            yield conn
        except sqlite3.Error as e:
            logger.error("TodoStore %s failed db=%s: %s", action, self._db_path, e)
            raise StorageError(f"Failed to {action}: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connect("create schema") as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS todo_items (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL DEFAULT '',
                    timestamp TEXT NOT NULL,
                    is_completed INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            conn.commit()

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> TodoItem:
        return TodoItem(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            timestamp=datetime.fromisoformat(row["timestamp"]),
            is_completed=bool(row["is_completed"]),
        )

    def _fetch_one(self, conn: sqlite3.Connection, item_id: str) -> TodoItem | None:
        row = conn.execute(
            "SELECT id, title, timestamp, is_completed FROM todo_items WHERE id = ?",
            (item_id,),
        ).fetchone()
        return self._row_to_item(row) if row else None

    # ---- change notification ----

    def subscribe(self, listener: StoreListener) -> Unsubscribe:
        """Register a listener called after every committed mutation."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, kind: ChangeKind, item: TodoItem) -> None:
        change = StoreChange(kind=kind, item=item)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Store listener failed for %s id=%s", kind.value, item.id)

    # ---- public API ----

    def count(self) -> int:
        with self._connect("count tasks") as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM todo_items").fetchone()
            return int(n)

    def get(self, item_id: str) -> TodoItem | None:
        with self._connect("read task") as conn:
            return self._fetch_one(conn, item_id)

    def list_items(self) -> list[TodoItem]:
        """One-shot snapshot of all records in natural (insertion) order."""
        with self._connect("list tasks") as conn:
            rows = conn.execute(
                "SELECT id, title, timestamp, is_completed FROM todo_items ORDER BY seq ASC"
            ).fetchall()
            return [self._row_to_item(r) for r in rows]

    def query_all(self) -> LiveQuery:
        """
        Live view of all records.

        The returned LiveQuery follows subsequent changes on its own; call close()
        on it when the consumer goes away.
        """
        return LiveQuery(self)

    def insert(self, title: str, timestamp: datetime | None = None) -> TodoItem:
        """
        Add a record with a fresh id.

        No constraints: empty titles and past dates are stored as given.
        """
        item = TodoItem(
            id=new_item_id(),
            title=title,
            timestamp=timestamp if timestamp is not None else datetime.now(),
        )
        with self._connect("insert task") as conn:
            conn.execute(
                "INSERT INTO todo_items(id, title, timestamp, is_completed) VALUES (?, ?, ?, ?)",
                (item.id, item.title, item.timestamp.isoformat(), int(item.is_completed)),
            )
            conn.commit()
        logger.debug("Task inserted id=%s timestamp=%s", item.id, item.timestamp.isoformat())
        self._notify(ChangeKind.INSERTED, item)
        return item

    def toggle_completion(self, item_id: str) -> TodoItem | None:
        """
        Flip is_completed.

        Under CompletionPolicy.DELETE a record that becomes completed is deleted in
        the same transaction; listeners get UPDATED (completed) then DELETED.
        Returns the record as it now exists, or None if it is gone (or unknown).
        """
        with self._connect("toggle task") as conn:
            item = self._fetch_one(conn, item_id)
            if item is None:
                logger.debug("Toggle ignored: unknown id=%s", item_id)
                return None

            item.is_completed = not item.is_completed
            remove = item.is_completed and self.completion_policy is CompletionPolicy.DELETE
            if remove:
                conn.execute("DELETE FROM todo_items WHERE id = ?", (item_id,))
            else:
                conn.execute(
                    "UPDATE todo_items SET is_completed = ? WHERE id = ?",
                    (int(item.is_completed), item_id),
                )
            conn.commit()

        logger.debug("Task toggled id=%s completed=%s removed=%s", item_id, item.is_completed, remove)
        self._notify(ChangeKind.UPDATED, item)
        if remove:
            self._notify(ChangeKind.DELETED, item)
            return None
        return item

    def delete(self, item_id: str) -> bool:
        """Remove a record by identity. Returns False if no such record exists."""
        with self._connect("delete task") as conn:
            item = self._fetch_one(conn, item_id)
            if item is None:
                return False
            conn.execute("DELETE FROM todo_items WHERE id = ?", (item_id,))
            conn.commit()
        logger.debug("Task deleted id=%s", item_id)
        self._notify(ChangeKind.DELETED, item)
        return True
