# src/todo_list/tasks/task_api.py

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime, timedelta

from ..core.state import AppState
from ..errors import ValidationError
from .task_models import TodoItem

logger = logging.getLogger(__name__)

_RELATIVE_RE = re.compile(r"^\+\s*(\d+)\s*([mhdw])$", re.IGNORECASE)
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_RELATIVE_UNITS = {"m": "minutes", "h": "hours", "d": "days", "w": "weeks"}
_DATE_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d")


def _shift(now: datetime, delta: timedelta, raw: str) -> datetime:
    try:
        return now + delta
    except OverflowError as e:
        raise ValidationError(f"Due date out of range: {raw!r}") from e


def parse_due(text: str | None, now: datetime | None = None) -> datetime:
    """
    Text stand-in for a date-and-time picker.

    Accepted:
      ""/now            -> now
      today, tomorrow   -> that day, keeping the current time
      HH:MM             -> today at that time
      YYYY-MM-DD[ HH:MM[:SS]] or ISO-8601 (T separator)
      +Nm / +Nh / +Nd / +Nw  -> relative to now
    """
    now = now if now is not None else datetime.now()
    raw = (text or "").strip()
    low = raw.lower()

    if low in ("", "now"):
        return now
    if low == "today":
        return now
    if low == "tomorrow":
        return _shift(now, timedelta(days=1), raw)

    m = _RELATIVE_RE.match(low)
    if m:
        amount, unit = int(m.group(1)), m.group(2).lower()
        try:
            delta = timedelta(**{_RELATIVE_UNITS[unit]: amount})
        except OverflowError as e:
            raise ValidationError(f"Due date out of range: {raw!r}") from e
        return _shift(now, delta, raw)

    m = _TIME_RE.match(low)
    if m:
        hour, minute = int(m.group(1)), int(m.group(2))
        try:
            return now.replace(hour=hour, minute=minute, second=0, microsecond=0)
        except ValueError as e:
            raise ValidationError(f"Invalid time: {raw!r}") from e

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(
            f"Cannot read due date {raw!r}. Use YYYY-MM-DD HH:MM, HH:MM, +2h, tomorrow or now."
        ) from e


def format_due(dt: datetime) -> str:
    """Numeric date with a shortened time, e.g. '9/3/2024, 10:00 AM'."""
    hour12 = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{dt.month}/{dt.day}/{dt.year}, {hour12}:{dt.minute:02d} {suffix}"


def open_add_form(state: AppState, now: datetime | None = None) -> None:
    state.form.reset(now)
    state.show_add_form = True


def add_item(state: AppState, now: datetime | None = None) -> TodoItem:
    """
    Save the add form: insert, then reset the fields and dismiss the form.

    Titles are free text; an empty one is accepted unless settings.require_title is on.
    On failure the form keeps its fields so the user can retry.
    """
    title = state.form.title
    if getattr(state.settings, "require_title", False) and not title.strip():
        raise ValidationError("Title required.")

    item = state.store.insert(title, state.form.due)
    logger.info("Added task id=%s", item.id)

    state.form.reset(now)
    state.show_add_form = False
    return item


def complete_item(state: AppState, item_id: str) -> TodoItem | None:
    """Completion tap: toggle, which deletes the record under the default policy."""
    return state.store.toggle_completion(item_id)


def item_at(state: AppState, offset: int) -> TodoItem:
    """Resolve a displayed 1-based row number against the live list."""
    if offset < 1 or offset > len(state.items):
        raise ValidationError(f"No task #{offset}.")
    return state.items[offset - 1]


def delete_items(state: AppState, offsets: Iterable[int]) -> int:
    """
    List-edit delete: resolve every offset first, then delete by identity, so that
    earlier deletions do not shift later offsets. Returns the number removed.
    """
    targets: list[TodoItem] = []
    for offset in sorted(set(offsets)):
        targets.append(item_at(state, offset))

    removed = 0
    for item in targets:
        if state.store.delete(item.id):
            removed += 1
    logger.info("Deleted %d task(s)", removed)
    return removed
