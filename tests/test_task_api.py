# tests/test_task_api.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from todo_list.core.state import AppState
from todo_list.errors import ValidationError
from todo_list.tasks.task_api import (
    add_item,
    complete_item,
    delete_items,
    format_due,
    open_add_form,
    parse_due,
)

NOW = datetime(2024, 9, 3, 8, 15, 30)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("", NOW),
        ("  now ", NOW),
        ("today", NOW),
        ("tomorrow", NOW + timedelta(days=1)),
        ("10:00", datetime(2024, 9, 3, 10, 0)),
        ("2024-09-03 10:00", datetime(2024, 9, 3, 10, 0)),
        ("2024-09-03T10:00", datetime(2024, 9, 3, 10, 0)),
        ("2024-12-24", datetime(2024, 12, 24)),
        ("+30m", NOW + timedelta(minutes=30)),
        ("+2h", NOW + timedelta(hours=2)),
        ("+1d", NOW + timedelta(days=1)),
        ("+1W", NOW + timedelta(weeks=1)),
    ],
)
def test_parse_due(text: str, expected: datetime) -> None:
    assert parse_due(text, now=NOW) == expected


@pytest.mark.parametrize(
    "text", ["next someday", "25:00", "2024-13-01", "+5y", "+99999999999d", "+999999999d"]
)
def test_parse_due_rejects_garbage(text: str) -> None:
    with pytest.raises(ValidationError):
        parse_due(text, now=NOW)


@pytest.mark.parametrize(
    ("dt", "expected"),
    [
        (datetime(2024, 9, 3, 10, 0), "9/3/2024, 10:00 AM"),
        (datetime(2024, 12, 24, 0, 5), "12/24/2024, 12:05 AM"),
        (datetime(2024, 1, 2, 12, 0), "1/2/2024, 12:00 PM"),
        (datetime(2024, 1, 2, 15, 30), "1/2/2024, 3:30 PM"),
    ],
)
def test_format_due(dt: datetime, expected: str) -> None:
    assert format_due(dt) == expected


def test_add_item_inserts_resets_and_dismisses(state: AppState) -> None:
    open_add_form(state)
    state.form.title = "Buy milk"
    state.form.due = datetime(2024, 9, 3, 10, 0)

    item = add_item(state, now=NOW)

    assert state.show_add_form is False
    assert state.form.title == ""
    assert state.form.due == NOW
    assert [(i.title, i.timestamp, i.is_completed) for i in state.items] == [
        ("Buy milk", datetime(2024, 9, 3, 10, 0), False)
    ]
    assert state.items[0].id == item.id


def test_add_item_accepts_empty_title_by_default(state: AppState) -> None:
    open_add_form(state)
    item = add_item(state)
    assert item.title == ""
    assert len(state.items) == 1


def test_add_item_can_require_title(state: AppState) -> None:
    state.settings.require_title = True
    open_add_form(state)
    state.form.title = "   "

    with pytest.raises(ValidationError):
        add_item(state)

    assert len(state.items) == 0
    assert state.show_add_form is True
    assert state.form.title == "   "


def test_complete_item_removes_it(state: AppState) -> None:
    item = state.store.insert("Finish report")
    assert complete_item(state, item.id) is None
    assert len(state.items) == 0


def test_complete_item_retained(retain_state: AppState) -> None:
    item = retain_state.store.insert("Finish report")
    done = complete_item(retain_state, item.id)
    assert done is not None and done.is_completed
    assert retain_state.items[0].is_completed is True


def test_delete_items_by_offsets(state: AppState) -> None:
    for title in ("A", "B", "C", "D"):
        state.store.insert(title)

    removed = delete_items(state, [2, 4, 2])

    assert removed == 2
    assert [i.title for i in state.items] == ["A", "C"]


def test_delete_items_out_of_range_deletes_nothing(state: AppState) -> None:
    state.store.insert("A")
    state.store.insert("B")

    with pytest.raises(ValidationError):
        delete_items(state, [1, 3])

    assert [i.title for i in state.items] == ["A", "B"]
