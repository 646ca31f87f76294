# src/todo_list/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.ports import ConsoleIO
from ..core.state import AppState
from ..errors import ValidationError
from ..tasks.task_api import (
    add_item,
    complete_item,
    delete_items,
    format_due,
    item_at,
    open_add_form,
    parse_due,
)
from ..tasks.task_models import CompletionPolicy

CommandHandler3 = Callable[[AppState, list[str], ConsoleIO], "str | None"]
# Same, plus the untouched text after the command name.
CommandHandler4 = Callable[[AppState, list[str], ConsoleIO, str], "str | None"]
CommandHandler = CommandHandler3 | CommandHandler4

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, /done, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, io: ConsoleIO) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string, "" when the command needs no reply, or None if not a command.
        """
        if not line.startswith("/"):
            return None

        head_tail = line[1:].split(None, 1)
        if not head_tail:
            return "Empty command. Use /help to list available commands."

        name = head_tail[0].lower()
        rest = head_tail[1] if len(head_tail) > 1 else ""
        args = rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 4:
            h4 = cast(CommandHandler4, handler)
            return h4(state, args, io, rest) or ""

        h3 = cast(CommandHandler3, handler)
        return h3(state, args, io) or ""

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit (also /quit, Ctrl+D).")
        lines.append("Any other text adds a task due now.")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_offsets(args: list[str]) -> list[int]:
    offsets: list[int] = []
    for raw in args:
        token = raw.rstrip(".,")
        if not token.isdigit():
            raise ValidationError(f"Invalid task number: {raw!r}")
        offsets.append(int(token))
    return offsets


def cmd_help(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], io: ConsoleIO) -> str:
    policy = CompletionPolicy.from_config(str(getattr(state.settings, "completion_policy", "")))
    completing = "deletes it" if policy is CompletionPolicy.DELETE else "keeps it (struck through)"
    db_path = getattr(state.store, "db_path", None)
    return (
        "Status:\n"
        f"  Tasks: {len(state.items)}\n"
        f"  Completing a task: {completing}\n"
        f"  Database: {db_path}"
    )


def _split_inline_due(text: str, now: datetime) -> tuple[str, datetime]:
    """Split "<title> @ <due>" on the last " @ "; anything unparseable stays in the title."""
    title, sep, due_raw = text.rpartition(" @ ")
    if not sep:
        return text, now
    try:
        return title, parse_due(due_raw, now=now)
    except ValidationError:
        logger.debug("Inline due %r not a date, keeping it in the title", due_raw)
        return text, now


def cmd_add(state: AppState, args: list[str], io: ConsoleIO, rest: str) -> str | None:
    """
    /add                      -> open the add form (title, due date)
    /add <title> [@ <due>]    -> inline shorthand, due defaults to now
    """
    open_add_form(state)
    try:
        if rest:
            state.form.title, state.form.due = _split_inline_due(rest, state.form.due)
        else:
            state.form.title = io.ask("Task title: ")
            due_raw = io.ask(f"Due date [{format_due(state.form.due)}]: ")
            state.form.due = parse_due(due_raw, now=state.form.due)

        add_item(state)
    finally:
        state.show_add_form = False
    return None


def cmd_done(state: AppState, args: list[str], io: ConsoleIO) -> str | None:
    """/done <n> -> toggle completion of row n."""
    if len(args) != 1:
        return "Usage: /done <n>"
    (offset,) = _parse_offsets(args)
    item = item_at(state, offset)
    logger.debug("Toggle requested row=%s id=%s", offset, item.id)
    complete_item(state, item.id)
    return None


def cmd_rm(state: AppState, args: list[str], io: ConsoleIO) -> str | None:
    """/rm <n> [<n> ...] -> delete rows."""
    if not args:
        return "Usage: /rm <n> [<n> ...]"
    delete_items(state, _parse_offsets(args))
    return None


def cmd_list(state: AppState, args: list[str], io: ConsoleIO) -> str | None:
    io.redraw()
    return None


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add (form) | /add <title> [@ <due>].", aliases=["new", "a"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["x", "toggle"])
registry.register("rm", cmd_rm, help_text="Delete tasks: /rm <n> [<n> ...].", aliases=["delete", "del"])
registry.register("list", cmd_list, help_text="Redraw the list.", aliases=["ls"])
registry.register("status", cmd_status, help_text="Show task count, completion policy and database path.")
