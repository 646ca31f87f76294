# src/todo_list/connectors/console_connector.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..errors import TodoError
from ..tasks.live_query import ResultChange
from ..tasks.task_api import add_item, format_due, open_add_form
from ..tasks.task_models import TodoItem

logger = logging.getLogger(__name__)

MARK_DONE = "✔"
MARK_OPEN = "○"
HINT = "/add  /done <n>  /rm <n>  /help  /exit"


class ConsoleView:
    """
    Renders the live list and serves as the ConsoleIO port for command handlers.

    The view never re-queries: it draws whatever snapshot the LiveQuery hands it.
    After a frame that shows an updated row (e.g. a just-completed task about to be
    removed) it holds for `transition_seconds` so the change is visible.
    """

    def __init__(
        self,
        state: AppState,
        console: Console | None = None,
        *,
        input_fn: Callable[[str], str] = input,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.state = state
        self.console = console if console is not None else Console()
        self._input = input_fn
        self._sleep = sleep
        self._stop_observing: Callable[[], None] | None = None

    # ---- ConsoleIO ----

    def emit(self, text: str) -> None:
        self.console.print(Text(text))

    def ask(self, prompt: str) -> str:
        return self._input(prompt)

    def redraw(self) -> None:
        self.render()

    # ---- reactive wiring ----

    def attach(self) -> None:
        if self._stop_observing is None:
            self._stop_observing = self.state.items.observe(self._on_change)

    def detach(self) -> None:
        if self._stop_observing is not None:
            self._stop_observing()
            self._stop_observing = None

    def _on_change(self, change: ResultChange) -> None:
        self.render(change)
        delay = float(getattr(self.state.settings, "transition_seconds", 0.0) or 0.0)
        if change.updated and delay > 0:
            self._sleep(delay)

    # ---- rendering ----

    def render(self, change: ResultChange | None = None) -> None:
        items = change.items if change is not None else self.state.items.items
        if getattr(self.state.settings, "clear_screen", False) and self.console.is_terminal:
            self.console.clear()
        self.console.print(self.build_frame(items, change))

    def build_frame(self, items: list[TodoItem], change: ResultChange | None = None) -> Group:
        app_name = str(getattr(self.state.settings, "app_name", "todo"))
        inserted = set(change.inserted) if change is not None else set()

        header = Text(f"{app_name}: {len(items)} task(s)", style="bold")
        parts: list[Text | Table] = [header]

        if items:
            parts.append(self._build_table(items, inserted))
        else:
            parts.append(Text("No tasks. Use /add to create one.", style="dim"))

        if change is not None:
            for gone in change.removed:
                parts.append(Text(f"  - {gone.title or '(untitled)'}", style="dim strike"))

        parts.append(Text(HINT, style="dim"))
        return Group(*parts)

    @staticmethod
    def _build_table(items: list[TodoItem], inserted: set[str]) -> Table:
        table = Table(box=None, show_header=False, pad_edge=False)
        table.add_column(justify="right", style="dim")
        table.add_column(width=1)
        table.add_column()
        table.add_column(justify="right", style="dim", no_wrap=True)

        for n, item in enumerate(items, start=1):
            if item.is_completed:
                mark = Text(MARK_DONE, style="green")
                title = Text(item.title, style="strike")
            else:
                mark = Text(MARK_OPEN, style="grey50")
                title = Text(item.title)
            if item.id in inserted:
                title.stylize("bold green")
            table.add_row(f"{n}.", mark, title, format_due(item.timestamp))
        return table


def run_console_loop(state: AppState, view: ConsoleView | None = None) -> None:
    view = view if view is not None else ConsoleView(state)
    logger.info("Console started (tasks=%s).", len(state.items))

    view.attach()
    view.render()
    try:
        while True:
            try:
                line = view.ask(": ").strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                view.emit("")
                break

            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = command_registry.handle(state, line, view)
                if reply is None:
                    # Plain text: quick add, due now.
                    open_add_form(state)
                    state.form.title = line
                    try:
                        add_item(state)
                    finally:
                        state.show_add_form = False
                    reply = ""
            except TodoError as e:
                logger.info("Command failed: %s", e)
                reply = str(e)
            except (EOFError, KeyboardInterrupt):
                reply = "Cancelled."
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply:
                view.emit(reply)
    finally:
        view.detach()
        logger.info("Console finished.")
