#!/usr/bin/env python3
"""Smart Reminder TUI — hero tasks up top, everything else below."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.screen import ModalScreen, Screen
from textual.widgets import (
    Button,
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Select,
    Static,
    TextArea,
)

from core import reminders
from core.logging_setup import setup_logging
from core.models import (
    HISTORY_CAPACITY,
    IMPORTANCE_LEVELS,
    SORT_TIME,
    DashboardView,
    HistoryEntry,
    RankedTask,
)
from core.storage import load_settings, load_tasks
from core.tasks import find_task, new_draft
from core.workspace import log_dir, now_local, workspace_root

logger = logging.getLogger(__name__)


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

.section-title {
    text-style: bold;
    color: $accent;
    padding: 1 1 0 1;
}

#hero-table {
    height: auto;
    max-height: 12;
    border: tall $error;
}

#hero-table.calm {
    border: tall $primary;
}

#grid-table {
    height: 1fr;
}

#empty-hint {
    color: $text-muted;
    padding: 1 2;
}

#history-table {
    height: 1fr;
}

EditorScreen, ConfirmScreen {
    align: center middle;
}

#editor-dialog {
    width: 70;
    height: auto;
    max-height: 90%;
    border: thick $primary;
    background: $panel;
    padding: 1 2;
}

#editor-dialog Input, #editor-dialog Select {
    margin-bottom: 1;
}

#content-area {
    height: 6;
}

.dialog-buttons {
    height: auto;
    align-horizontal: right;
    padding-top: 1;
}

#confirm-dialog {
    width: 50;
    height: auto;
    border: thick $warning;
    background: $panel;
    padding: 1 2;
}
"""

TONE_MARKS = {
    "urgent": "DDL",
    "daily": "↻",
    "hot": "●",
    "warm": "◐",
    "calm": "○",
}


def _row(item: RankedTask) -> tuple[str, ...]:
    task = item.task
    return (
        TONE_MARKS.get(item.tone, ""),
        task.title or "(untitled)",
        item.countdown,
        task.importance.icon,
        (task.content or "").splitlines()[0][:40] if task.content else "",
    )


# ── Modal screens ──────────────────────────────────────────────


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no question."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, question: str) -> None:
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(self.question),
            Horizontal(
                Button("Yes", variant="error", id="confirm-yes"),
                Button("No", id="confirm-no"),
                classes="dialog-buttons",
            ),
            id="confirm-dialog",
        )

    @on(Button.Pressed)
    def _on_button(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_cancel(self) -> None:
        self.dismiss(False)


class EditorScreen(ModalScreen[dict[str, Any] | None]):
    """Create or edit a task. Dismisses with the draft, or None on cancel."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("ctrl+s", "submit", "Save"),
    ]

    def __init__(self, draft: dict[str, Any]) -> None:
        super().__init__()
        self.draft = draft

    def compose(self) -> ComposeResult:
        d = self.draft
        options = [(f"{lvl.icon} {lvl.label}", lvl.value) for lvl in IMPORTANCE_LEVELS.values()]
        yield VerticalScroll(
            Label("Edit task" if d.get("id") else "New task", classes="section-title"),
            Input(value=d.get("title", ""), placeholder="What needs doing?", id="title-input"),
            Checkbox("Daily task (comes back every day)", value=bool(d.get("isEveryday")), id="everyday-box"),
            Input(value=d.get("ddl") or "", placeholder="Deadline YYYY-MM-DD", id="ddl-input"),
            Input(value=d.get("time") or "", placeholder="Due time HH:MM (default 23:59)", id="time-input"),
            Select(options, value=int(d.get("importanceLevel", 2)), allow_blank=False, id="importance-select"),
            TextArea(d.get("content", ""), id="content-area"),
            Horizontal(
                Button("Save", variant="primary", id="editor-save"),
                Button("Cancel", id="editor-cancel"),
                classes="dialog-buttons",
            ),
            id="editor-dialog",
        )

    def on_mount(self) -> None:
        self._sync_deadline_inputs(bool(self.draft.get("isEveryday")))
        self.query_one("#title-input", Input).focus()

    def _sync_deadline_inputs(self, everyday: bool) -> None:
        self.query_one("#ddl-input", Input).display = not everyday
        self.query_one("#time-input", Input).display = not everyday

    @on(Checkbox.Changed, "#everyday-box")
    def _on_everyday(self, event: Checkbox.Changed) -> None:
        self._sync_deadline_inputs(event.value)

    def _collect(self) -> dict[str, Any]:
        draft: dict[str, Any] = {
            "title": self.query_one("#title-input", Input).value.strip(),
            "content": self.query_one("#content-area", TextArea).text,
            "importanceLevel": self.query_one("#importance-select", Select).value,
            "isEveryday": self.query_one("#everyday-box", Checkbox).value,
            "ddl": self.query_one("#ddl-input", Input).value.strip() or None,
            "time": self.query_one("#time-input", Input).value.strip() or None,
        }
        if self.draft.get("id"):
            draft["id"] = self.draft["id"]
        return draft

    @on(Button.Pressed, "#editor-save")
    def action_submit(self) -> None:
        self.dismiss(self._collect())

    @on(Button.Pressed, "#editor-cancel")
    def action_cancel(self) -> None:
        self.dismiss(None)


class HistoryScreen(Screen):
    """Completed tasks, newest first. Restore or purge from here."""

    BINDINGS = [
        Binding("r", "restore", "Restore"),
        Binding("p", "purge", "Delete forever"),
        Binding("escape,h", "close", "Back"),
    ]

    def __init__(self, root: Path) -> None:
        super().__init__()
        self.workspace = root
        self._entries: list[HistoryEntry] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Label("", id="history-title", classes="section-title")
        yield DataTable(id="history-table", cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#history-table", DataTable)
        table.add_columns("Completed", "Title", "Kind", "Importance")
        self.reload()
        table.focus()

    def reload(self) -> None:
        self._entries = reminders.list_history(self.workspace)
        self.query_one("#history-title", Label).update(
            f"Completed ({len(self._entries)}/{HISTORY_CAPACITY})"
        )
        table = self.query_one("#history-table", DataTable)
        table.clear()
        for i, entry in enumerate(self._entries):
            table.add_row(
                entry.completed_at.replace("T", " ")[:16],
                entry.title or "(untitled)",
                "daily check-in" if not entry.restorable else "task",
                entry.importance.icon,
                key=str(i),
            )

    def _selected(self) -> HistoryEntry | None:
        table = self.query_one("#history-table", DataTable)
        if not table.row_count:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        return self._entries[int(row_key.value)]

    def action_restore(self) -> None:
        entry = self._selected()
        if entry is None:
            return
        task = reminders.restore(entry.id, entry.completed_at, self.workspace)
        if task is not None:
            self.app.notify(f"Restored: {task.title}", title="Restored")
        self.reload()

    def action_purge(self) -> None:
        entry = self._selected()
        if entry is None:
            return

        def _done(confirmed: bool | None) -> None:
            if confirmed:
                reminders.purge(entry.id, entry.completed_at, self.workspace)
                self.reload()

        self.app.push_screen(ConfirmScreen(f"Delete '{entry.title}' from history for good?"), _done)

    def action_close(self) -> None:
        self.app.pop_screen()
        self.app.refresh_view()


# ── Main app ───────────────────────────────────────────────────


class ReminderApp(App):
    """Smart Reminder — what to do right now."""

    TITLE = "Smart Reminder"
    CSS = CSS

    BINDINGS = [
        Binding("n", "new_task", "New"),
        Binding("e", "edit_task", "Edit"),
        Binding("c", "complete_task", "Done"),
        Binding("x", "delete_task", "Delete"),
        Binding("s", "toggle_sort", "Sort"),
        Binding("h", "show_history", "History"),
        Binding("q", "quit", "Quit"),
    ]

    MAIN_SCREEN_ACTIONS = {"new_task", "edit_task", "complete_task", "delete_task", "toggle_sort", "show_history"}

    sort_mode: reactive[str] = reactive(SORT_TIME)

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Task actions only apply while the dashboard is the active screen."""
        if action in self.MAIN_SCREEN_ACTIONS and len(self.screen_stack) > 1:
            return False
        return True

    def __init__(self, root: Path | None = None) -> None:
        super().__init__()
        self.workspace = root or workspace_root()
        self.settings = load_settings(self.workspace)
        self.sort_mode = self.settings.sort_mode
        self.dashboard: DashboardView | None = None
        self._ticker = None
        self._hero_table: DataTable | None = None
        self._grid_table: DataTable | None = None
        self._empty_hint: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            Label("Now", classes="section-title"),
            DataTable(id="hero-table", cursor_type="row"),
            Label("Later", classes="section-title"),
            DataTable(id="grid-table", cursor_type="row"),
            Static("", id="empty-hint"),
        )
        yield Footer()

    def on_mount(self) -> None:
        self._hero_table = self.query_one("#hero-table", DataTable)
        self._grid_table = self.query_one("#grid-table", DataTable)
        self._empty_hint = self.query_one("#empty-hint", Static)
        for table in (self._hero_table, self._grid_table):
            table.add_columns("", "Title", "When", "Imp.", "Notes")
        self.refresh_view()
        self._hero_table.focus()
        # Countdowns and urgency change with the clock even when no task does.
        self._ticker = self.set_interval(self.settings.tick_seconds, self.refresh_view)

    def on_unmount(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()

    # ── Rendering ──────────────────────────────────────────────

    def refresh_view(self) -> None:
        """Recompute hero/grid from disk and redraw both tables."""
        self.dashboard = reminders.get_view(self.workspace, self.sort_mode, now_local(self.workspace))
        self._fill(self._hero_table, self.dashboard.hero)
        self._fill(self._grid_table, self.dashboard.grid)
        self._hero_table.set_class(not any(r.is_urgent for r in self.dashboard.hero), "calm")
        self._empty_hint.update(
            "Nothing to do. Press n to add a task." if self.dashboard.is_empty else ""
        )
        label = "by deadline" if self.sort_mode == SORT_TIME else "by importance"
        self.sub_title = f"{len(self.dashboard.hero) + len(self.dashboard.grid)} open · sorted {label}"

    @staticmethod
    def _fill(table: DataTable, items: list[RankedTask]) -> None:
        cursor = table.cursor_row
        table.clear()
        for item in items:
            table.add_row(*_row(item), key=item.task.id)
        if items:
            table.move_cursor(row=min(cursor, len(items) - 1))

    def _selected_task_id(self) -> str | None:
        focused = self.focused
        table = focused if isinstance(focused, DataTable) else self._hero_table
        if not table.row_count:
            return None
        return table.coordinate_to_cell_key(table.cursor_coordinate).row_key.value

    # ── Actions ────────────────────────────────────────────────

    def _open_editor(self, draft: dict[str, Any]) -> None:
        def _done(result: dict[str, Any] | None) -> None:
            if result is None:
                return
            task, errors = reminders.save(result, self.workspace)
            if errors:
                self.notify("\n".join(errors), title="Not saved", severity="error")
                return
            self.notify(f"Saved: {task.title}")
            self.refresh_view()

        self.push_screen(EditorScreen(draft), _done)

    def action_new_task(self) -> None:
        self._open_editor(new_draft(now_local(self.workspace)))

    @on(DataTable.RowSelected, "#hero-table, #grid-table")
    def _on_row_selected(self) -> None:
        self.action_edit_task()

    def action_edit_task(self) -> None:
        task_id = self._selected_task_id()
        task = find_task(load_tasks(self.workspace), task_id) if task_id else None
        if task is not None:
            self._open_editor(task.to_dict())

    def action_complete_task(self) -> None:
        task_id = self._selected_task_id()
        if task_id is None:
            return
        entry = reminders.complete(task_id, self.workspace)
        if entry is not None:
            message = "See you tomorrow" if not entry.restorable else "Moved to history"
            self.notify(f"{entry.title}: {message}", title="Done")
        self.refresh_view()

    def action_delete_task(self) -> None:
        task_id = self._selected_task_id()
        if task_id is None:
            return

        def _done(confirmed: bool | None) -> None:
            if confirmed:
                reminders.delete(task_id, self.workspace)
                self.refresh_view()

        self.push_screen(ConfirmScreen("Delete this task without saving it to history?"), _done)

    def action_toggle_sort(self) -> None:
        self.settings = reminders.toggle_sort_mode(self.workspace)
        self.sort_mode = self.settings.sort_mode
        self.refresh_view()

    def action_show_history(self) -> None:
        self.push_screen(HistoryScreen(self.workspace))


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set REMINDER_ROOT or create the directory first.")
        sys.exit(1)

    setup_logging(log_dir=log_dir(root), console_level=logging.WARNING)
    logger.info("Starting reminder TUI in %s", root)
    app = ReminderApp(root)
    app.run()


if __name__ == "__main__":
    main()
