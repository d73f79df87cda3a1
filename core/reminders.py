"""User actions over the persisted workspace.

Each action takes the workspace lock, loads a fresh snapshot, applies one
pure operation and writes the changed blobs back. The matching hook fires
after the lock is released. Front-ends (TUI, web) call these and
re-derive the view afterwards.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from core.fileio import locked
from core.history import purge_entry, restore_entry
from core.hooks import run_hooks
from core.models import (
    SORT_IMPORTANCE,
    SORT_MODES,
    SORT_TIME,
    DashboardView,
    HistoryEntry,
    Settings,
    Task,
)
from core.storage import (
    load_history,
    load_settings,
    load_state,
    load_tasks,
    save_history,
    save_settings,
    save_tasks,
)
from core.tasks import complete_task, delete_task, save_task
from core.view import derive_view
from core.workspace import lock_path, now_local, workspace_root

logger = logging.getLogger(__name__)


def _resolve(root: Path | None, now: datetime | None) -> tuple[Path, datetime]:
    if root is None:
        root = workspace_root()
    if now is None:
        now = now_local(root)
    return root, now


def get_view(
    root: Path | None = None,
    sort_mode: str | None = None,
    now: datetime | None = None,
) -> DashboardView:
    """Current hero/grid split. *sort_mode* overrides the saved setting."""
    root, now = _resolve(root, now)
    if sort_mode is None:
        sort_mode = load_settings(root).sort_mode
    state = load_state(root)
    return derive_view(state.tasks, state.history, sort_mode, now)


def save(
    draft: dict[str, Any],
    root: Path | None = None,
    now: datetime | None = None,
) -> tuple[Task | None, list[str]]:
    """Create or update a task from an editor draft. Returns (task, errors)."""
    root, now = _resolve(root, now)
    with locked(lock_path(root)):
        tasks, task, errors = save_task(load_tasks(root), draft, now)
        if errors:
            logger.info("Rejected task draft: %s", "; ".join(errors))
            return None, errors
        save_tasks(tasks, root)
    logger.info("Saved task %s (%s)", task.id, task.title)
    run_hooks("on_task_save", {"task": task.to_dict()}, root)
    return task, []


def complete(
    task_id: str,
    root: Path | None = None,
    now: datetime | None = None,
) -> HistoryEntry | None:
    """Complete a task. Returns the archive entry, or None for unknown ids."""
    root, now = _resolve(root, now)
    with locked(lock_path(root)):
        state = load_state(root)
        tasks, history, entry = complete_task(state.tasks, state.history, task_id, now)
        if entry is None:
            logger.info("Complete skipped, no task %s", task_id)
            return None
        save_tasks(tasks, root)
        save_history(history, root)
    logger.info("Completed task %s as %s", task_id, entry.type)
    run_hooks("on_task_complete", {"entry": entry.to_dict()}, root)
    return entry


def delete(task_id: str, root: Path | None = None) -> bool:
    """Delete a live task without archiving it."""
    if root is None:
        root = workspace_root()
    with locked(lock_path(root)):
        tasks, deleted = delete_task(load_tasks(root), task_id)
        if not deleted:
            return False
        save_tasks(tasks, root)
    logger.info("Deleted task %s", task_id)
    run_hooks("on_task_delete", {"task_id": task_id}, root)
    return True


def restore(
    entry_id: str,
    completed_at: str | None = None,
    root: Path | None = None,
) -> Task | None:
    """Move a history entry back into the task list. Daily logs are ignored."""
    if root is None:
        root = workspace_root()
    with locked(lock_path(root)):
        state = load_state(root)
        tasks, history, task = restore_entry(state.tasks, state.history, entry_id, completed_at)
        if task is None:
            return None
        save_tasks(tasks, root)
        save_history(history, root)
    logger.info("Restored task %s", task.id)
    run_hooks("on_task_restore", {"task": task.to_dict()}, root)
    return task


def purge(
    entry_id: str,
    completed_at: str | None = None,
    root: Path | None = None,
) -> HistoryEntry | None:
    """Permanently remove a history entry."""
    if root is None:
        root = workspace_root()
    with locked(lock_path(root)):
        history, removed = purge_entry(load_history(root), entry_id, completed_at)
        if removed is None:
            return None
        save_history(history, root)
    logger.info("Purged history entry %s", entry_id)
    run_hooks("on_history_purge", {"entry": removed.to_dict()}, root)
    return removed


def list_history(root: Path | None = None) -> list[HistoryEntry]:
    return load_history(root)


def get_settings(root: Path | None = None) -> Settings:
    return load_settings(root)


def _store_sort_mode(mode: str, root: Path) -> Settings:
    # Caller holds the workspace lock.
    settings = load_settings(root)
    if settings.sort_mode != mode:
        settings.sort_mode = mode
        save_settings(settings, root)
    return settings


def set_sort_mode(mode: str, root: Path | None = None) -> Settings:
    """Persist the sort mode. Raises ValueError for unknown modes."""
    mode = (mode or "").strip().lower()
    if mode not in SORT_MODES:
        raise ValueError(f"Unknown sort mode: {mode!r} (expected one of {', '.join(SORT_MODES)})")
    if root is None:
        root = workspace_root()
    with locked(lock_path(root)):
        previous = load_settings(root).sort_mode
        settings = _store_sort_mode(mode, root)
    if previous != mode:
        logger.info("Sort mode set to %s", mode)
        run_hooks("on_sort_mode_change", {"sort_mode": mode}, root)
    return settings


def toggle_sort_mode(root: Path | None = None) -> Settings:
    if root is None:
        root = workspace_root()
    with locked(lock_path(root)):
        current = load_settings(root).sort_mode
        mode = SORT_IMPORTANCE if current == SORT_TIME else SORT_TIME
        settings = _store_sort_mode(mode, root)
    logger.info("Sort mode set to %s", mode)
    run_hooks("on_sort_mode_change", {"sort_mode": mode}, root)
    return settings
