"""Task store operations: validation, visibility, save, delete, complete.

Every operation is copy-on-write: it returns new lists and never mutates the
lists or tasks it was given.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

from core.clock import parse_date, parse_time, same_local_day
from core.history import archive_task
from core.models import (
    ENTRY_DAILY_LOG,
    ENTRY_NORMAL,
    IMPORTANCE_LEVELS,
    HistoryEntry,
    Task,
)


# ── Validation ────────────────────────────────────────────────


MISSING_DEADLINE_ERROR = "Set a deadline, or mark the task as daily"

# Fields the editor may change on an existing task; id and createdAt are fixed.
EDITABLE_FIELDS = ("title", "content", "importanceLevel", "isEveryday", "ddl", "time")


def validate_task(task: dict[str, Any]) -> list[str]:
    """Validate a task draft and return list of errors (empty if valid)."""
    errors = []
    everyday = task.get("isEveryday", False)
    if not isinstance(everyday, bool):
        errors.append("isEveryday must be true or false")
        everyday = False
    ddl = task.get("ddl")
    if not everyday:
        if not ddl:
            errors.append(MISSING_DEADLINE_ERROR)
        elif not isinstance(ddl, str) or len(ddl) != 10 or parse_date(ddl) is None:
            errors.append(f"Invalid deadline date: {ddl}")

    time_value = task.get("time")
    if not everyday and time_value:
        if len(str(time_value)) != 5 or parse_time(str(time_value)) is None:
            errors.append(f"Invalid time (expected HH:MM): {time_value}")

    if "importanceLevel" in task:
        level = task["importanceLevel"]
        if isinstance(level, bool) or not isinstance(level, int) or level not in IMPORTANCE_LEVELS:
            errors.append("importanceLevel must be 1, 2 or 3")

    return errors


# ── Visibility ────────────────────────────────────────────────


def visible_tasks(tasks: list[Task], now: datetime) -> list[Task]:
    """Hide daily tasks already completed today; one-time tasks are always shown."""
    return [
        t for t in tasks
        if not (t.is_everyday and same_local_day(t.last_completed_at, now))
    ]


# ── CRUD ──────────────────────────────────────────────────────


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    """Find a task by ID in the active task list."""
    for t in tasks:
        if t.id == task_id:
            return t
    return None


def new_draft(now: datetime) -> dict[str, Any]:
    """Editor defaults: due tomorrow, normal importance."""
    return {
        "title": "",
        "content": "",
        "importanceLevel": 2,
        "ddl": (now.date() + timedelta(days=1)).isoformat(),
        "isEveryday": False,
    }


def _normalized(task: Task) -> Task:
    if task.is_everyday:
        return replace(task, ddl=None, time=None)
    return task


def save_task(
    tasks: list[Task], draft: dict[str, Any], now: datetime
) -> tuple[list[Task], Task | None, list[str]]:
    """Create or update a task from an editor draft.

    Returns ``(tasks, task, errors)``. With errors, *tasks* is returned as-is.
    A draft without ``id`` becomes a new task at the front of the list.
    """
    task_id = draft.get("id")
    if task_id:
        existing = find_task(tasks, str(task_id))
        if existing is None:
            return tasks, None, [f"Task not found: {task_id}"]
        merged = existing.to_dict()
        merged.update({k: draft[k] for k in EDITABLE_FIELDS if k in draft})
        errors = validate_task(merged)
        if errors:
            return tasks, None, errors
        updated = _normalized(Task.from_dict(merged))
        return [updated if t.id == existing.id else t for t in tasks], updated, []

    errors = validate_task(draft)
    if errors:
        return tasks, None, errors
    data = {k: draft[k] for k in EDITABLE_FIELDS if k in draft}
    data["id"] = uuid.uuid4().hex
    data["createdAt"] = now.isoformat(timespec="seconds")
    task = _normalized(Task.from_dict(data))
    return [task, *tasks], task, []


def delete_task(tasks: list[Task], task_id: str) -> tuple[list[Task], bool]:
    """Remove a task outright, bypassing the history archive."""
    remaining = [t for t in tasks if t.id != task_id]
    return remaining, len(remaining) != len(tasks)


# ── Lifecycle ─────────────────────────────────────────────────


def complete_task(
    tasks: list[Task],
    history: list[HistoryEntry],
    task_id: str,
    now: datetime,
) -> tuple[list[Task], list[HistoryEntry], HistoryEntry | None]:
    """Mark a task done.

    - one-time: removed from the list and archived as ``normal``
    - daily: stays active with ``lastCompletedAt`` set; a ``daily_log``
      copy is archived as well

    Returns ``(tasks, history, entry)``; entry is None for unknown ids.
    """
    task = find_task(tasks, task_id)
    if task is None:
        return tasks, history, None

    stamp = now.isoformat(timespec="seconds")
    if task.is_everyday:
        done = replace(task, last_completed_at=stamp)
        new_tasks = [done if t.id == task_id else t for t in tasks]
        new_history = archive_task(history, done, now, ENTRY_DAILY_LOG)
    else:
        new_tasks = [t for t in tasks if t.id != task_id]
        new_history = archive_task(history, task, now, ENTRY_NORMAL)
    return new_tasks, new_history, new_history[0]
