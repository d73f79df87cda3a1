"""Bounded completion history: archive, restore, purge.

The archive is newest-first and holds at most HISTORY_CAPACITY entries.
All functions return new lists and leave their inputs untouched.
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime

from core.models import ENTRY_NORMAL, ENTRY_TYPES, HISTORY_CAPACITY, HistoryEntry, Task

logger = logging.getLogger(__name__)


def cap_history(entries: list[HistoryEntry]) -> list[HistoryEntry]:
    """Keep only the newest HISTORY_CAPACITY entries."""
    return list(entries[:HISTORY_CAPACITY])


def archive_task(
    history: list[HistoryEntry],
    task: Task,
    now: datetime,
    kind: str = ENTRY_NORMAL,
) -> list[HistoryEntry]:
    """Prepend an entry for *task*; the oldest entry falls off at capacity."""
    if kind not in ENTRY_TYPES:
        raise ValueError(f"Invalid history entry type: {kind!r}")
    entry = HistoryEntry.from_task(task, now.isoformat(timespec="seconds"), kind)
    archive: deque[HistoryEntry] = deque(history[:HISTORY_CAPACITY], maxlen=HISTORY_CAPACITY)
    archive.appendleft(entry)
    return list(archive)


def find_entry(
    history: list[HistoryEntry], entry_id: str, completed_at: str | None = None
) -> int | None:
    """Index of the newest entry for *entry_id* (narrowed by *completed_at*), or None."""
    for i, entry in enumerate(history):
        if entry.id != entry_id:
            continue
        if completed_at and entry.completed_at != completed_at:
            continue
        return i
    return None


def restore_entry(
    tasks: list[Task],
    history: list[HistoryEntry],
    entry_id: str,
    completed_at: str | None = None,
) -> tuple[list[Task], list[HistoryEntry], Task | None]:
    """Move a ``normal`` entry back to the front of the task list.

    Returns ``(tasks, history, restored_task)``; daily logs, unknown ids, and
    ids that are already live leave both lists unchanged and return None.
    """
    index = find_entry(history, entry_id, completed_at)
    if index is None:
        logger.debug("Restore skipped, no history entry %s", entry_id)
        return tasks, history, None

    entry = history[index]
    if not entry.restorable:
        logger.debug("Restore skipped, %s is a daily log", entry_id)
        return tasks, history, None
    if any(t.id == entry_id for t in tasks):
        logger.warning("Restore skipped, task %s is already active", entry_id)
        return tasks, history, None

    task = entry.to_task()
    return [task, *tasks], history[:index] + history[index + 1:], task


def purge_entry(
    history: list[HistoryEntry], entry_id: str, completed_at: str | None = None
) -> tuple[list[HistoryEntry], HistoryEntry | None]:
    """Permanently drop one entry. Returns ``(history, removed_entry)``."""
    index = find_entry(history, entry_id, completed_at)
    if index is None:
        return history, None
    return history[:index] + history[index + 1:], history[index]
