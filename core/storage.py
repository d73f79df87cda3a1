"""Key-value blob persistence for tasks, history and settings.

Each key maps to ``<root>/<key>.json``. A missing blob is an empty
collection; a blob that cannot be decoded is also treated as empty so a
damaged file never blocks start-up.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from core.fileio import read_json, read_yaml, write_json_atomic, write_yaml_atomic
from core.history import cap_history
from core.models import HistoryEntry, ReminderState, Settings, Task
from core.workspace import blob_path, settings_path, workspace_root

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
HISTORY_KEY = "history"


def load_blob(key: str, root: Path | None = None) -> Any:
    """Decoded JSON for *key*, or None when missing or unreadable."""
    path = blob_path(key, root)
    try:
        return read_json(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable %s blob at %s: %s", key, path, e)
        return None


def save_blob(key: str, blob: Any, root: Path | None = None) -> None:
    write_json_atomic(blob_path(key, root), blob)


def _load_records(key: str, factory, root: Path | None) -> list:
    blob = load_blob(key, root)
    if blob is None:
        return []
    if not isinstance(blob, list):
        logger.warning("Expected a list in %s blob, got %s; treating as empty", key, type(blob).__name__)
        return []
    try:
        return [factory(item) for item in blob]
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning("Malformed record in %s blob (%s); treating as empty", key, e)
        return []


def load_tasks(root: Path | None = None) -> list[Task]:
    return _load_records(TASKS_KEY, Task.from_dict, root)


def load_history(root: Path | None = None) -> list[HistoryEntry]:
    return cap_history(_load_records(HISTORY_KEY, HistoryEntry.from_dict, root))


def load_state(root: Path | None = None) -> ReminderState:
    """Load both collections from the workspace."""
    if root is None:
        root = workspace_root()
    return ReminderState(tasks=load_tasks(root), history=load_history(root))


def save_tasks(tasks: list[Task], root: Path | None = None) -> None:
    save_blob(TASKS_KEY, [t.to_dict() for t in tasks], root)


def save_history(history: list[HistoryEntry], root: Path | None = None) -> None:
    save_blob(HISTORY_KEY, [e.to_dict() for e in cap_history(history)], root)


def save_state(state: ReminderState, root: Path | None = None) -> None:
    save_tasks(state.tasks, root)
    save_history(state.history, root)


# ── Settings ──────────────────────────────────────────────────


def load_settings(root: Path | None = None) -> Settings:
    try:
        data = read_yaml(settings_path(root))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable settings: %s", e)
        data = {}
    return Settings.from_dict(data)


def save_settings(settings: Settings, root: Path | None = None) -> None:
    write_yaml_atomic(settings_path(root), settings.to_dict())
