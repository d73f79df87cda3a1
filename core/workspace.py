"""Workspace root, timezone, path helpers for the reminder tracker."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from core.fileio import read_yaml

logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Get the workspace root directory (holds the task/history blobs and settings)."""
    return Path(
        os.environ.get("REMINDER_ROOT", str(Path.home() / "reminders"))
    ).expanduser().resolve()


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get the user's timezone from settings.yaml, defaulting to UTC."""
    if root is None:
        root = workspace_root()
    try:
        settings = read_yaml(settings_path(root))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not read settings for timezone: %s", e)
        return ZoneInfo("UTC")
    name = settings.get("timezone")
    if not name:
        return ZoneInfo("UTC")
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r in settings, using UTC", name)
        return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) in user's timezone."""
    return now_local(root).date().isoformat()


# ── Path helpers ──────────────────────────────────────────────

def blob_path(key: str, root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / f"{key}.json"


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"


def log_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "logs"


def lock_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / ".lock"
