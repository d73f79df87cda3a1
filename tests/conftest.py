"""Shared test fixtures for the reminder tests."""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import yaml

from core.models import Task

UTC = ZoneInfo("UTC")

# Wednesday morning; "tomorrow" is 2026-02-12.
NOW = datetime(2026, 2, 11, 9, 0, tzinfo=UTC)


def make_task(task_id: str, **kwargs) -> Task:
    """Task with a title from its id and a fixed createdAt unless given."""
    kwargs.setdefault("title", task_id.title())
    kwargs.setdefault("created_at", "2026-02-01T08:00:00+00:00")
    return Task(id=task_id, **kwargs)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with settings, tasks and history blobs."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    settings = {"timezone": "UTC", "sort_mode": "time", "tick_seconds": 60}
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    tasks = [
        {
            "id": "paper",
            "title": "Submit paper",
            "content": "camera-ready version",
            "importanceLevel": 3,
            "isEveryday": False,
            "ddl": "2026-02-12",
            "createdAt": "2026-02-01T10:00:00+00:00",
        },
        {
            "id": "stretch",
            "title": "Stretch",
            "content": "",
            "importanceLevel": 2,
            "isEveryday": True,
            "createdAt": "2026-02-02T10:00:00+00:00",
        },
        {
            "id": "taxes",
            "title": "File taxes",
            "content": "",
            "importanceLevel": 1,
            "isEveryday": False,
            "ddl": "2026-02-21",
            "time": "17:00",
            "createdAt": "2026-02-03T10:00:00+00:00",
        },
    ]
    (root / "tasks.json").write_text(json.dumps(tasks, indent=2), encoding="utf-8")

    history = [
        {
            "id": "dentist",
            "title": "Book dentist",
            "content": "",
            "importanceLevel": 2,
            "isEveryday": False,
            "ddl": "2026-02-09",
            "createdAt": "2026-01-30T10:00:00+00:00",
            "completedAt": "2026-02-08T18:00:00+00:00",
            "type": "normal",
        },
    ]
    (root / "history.json").write_text(json.dumps(history, indent=2), encoding="utf-8")

    # Set env var
    os.environ["REMINDER_ROOT"] = str(root)
    yield root
    # Cleanup
    if "REMINDER_ROOT" in os.environ:
        del os.environ["REMINDER_ROOT"]
