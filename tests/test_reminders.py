"""Tests for core/reminders.py — actions persisted to the workspace."""

import json
import threading

import pytest
import yaml

from core import reminders
from core.storage import load_history, load_settings, load_tasks

from conftest import NOW


def test_get_view_uses_saved_sort_mode(workspace):
    view = reminders.get_view(workspace, now=NOW)
    assert view.sort_mode == "time"
    assert [r.task.id for r in view.hero] == ["paper"]
    assert [r.task.id for r in view.grid] == ["taxes", "stretch"]

    view = reminders.get_view(workspace, sort_mode="importance", now=NOW)
    assert [r.task.id for r in view.grid] == ["stretch", "taxes"]


def test_save_new_task_persists(workspace):
    task, errors = reminders.save({"title": "Call mom", "isEveryday": True}, workspace, NOW)
    assert errors == []
    stored = load_tasks(workspace)
    assert stored[0].id == task.id
    assert stored[0].created_at == NOW.isoformat(timespec="seconds")


def test_save_invalid_draft_writes_nothing(workspace):
    before = (workspace / "tasks.json").read_text(encoding="utf-8")
    task, errors = reminders.save({"title": "Someday"}, workspace, NOW)
    assert task is None
    assert errors
    assert (workspace / "tasks.json").read_text(encoding="utf-8") == before


def test_complete_one_time_task(workspace):
    entry = reminders.complete("paper", workspace, NOW)
    assert entry.type == "normal"
    assert "paper" not in [t.id for t in load_tasks(workspace)]
    assert [e.id for e in load_history(workspace)] == ["paper", "dentist"]


def test_complete_daily_task_hides_until_tomorrow(workspace):
    entry = reminders.complete("stretch", workspace, NOW)
    assert entry.type == "daily_log"
    stretch = [t for t in load_tasks(workspace) if t.id == "stretch"][0]
    assert stretch.last_completed_at == NOW.isoformat(timespec="seconds")

    today = reminders.get_view(workspace, now=NOW)
    assert "stretch" not in [r.task.id for r in today.hero + today.grid]
    tomorrow = reminders.get_view(workspace, now=NOW.replace(day=12, hour=0))
    assert "stretch" in [r.task.id for r in tomorrow.hero + tomorrow.grid]


def test_complete_unknown_task(workspace):
    assert reminders.complete("nope", workspace, NOW) is None


def test_restore_round_trip(workspace):
    reminders.complete("taxes", workspace, NOW)
    task = reminders.restore("taxes", root=workspace)
    assert task.id == "taxes"
    assert task.title == "File taxes"
    assert task.ddl == "2026-02-21"
    assert task.importance_level == 1
    assert load_tasks(workspace)[0].id == "taxes"
    assert "taxes" not in [e.id for e in load_history(workspace)]


def test_restore_daily_log_changes_nothing(workspace):
    reminders.complete("stretch", workspace, NOW)
    tasks_before = (workspace / "tasks.json").read_text(encoding="utf-8")
    history_before = (workspace / "history.json").read_text(encoding="utf-8")
    assert reminders.restore("stretch", root=workspace) is None
    assert (workspace / "tasks.json").read_text(encoding="utf-8") == tasks_before
    assert (workspace / "history.json").read_text(encoding="utf-8") == history_before


def test_purge_and_delete(workspace):
    assert reminders.purge("dentist", root=workspace).id == "dentist"
    assert load_history(workspace) == []
    assert reminders.purge("dentist", root=workspace) is None

    assert reminders.delete("taxes", workspace) is True
    assert reminders.delete("taxes", workspace) is False
    assert load_history(workspace) == []


def test_set_and_toggle_sort_mode(workspace):
    assert reminders.set_sort_mode("Importance", workspace).sort_mode == "importance"
    assert load_settings(workspace).sort_mode == "importance"
    assert reminders.toggle_sort_mode(workspace).sort_mode == "time"
    with pytest.raises(ValueError, match="Unknown sort mode"):
        reminders.set_sort_mode("random", workspace)


def test_complete_runs_hook(workspace, tmp_path):
    out = tmp_path / "hook.json"
    config = {"on_task_complete": [f"cat > {out}"]}
    (workspace / "hooks.yaml").write_text(yaml.dump(config), encoding="utf-8")

    reminders.complete("paper", workspace, NOW)
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["event"] == "on_task_complete"
    assert payload["entry"]["id"] == "paper"


def test_env_root_used_by_default(workspace):
    view = reminders.get_view(now=NOW)
    assert len(view.hero) + len(view.grid) == 3


def test_concurrent_saves_keep_every_task(workspace):
    """Parallel writers each see the previous writer's tasks."""
    before = len(load_tasks(workspace))
    errors = []

    def add_tasks(worker: int) -> None:
        for i in range(10):
            _, errs = reminders.save({"title": f"w{worker}-{i}", "isEveryday": True}, workspace, NOW)
            errors.extend(errs)

    threads = [threading.Thread(target=add_tasks, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    titles = {t.title for t in load_tasks(workspace)}
    assert len(load_tasks(workspace)) == before + 80
    assert {f"w{n}-{i}" for n in range(8) for i in range(10)} <= titles


def test_concurrent_toggles_alternate(workspace):
    threads = [threading.Thread(target=reminders.toggle_sort_mode, args=(workspace,)) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert load_settings(workspace).sort_mode == "time"
