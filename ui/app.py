from __future__ import annotations

import logging
import os
import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, status
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from core import reminders
from core.models import HISTORY_CAPACITY, IMPORTANCE_LEVELS, SORT_MODES, RankedTask
from core.storage import load_tasks
from core.tasks import find_task, new_draft
from core.workspace import now_local, workspace_root as _workspace_root

logger = logging.getLogger(__name__)


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _card(item: RankedTask, hero: bool = False) -> str:
    task = item.task
    notes = f'<p class="notes">{_escape(task.content)}</p>' if task.content else ""
    badge = '<span class="badge">DDL</span>' if item.is_urgent else ""
    return (
        f'<div class="card {"hero" if hero else "grid"} tone-{item.tone}" data-id="{_escape(task.id)}">'
        f'{badge}<div class="meta"><span>{_escape(item.countdown)}</span>'
        f'<span>{task.importance.icon}</span></div>'
        f'<h3>{_escape(task.title or "(untitled)")}</h3>{notes}</div>'
    )


PAGE_CSS = """
body { font-family: system-ui, sans-serif; max-width: 860px; margin: 2rem auto; padding: 0 1rem; background: #f8fafc; }
.card { border-radius: 16px; padding: 1rem 1.25rem; margin-bottom: .75rem; position: relative; border: 1px solid #e2e8f0; background: #fff; }
.card.hero { color: #fff; background: linear-gradient(135deg, #3b82f6, #1d4ed8); }
.card.hero.tone-urgent { background: linear-gradient(135deg, #e11d48, #b91c1c); }
.tone-urgent.grid { background: #fff1f2; border-color: #fecdd3; }
.tone-daily { background: #ecfdf5; border-color: #a7f3d0; }
.tone-hot { background: #fff7ed; }
.tone-warm { background: #fffbeb; }
.grid-wrap { display: grid; grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); gap: .75rem; }
.meta { display: flex; justify-content: space-between; font-size: .8rem; opacity: .8; }
.badge { position: absolute; right: 1rem; bottom: .5rem; font-weight: 900; opacity: .2; font-size: 2rem; }
.muted { color: #94a3b8; }
"""


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="Smart Reminder", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("REMINDER_USERNAME", "")
    expected_password = os.environ.get("REMINDER_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def _check_sort_mode(sort: str | None) -> str | None:
    if sort is not None and sort not in SORT_MODES:
        raise HTTPException(status_code=400, detail=f"Unknown sort mode: {sort}")
    return sort


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(sort: str | None = None, username: str = Depends(get_current_user)) -> HTMLResponse:
    view = reminders.get_view(_workspace_root(), _check_sort_mode(sort))
    hero = "".join(_card(r, hero=True) for r in view.hero)
    grid = "".join(_card(r) for r in view.grid)
    if view.is_empty:
        hero = '<p class="muted">Nothing to do right now.</p>'
    other = "importance" if view.sort_mode == "time" else "time"
    html = f"""<!doctype html>
<html><head><meta charset="utf-8"><title>Smart Reminder</title>
<meta name="viewport" content="width=device-width, initial-scale=1">
<meta http-equiv="refresh" content="60">
<style>{PAGE_CSS}</style></head>
<body>
<h1>Smart Reminder</h1>
<p class="muted">Sorted by {_escape(view.sort_mode)} · <a href="/?sort={other}">sort by {other}</a>
 · history {len(view.history)}/{HISTORY_CAPACITY}</p>
<section>{hero}</section>
<section class="grid-wrap">{grid}</section>
</body></html>"""
    return HTMLResponse(html)


# ── View & tasks ──────────────────────────────────────────────

@app.get("/api/view")
def api_view(sort: str | None = None, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Hero and grid for the current moment."""
    view = reminders.get_view(_workspace_root(), _check_sort_mode(sort))
    return view.to_dict()


@app.get("/api/tasks")
def api_list_tasks(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """All stored tasks in store order, including daily tasks done today."""
    tasks = load_tasks(_workspace_root())
    return {"tasks": [t.to_dict() for t in tasks]}


@app.get("/api/tasks/draft")
def api_task_draft(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Editor defaults for a new task."""
    return {
        "draft": new_draft(now_local(_workspace_root())),
        "importanceLevels": [
            {"value": lvl.value, "label": lvl.label, "icon": lvl.icon}
            for lvl in IMPORTANCE_LEVELS.values()
        ],
    }


@app.get("/api/tasks/{task_id}")
def api_get_task(task_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    task = find_task(load_tasks(_workspace_root()), task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    return {"task": task.to_dict()}


@app.post("/api/tasks")
def api_create_task(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Create a new task."""
    payload = {k: v for k, v in payload.items() if k != "id"}
    task, errors = reminders.save(payload, _workspace_root())
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    return {"ok": True, "task": task.to_dict()}


@app.put("/api/tasks/{task_id}")
def api_update_task(task_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Update a task (RESTful)."""
    root = _workspace_root()
    if find_task(load_tasks(root), task_id) is None:
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    task, errors = reminders.save({**payload, "id": task_id}, root)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))
    return {"ok": True, "task": task.to_dict()}


@app.delete("/api/tasks/{task_id}")
def api_delete_task(task_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Delete a task without archiving it."""
    if not reminders.delete(task_id, _workspace_root()):
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    return {"ok": True, "task_id": task_id}


@app.post("/api/tasks/{task_id}/complete")
def api_complete_task(task_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Mark a task done (one-time tasks move to history)."""
    entry = reminders.complete(task_id, _workspace_root())
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Task not found: {task_id}")
    return {"ok": True, "entry": entry.to_dict()}


# ── History ───────────────────────────────────────────────────

@app.get("/api/history")
def api_history(username: str = Depends(get_current_user)) -> dict[str, Any]:
    history = reminders.list_history(_workspace_root())
    return {
        "history": [e.to_dict() for e in history],
        "capacity": HISTORY_CAPACITY,
    }


@app.post("/api/history/{entry_id}/restore")
def api_restore(
    entry_id: str,
    completed_at: str | None = None,
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Restore a completed task. Daily check-ins are left as they are."""
    task = reminders.restore(entry_id, completed_at, _workspace_root())
    return {"ok": True, "restored": task is not None, "task": task.to_dict() if task else None}


@app.delete("/api/history/{entry_id}")
def api_purge(
    entry_id: str,
    completed_at: str | None = None,
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    """Remove a history entry permanently."""
    removed = reminders.purge(entry_id, completed_at, _workspace_root())
    if removed is None:
        raise HTTPException(status_code=404, detail=f"History entry not found: {entry_id}")
    return {"ok": True, "entry_id": entry_id}


# ── Settings ──────────────────────────────────────────────────

@app.get("/api/settings")
def api_get_settings(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return reminders.get_settings(_workspace_root()).to_dict()


@app.put("/api/settings")
def api_update_settings(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Only ``sort_mode`` is writable from the UI."""
    if "sort_mode" not in payload:
        raise HTTPException(status_code=400, detail="sort_mode is required")
    try:
        settings = reminders.set_sort_mode(str(payload["sort_mode"]), _workspace_root())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return settings.to_dict()
