"""Derive the dashboard view: visibility filter, rank, partition, decorate."""

from __future__ import annotations

from datetime import datetime

from core.clock import days_remaining, format_countdown, is_urgent, time_level
from core.models import DashboardView, HistoryEntry, RankedTask, Task
from core.partition import partition
from core.ranking import rank_tasks
from core.tasks import visible_tasks


def _tone(task: Task, urgent: bool, score: int) -> str:
    if urgent:
        return "urgent"
    if task.is_everyday:
        return "daily"
    if score >= 5:
        return "hot"
    if score == 4:
        return "warm"
    return "calm"


def decorate(task: Task, now: datetime) -> RankedTask:
    urgent = is_urgent(task, now)
    level = time_level(task, now)
    score = level + task.importance_level
    return RankedTask(
        task=task,
        days_remaining=days_remaining(task, now),
        is_urgent=urgent,
        time_level=level,
        score=score,
        countdown=format_countdown(task, now),
        tone=_tone(task, urgent, score),
    )


def derive_view(
    tasks: list[Task],
    history: list[HistoryEntry],
    sort_mode: str,
    now: datetime,
) -> DashboardView:
    """Recompute hero and grid from a snapshot of the inputs."""
    ranked = rank_tasks(visible_tasks(tasks, now), sort_mode, now)
    hero, grid = partition(ranked, now)
    return DashboardView(
        hero=[decorate(t, now) for t in hero],
        grid=[decorate(t, now) for t in grid],
        sort_mode=sort_mode,
        history=list(history),
        generated_at=now,
    )
