"""Ranking engine: a deterministic total order over the visible tasks.

Urgent tasks (one-time, due tomorrow or earlier) always come first and are
ordered by their deadline instant. The rest follow the user's sort mode:

- ``time``: days remaining, then deadline instant, then importance
- ``importance``: importance, then days remaining, then deadline instant

Both modes fall back to newest-created first.
"""

from __future__ import annotations

from datetime import datetime
from functools import cmp_to_key

from core.clock import days_remaining, deadline_instant, is_urgent, timestamp_key
from core.models import SORT_IMPORTANCE, SORT_MODES, SORT_TIME, Task


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _cmp_instant(a: Task, b: Task) -> int:
    """Soonest deadline first; 0 unless both tasks have one."""
    ia, ib = deadline_instant(a), deadline_instant(b)
    if ia is None or ib is None:
        return 0
    return _cmp(ia, ib)


def _cmp_importance(a: Task, b: Task) -> int:
    return _cmp(b.importance_level, a.importance_level)


def _cmp_created(a: Task, b: Task) -> int:
    return _cmp(timestamp_key(b.created_at), timestamp_key(a.created_at))


def compare_tasks(a: Task, b: Task, mode: str, now: datetime) -> int:
    """Negative if *a* ranks before *b*, positive if after, 0 only for identical keys."""
    urgent_a, urgent_b = is_urgent(a, now), is_urgent(b, now)
    if urgent_a != urgent_b:
        return -1 if urgent_a else 1

    if urgent_a:
        chain = (_cmp_instant(a, b), _cmp_importance(a, b))
    else:
        days = _cmp(days_remaining(a, now), days_remaining(b, now))
        if mode == SORT_TIME:
            chain = (days, _cmp_instant(a, b), _cmp_importance(a, b))
        elif mode == SORT_IMPORTANCE:
            chain = (_cmp_importance(a, b), days, _cmp_instant(a, b))
        else:
            raise ValueError(f"Unknown sort mode: {mode!r}")

    for result in chain:
        if result:
            return result
    return _cmp_created(a, b) or _cmp(a.id, b.id)


def rank_tasks(tasks: list[Task], mode: str, now: datetime) -> list[Task]:
    """Return a new list of *tasks* in rank order."""
    if mode not in SORT_MODES:
        raise ValueError(f"Unknown sort mode: {mode!r}")
    return sorted(tasks, key=cmp_to_key(lambda a, b: compare_tasks(a, b, mode, now)))
