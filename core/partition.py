"""Split a ranked task list into hero and grid sets."""

from __future__ import annotations

from datetime import datetime
from typing import TypeVar

from core.clock import is_urgent
from core.models import Task

T = TypeVar("T", bound=Task)


def partition(ranked: list[T], now: datetime) -> tuple[list[T], list[T]]:
    """Return ``(hero, grid)``.

    Every urgent task is a hero when any exist (they lead *ranked*);
    otherwise the single top-ranked task is.
    """
    if not ranked:
        return [], []
    split = 0
    while split < len(ranked) and is_urgent(ranked[split], now):
        split += 1
    if split == 0:
        split = 1
    return list(ranked[:split]), list(ranked[split:])
