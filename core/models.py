"""Typed dataclasses for the reminder data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


# ── Constants ─────────────────────────────────────────────────

SORT_TIME = "time"
SORT_IMPORTANCE = "importance"
SORT_MODES = (SORT_TIME, SORT_IMPORTANCE)

ENTRY_NORMAL = "normal"
ENTRY_DAILY_LOG = "daily_log"
ENTRY_TYPES = (ENTRY_NORMAL, ENTRY_DAILY_LOG)

HISTORY_CAPACITY = 20
DEFAULT_TICK_SECONDS = 60


@dataclass(frozen=True)
class ImportanceLevel:
    value: int
    label: str
    icon: str


IMPORTANCE_LEVELS: dict[int, ImportanceLevel] = {
    1: ImportanceLevel(1, "Trivial", "💭"),
    2: ImportanceLevel(2, "Normal", "📝"),
    3: ImportanceLevel(3, "Important", "⭐"),
}


def _opt_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _importance(value: Any) -> int:
    """Stored level clamped to a known one; anything else reads as Normal."""
    try:
        level = int(value)
    except (TypeError, ValueError):
        return 2
    return level if level in IMPORTANCE_LEVELS else 2


# ── Tasks ─────────────────────────────────────────────────────


@dataclass
class Task:
    id: str = ""
    title: str = ""
    content: str = ""
    importance_level: int = 2
    is_everyday: bool = False
    ddl: str | None = None  # ISO date, one-time tasks only
    time: str | None = None  # HH:MM, defaults to 23:59 for countdowns
    created_at: str = ""
    last_completed_at: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Task:
        return cls(
            id=str(d.get("id") or ""),
            title=str(d.get("title") or ""),
            content=str(d.get("content", "") or ""),
            importance_level=_importance(d.get("importanceLevel", 2)),
            is_everyday=bool(d.get("isEveryday", False)),
            ddl=_opt_str(d.get("ddl")),
            time=_opt_str(d.get("time")),
            created_at=str(d.get("createdAt", "") or ""),
            last_completed_at=_opt_str(d.get("lastCompletedAt")),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "importanceLevel": self.importance_level,
            "isEveryday": self.is_everyday,
        }
        if not self.is_everyday:
            d["ddl"] = self.ddl
            if self.time:
                d["time"] = self.time
        d["createdAt"] = self.created_at
        if self.last_completed_at:
            d["lastCompletedAt"] = self.last_completed_at
        return d

    @property
    def importance(self) -> ImportanceLevel:
        return IMPORTANCE_LEVELS.get(self.importance_level, IMPORTANCE_LEVELS[2])


@dataclass
class HistoryEntry(Task):
    """A completed or archived task. ``type`` is ``normal`` or ``daily_log``."""

    completed_at: str = ""
    type: str = ENTRY_NORMAL

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HistoryEntry:
        task = Task.from_dict(d)
        entry_type = str(d.get("type", ENTRY_NORMAL) or ENTRY_NORMAL)
        if entry_type not in ENTRY_TYPES:
            entry_type = ENTRY_NORMAL
        return cls(
            **task.__dict__,
            completed_at=str(d.get("completedAt", "") or ""),
            type=entry_type,
        )

    @classmethod
    def from_task(cls, task: Task, completed_at: str, entry_type: str = ENTRY_NORMAL) -> HistoryEntry:
        return cls(**Task.from_dict(task.to_dict()).__dict__, completed_at=completed_at, type=entry_type)

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["completedAt"] = self.completed_at
        d["type"] = self.type
        return d

    @property
    def restorable(self) -> bool:
        return self.type != ENTRY_DAILY_LOG

    def to_task(self) -> Task:
        """Live task with the original identity; ``completedAt`` is dropped."""
        return Task.from_dict(Task.to_dict(self))


@dataclass
class ReminderState:
    """Snapshot of both persisted collections. Replaced wholesale on mutation."""

    tasks: list[Task] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    timezone: str = "UTC"
    sort_mode: str = SORT_TIME
    tick_seconds: int = DEFAULT_TICK_SECONDS

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        sort_mode = str(d.get("sort_mode", SORT_TIME)).strip().lower()
        if sort_mode not in SORT_MODES:
            sort_mode = SORT_TIME
        try:
            tick = int(d.get("tick_seconds", DEFAULT_TICK_SECONDS))
        except (TypeError, ValueError):
            tick = DEFAULT_TICK_SECONDS
        return cls(
            timezone=str(d.get("timezone", "UTC") or "UTC"),
            sort_mode=sort_mode,
            tick_seconds=tick if tick > 0 else DEFAULT_TICK_SECONDS,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "sort_mode": self.sort_mode,
            "tick_seconds": self.tick_seconds,
        }


# ── View ──────────────────────────────────────────────────────


@dataclass
class RankedTask:
    """A task decorated with the fields computed for one recomputation."""

    task: Task
    days_remaining: int = 0
    is_urgent: bool = False
    time_level: int = 1
    score: int = 0
    countdown: str = ""
    tone: str = "calm"  # urgent, daily, hot, warm, calm

    def to_dict(self) -> dict[str, Any]:
        d = self.task.to_dict()
        d.update({
            "daysRemaining": self.days_remaining,
            "isUrgent": self.is_urgent,
            "timeLevel": self.time_level,
            "score": self.score,
            "countdown": self.countdown,
            "tone": self.tone,
            "importanceLabel": self.task.importance.label,
            "importanceIcon": self.task.importance.icon,
        })
        return d


@dataclass
class DashboardView:
    hero: list[RankedTask] = field(default_factory=list)
    grid: list[RankedTask] = field(default_factory=list)
    sort_mode: str = SORT_TIME
    history: list[HistoryEntry] = field(default_factory=list)
    generated_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.hero and not self.grid

    def to_dict(self) -> dict[str, Any]:
        return {
            "hero": [r.to_dict() for r in self.hero],
            "grid": [r.to_dict() for r in self.grid],
            "sortMode": self.sort_mode,
            "historyCount": len(self.history),
            "historyCapacity": HISTORY_CAPACITY,
            "generatedAt": self.generated_at.isoformat(timespec="seconds") if self.generated_at else None,
        }
