"""Day- and time-granularity deltas between "now" and a task's deadline."""

from __future__ import annotations

from datetime import date, datetime, time, tzinfo

from core.models import Task

NO_DEADLINE_DAYS = 999
DEFAULT_DUE_TIME = time(23, 59)
URGENT_DAYS = 1


def parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def parse_time(value: str | None) -> time | None:
    if not value:
        return None
    try:
        return time.fromisoformat(value)
    except ValueError:
        return None


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def timestamp_key(value: str | None) -> float:
    """Sortable number for an ISO timestamp; missing or malformed sorts oldest."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return 0.0
    return parsed.timestamp()


def has_deadline(task: Task) -> bool:
    return not task.is_everyday and parse_date(task.ddl) is not None


def days_remaining(task: Task, now: datetime) -> int:
    """Signed whole days from today to the deadline day (negative = overdue).

    Tasks without a deadline get NO_DEADLINE_DAYS.
    """
    if task.is_everyday:
        return NO_DEADLINE_DAYS
    deadline = parse_date(task.ddl)
    if deadline is None:
        return NO_DEADLINE_DAYS
    return (deadline - now.date()).days


def deadline_instant(task: Task, tz: tzinfo | None = None) -> datetime | None:
    """``ddl`` at ``time`` (23:59 when unset) in *tz*; None for tasks without a deadline."""
    if not has_deadline(task):
        return None
    due = parse_time(task.time) or DEFAULT_DUE_TIME
    return datetime.combine(parse_date(task.ddl), due, tzinfo=tz)


def is_urgent(task: Task, now: datetime) -> bool:
    """Due tomorrow, today, or overdue. Daily tasks are never urgent."""
    return has_deadline(task) and days_remaining(task, now) <= URGENT_DAYS


def same_local_day(timestamp: str | None, now: datetime) -> bool:
    """True if *timestamp* falls on the same calendar day as *now* in now's timezone."""
    moment = parse_timestamp(timestamp)
    if moment is None:
        return False
    if moment.tzinfo is not None and now.tzinfo is not None:
        moment = moment.astimezone(now.tzinfo)
    elif moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment.date() == now.date()


def time_level(task: Task, now: datetime) -> int:
    """Coarse 1-3 deadline pressure used for card tone."""
    if task.is_everyday:
        return 2
    days = days_remaining(task, now)
    if days <= 3:
        return 3
    if days <= 7:
        return 2
    return 1


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def format_countdown(task: Task, now: datetime) -> str:
    if task.is_everyday:
        return "Daily task"
    if not has_deadline(task):
        return "No deadline"
    days = days_remaining(task, now)
    if days < 0:
        return f"Overdue by {_plural(abs(days), 'day')}"
    if days > URGENT_DAYS:
        return f"Due in {days} days"

    label = "Due today" if days == 0 else "Due tomorrow"
    due = deadline_instant(task, now.tzinfo)
    minutes = int((due - now).total_seconds() // 60)
    if minutes < 0:
        return "Overdue"
    hours, mins = divmod(minutes, 60)
    return f"{label} · {hours}h {mins}m left"
