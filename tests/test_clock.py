"""Tests for core/clock.py — day deltas, countdown text, local-day checks."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from core.clock import (
    NO_DEADLINE_DAYS,
    days_remaining,
    deadline_instant,
    format_countdown,
    is_urgent,
    same_local_day,
    time_level,
)
from core.models import Task

from conftest import NOW, make_task


def test_days_remaining_truncates_to_midnight():
    late = datetime(2026, 2, 11, 23, 59, tzinfo=NOW.tzinfo)
    task = make_task("t", ddl="2026-02-12")
    assert days_remaining(task, NOW) == 1
    assert days_remaining(task, late) == 1


def test_days_remaining_signed():
    assert days_remaining(make_task("t", ddl="2026-02-11"), NOW) == 0
    assert days_remaining(make_task("t", ddl="2026-02-08"), NOW) == -3
    assert days_remaining(make_task("t", ddl="2026-02-21"), NOW) == 10


def test_days_remaining_sentinel_for_daily_and_missing_deadline():
    assert days_remaining(make_task("d", is_everyday=True), NOW) == NO_DEADLINE_DAYS
    assert days_remaining(make_task("broken", ddl=None), NOW) == NO_DEADLINE_DAYS


def test_deadline_instant_defaults_to_end_of_day():
    task = make_task("t", ddl="2026-02-12")
    assert deadline_instant(task) == datetime(2026, 2, 12, 23, 59)
    timed = make_task("t", ddl="2026-02-12", time="08:15")
    assert deadline_instant(timed, NOW.tzinfo) == datetime(2026, 2, 12, 8, 15, tzinfo=NOW.tzinfo)
    assert deadline_instant(make_task("d", is_everyday=True)) is None


def test_is_urgent_threshold():
    assert is_urgent(make_task("t", ddl="2026-02-12"), NOW) is True
    assert is_urgent(make_task("t", ddl="2026-02-11"), NOW) is True
    assert is_urgent(make_task("t", ddl="2026-01-01"), NOW) is True
    assert is_urgent(make_task("t", ddl="2026-02-13"), NOW) is False
    assert is_urgent(make_task("d", is_everyday=True), NOW) is False


def test_format_countdown_daily():
    assert format_countdown(make_task("d", is_everyday=True), NOW) == "Daily task"


def test_format_countdown_far_and_overdue():
    assert format_countdown(make_task("t", ddl="2026-02-21"), NOW) == "Due in 10 days"
    assert format_countdown(make_task("t", ddl="2026-02-10"), NOW) == "Overdue by 1 day"
    assert format_countdown(make_task("t", ddl="2026-02-06"), NOW) == "Overdue by 5 days"


def test_format_countdown_hours_for_today_and_tomorrow():
    today = make_task("t", ddl="2026-02-11", time="17:30")
    assert format_countdown(today, NOW) == "Due today · 8h 30m left"
    tomorrow = make_task("t", ddl="2026-02-12")
    assert format_countdown(tomorrow, NOW) == "Due tomorrow · 38h 59m left"


def test_format_countdown_clamps_to_overdue_after_due_time():
    task = make_task("t", ddl="2026-02-11", time="08:00")
    assert format_countdown(task, NOW) == "Overdue"


def test_same_local_day_uses_now_timezone():
    tokyo = ZoneInfo("Asia/Tokyo")
    now = datetime(2026, 2, 11, 8, 0, tzinfo=tokyo)
    # 23:30 UTC on the 10th is 08:30 on the 11th in Tokyo.
    assert same_local_day("2026-02-10T23:30:00+00:00", now) is True
    assert same_local_day("2026-02-10T10:00:00+00:00", now) is False
    assert same_local_day(None, now) is False
    assert same_local_day("not a date", now) is False


def test_same_local_day_next_day():
    stamp = NOW.isoformat()
    assert same_local_day(stamp, NOW + timedelta(hours=14)) is True
    assert same_local_day(stamp, NOW + timedelta(hours=15)) is False


def test_time_level_bands():
    assert time_level(make_task("t", ddl="2026-02-14"), NOW) == 3
    assert time_level(make_task("t", ddl="2026-02-18"), NOW) == 2
    assert time_level(make_task("t", ddl="2026-02-19"), NOW) == 1
    assert time_level(Task(is_everyday=True), NOW) == 2
