"""Tests for core/view.py — end-to-end derivation of the dashboard."""

from datetime import timedelta

from core.view import decorate, derive_view

from conftest import NOW, make_task


def test_derive_view_filters_ranks_and_partitions():
    tasks = [
        make_task("daily-done", is_everyday=True, last_completed_at=NOW.isoformat()),
        make_task("daily", is_everyday=True),
        make_task("tomorrow", ddl="2026-02-12", importance_level=3),
        make_task("ten-days", ddl="2026-02-21", importance_level=1),
    ]
    view = derive_view(tasks, [], "time", NOW)
    assert [r.task.id for r in view.hero] == ["tomorrow"]
    assert [r.task.id for r in view.grid] == ["ten-days", "daily"]
    assert view.sort_mode == "time"
    assert view.hero[0].is_urgent is True
    assert view.hero[0].tone == "urgent"


def test_derive_view_tick_promotes_task_to_hero():
    tasks = [
        make_task("soon", ddl="2026-02-13", importance_level=1),
        make_task("important", ddl="2026-03-01", importance_level=3),
    ]
    before = derive_view(tasks, [], "importance", NOW)
    assert [r.task.id for r in before.hero] == ["important"]

    after = derive_view(tasks, [], "importance", NOW + timedelta(days=1))
    assert [r.task.id for r in after.hero] == ["soon"]
    assert after.hero[0].countdown.startswith("Due tomorrow")


def test_derive_view_empty():
    view = derive_view([], [], "time", NOW)
    assert view.is_empty
    assert view.to_dict()["hero"] == []


def test_decorate_scores_and_tones():
    hot = decorate(make_task("hot", ddl="2026-02-14", importance_level=3), NOW)
    assert (hot.time_level, hot.score, hot.tone) == (3, 6, "hot")
    warm = decorate(make_task("warm", ddl="2026-02-18", importance_level=2), NOW)
    assert warm.tone == "warm"
    calm = decorate(make_task("calm", ddl="2026-03-30", importance_level=1), NOW)
    assert calm.tone == "calm"
    daily = decorate(make_task("daily", is_everyday=True), NOW)
    assert daily.tone == "daily"
    assert daily.days_remaining == 999


def test_view_to_dict_shape():
    view = derive_view([make_task("a", ddl="2026-02-12")], [], "time", NOW)
    d = view.to_dict()
    assert d["sortMode"] == "time"
    assert d["historyCapacity"] == 20
    card = d["hero"][0]
    assert card["id"] == "a"
    assert card["isUrgent"] is True
    assert card["importanceLabel"] == "Normal"
    assert "countdown" in card
