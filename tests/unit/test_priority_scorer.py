"""
Unit tests for the flexible task scoring function.
"""

from datetime import datetime, timedelta

import pytest

from autoplanner.models.enums import PrioritizationStrategy, Priority
from autoplanner.models.task import Task, TimePlanning
from autoplanner.services.priority_scorer import score_task

NOW = datetime(2026, 3, 2, 8, 0)


def make_task(
    priority: Priority = Priority.NONE,
    deadline: datetime | None = None,
    start: datetime | None = None,
    duration_minutes: int | None = 60,
) -> Task:
    return Task(
        id=1,
        name="Scored",
        priority=priority,
        start_plan=TimePlanning(date_time=start) if start else None,
        end_plan=TimePlanning(date_time=deadline) if deadline else None,
        duration_minutes=duration_minutes,
    )


@pytest.mark.parametrize("strategy", list(PrioritizationStrategy))
@pytest.mark.parametrize("deadline", [None, NOW + timedelta(hours=5), NOW - timedelta(hours=2)])
def test_priority_monotonic(strategy, deadline):
    scores = [
        score_task(make_task(priority, deadline=deadline), strategy, NOW)
        for priority in (Priority.HIGH, Priority.MEDIUM, Priority.LOW, Priority.NONE)
    ]
    assert scores[0] > scores[1] > scores[2] > scores[3]


def test_base_scores_without_deadline():
    strategy = PrioritizationStrategy.URGENT_FIRST
    assert score_task(make_task(Priority.HIGH), strategy, NOW) == pytest.approx(10000)
    assert score_task(make_task(Priority.MEDIUM), strategy, NOW) == pytest.approx(3500)
    assert score_task(make_task(Priority.NONE), strategy, NOW) == pytest.approx(70)


def test_deadline_bands():
    strategy = PrioritizationStrategy.HIGH_PRIORITY_FIRST
    overdue = score_task(make_task(Priority.LOW, deadline=NOW - timedelta(hours=1)), strategy, NOW)
    within_8h = score_task(make_task(Priority.LOW, deadline=NOW + timedelta(hours=3)), strategy, NOW)
    within_24h = score_task(make_task(Priority.LOW, deadline=NOW + timedelta(hours=19)), strategy, NOW)
    far = score_task(make_task(Priority.LOW, deadline=NOW + timedelta(days=10)), strategy, NOW)

    assert overdue == pytest.approx(1000 + 50000)
    assert within_8h == pytest.approx(1000 + 20000 / 4)
    assert within_24h == pytest.approx(1000 + 10000 / 20)
    assert far == pytest.approx(1000 + 1000 / 241)
    assert overdue > within_8h > within_24h > far


def test_partial_hours_truncate():
    strategy = PrioritizationStrategy.HIGH_PRIORITY_FIRST
    score = score_task(make_task(Priority.LOW, deadline=NOW + timedelta(minutes=59)), strategy, NOW)
    # 0 whole hours left: divisor is 1
    assert score == pytest.approx(1000 + 20000)


def test_urgent_first_boosts_dated_tasks():
    task = make_task(Priority.LOW, deadline=NOW + timedelta(days=10))
    urgent = score_task(task, PrioritizationStrategy.URGENT_FIRST, NOW)
    earlier = score_task(task, PrioritizationStrategy.EARLIER_DEADLINES_FIRST, NOW)
    base = score_task(task, PrioritizationStrategy.HIGH_PRIORITY_FIRST, NOW)
    assert urgent == pytest.approx(base * 1.1)
    assert earlier == pytest.approx(base * 1.05)


def test_short_tasks_first_prefers_short():
    strategy = PrioritizationStrategy.SHORT_TASKS_FIRST
    short = score_task(make_task(duration_minutes=15), strategy, NOW)
    long = score_task(make_task(duration_minutes=240), strategy, NOW)
    assert short > long


def test_start_bonus():
    strategy = PrioritizationStrategy.HIGH_PRIORITY_FIRST
    base = score_task(make_task(Priority.HIGH), strategy, NOW)
    soon = score_task(make_task(Priority.HIGH, start=NOW + timedelta(hours=3)), strategy, NOW)
    past = score_task(make_task(Priority.HIGH, start=NOW - timedelta(hours=3)), strategy, NOW)
    later = score_task(make_task(Priority.HIGH, start=NOW + timedelta(days=5)), strategy, NOW)

    assert soon == pytest.approx(base + 200 / 4)
    assert past == pytest.approx(base + 100)
    assert later == pytest.approx(base)


def test_score_is_always_positive():
    task = make_task(Priority.NONE, duration_minutes=0)
    for strategy in PrioritizationStrategy:
        assert score_task(task, strategy, NOW) >= 0.1
