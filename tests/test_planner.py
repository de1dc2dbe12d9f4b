"""
Unit tests for daily plan scoring, ordering and budget fitting.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from taskpilot.hydrator import hydrate
from taskpilot.matrix import set_status
from taskpilot.models import DraftTask, PlanBudget
from taskpilot.planner import (
    coerce_budget,
    compute_energy_fit,
    compute_urgency_bonus,
    plan,
    planned_minutes,
    score_task,
)

NOW = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _task(name, minutes=None, priority="Medium", due=None):
    draft = DraftTask(
        name=name,
        priority=priority,
        estimated_minutes=minutes,
        due_date=NOW + due if due is not None else None,
    )
    return hydrate(draft, now=NOW)


def _names(tasks):
    return [t.name for t in tasks]


def test_task_over_remaining_budget_is_skipped():
    task_a = _task("A", 60, "High")
    task_b = _task("B", 200, "Low")

    result = plan([task_a, task_b], {"availableMinutes": 120, "energyLevel": "Medium"}, now=NOW)

    assert result == [task_a]


def test_greedy_keeps_looking_after_a_skip():
    tasks = [_task("A", 100, "Critical"), _task("B", 50, "High"), _task("C", 30, "Low")]
    assert _names(plan(tasks, PlanBudget(140), now=NOW)) == ["A", "C"]


@pytest.mark.parametrize("minutes", [0, -30])
def test_non_positive_budget_gives_empty_plan(minutes):
    assert plan([_task("A", 10)], PlanBudget(minutes), now=NOW) == []


def test_completed_tasks_are_never_planned():
    done = set_status(_task("done", 10, "Critical"), "Completed", NOW)
    assert plan([done], PlanBudget(120), now=NOW) == []


def test_total_never_exceeds_budget():
    tasks = [_task(f"t{i}", m) for i, m in enumerate([25, 40, 15, 90, 60, None, 35])]
    result = plan(tasks, PlanBudget(150), now=NOW)
    assert planned_minutes(result) <= 150
    assert len({t.id for t in result}) == len(result)


def test_missing_estimate_counts_as_default_minutes():
    task = _task("no estimate")
    assert plan([task], PlanBudget(45), now=NOW) == [task]
    assert plan([task], PlanBudget(44), now=NOW) == []


def test_priority_and_urgency_rank_first():
    relaxed = _task("relaxed", 30, "Low")
    overdue = _task("overdue", 30, "Critical", due=-timedelta(hours=2))
    soon = _task("soon", 30, "High", due=timedelta(hours=6))
    assert _names(plan([relaxed, soon, overdue], PlanBudget(240), now=NOW)) == ["overdue", "soon", "relaxed"]


def test_ties_break_on_due_date_then_estimate_then_input_order():
    later = _task("later", 30, due=timedelta(days=10))
    earlier = _task("earlier", 30, due=timedelta(days=5))
    assert _names(plan([later, earlier], PlanBudget(240), now=NOW)) == ["earlier", "later"]

    longer = _task("longer", 40)
    shorter = _task("shorter", 35)
    assert _names(plan([longer, shorter], PlanBudget(240), now=NOW)) == ["shorter", "longer"]

    first = _task("first", 40)
    second = _task("second", 40)
    assert _names(plan([first, second], PlanBudget(240), now=NOW)) == ["first", "second"]


def test_unscheduled_sorts_after_dated_on_equal_score():
    undated = _task("undated", 30)
    dated = _task("dated", 30, due=timedelta(days=9))
    assert _names(plan([undated, dated], PlanBudget(240), now=NOW)) == ["dated", "undated"]


def test_high_energy_prefers_deep_work():
    quick = _task("quick", 20)
    deep = _task("deep", 90)
    assert _names(plan([quick, deep], {"available_minutes": 240, "energy_level": "High"}, now=NOW)) == ["deep", "quick"]


def test_low_energy_prefers_quick_wins():
    deep = _task("deep", 90)
    quick = _task("quick", 20)
    assert _names(plan([deep, quick], {"available_minutes": 240, "energy_level": "low"}, now=NOW)) == ["quick", "deep"]


def test_energy_fit_values():
    assert compute_energy_fit(90, "High") == 1.0
    assert compute_energy_fit(20, "High") == -0.5
    assert compute_energy_fit(20, "Low") == 1.0
    assert compute_energy_fit(90, "Low") == -1.0
    assert compute_energy_fit(45, "Low") == 0.0
    assert compute_energy_fit(90, "Medium") == 0.0


def test_urgency_bonus_curve():
    assert compute_urgency_bonus(None, NOW) == 1.0
    assert compute_urgency_bonus(NOW - timedelta(hours=1), NOW) == 4.0
    assert compute_urgency_bonus(NOW + timedelta(hours=24), NOW) == pytest.approx(2.5)
    assert compute_urgency_bonus(NOW + timedelta(hours=72), NOW) == 1.0


def test_score_is_composite():
    task = _task("fire", 60, "Critical", due=-timedelta(hours=1))
    assert score_task(task, "Medium", NOW) == pytest.approx(8.0)
    assert score_task(task, "High", NOW) == pytest.approx(9.0)


def test_coerce_budget_degrades_bad_values():
    assert coerce_budget({"availableMinutes": "90", "energyLevel": "sleepy"}) == PlanBudget(90, "Medium")
    assert coerce_budget({"available_minutes": "lots"}) == PlanBudget(0, "Medium")
    assert coerce_budget(PlanBudget(30, "HIGH")) == PlanBudget(30, "High")
    assert coerce_budget({"availableMinutes": float("inf")}) == PlanBudget(0, "Medium")
    assert plan([_task("deep work", 30, "High")], {"availableMinutes": float("inf")}, NOW) == []
