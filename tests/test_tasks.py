from __future__ import annotations

from datetime import date

import pytest

from habitpulse.models import Task
from habitpulse.services import tasks


def test_map_enums_to_values_defaults_to_least_attractive():
    values = tasks.map_enums_to_values({})
    assert values == tasks.TaskValues(priority_value=1, effort_value=4, time_estimation_value=1.5)


def test_map_enums_to_values_reads_labels():
    task = Task(tab_id="t", title="Plan", priority="High", effort="S", time_estimation="30m")
    assert tasks.map_enums_to_values(task) == tasks.TaskValues(3, 1, 0.5)


@pytest.mark.parametrize(
    ("capacity", "expected"),
    [("Effort", 1.5), (None, 1.5), ("Estimated Time", 2.0)],
)
def test_calculate_sort_value(capacity, expected):
    values = tasks.TaskValues(priority_value=3, effort_value=2, time_estimation_value=1.5)
    assert tasks.calculate_sort_value(values, capacity) == pytest.approx(expected)


def test_sort_tasks_puts_completed_last():
    items = [
        {"title": "low", "priority": "Low", "effort": "XL"},
        {"title": "done", "priority": "High", "effort": "S", "completed": True},
        {"title": "quick win", "priority": "High", "effort": "S"},
        {"title": "medium", "priority": "Medium", "effort": "M"},
    ]
    ordered = [t["title"] for t in tasks.sort_tasks(items)]
    assert ordered == ["quick win", "medium", "low", "done"]


@pytest.mark.parametrize(
    ("due", "label", "variant"),
    [
        (None, "", "outline"),
        ("2024-01-10", "Due today", "destructive"),
        ("2024-01-11", "Due tomorrow", "warning"),
        ("2024-01-02", "Overdue", "destructive"),
        ("2024-01-13", "Due in 3 days", "default"),
        (date(2024, 1, 25), "Jan 25", "outline"),
    ],
)
def test_due_date_info(due, label, variant):
    assert tasks.due_date_info(due, today="2024-01-10") == tasks.DueDateInfo(label, variant)
