"""Task prioritisation and due-date badges."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional

from .calendar import DayLike, to_day

PRIORITY_VALUES = {"Low": 1, "Medium": 2, "High": 3}
EFFORT_VALUES = {"S": 1, "M": 2, "L": 3, "XL": 4}
TIME_ESTIMATION_VALUES = {"15m": 0.25, "30m": 0.5, "1h": 1.0, "1.5h": 1.5}

# Unset fields score as the least attractive option.
DEFAULT_PRIORITY = 1
DEFAULT_EFFORT = 4
DEFAULT_TIME_ESTIMATION = 1.5

CAPACITY_EFFORT = "Effort"
CAPACITY_ESTIMATED_TIME = "Estimated Time"


@dataclass(frozen=True, slots=True)
class TaskValues:
    priority_value: int
    effort_value: int
    time_estimation_value: float


@dataclass(frozen=True, slots=True)
class DueDateInfo:
    label: str
    variant: str


def _field(task: Any, name: str) -> Any:
    if isinstance(task, Mapping):
        return task.get(name)
    return getattr(task, name, None)


def map_enums_to_values(task: Any) -> TaskValues:
    """Translate a task's priority/effort/time labels into numbers."""

    return TaskValues(
        priority_value=PRIORITY_VALUES.get(_field(task, "priority"), DEFAULT_PRIORITY),
        effort_value=EFFORT_VALUES.get(_field(task, "effort"), DEFAULT_EFFORT),
        time_estimation_value=TIME_ESTIMATION_VALUES.get(
            _field(task, "time_estimation"), DEFAULT_TIME_ESTIMATION
        ),
    )


def calculate_sort_value(values: TaskValues, capacity_calculation: Optional[str] = CAPACITY_EFFORT) -> float:
    """Priority per unit of effort (or of estimated time)."""

    if (capacity_calculation or CAPACITY_EFFORT) == CAPACITY_EFFORT:
        denominator = values.effort_value if values.effort_value > 0 else DEFAULT_EFFORT
    else:
        denominator = (
            values.time_estimation_value if values.time_estimation_value > 0 else DEFAULT_TIME_ESTIMATION
        )
    return values.priority_value / denominator


def sort_tasks(tasks: Iterable[Any], capacity_calculation: Optional[str] = CAPACITY_EFFORT) -> list[Any]:
    """Open tasks by descending sort value, completed tasks last.

    Ties keep their incoming order.
    """

    def key(task: Any) -> tuple[bool, float]:
        value = calculate_sort_value(map_enums_to_values(task), capacity_calculation)
        return bool(_field(task, "completed")), -value

    return sorted(tasks, key=key)


def due_date_info(due_date: Optional[DayLike], today: Optional[DayLike] = None) -> DueDateInfo:
    """Badge label and style for a task's due date."""

    if not due_date:
        return DueDateInfo(label="", variant="outline")

    due = to_day(due_date)
    today_day = to_day(today) if today is not None else date.today()
    days_until_due = (due - today_day).days

    if days_until_due == 0:
        return DueDateInfo(label="Due today", variant="destructive")
    if days_until_due == 1:
        return DueDateInfo(label="Due tomorrow", variant="warning")
    if days_until_due < 0:
        return DueDateInfo(label="Overdue", variant="destructive")
    if days_until_due <= 5:
        return DueDateInfo(label=f"Due in {days_until_due} days", variant="default")
    return DueDateInfo(label=f"{due:%b} {due.day}", variant="outline")


__all__ = [
    "DueDateInfo",
    "TaskValues",
    "calculate_sort_value",
    "due_date_info",
    "map_enums_to_values",
    "sort_tasks",
]
