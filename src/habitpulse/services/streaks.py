"""Weekly streak engine.

A habit's streak is measured in weeks: every week from the habit's start
through the current week must collect ``frequency`` completions. The first week
of an attempt is excused when it began too late in the week to reach the
target, and the current week only breaks the streak once the target is out of
reach.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from .calendar import (
    DayLike,
    WeekStartLike,
    available_days_remaining_in_week,
    days_remaining_in_week,
    to_day,
    week_start_day_from_setting,
    weeks_between,
)
from .completions import completions_for_habit, normalize_completions


@dataclass(frozen=True, slots=True)
class StreakResult:
    """Outcome of a streak recomputation."""

    current_streak: int = 0
    last_streak_broken_at: Optional[str] = None
    streak_start_date: Optional[str] = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "currentStreak": self.current_streak,
            "lastStreakBrokenAt": self.last_streak_broken_at,
            "streakStartDate": self.streak_start_date,
        }


@dataclass(slots=True)
class HabitSnapshot:
    """The fields of a habit the engine reads, with completions already reduced."""

    id: Optional[str] = None
    frequency: int = 1
    created_date: Optional[DayLike] = None
    completions: Sequence[str] = field(default_factory=list)


def _field(habit: Any, name: str) -> Any:
    if isinstance(habit, Mapping):
        return habit.get(name)
    return getattr(habit, name, None)


def effective_frequency(habit: Any) -> int:
    """Weekly target of ``habit``; missing or non-positive values count as 1."""

    try:
        frequency = int(_field(habit, "frequency") or 1)
    except (TypeError, ValueError):
        return 1
    return max(frequency, 1)


def recompute_streak(
    habit: Any,
    week_start_day: WeekStartLike,
    today: Optional[DayLike] = None,
) -> StreakResult:
    """Walk the habit's weeks up to ``today`` and derive its current streak.

    ``habit`` may be a mapping or an object exposing ``completions``,
    ``frequency`` and ``created_date``. ``today`` defaults to the local calendar
    day. Malformed date strings raise ``ValueError``.
    """

    days = [to_day(d) for d in normalize_completions(_field(habit, "completions") or [])]
    if not days:
        return StreakResult()

    start_day = week_start_day_from_setting(week_start_day)
    frequency = effective_frequency(habit)
    today_day = to_day(today) if today is not None else date.today()

    first_completion = days[0]
    created = _field(habit, "created_date")
    created_day = to_day(created) if created else first_completion
    anchor = min(created_day, first_completion)

    active = True
    broken_at: Optional[date] = None
    streak_start: Optional[date] = None

    for index, week in enumerate(weeks_between(anchor, today_day, start_day)):
        in_week = [d for d in days if week.contains(d)]
        hits = len(in_week)
        first_in_week = in_week[0] if in_week else None

        required = frequency
        first_active_week = index == 0 or (broken_at is not None and week.start > broken_at)
        if first_active_week and first_in_week is not None:
            if days_remaining_in_week(first_in_week, start_day) < required:
                # Grace: the attempt started too late in the week to reach the target.
                required = 0

        if hits < required:
            if not week.contains(today_day):
                active = False
                broken_at = week.end
                streak_start = None
                continue

            available = available_days_remaining_in_week(today_day, start_day, in_week)
            if hits + available < required:
                active = False
                broken_at = today_day
                streak_start = None
                break
            # Still reachable this week. A broken streak only restarts from a
            # completion inside the current week.
            if not active and first_in_week is not None:
                active = True
                broken_at = None
                streak_start = first_in_week
            continue

        if not active:
            active = True
            broken_at = None
            streak_start = first_in_week
        elif streak_start is None:
            streak_start = first_in_week

    if active and streak_start is not None:
        current = sum(1 for d in days if d >= streak_start)
    elif active and broken_at is None:
        # Never broken and no week has closed yet: the whole history counts.
        streak_start = first_completion
        current = len(days)
    else:
        current = 0
        streak_start = None

    return StreakResult(
        current_streak=current,
        last_streak_broken_at=broken_at.isoformat() if broken_at else None,
        streak_start_date=streak_start.isoformat() if streak_start else None,
    )


def snapshot_for(habit: Any, completion_records: Iterable[Any]) -> HabitSnapshot:
    """Build the engine input for ``habit`` from a mixed list of completion records."""

    habit_id = _field(habit, "id")
    return HabitSnapshot(
        id=habit_id,
        frequency=effective_frequency(habit),
        created_date=_field(habit, "created_date"),
        completions=completions_for_habit(habit_id, completion_records),
    )


def calculate_habit_streak(
    habit: Any,
    completion_records: Iterable[Any],
    week_start: WeekStartLike,
    today: Optional[DayLike] = None,
) -> int:
    """Current streak length of ``habit`` given raw completion records."""

    return recompute_streak(snapshot_for(habit, completion_records), week_start, today).current_streak


__all__ = [
    "HabitSnapshot",
    "StreakResult",
    "calculate_habit_streak",
    "effective_frequency",
    "recompute_streak",
    "snapshot_for",
]
