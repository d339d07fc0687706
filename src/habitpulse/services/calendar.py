"""Calendar and week helpers shared by the streak engine and celebrations.

Every helper reduces its input to a ``datetime.date`` first. A ``date`` is a
bare calendar day, so once a value enters week arithmetic no time-of-day or
UTC offset can shift it onto a neighbouring day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Union

SUNDAY = 0
MONDAY = 1

DayLike = Union[date, datetime, str]
WeekStartLike = Union[int, str, None]


@dataclass(frozen=True, slots=True)
class Week:
    """Closed 7-day interval ``[start, start + 6]``."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def to_day(value: DayLike) -> date:
    """Reduce ``value`` to the calendar day it names.

    Aware datetimes are converted to the local timezone before truncation so
    that an evening timestamp does not land on the next UTC day. Strings may be
    ``YYYY-MM-DD`` or any ISO-8601 timestamp; only the date portion is read.

    Raises:
        ValueError: when a string does not start with a valid ISO date.
    """

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Cannot interpret {value!r} as a calendar day")


def to_day_string(value: DayLike) -> str:
    """Return ``value`` as a ``YYYY-MM-DD`` string."""

    return to_day(value).isoformat()


def today_string() -> str:
    return date.today().isoformat()


def week_start_day_from_setting(setting: WeekStartLike) -> int:
    """Map a stored ``"monday"``/``"sunday"`` setting (or 0/1) to a week-start day."""

    if isinstance(setting, int) and not isinstance(setting, bool):
        if setting not in (SUNDAY, MONDAY):
            raise ValueError(f"week start day must be 0 (Sunday) or 1 (Monday), got {setting}")
        return setting
    if isinstance(setting, str) and setting.strip().lower() == "sunday":
        return SUNDAY
    return MONDAY


def _days_from_week_start(day: date, week_start_day: int) -> int:
    # date.weekday(): Monday == 0 ... Sunday == 6
    if week_start_day == SUNDAY:
        return (day.weekday() + 1) % 7
    return day.weekday()


def week_start(value: DayLike, week_start_day: WeekStartLike = MONDAY) -> date:
    """Return the first day of the week containing ``value``."""

    day = to_day(value)
    start_day = week_start_day_from_setting(week_start_day)
    return day - timedelta(days=_days_from_week_start(day, start_day))


def compute_week_start(value: DayLike, week_start_day: WeekStartLike = "monday") -> str:
    """String form of :func:`week_start`, as stored in milestone ids."""

    return week_start(value, week_start_day).isoformat()


def week_of(value: DayLike, week_start_day: WeekStartLike = MONDAY) -> Week:
    start = week_start(value, week_start_day)
    return Week(start=start, end=start + timedelta(days=6))


def days_remaining_in_week(value: DayLike, week_start_day: WeekStartLike = MONDAY) -> int:
    """Days from ``value`` through the end of its week, ``value`` included (1-7)."""

    day = to_day(value)
    return 7 - _days_from_week_start(day, week_start_day_from_setting(week_start_day))


def available_days_remaining_in_week(
    value: DayLike,
    week_start_day: WeekStartLike,
    completion_dates_in_week: Iterable[DayLike],
) -> int:
    """Remaining days in the week of ``value`` that have no completion yet."""

    day = to_day(value)
    completed = {to_day(d) for d in completion_dates_in_week}
    remaining = days_remaining_in_week(day, week_start_day)
    return sum(
        1
        for offset in range(remaining)
        if day + timedelta(days=offset) not in completed
    )


def weeks_between(start: DayLike, end: DayLike, week_start_day: WeekStartLike = MONDAY) -> list[Week]:
    """Every week from the one containing ``start`` through the one containing ``end``."""

    last = to_day(end)
    cursor = week_start(start, week_start_day)
    weeks: list[Week] = []
    while cursor <= last:
        weeks.append(Week(start=cursor, end=cursor + timedelta(days=6)))
        cursor += timedelta(days=7)
    return weeks


def week_dates(week_start_date: DayLike) -> list[str]:
    """The seven ``YYYY-MM-DD`` strings of the week beginning on ``week_start_date``."""

    start = to_day(week_start_date)
    return [(start + timedelta(days=offset)).isoformat() for offset in range(7)]


def is_date_in_range(value: DayLike, start: DayLike, end: DayLike) -> bool:
    return to_day(start) <= to_day(value) <= to_day(end)


__all__ = [
    "MONDAY",
    "SUNDAY",
    "Week",
    "available_days_remaining_in_week",
    "compute_week_start",
    "days_remaining_in_week",
    "is_date_in_range",
    "to_day",
    "to_day_string",
    "today_string",
    "week_dates",
    "week_of",
    "week_start",
    "week_start_day_from_setting",
    "weeks_between",
]
