"""Completion record normalisation."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any, Iterable, Optional

from .calendar import Week, to_day, to_day_string

# Authenticated records carry user_habit_id, local ones habit_id.
_HABIT_REF_FIELDS = ("user_habit_id", "habit_id")


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def habit_ref_of(record: Any) -> Optional[str]:
    """Return the habit a completion record belongs to, whichever field holds it."""

    for name in _HABIT_REF_FIELDS:
        value = _field(record, name)
        if value:
            return str(value)
    return None


def is_raw_day(value: Any) -> bool:
    return isinstance(value, (str, date))


def is_completed(record: Any) -> bool:
    """Raw day values always count; records only when ``completed`` is exactly True."""

    if is_raw_day(record):
        return True
    return _field(record, "completed") is True


def completion_day_of(record: Any) -> Optional[str]:
    """Logical ``YYYY-MM-DD`` day of a record or raw value.

    Prefers ``completion_date`` and falls back to the date portion of
    ``created_date``.
    """

    if is_raw_day(record):
        return to_day_string(record)
    value = _field(record, "completion_date") or _field(record, "created_date")
    if not value:
        return None
    return to_day_string(value)


def normalize_completions(records: Iterable[Any]) -> list[str]:
    """Sorted, de-duplicated completion days for the completed records given."""

    days = set()
    for record in records or ():
        if not is_completed(record):
            continue
        day = completion_day_of(record)
        if day:
            days.add(day)
    return sorted(days)


def completions_for_habit(habit_id: Any, records: Iterable[Any]) -> list[str]:
    """Normalised completion days for one habit out of a mixed record list."""

    target = str(habit_id)
    return normalize_completions(r for r in records or () if habit_ref_of(r) == target)


def completions_in_week(days: Iterable[str], week: Week) -> list[str]:
    return [d for d in days if week.contains(to_day(d))]


__all__ = [
    "completion_day_of",
    "completions_for_habit",
    "completions_in_week",
    "habit_ref_of",
    "is_completed",
    "normalize_completions",
]
