"""Service module exports."""

from . import calendar, celebrations, completions, habits, streaks, tasks

__all__ = [
    "calendar",
    "celebrations",
    "completions",
    "habits",
    "streaks",
    "tasks",
]
