"""SQLModel table exports."""

from .habit import Habit, HabitCompletion
from .settings import AppSetting
from .task import Task, TaskTab

__all__ = [
    "AppSetting",
    "Habit",
    "HabitCompletion",
    "Task",
    "TaskTab",
]
