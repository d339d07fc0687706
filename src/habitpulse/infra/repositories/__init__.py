"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .settings import SQLModelSettingsRepository
from .task import SQLModelTaskRepository

__all__ = [
    "SQLModelHabitRepository",
    "SQLModelSettingsRepository",
    "SQLModelTaskRepository",
]
