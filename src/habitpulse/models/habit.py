"""Habit tracking data structures."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar
from uuid import uuid4

from sqlmodel import Field, SQLModel


def new_record_id() -> str:
    """Opaque string identifier used for every stored record."""

    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Habit(SQLModel, table=True):
    """A recurring habit with a weekly completion target."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=new_record_id, primary_key=True, max_length=64)
    name: str = Field(nullable=False, max_length=80, index=True)
    emoji: str = Field(default="", max_length=16)
    frequency: int = Field(default=1, nullable=False)
    daily_goal: int = Field(default=1, nullable=False)
    personal_best_streak: int = Field(default=0, nullable=False)
    sort_order: int = Field(default=0, nullable=False)
    created_date: datetime = Field(default_factory=utcnow, nullable=False)


class HabitCompletion(SQLModel, table=True):
    """Completion record for a habit on one logical calendar day."""

    __tablename__: ClassVar[str] = "habit_completion"

    id: str = Field(default_factory=new_record_id, primary_key=True, max_length=64)
    habit_id: str = Field(foreign_key="habit.id", nullable=False, index=True, max_length=64)
    # Logical "YYYY-MM-DD" day the habit was performed, not the row creation time.
    completion_date: str = Field(nullable=False, index=True, max_length=10)
    completed: bool = Field(default=True, nullable=False)
    progress_count: int = Field(default=1, nullable=False)
    created_date: datetime = Field(default_factory=utcnow, nullable=False)
