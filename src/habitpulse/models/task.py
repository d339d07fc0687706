"""To-do tabs and tasks."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .habit import new_record_id, utcnow


class TaskTab(SQLModel, table=True):
    """A named list grouping daily tasks."""

    __tablename__: ClassVar[str] = "task_tab"

    id: str = Field(default_factory=new_record_id, primary_key=True, max_length=64)
    name: str = Field(nullable=False, max_length=80)
    sort_order: int = Field(default=0, nullable=False)
    created_date: datetime = Field(default_factory=utcnow, nullable=False)


class Task(SQLModel, table=True):
    """A to-do item scored by priority against effort or time."""

    __tablename__: ClassVar[str] = "task"

    id: str = Field(default_factory=new_record_id, primary_key=True, max_length=64)
    tab_id: str = Field(foreign_key="task_tab.id", nullable=False, index=True, max_length=64)
    title: str = Field(nullable=False, max_length=200)
    priority: Optional[str] = Field(default=None, max_length=16)
    effort: Optional[str] = Field(default=None, max_length=8)
    time_estimation: Optional[str] = Field(default=None, max_length=8)
    due_date: Optional[date] = Field(default=None)
    completed: bool = Field(default=False, nullable=False)
    created_date: datetime = Field(default_factory=utcnow, nullable=False)
