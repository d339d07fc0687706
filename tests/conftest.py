"""Pytest configuration and shared fixtures for HabitPulse tests.

Database fixtures give every test an isolated SQLite file; factories persist
habits and completion records with sensible defaults.
"""

from __future__ import annotations

import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from habitpulse.infra.repositories import (
    SQLModelHabitRepository,
    SQLModelSettingsRepository,
    SQLModelTaskRepository,
)
from habitpulse.models import Habit, HabitCompletion


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching ``infra.database.create_session_factory``."""

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def settings_repo(session_factory) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(session_factory)


@pytest.fixture
def task_repo(session_factory) -> SQLModelTaskRepository:
    return SQLModelTaskRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(habit_repo):
    """Factory for creating test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        frequency: int = 1,
        created: str = "2024-01-01",
        daily_goal: int = 1,
        personal_best_streak: int = 0,
    ) -> Habit:
        return habit_repo.create(
            Habit(
                name=name,
                frequency=frequency,
                daily_goal=daily_goal,
                personal_best_streak=personal_best_streak,
                created_date=datetime.fromisoformat(f"{created}T09:00:00"),
            )
        )

    return _create_habit


@pytest.fixture
def completion_factory(habit_repo):
    """Factory for creating completion records on given days."""

    def _create_completion(habit: Habit, day: str, completed: bool = True) -> HabitCompletion:
        return habit_repo.create_completion(
            HabitCompletion(habit_id=habit.id, completion_date=day, completed=completed)
        )

    return _create_completion
