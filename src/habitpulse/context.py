"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from sqlmodel import Session

from .config import BaseConfig
from .infra.database import create_db_engine, create_session_factory, init_database
from .infra.repositories import (
    SQLModelHabitRepository,
    SQLModelSettingsRepository,
    SQLModelTaskRepository,
)
from .services.celebrations import CelebrationEvaluator
from .services.habits import HabitTracker


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    session_factory: Callable[[], Session]

    # Repositories
    habit_repo: SQLModelHabitRepository
    settings_repo: SQLModelSettingsRepository
    task_repo: SQLModelTaskRepository

    # Services
    tracker: HabitTracker


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    habit_repo = SQLModelHabitRepository(session_factory)
    settings_repo = SQLModelSettingsRepository(session_factory, default_week_start=config.WEEK_START)
    task_repo = SQLModelTaskRepository(session_factory)

    # One evaluator per context; its seen set is reloaded before every check.
    tracker = HabitTracker(habit_repo, settings_repo, CelebrationEvaluator())

    return AppContext(
        config=config,
        session_factory=session_factory,
        habit_repo=habit_repo,
        settings_repo=settings_repo,
        task_repo=task_repo,
        tracker=tracker,
    )
