"""Habit service: completion toggles, streaks, and celebration bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..domain.repositories import HabitRepository, SettingsRepository
from ..logging_config import get_logger
from ..models.habit import Habit, HabitCompletion
from .calendar import DayLike, to_day, to_day_string
from .celebrations import CelebrationEvaluator, CelebrationEvent
from .streaks import StreakResult, recompute_streak, snapshot_for

logger = get_logger(__name__)


class HabitNotFoundError(LookupError):
    """Raised when an operation targets a habit that does not exist."""


@dataclass(slots=True)
class ToggleOutcome:
    """What a toggle changed and what the UI should show next."""

    habit: Habit
    completion: Optional[HabitCompletion]
    streak: StreakResult
    celebrations: list[CelebrationEvent] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.completion is not None and self.completion.completed


class HabitTracker:
    """Coordinates the record store, the streak engine and the celebration evaluator.

    Toggles for one tracker must be issued one at a time: the evaluator's seen
    set is read, updated and saved around each check.
    """

    def __init__(
        self,
        habit_repo: HabitRepository,
        settings_repo: SettingsRepository,
        evaluator: Optional[CelebrationEvaluator] = None,
    ):
        self.habit_repo = habit_repo
        self.settings_repo = settings_repo
        self.evaluator = evaluator or CelebrationEvaluator()

    def _require_habit(self, habit_id: str) -> Habit:
        habit = self.habit_repo.get_by_id(habit_id)
        if habit is None:
            raise HabitNotFoundError(f"Habit {habit_id!r} not found")
        return habit

    def week_start(self) -> str:
        return self.settings_repo.get_week_start()

    def streak_for(self, habit_id: str, today: Optional[DayLike] = None) -> StreakResult:
        """Recompute the streak of one stored habit."""

        habit = self._require_habit(habit_id)
        completions = self.habit_repo.list_completions(habit_id)
        return recompute_streak(snapshot_for(habit, completions), self.week_start(), today)

    def streaks(self, today: Optional[DayLike] = None) -> dict[str, StreakResult]:
        """Streaks of every habit, keyed by habit id."""

        week_start = self.week_start()
        completions = self.habit_repo.list_completions()
        return {
            habit.id: recompute_streak(snapshot_for(habit, completions), week_start, today)
            for habit in self.habit_repo.list_all()
        }

    def toggle_completion(
        self,
        habit_id: str,
        day: Optional[DayLike] = None,
        today: Optional[DayLike] = None,
    ) -> ToggleOutcome:
        """Mark ``habit_id`` done on ``day`` (default today), or undo it.

        Single-goal habits flip between done and not done. Habits with a daily
        goal above one gain one unit of progress per call until the goal is
        reached; a further call on a finished day removes the record.
        """

        habit = self._require_habit(habit_id)
        day_str = to_day_string(day) if day is not None else date.today().isoformat()
        existing = self.habit_repo.get_completion(habit_id, day_str)
        goal = max(habit.daily_goal or 1, 1)

        completion: Optional[HabitCompletion]
        if existing is not None and (existing.completed or goal == 1):
            self.habit_repo.delete_completion(existing.id)
            completion = None
            logger.info("Completion removed", extra={"habit_id": habit_id, "day": day_str})
        elif existing is not None:
            existing.progress_count += 1
            existing.completed = existing.progress_count >= goal
            completion = self.habit_repo.update_completion(existing)
        else:
            completion = self.habit_repo.create_completion(
                HabitCompletion(
                    habit_id=habit_id,
                    completion_date=day_str,
                    progress_count=1,
                    completed=goal == 1,
                )
            )

        celebrations: list[CelebrationEvent] = []
        if completion is not None and completion.completed:
            logger.info("Habit completed", extra={"habit_id": habit_id, "day": day_str})
            celebrations = self._celebrate(habit, today)
            habit = self.habit_repo.get_by_id(habit_id) or habit

        return ToggleOutcome(
            habit=habit,
            completion=completion,
            streak=self.streak_for(habit_id, today),
            celebrations=celebrations,
        )

    def decrement_progress(self, habit_id: str, day: Optional[DayLike] = None) -> Optional[HabitCompletion]:
        """Take one unit of progress back; the record is deleted at zero."""

        habit = self._require_habit(habit_id)
        day_str = to_day_string(day) if day is not None else date.today().isoformat()
        existing = self.habit_repo.get_completion(habit_id, day_str)
        if existing is None:
            return None
        existing.progress_count -= 1
        if existing.progress_count <= 0:
            self.habit_repo.delete_completion(existing.id)
            return None
        existing.completed = existing.progress_count >= max(habit.daily_goal or 1, 1)
        return self.habit_repo.update_completion(existing)

    def _celebrate(self, toggled: Habit, today: Optional[DayLike]) -> list[CelebrationEvent]:
        self._load_milestones()

        habits = self.habit_repo.list_all()
        completions = self.habit_repo.list_completions()
        today_day = to_day(today) if today is not None else date.today()
        events = self.evaluator.check(toggled, habits, completions, self.week_start(), today_day)

        for habit in habits:
            best = self.evaluator.personal_best_updates.get(habit.id)
            if best is not None:
                habit.personal_best_streak = best
                self.habit_repo.update(habit)

        self._save_milestones()
        return events

    def _load_milestones(self) -> None:
        try:
            milestones = self.settings_repo.get_seen_milestones()
        except (SQLAlchemyError, ValueError):
            logger.exception("Failed to load seen milestones; continuing with an empty set")
            milestones = None
        self.evaluator.load_state(milestones)

    def _save_milestones(self) -> None:
        try:
            self.settings_repo.set_seen_milestones(self.evaluator.persisted_state())
        except SQLAlchemyError:
            logger.exception(
                "Failed to save seen milestones",
                extra={"milestones": len(self.evaluator.seen_milestones)},
            )


__all__ = ["HabitNotFoundError", "HabitTracker", "ToggleOutcome"]
