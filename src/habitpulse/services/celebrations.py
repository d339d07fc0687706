"""Celebration rules evaluated after each completion toggle."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from ..logging_config import get_logger
from .calendar import DayLike, WeekStartLike, compute_week_start, to_day, week_of
from .completions import completions_for_habit, completions_in_week, habit_ref_of, is_completed
from .streaks import calculate_habit_streak, effective_frequency

logger = get_logger(__name__)

FIRST_CHECK_MILESTONE = "global-first-habit-check"
FIRST_WEEKLY_GOAL_MILESTONE = "global-first-weekly-goal"
PERSONAL_RECORD_THRESHOLD = 3
STREAK_MILESTONE_STEP = 5


def streak_milestone_id(habit_id: str, streak: int) -> str:
    return f"habit-{habit_id}-streak-{streak}"


def habit_week_milestone_id(habit_id: str, week_start: str) -> str:
    return f"habit-{habit_id}-week-{week_start}"


def all_habits_week_milestone_id(week_start: str) -> str:
    return f"global-all-habits-week-{week_start}"


@dataclass(frozen=True, slots=True)
class CelebrationEvent:
    """A celebration the UI shows once, one card at a time."""

    id: str
    title: str
    body: str
    button_text: str
    icon: str
    habit_id: Optional[str] = None
    milestone_id: Optional[str] = None


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


class CelebrationEvaluator:
    """Decides which celebrations fire, remembering milestones already shown.

    The seen set is the evaluator's only durable state. Callers load it before
    ``check`` and persist :meth:`persisted_state` afterwards. Calls against one
    instance must be serialised.
    """

    def __init__(self, seen_milestones: Optional[Iterable[str]] = None):
        self.seen_milestones: set[str] = set(seen_milestones or ())
        self.personal_best_updates: dict[str, int] = {}
        self._known_bests: dict[str, int] = {}
        self._queue: list[CelebrationEvent] = []

    def load_state(self, milestones: Optional[Iterable[str]]) -> None:
        """Replace the seen set. ``None`` (a failed load) leaves it empty."""

        self.seen_milestones = set(milestones or ())

    def persisted_state(self) -> list[str]:
        return sorted(self.seen_milestones)

    def check(
        self,
        toggled_habit: Any,
        all_habits: Sequence[Any],
        all_completions: Sequence[Any],
        week_start: WeekStartLike,
        today: Optional[DayLike] = None,
    ) -> list[CelebrationEvent]:
        """Evaluate every rule once for a toggle of ``toggled_habit``.

        ``all_completions`` is expected in creation order; the last record of
        the toggled habit is treated as the one just added when measuring the
        streak before the toggle.
        """

        self._queue = []
        self.personal_best_updates = {}
        today_day = to_day(today) if today is not None else date.today()
        current_week_start = compute_week_start(today_day, week_start)

        habit_id = str(_field(toggled_habit, "id"))
        toggled_records = [c for c in all_completions if habit_ref_of(c) == habit_id]
        old_streak = calculate_habit_streak(toggled_habit, toggled_records[:-1], week_start, today_day)
        new_streak = calculate_habit_streak(toggled_habit, toggled_records, week_start, today_day)

        self._check_first_habit_check(all_completions)
        self._check_first_weekly_goal(toggled_habit, all_completions, current_week_start, week_start)
        self._check_new_personal_record(toggled_habit, new_streak, all_habits)
        self._check_streak_milestone(toggled_habit, new_streak, old_streak)
        self._check_weekly_single_habit(toggled_habit, all_completions, current_week_start, week_start)
        self._check_weekly_all_habits(all_habits, all_completions, current_week_start, week_start)
        self._check_daily_goal_complete(all_habits, all_completions, today_day)

        if self._queue:
            logger.info(
                "Celebrations queued",
                extra={"habit_id": habit_id, "events": [e.id for e in self._queue]},
            )
        return list(self._queue)

    # Internal helpers -------------------------------------------------
    def _enqueue(self, event: CelebrationEvent) -> None:
        if not any(queued.id == event.id for queued in self._queue):
            self._queue.append(event)

    def _mark(self, milestone_id: str) -> bool:
        """Record ``milestone_id``; False when it had already been seen."""

        if milestone_id in self.seen_milestones:
            return False
        self.seen_milestones.add(milestone_id)
        return True

    @staticmethod
    def _week_count(habit: Any, all_completions: Iterable[Any], week_start_str: str, week_start: WeekStartLike) -> int:
        week = week_of(week_start_str, week_start)
        days = completions_for_habit(_field(habit, "id"), all_completions)
        return len(completions_in_week(days, week))

    def _check_first_habit_check(self, all_completions: Sequence[Any]) -> None:
        done = [c for c in all_completions if is_completed(c)]
        if len(done) == 1 and self._mark(FIRST_CHECK_MILESTONE):
            self._enqueue(
                CelebrationEvent(
                    id="first-habit-check",
                    title="You're On the Board!",
                    body="Your first habit is checked. Keep that momentum going!",
                    button_text="Let's Go",
                    icon="PartyPopper",
                    milestone_id=FIRST_CHECK_MILESTONE,
                )
            )

    def _check_first_weekly_goal(self, habit, all_completions, week_start_str, week_start) -> None:
        if FIRST_WEEKLY_GOAL_MILESTONE in self.seen_milestones:
            return
        frequency = effective_frequency(habit)
        if self._week_count(habit, all_completions, week_start_str, week_start) < frequency:
            return
        self._mark(FIRST_WEEKLY_GOAL_MILESTONE)
        self._enqueue(
            CelebrationEvent(
                id="first-weekly-goal",
                title="First Weekly Win!",
                body=f"First time finishing {frequency}/{frequency} on {_field(habit, 'name')}. Way to start strong!",
                button_text="Let's Roll",
                icon="Rocket",
                habit_id=str(_field(habit, "id")),
                milestone_id=FIRST_WEEKLY_GOAL_MILESTONE,
            )
        )

    def _check_new_personal_record(self, habit, new_streak: int, all_habits) -> None:
        habit_id = str(_field(habit, "id"))
        stored = next((h for h in all_habits if str(_field(h, "id")) == habit_id), habit)
        personal_best = max(
            int(_field(stored, "personal_best_streak") or 0),
            self._known_bests.get(habit_id, 0),
        )
        if new_streak <= personal_best:
            return
        self._known_bests[habit_id] = new_streak
        self.personal_best_updates[habit_id] = new_streak
        if new_streak > PERSONAL_RECORD_THRESHOLD:
            self._enqueue(
                CelebrationEvent(
                    id="new-personal-record",
                    title="New Record!",
                    body=f"Your longest ever for {_field(habit, 'name')}: {new_streak} days!",
                    button_text="Woohoo!",
                    icon="Sparkles",
                    habit_id=habit_id,
                )
            )

    def _check_streak_milestone(self, habit, new_streak: int, old_streak: int) -> None:
        if not (new_streak > old_streak and new_streak > 0 and new_streak % STREAK_MILESTONE_STEP == 0):
            return
        habit_id = str(_field(habit, "id"))
        milestone_id = streak_milestone_id(habit_id, new_streak)
        if self._mark(milestone_id):
            self._enqueue(
                CelebrationEvent(
                    id="streak-milestone",
                    title=f"{new_streak}-Day Streak!",
                    body=f"You're crushing {_field(habit, 'name')}: {new_streak} days straight!",
                    button_text="Keep It Up",
                    icon="Target",
                    habit_id=habit_id,
                    milestone_id=milestone_id,
                )
            )

    def _check_weekly_single_habit(self, habit, all_completions, week_start_str, week_start) -> None:
        frequency = effective_frequency(habit)
        if frequency < 2:
            return
        if self._week_count(habit, all_completions, week_start_str, week_start) < frequency:
            return
        habit_id = str(_field(habit, "id"))
        milestone_id = habit_week_milestone_id(habit_id, week_start_str)
        if self._mark(milestone_id):
            self._enqueue(
                CelebrationEvent(
                    id="weekly-single-habit",
                    title="Weekly Win!",
                    body=f"You've completed {frequency}/{frequency} for {_field(habit, 'name')} this week.",
                    button_text="Sweet!",
                    icon="Flame",
                    habit_id=habit_id,
                    milestone_id=milestone_id,
                )
            )

    def _check_weekly_all_habits(self, all_habits, all_completions, week_start_str, week_start) -> None:
        if not all_habits:
            return
        all_met = all(
            self._week_count(h, all_completions, week_start_str, week_start) >= effective_frequency(h)
            for h in all_habits
        )
        if not all_met:
            return
        milestone_id = all_habits_week_milestone_id(week_start_str)
        if self._mark(milestone_id):
            self._enqueue(
                CelebrationEvent(
                    id="weekly-all-habits",
                    title="All-Around Champion!",
                    body="Every habit is in the green this week. Keep the streak alive!",
                    button_text="Awesome!",
                    icon="Trophy",
                    milestone_id=milestone_id,
                )
            )

    def _check_daily_goal_complete(self, all_habits, all_completions, today_day: date) -> None:
        # Not guarded by a milestone: fires on every check once all habits are done today.
        if len(all_habits) < 2:
            return
        today_str = today_day.isoformat()
        done_today = {
            habit_ref_of(c)
            for c in all_completions
            if is_completed(c) and _field(c, "completion_date") == today_str
        }
        if all(str(_field(h, "id")) in done_today for h in all_habits):
            self._enqueue(
                CelebrationEvent(
                    id="daily-goal-complete",
                    title="Daily Goal Achieved!",
                    body="You've knocked out every habit today. See you tomorrow!",
                    button_text="Great!",
                    icon="Sun",
                )
            )


__all__ = [
    "CelebrationEvaluator",
    "CelebrationEvent",
    "all_habits_week_milestone_id",
    "habit_week_milestone_id",
    "streak_milestone_id",
]
