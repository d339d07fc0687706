"""Tests for the habit tracker service against SQLite-backed repositories."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy.exc import OperationalError

from habitpulse.services.celebrations import CelebrationEvaluator
from habitpulse.services.habits import HabitNotFoundError, HabitTracker
from habitpulse.services.streaks import StreakResult


@pytest.fixture
def tracker(habit_repo, settings_repo):
    return HabitTracker(habit_repo, settings_repo, CelebrationEvaluator())


class _SaveFailingSettings:
    """Settings repository whose milestone writes always fail."""

    def __init__(self, inner):
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def set_seen_milestones(self, milestones):
        raise OperationalError("UPDATE app_setting", {}, Exception("disk I/O error"))


class TestToggleCompletion:
    def test_first_toggle_creates_completion_and_celebrates(self, tracker, habit_factory, habit_repo, settings_repo):
        habit = habit_factory(frequency=3, created="2024-01-08")

        outcome = tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")

        assert outcome.completed
        assert outcome.completion.completion_date == "2024-01-10"
        assert outcome.streak.current_streak == 1
        assert [e.id for e in outcome.celebrations] == ["first-habit-check"]
        assert settings_repo.get_seen_milestones() == ["global-first-habit-check"]
        assert habit_repo.get_by_id(habit.id).personal_best_streak == 1

    def test_second_toggle_removes_completion(self, tracker, habit_factory, habit_repo):
        habit = habit_factory(frequency=3, created="2024-01-08")
        tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")

        outcome = tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")

        assert not outcome.completed
        assert outcome.completion is None
        assert outcome.streak == StreakResult(0, None, None)
        assert outcome.celebrations == []
        assert habit_repo.list_completions(habit.id) == []

    def test_goal_habit_completes_when_progress_reaches_goal(self, tracker, habit_factory, habit_repo):
        habit = habit_factory(frequency=1, created="2024-01-08", daily_goal=2)

        first = tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")
        assert not first.completed
        assert first.completion.progress_count == 1
        assert first.celebrations == []
        assert first.streak.current_streak == 0

        second = tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")
        assert second.completed
        assert second.completion.progress_count == 2
        assert "first-habit-check" in [e.id for e in second.celebrations]

        third = tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")
        assert third.completion is None
        assert habit_repo.get_completion(habit.id, "2024-01-10") is None

    def test_unknown_habit(self, tracker):
        with pytest.raises(HabitNotFoundError):
            tracker.toggle_completion("missing", "2024-01-10")

    def test_corrupt_milestones_are_logged_and_replaced(self, tracker, habit_factory, settings_repo, caplog):
        settings_repo.set("seen_milestones", "{oops")
        habit = habit_factory(frequency=3, created="2024-01-08")

        with caplog.at_level(logging.ERROR, logger="habitpulse"):
            outcome = tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")

        assert [e.id for e in outcome.celebrations] == ["first-habit-check"]
        assert "Failed to load seen milestones" in caplog.text
        assert settings_repo.get_seen_milestones() == ["global-first-habit-check"]

    def test_save_failure_does_not_block_celebrations(self, habit_repo, settings_repo, habit_factory, caplog):
        tracker = HabitTracker(habit_repo, _SaveFailingSettings(settings_repo))
        habit = habit_factory(frequency=3, created="2024-01-08")

        with caplog.at_level(logging.ERROR, logger="habitpulse"):
            outcome = tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")

        assert [e.id for e in outcome.celebrations] == ["first-habit-check"]
        assert "Failed to save seen milestones" in caplog.text


class TestDecrementProgress:
    def test_decrement_then_delete_at_zero(self, tracker, habit_factory, habit_repo):
        habit = habit_factory(daily_goal=3)
        tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")
        tracker.toggle_completion(habit.id, "2024-01-10", today="2024-01-10")

        remaining = tracker.decrement_progress(habit.id, "2024-01-10")
        assert remaining.progress_count == 1
        assert not remaining.completed

        assert tracker.decrement_progress(habit.id, "2024-01-10") is None
        assert habit_repo.get_completion(habit.id, "2024-01-10") is None

    def test_decrement_without_record(self, tracker, habit_factory):
        habit = habit_factory()
        assert tracker.decrement_progress(habit.id, "2024-01-10") is None


class TestStreaks:
    def test_streak_for_stored_habit(self, tracker, habit_factory, completion_factory):
        habit = habit_factory(frequency=3, created="2024-01-01")
        for day in ("2024-01-01", "2024-01-02", "2024-01-03", "2024-01-08"):
            completion_factory(habit, day)
        completion_factory(habit, "2024-01-09", completed=False)

        result = tracker.streak_for(habit.id, today="2024-01-08")

        assert result == StreakResult(4, None, "2024-01-01")

    def test_streaks_for_all_habits_follow_week_start(self, tracker, habit_factory, completion_factory, settings_repo):
        read = habit_factory(name="Read", frequency=3, created="2024-01-07")
        walk = habit_factory(name="Walk", frequency=1, created="2024-01-07")
        completion_factory(read, "2024-01-07")

        settings_repo.set_week_start("sunday")
        results = tracker.streaks(today="2024-01-14")

        assert results[read.id] == StreakResult(0, "2024-01-13", None)
        assert results[walk.id] == StreakResult(0, None, None)
