"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.habit import Habit, HabitCompletion


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self) -> list[Habit]:
        """List habits in display order."""
        with self.session_factory() as session:
            statement = select(Habit).order_by(Habit.sort_order, Habit.created_date)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, habit_id: str) -> None:
        """Delete a habit by ID, removing its completions first."""
        with self.session_factory() as session:
            for completion in session.exec(
                select(HabitCompletion).where(HabitCompletion.habit_id == habit_id)
            ).all():
                session.delete(completion)
            habit = session.get(Habit, habit_id)
            if habit:
                session.delete(habit)
            session.commit()

    # Completion operations
    def get_completion(self, habit_id: str, completion_date: str) -> Optional[HabitCompletion]:
        """Get the completion record of a habit for one day."""
        with self.session_factory() as session:
            statement = (
                select(HabitCompletion)
                .where(HabitCompletion.habit_id == habit_id)
                .where(HabitCompletion.completion_date == completion_date)
            )
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_completions(self, habit_id: Optional[str] = None) -> list[HabitCompletion]:
        """List completion records in creation order, optionally for one habit."""
        with self.session_factory() as session:
            statement = select(HabitCompletion).order_by(
                HabitCompletion.created_date, HabitCompletion.id  # type: ignore
            )
            if habit_id is not None:
                statement = statement.where(HabitCompletion.habit_id == habit_id)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create_completion(self, completion: HabitCompletion) -> HabitCompletion:
        """Create a completion record."""
        with self.session_factory() as session:
            session.add(completion)
            session.commit()
            session.refresh(completion)
            session.expunge(completion)
            return completion

    def update_completion(self, completion: HabitCompletion) -> HabitCompletion:
        """Update a completion record."""
        with self.session_factory() as session:
            merged = session.merge(completion)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete_completion(self, completion_id: str) -> None:
        """Delete a completion record."""
        with self.session_factory() as session:
            completion = session.get(HabitCompletion, completion_id)
            if completion:
                session.delete(completion)
                session.commit()


__all__ = ["SQLModelHabitRepository"]
