"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.habit import Habit, HabitCompletion


class HabitRepository(Protocol):
    """Record store for habits and their completion records."""

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self) -> list[Habit]:
        """List habits in display order."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: str) -> None:
        """Delete a habit and its completions."""
        ...

    # Completion operations
    def get_completion(self, habit_id: str, completion_date: str) -> Optional[HabitCompletion]:
        """Get the completion record of a habit for one day."""
        ...

    def list_completions(self, habit_id: Optional[str] = None) -> list[HabitCompletion]:
        """List completion records in creation order, optionally for one habit."""
        ...

    def create_completion(self, completion: HabitCompletion) -> HabitCompletion:
        """Create a completion record."""
        ...

    def update_completion(self, completion: HabitCompletion) -> HabitCompletion:
        """Update a completion record."""
        ...

    def delete_completion(self, completion_id: str) -> None:
        """Delete a completion record."""
        ...
