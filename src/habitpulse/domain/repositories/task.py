"""Task repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.task import Task, TaskTab


class TaskRepository(Protocol):
    """Record store for task tabs and tasks."""

    def list_tabs(self) -> list[TaskTab]:
        ...

    def create_tab(self, tab: TaskTab) -> TaskTab:
        ...

    def delete_tab(self, tab_id: str) -> None:
        """Delete a tab and every task in it."""
        ...

    def get_task(self, task_id: str) -> Optional[Task]:
        ...

    def list_tasks(self, tab_id: str) -> list[Task]:
        ...

    def create_task(self, task: Task) -> Task:
        ...

    def update_task(self, task: Task) -> Task:
        ...

    def delete_task(self, task_id: str) -> None:
        ...
