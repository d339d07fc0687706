"""SQLModel implementation of Task repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.task import Task, TaskTab


class SQLModelTaskRepository:
    """SQLModel-based task repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def list_tabs(self) -> list[TaskTab]:
        with self.session_factory() as session:
            rows = list(
                session.exec(select(TaskTab).order_by(TaskTab.sort_order, TaskTab.created_date)).all()  # type: ignore
            )
            session.expunge_all()
            return rows

    def create_tab(self, tab: TaskTab) -> TaskTab:
        with self.session_factory() as session:
            session.add(tab)
            session.commit()
            session.refresh(tab)
            session.expunge(tab)
            return tab

    def delete_tab(self, tab_id: str) -> None:
        with self.session_factory() as session:
            for task in session.exec(select(Task).where(Task.tab_id == tab_id)).all():
                session.delete(task)
            tab = session.get(TaskTab, tab_id)
            if tab:
                session.delete(tab)
            session.commit()

    def get_task(self, task_id: str) -> Optional[Task]:
        with self.session_factory() as session:
            obj = session.get(Task, task_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_tasks(self, tab_id: str) -> list[Task]:
        with self.session_factory() as session:
            statement = select(Task).where(Task.tab_id == tab_id).order_by(Task.created_date)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create_task(self, task: Task) -> Task:
        with self.session_factory() as session:
            session.add(task)
            session.commit()
            session.refresh(task)
            session.expunge(task)
            return task

    def update_task(self, task: Task) -> Task:
        with self.session_factory() as session:
            merged = session.merge(task)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete_task(self, task_id: str) -> None:
        with self.session_factory() as session:
            task = session.get(Task, task_id)
            if task:
                session.delete(task)
                session.commit()


__all__ = ["SQLModelTaskRepository"]
