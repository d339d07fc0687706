"""Settings repository for app-level key/value pairs."""

from __future__ import annotations

import json
from typing import Callable, Optional

from sqlmodel import Session, select

from ...config import WEEK_START_CHOICES
from ...models.settings import AppSetting

WEEK_START_KEY = "week_start"
SEEN_MILESTONES_KEY = "seen_milestones"


class SQLModelSettingsRepository:
    """SQLModel-based settings repository."""

    def __init__(self, session_factory: Callable[[], Session], default_week_start: str = "monday"):
        self.session_factory = session_factory
        self.default_week_start = default_week_start

    def get(self, key: str) -> Optional[AppSetting]:
        with self.session_factory() as session:
            setting = session.exec(select(AppSetting).where(AppSetting.key == key)).first()
            if setting:
                session.expunge(setting)
            return setting

    def set(self, key: str, value: str, description: str | None = None) -> AppSetting:
        with self.session_factory() as session:
            setting = session.exec(select(AppSetting).where(AppSetting.key == key)).first()
            if setting:
                setting.value = value
                setting.description = description
            else:
                setting = AppSetting(key=key, value=value, description=description)
            session.add(setting)
            session.commit()
            session.refresh(setting)
            session.expunge(setting)
            return setting

    def delete(self, key: str) -> None:
        with self.session_factory() as session:
            setting = session.exec(select(AppSetting).where(AppSetting.key == key)).first()
            if setting:
                session.delete(setting)
                session.commit()

    def get_week_start(self) -> str:
        setting = self.get(WEEK_START_KEY)
        if setting is None or setting.value not in WEEK_START_CHOICES:
            return self.default_week_start
        return setting.value

    def set_week_start(self, week_start: str) -> None:
        value = week_start.strip().lower()
        if value not in WEEK_START_CHOICES:
            raise ValueError(f"week start must be one of {WEEK_START_CHOICES}, got {week_start!r}")
        self.set(WEEK_START_KEY, value, description="First day of the week")

    def get_seen_milestones(self) -> list[str]:
        """Return stored milestone ids.

        Raises:
            ValueError: when the stored value is not a JSON list.
        """
        setting = self.get(SEEN_MILESTONES_KEY)
        if setting is None:
            return []
        milestones = json.loads(setting.value)
        if not isinstance(milestones, list):
            raise ValueError(f"{SEEN_MILESTONES_KEY} must hold a JSON list")
        return [str(m) for m in milestones]

    def set_seen_milestones(self, milestones: list[str]) -> None:
        self.set(
            SEEN_MILESTONES_KEY,
            json.dumps(sorted(milestones)),
            description="Celebration milestones already shown",
        )


__all__ = ["SQLModelSettingsRepository"]
