"""Settings repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.settings import AppSetting


class SettingsRepository(Protocol):
    """Key/value settings plus the typed values the habit core reads."""

    def get(self, key: str) -> Optional[AppSetting]:
        ...

    def set(self, key: str, value: str, description: str | None = None) -> AppSetting:
        ...

    def delete(self, key: str) -> None:
        ...

    def get_week_start(self) -> str:
        """Return ``"monday"`` or ``"sunday"``."""
        ...

    def set_week_start(self, week_start: str) -> None:
        ...

    def get_seen_milestones(self) -> list[str]:
        """Return the milestone ids celebrations have already fired for."""
        ...

    def set_seen_milestones(self, milestones: list[str]) -> None:
        ...
