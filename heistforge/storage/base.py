"""Storage abstractions used by the HeistForge services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, Sequence

from ..domain.types import PlayerProfile


@dataclass(slots=True)
class SettingsRecord:
    """Last heist options a player picked, stored as catalog keys."""

    user_id: int
    mode: str | None = None
    risk: str | None = None
    loadout: list[str] = field(default_factory=list)


@dataclass(slots=True)
class HeistLogRecord:
    user_id: int
    timestamp: datetime
    mode: str
    risk: str
    items: Sequence[str]
    minigame: str
    success: bool
    amount: int
    heat_delta: int


class ProfileStore(Protocol):
    """Keyed mirror of player profiles.

    ``get_or_create`` must insert at most one default profile per id under
    concurrent first access and always hands out a copy; ``save`` is a
    last-writer-wins upsert keyed by ``profile.user_id``.
    """

    async def get_or_create(self, user_id: int) -> PlayerProfile:
        ...

    async def save(self, profile: PlayerProfile) -> None:
        ...


class SettingsStore(Protocol):
    async def load(self, user_id: int) -> SettingsRecord | None:
        ...

    async def save(self, record: SettingsRecord) -> None:
        ...


class LedgerStore(Protocol):
    """Durable currency balances; the source of truth for ``balance``."""

    async def get_balance(self, user_id: int) -> int:
        ...

    async def add_balance(self, user_id: int, delta: int) -> int:
        """Apply ``delta`` atomically and return the balance afterwards."""
        ...


class HeistLogStore(Protocol):
    async def add_record(self, record: HeistLogRecord) -> None:
        ...

    async def recent_for_user(self, user_id: int, limit: int = 20) -> Sequence[HeistLogRecord]:
        ...


class AuditStore(Protocol):
    async def add_entry(self, action: str, payload: dict) -> None:
        ...
