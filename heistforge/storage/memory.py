"""In-memory storage backend for HeistForge."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import replace
from datetime import datetime, timezone
from typing import Deque, Sequence

from ..domain.types import PlayerProfile
from .base import (
    AuditStore,
    HeistLogRecord,
    HeistLogStore,
    LedgerStore,
    ProfileStore,
    SettingsRecord,
    SettingsStore,
)


class InMemoryProfileStore(ProfileStore):
    """Profile mirror with no eviction; every player keeps a slot for the process lifetime."""

    def __init__(self) -> None:
        self._profiles: dict[int, PlayerProfile] = {}
        self._lock = threading.Lock()

    async def get_or_create(self, user_id: int) -> PlayerProfile:
        with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                profile = PlayerProfile.fresh(user_id)
                self._profiles[user_id] = profile
            return replace(profile)

    async def save(self, profile: PlayerProfile) -> None:
        with self._lock:
            self._profiles[profile.user_id] = replace(profile)

    def __len__(self) -> int:
        return len(self._profiles)


class InMemorySettingsStore(SettingsStore):
    def __init__(self) -> None:
        self._records: dict[int, SettingsRecord] = {}

    async def load(self, user_id: int) -> SettingsRecord | None:
        record = self._records.get(user_id)
        if record is None:
            return None
        return replace(record, loadout=list(record.loadout))

    async def save(self, record: SettingsRecord) -> None:
        self._records[record.user_id] = replace(record, loadout=list(record.loadout))


class InMemoryLedger(LedgerStore):
    def __init__(self, *, allow_negative: bool = False) -> None:
        self._balances: dict[int, int] = {}
        self._allow_negative = allow_negative
        self._lock = threading.Lock()

    async def get_balance(self, user_id: int) -> int:
        with self._lock:
            return self._balances.setdefault(user_id, 0)

    async def add_balance(self, user_id: int, delta: int) -> int:
        with self._lock:
            balance = self._balances.get(user_id, 0) + delta
            if not self._allow_negative:
                balance = max(0, balance)
            self._balances[user_id] = balance
            return balance


class InMemoryHeistLogStore(HeistLogStore):
    def __init__(self, *, maxlen: int = 5000) -> None:
        self._history: Deque[HeistLogRecord] = deque(maxlen=maxlen)

    async def add_record(self, record: HeistLogRecord) -> None:
        self._history.append(record)

    async def recent_for_user(self, user_id: int, limit: int = 20) -> Sequence[HeistLogRecord]:
        filtered = [rec for rec in reversed(self._history) if rec.user_id == user_id]
        return filtered[:limit]


class InMemoryAuditStore(AuditStore):
    def __init__(self, *, maxlen: int = 1000) -> None:
        self._entries: Deque[tuple[datetime, str, dict]] = deque(maxlen=maxlen)

    async def add_entry(self, action: str, payload: dict) -> None:
        self._entries.append((datetime.now(timezone.utc), action, payload))

    def dump(self) -> list[tuple[datetime, str, dict]]:
        return list(self._entries)
