"""Storage backends for HeistForge."""

from .base import (
    AuditStore,
    HeistLogRecord,
    HeistLogStore,
    LedgerStore,
    ProfileStore,
    SettingsRecord,
    SettingsStore,
)
from .memory import (
    InMemoryAuditStore,
    InMemoryHeistLogStore,
    InMemoryLedger,
    InMemoryProfileStore,
    InMemorySettingsStore,
)
from .sqlalchemy import AsyncSQLAlchemyStorage

__all__ = [
    "AuditStore",
    "HeistLogRecord",
    "HeistLogStore",
    "LedgerStore",
    "ProfileStore",
    "SettingsRecord",
    "SettingsStore",
    "InMemoryAuditStore",
    "InMemoryHeistLogStore",
    "InMemoryLedger",
    "InMemoryProfileStore",
    "InMemorySettingsStore",
    "AsyncSQLAlchemyStorage",
]
