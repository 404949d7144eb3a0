"""Top level application object for HeistForge bots."""

from __future__ import annotations

import logging
from random import Random
from typing import Any

from .config import HeistForgeConfig
from .domain.events import EventBus
from .domain.heists import HeistService
from .domain.session import SessionRegistry
from .storage.base import AuditStore, HeistLogStore, LedgerStore, ProfileStore, SettingsStore
from .storage.memory import (
    InMemoryAuditStore,
    InMemoryHeistLogStore,
    InMemoryLedger,
    InMemoryProfileStore,
    InMemorySettingsStore,
)
from .storage.sqlalchemy import AsyncSQLAlchemyStorage

logger = logging.getLogger(__name__)


class HeistApp:
    """Central dependency container used by bots and tools."""

    def __init__(
        self,
        config: HeistForgeConfig,
        *,
        profile_store: ProfileStore | None = None,
        settings_store: SettingsStore | None = None,
        ledger: LedgerStore | None = None,
        log_store: HeistLogStore | None = None,
        audit_store: AuditStore | None = None,
        event_bus: EventBus | None = None,
        rng: Random | None = None,
    ) -> None:
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.sessions = SessionRegistry()
        self.rng = rng or (Random(config.rng_seed) if config.rng_seed is not None else Random())

        self._sqlalchemy_storage: AsyncSQLAlchemyStorage | None = None
        (
            self.profile_store,
            self.settings_store,
            self.ledger,
            self.log_store,
            self.audit_store,
        ) = self._wire_storage(profile_store, settings_store, ledger, log_store, audit_store)

        self.heists = HeistService(
            self.profile_store,
            self.settings_store,
            self.ledger,
            self.log_store,
            self.audit_store,
            self.event_bus,
            sessions=self.sessions,
            session_config=self.config.session,
            audit_config=self.config.audit,
            rng=self.rng,
        )

    def _wire_storage(
        self,
        profile_store: ProfileStore | None,
        settings_store: SettingsStore | None,
        ledger: LedgerStore | None,
        log_store: HeistLogStore | None,
        audit_store: AuditStore | None,
    ) -> tuple[ProfileStore, SettingsStore, LedgerStore, HeistLogStore, AuditStore]:
        backend = self.config.storage.backend
        allow_negative = self.config.ledger.allow_negative
        if backend == "memory":
            return (
                profile_store or InMemoryProfileStore(),
                settings_store or InMemorySettingsStore(),
                ledger or InMemoryLedger(allow_negative=allow_negative),
                log_store or InMemoryHeistLogStore(),
                audit_store or InMemoryAuditStore(),
            )
        if backend == "sqlalchemy":
            dsn = self.config.storage.resolve_dsn()
            if not dsn:
                raise ValueError("SQLAlchemy backend requires a DSN")
            storage = AsyncSQLAlchemyStorage(dsn, echo=self.config.storage.echo_sql)
            self._sqlalchemy_storage = storage
            logger.info("Using SQLAlchemy storage at %s", dsn)
            return (
                profile_store or storage.profile_store(),
                settings_store or storage.settings_store(),
                ledger or storage.ledger(allow_negative=allow_negative),
                log_store or storage.heist_log_store(),
                audit_store or storage.audit_store(),
            )
        raise ValueError(f"Unsupported storage backend {backend}")

    def snapshot(self) -> dict[str, Any]:
        """Export current configuration for debugging."""
        return {
            "storage": self.config.storage.backend,
            "allow_negative_balance": self.config.ledger.allow_negative,
            "max_items": self.config.session.max_items,
            "audit_enabled": self.config.audit.enabled,
            "active_sessions": len(self.sessions),
        }

    async def init_backend(self) -> None:
        """Initialize storage backend resources (e.g., database tables)."""
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.init_models()

    async def close(self) -> None:
        if self._sqlalchemy_storage:
            await self._sqlalchemy_storage.dispose()
