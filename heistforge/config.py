"""Configuration models for HeistForge."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

StorageBackend = Literal["memory", "sqlalchemy"]

_TRUTHY = {"1", "true", "yes"}


@dataclass(slots=True)
class StorageConfig:
    """Configure how profiles, settings and balances are persisted."""

    backend: StorageBackend = "memory"
    dsn: str | None = None
    echo_sql: bool = False

    def resolve_dsn(self) -> str | None:
        if self.dsn:
            return self.dsn
        if self.backend == "sqlalchemy":
            return "sqlite+aiosqlite:///./heistforge.db"
        return None


@dataclass(slots=True)
class LedgerConfig:
    """Currency ledger rules."""

    allow_negative: bool = False


@dataclass(slots=True)
class SessionConfig:
    """Limits applied while players configure a heist."""

    max_items: int = 3
    history_limit: int = 20


@dataclass(slots=True)
class AuditConfig:
    """Where heist results are reported and who may administer them."""

    enabled: bool = True
    log_channel_id: int | None = None
    admin_role_ids: set[int] = field(default_factory=set)


@dataclass(slots=True)
class HeistForgeConfig:
    """Top-level configuration container, built once and passed explicitly."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    rng_seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "HeistForgeConfig":
        """Create config from environment variables prefixed with HEISTFORGE_."""
        prefix = "HEISTFORGE_"
        backend = os.getenv(f"{prefix}STORAGE_BACKEND", "memory")
        if backend not in ("memory", "sqlalchemy"):
            raise ValueError(f"Unsupported {prefix}STORAGE_BACKEND '{backend}'")

        storage = StorageConfig(
            backend=backend,
            dsn=os.getenv(f"{prefix}STORAGE_DSN"),
            echo_sql=os.getenv(f"{prefix}STORAGE_ECHO_SQL", "false").lower() in _TRUTHY,
        )
        ledger = LedgerConfig(
            allow_negative=os.getenv(f"{prefix}LEDGER_ALLOW_NEGATIVE", "false").lower()
            in _TRUTHY,
        )
        session = SessionConfig(
            max_items=_int_env(f"{prefix}SESSION_MAX_ITEMS", 3),
            history_limit=_int_env(f"{prefix}SESSION_HISTORY_LIMIT", 20),
        )
        audit = AuditConfig(
            enabled=os.getenv(f"{prefix}AUDIT_ENABLED", "true").lower() in _TRUTHY,
            log_channel_id=_int_env(f"{prefix}AUDIT_LOG_CHANNEL", 0) or None,
            admin_role_ids=_id_set(os.getenv(f"{prefix}AUDIT_ADMIN_ROLE_IDS", "")),
        )
        raw_seed = os.getenv(f"{prefix}RNG_SEED")
        return cls(
            storage=storage,
            ledger=ledger,
            session=session,
            audit=audit,
            rng_seed=int(raw_seed) if raw_seed else None,
            log_level=os.getenv(f"{prefix}LOG_LEVEL", "INFO").upper(),
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from exc


def _id_set(raw: str) -> set[int]:
    ids: set[int] = set()
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            ids.add(int(chunk))
        except ValueError as exc:
            raise ValueError(f"Invalid id '{chunk}' in HEISTFORGE_AUDIT_ADMIN_ROLE_IDS") from exc
    return ids
