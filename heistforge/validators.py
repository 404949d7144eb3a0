"""Validation utilities for HeistForge configuration."""

from __future__ import annotations

import logging

from .config import HeistForgeConfig
from .domain.items import MAX_LOADOUT

_ASYNC_DRIVERS = ("+aiosqlite", "+asyncpg", "+aiomysql", "+asyncmy")


def validate_config(config: HeistForgeConfig) -> list[str]:
    """Return list of validation errors discovered in the configuration."""
    errors: list[str] = []

    if config.storage.backend not in ("memory", "sqlalchemy"):
        errors.append(f"Unsupported storage backend '{config.storage.backend}'.")
    if config.storage.backend == "sqlalchemy":
        dsn = config.storage.resolve_dsn() or ""
        if not any(driver in dsn.split("://", 1)[0] for driver in _ASYNC_DRIVERS):
            errors.append(f"Storage DSN '{dsn}' does not use an async driver.")
    elif config.storage.dsn:
        errors.append("Storage DSN is set but the memory backend ignores it.")

    if not 1 <= config.session.max_items <= MAX_LOADOUT:
        errors.append(
            f"Session max_items must be between 1 and {MAX_LOADOUT}, got {config.session.max_items}."
        )
    if config.session.history_limit <= 0:
        errors.append(
            f"Session history_limit must be positive, got {config.session.history_limit}."
        )

    if config.audit.log_channel_id is not None and config.audit.log_channel_id <= 0:
        errors.append(f"Audit channel id '{config.audit.log_channel_id}' is not a valid id.")
    for role_id in sorted(config.audit.admin_role_ids):
        if role_id <= 0:
            errors.append(f"Admin role id '{role_id}' is not a valid id.")

    if not isinstance(logging.getLevelName(config.log_level), int):
        errors.append(f"Unknown log level '{config.log_level}'.")
    return errors
