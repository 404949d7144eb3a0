from heistforge.config import (
    AuditConfig,
    HeistForgeConfig,
    SessionConfig,
    StorageConfig,
)
from heistforge.validators import validate_config


def test_default_config_is_valid():
    assert validate_config(HeistForgeConfig()) == []


def test_default_sqlalchemy_dsn_is_valid():
    config = HeistForgeConfig(storage=StorageConfig(backend="sqlalchemy"))
    assert validate_config(config) == []


def test_sync_driver_is_reported():
    config = HeistForgeConfig(
        storage=StorageConfig(backend="sqlalchemy", dsn="postgresql://db/heists")
    )
    errors = validate_config(config)
    assert len(errors) == 1
    assert "async driver" in errors[0]


def test_every_problem_is_listed():
    config = HeistForgeConfig(
        storage=StorageConfig(dsn="sqlite+aiosqlite:///x.db"),
        session=SessionConfig(max_items=5, history_limit=0),
        audit=AuditConfig(log_channel_id=-1, admin_role_ids={0, 7}),
        log_level="LOUD",
    )
    errors = validate_config(config)
    assert len(errors) == 6
    assert any("memory backend ignores" in err for err in errors)
    assert any("max_items" in err for err in errors)
    assert any("history_limit" in err for err in errors)
    assert any("LOUD" in err for err in errors)
