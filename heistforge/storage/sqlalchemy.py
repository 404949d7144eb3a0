"""SQLAlchemy storage backend for HeistForge."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Sequence

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, Integer, String, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..domain.types import DEFAULT_SKILL, PlayerProfile
from .base import (
    AuditStore,
    HeistLogRecord,
    HeistLogStore,
    LedgerStore,
    ProfileStore,
    SettingsRecord,
    SettingsStore,
)


class Base(DeclarativeBase):
    pass


class ProfileTable(Base):
    __tablename__ = "heist_profiles"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    heat: Mapped[int] = mapped_column(Integer, default=0)
    pp: Mapped[int] = mapped_column(Integer, default=0)
    thief_skill: Mapped[int] = mapped_column(Integer, default=DEFAULT_SKILL)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class SettingsTable(Base):
    __tablename__ = "heist_settings"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    mode: Mapped[str | None] = mapped_column(String(32), nullable=True)
    risk: Mapped[str | None] = mapped_column(String(32), nullable=True)
    loadout: Mapped[list] = mapped_column(JSON, default=list)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class LedgerTable(Base):
    __tablename__ = "heist_ledger"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    balance: Mapped[int] = mapped_column(BigInteger, default=0)


class HeistLogTable(Base):
    __tablename__ = "heist_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    mode: Mapped[str] = mapped_column(String(32))
    risk: Mapped[str] = mapped_column(String(32))
    items: Mapped[list] = mapped_column(JSON)
    minigame: Mapped[str] = mapped_column(String(32))
    success: Mapped[bool] = mapped_column(Boolean)
    amount: Mapped[int] = mapped_column(BigInteger)
    heat_delta: Mapped[int] = mapped_column(Integer)


class AuditTable(Base):
    __tablename__ = "heist_audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    action: Mapped[str] = mapped_column(String(128))
    payload: Mapped[dict] = mapped_column(JSON)


class AsyncSQLAlchemyStorage:
    """Bundle of async stores backed by SQLAlchemy."""

    def __init__(self, dsn: str, *, echo: bool = False) -> None:
        self._engine = create_async_engine(dsn, echo=echo, future=True)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            yield session

    async def init_models(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()

    def profile_store(self) -> "AsyncSQLAlchemyProfileStore":
        return AsyncSQLAlchemyProfileStore(self._session_factory)

    def settings_store(self) -> "AsyncSQLAlchemySettingsStore":
        return AsyncSQLAlchemySettingsStore(self._session_factory)

    def ledger(self, *, allow_negative: bool = False) -> "AsyncSQLAlchemyLedger":
        return AsyncSQLAlchemyLedger(self._session_factory, allow_negative=allow_negative)

    def heist_log_store(self) -> "AsyncSQLAlchemyHeistLogStore":
        return AsyncSQLAlchemyHeistLogStore(self._session_factory)

    def audit_store(self) -> "AsyncSQLAlchemyAuditStore":
        return AsyncSQLAlchemyAuditStore(self._session_factory)


class AsyncSQLAlchemyProfileStore(ProfileStore):
    """Durable profiles. ``balance`` lives in the ledger and is returned as 0."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_or_create(self, user_id: int) -> PlayerProfile:
        async with self._session_factory() as session:
            row = await session.get(ProfileTable, user_id)
            if row is None:
                row = ProfileTable(
                    user_id=user_id,
                    heat=0,
                    pp=0,
                    thief_skill=DEFAULT_SKILL,
                    updated_at=datetime.now(timezone.utc),
                )
                session.add(row)
                try:
                    await session.commit()
                except IntegrityError:
                    # Another writer inserted the row first.
                    await session.rollback()
                    row = await session.get(ProfileTable, user_id)
            return PlayerProfile(
                user_id=row.user_id,
                heat=row.heat,
                pp=row.pp,
                thief_skill=row.thief_skill,
            )

    async def save(self, profile: PlayerProfile) -> None:
        now = datetime.now(timezone.utc)
        async with self._session_factory() as session:
            stmt = (
                update(ProfileTable)
                .where(ProfileTable.user_id == profile.user_id)
                .values(
                    heat=profile.heat,
                    pp=profile.pp,
                    thief_skill=profile.thief_skill,
                    updated_at=now,
                )
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                session.add(
                    ProfileTable(
                        user_id=profile.user_id,
                        heat=profile.heat,
                        pp=profile.pp,
                        thief_skill=profile.thief_skill,
                        updated_at=now,
                    )
                )
            await session.commit()


class AsyncSQLAlchemySettingsStore(SettingsStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load(self, user_id: int) -> SettingsRecord | None:
        async with self._session_factory() as session:
            row = await session.get(SettingsTable, user_id)
            if row is None:
                return None
            return SettingsRecord(
                user_id=row.user_id,
                mode=row.mode,
                risk=row.risk,
                loadout=list(row.loadout or []),
            )

    async def save(self, record: SettingsRecord) -> None:
        now = datetime.now(timezone.utc)
        async with self._session_factory() as session:
            row = await session.get(SettingsTable, record.user_id)
            if row is None:
                session.add(
                    SettingsTable(
                        user_id=record.user_id,
                        mode=record.mode,
                        risk=record.risk,
                        loadout=list(record.loadout),
                        updated_at=now,
                    )
                )
            else:
                row.mode = record.mode
                row.risk = record.risk
                row.loadout = list(record.loadout)
                row.updated_at = now
            await session.commit()


class AsyncSQLAlchemyLedger(LedgerStore):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        allow_negative: bool = False,
    ) -> None:
        self._session_factory = session_factory
        self._allow_negative = allow_negative

    async def get_balance(self, user_id: int) -> int:
        async with self._session_factory() as session:
            row = await session.get(LedgerTable, user_id)
            return row.balance if row else 0

    async def add_balance(self, user_id: int, delta: int) -> int:
        async with self._session_factory() as session:
            async with session.begin():
                stmt = select(LedgerTable).where(LedgerTable.user_id == user_id).with_for_update()
                row = (await session.execute(stmt)).scalar_one_or_none()
                if row is None:
                    row = LedgerTable(user_id=user_id, balance=0)
                    session.add(row)
                balance = row.balance + delta
                if not self._allow_negative:
                    balance = max(0, balance)
                row.balance = balance
            return balance


class AsyncSQLAlchemyHeistLogStore(HeistLogStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_record(self, record: HeistLogRecord) -> None:
        async with self._session_factory() as session:
            session.add(
                HeistLogTable(
                    user_id=record.user_id,
                    timestamp=record.timestamp,
                    mode=record.mode,
                    risk=record.risk,
                    items=list(record.items),
                    minigame=record.minigame,
                    success=record.success,
                    amount=record.amount,
                    heat_delta=record.heat_delta,
                )
            )
            await session.commit()

    async def recent_for_user(self, user_id: int, limit: int = 20) -> Sequence[HeistLogRecord]:
        async with self._session_factory() as session:
            stmt = (
                select(HeistLogTable)
                .where(HeistLogTable.user_id == user_id)
                .order_by(HeistLogTable.timestamp.desc(), HeistLogTable.id.desc())
                .limit(limit)
            )
            rows = (await session.execute(stmt)).scalars().all()
            return [
                HeistLogRecord(
                    user_id=row.user_id,
                    timestamp=row.timestamp,
                    mode=row.mode,
                    risk=row.risk,
                    items=list(row.items),
                    minigame=row.minigame,
                    success=row.success,
                    amount=row.amount,
                    heat_delta=row.heat_delta,
                )
                for row in rows
            ]


class AsyncSQLAlchemyAuditStore(AuditStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add_entry(self, action: str, payload: dict) -> None:
        async with self._session_factory() as session:
            session.add(
                AuditTable(
                    created_at=datetime.now(timezone.utc),
                    action=action,
                    payload=dict(payload),
                )
            )
            await session.commit()
