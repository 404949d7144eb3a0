"""Solo heist flow over the profile mirror, the ledger and player settings."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from random import Random
from typing import Callable, Iterable, Sequence

from . import events
from .core import HeistForecast, forecast, resolve_solo
from .exceptions import SessionLocked
from .items import newly_unlocked
from .session import ResolvedView, SessionPhase, SessionRegistry, SoloSession
from .types import CrimeMode, ItemKey, MinigameResult, PlayerProfile, Risk
from ..config import AuditConfig, SessionConfig
from ..storage.base import (
    AuditStore,
    HeistLogRecord,
    HeistLogStore,
    LedgerStore,
    ProfileStore,
    SettingsRecord,
    SettingsStore,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class HeistService:
    """Drive players through configure, minigame and resolution.

    Every mutation for one player runs under that player's lock, so fetching
    the profile, resolving, moving currency and saving never interleave for
    the same id.
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        settings_store: SettingsStore,
        ledger: LedgerStore,
        log_store: HeistLogStore,
        audit_store: AuditStore,
        event_bus: events.EventBus,
        *,
        sessions: SessionRegistry | None = None,
        session_config: SessionConfig | None = None,
        audit_config: AuditConfig | None = None,
        rng: Random | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._profiles = profile_store
        self._settings = settings_store
        self._ledger = ledger
        self._log = log_store
        self._audit_store = audit_store
        self._events = event_bus
        self._sessions = sessions or SessionRegistry()
        self._session_config = session_config or SessionConfig()
        self._audit_config = audit_config or AuditConfig()
        self._rng = rng or Random()
        self._clock = clock

    @property
    def sessions(self) -> SessionRegistry:
        return self._sessions

    async def open_session(self, user_id: int) -> SoloSession:
        """Sync the mirror with the ledger and start a fresh session with saved settings."""
        async with self._sessions.lock_for(user_id):
            current = self._sessions.get(user_id)
            if current is not None and current.phase is SessionPhase.IN_SIMON:
                raise SessionLocked("open a new session", current.phase.value)
            profile = await self._sync_profile(user_id)
            session = await self._sessions.replace(user_id)
            record = await self._settings.load(user_id)
            if record is not None:
                session.config.mode = _parse_enum(CrimeMode, record.mode)
                session.config.risk = _parse_enum(Risk, record.risk)
                session.select_items(
                    record.loadout, profile.pp, max_items=self._session_config.max_items
                )
            return session

    async def profile(self, user_id: int) -> PlayerProfile:
        async with self._sessions.lock_for(user_id):
            return await self._sync_profile(user_id)

    async def set_mode(self, user_id: int, mode: CrimeMode) -> SoloSession:
        async with self._sessions.lock_for(user_id):
            session = await self._sessions.get_or_create(user_id)
            session.set_mode(mode)
            await self._save_settings(session)
            return session

    async def set_risk(self, user_id: int, risk: Risk) -> SoloSession:
        async with self._sessions.lock_for(user_id):
            session = await self._sessions.get_or_create(user_id)
            session.set_risk(risk)
            await self._save_settings(session)
            return session

    async def select_items(self, user_id: int, keys: Iterable[ItemKey | str]) -> SoloSession:
        async with self._sessions.lock_for(user_id):
            session = await self._sessions.get_or_create(user_id)
            profile = await self._profiles.get_or_create(user_id)
            session.select_items(keys, profile.pp, max_items=self._session_config.max_items)
            await self._save_settings(session)
            return session

    async def start(self, user_id: int) -> SoloSession:
        async with self._sessions.lock_for(user_id):
            session = await self._sessions.get_or_create(user_id)
            spec = session.start(rng=self._rng, now=self._now())
            await self._save_settings(session)
            await self._events.publish(
                events.HEIST_STARTED,
                events.HeistStarted(
                    user_id=user_id,
                    config=session.base_config.copy(),
                    sequence_length=spec.length,
                ),
            )
            return session

    async def reveal(self, user_id: int) -> bool:
        async with self._sessions.lock_for(user_id):
            session = await self._sessions.get_or_create(user_id)
            return session.reveal(now=self._now())

    async def press(self, user_id: int, symbol: str) -> MinigameResult | None:
        async with self._sessions.lock_for(user_id):
            session = await self._sessions.get_or_create(user_id)
            return session.press(symbol, now=self._now())

    async def resolve(self, user_id: int) -> ResolvedView:
        async with self._sessions.lock_for(user_id):
            session = await self._sessions.get_or_create(user_id)
            session.ensure_resolvable()
            cfg = session.active_config().copy()
            mg = session.minigame_result()

            before = await self._profiles.get_or_create(user_id)
            before.balance = await self._ledger.get_balance(user_id)
            after, outcome = resolve_solo(before, cfg, mg, rng=self._rng)
            unlocked = newly_unlocked(before.pp, after.pp)
            view = ResolvedView(
                outcome=outcome,
                config=cfg,
                minigame=mg,
                before=before,
                after=after,
                newly_unlocked=unlocked,
            )
            # no store write happens before the session is resolved
            session.mark_resolved(view)

            # the ledger may floor the balance, so it has the final word
            after.balance = await self._ledger.add_balance(user_id, outcome.amount_final)
            await self._profiles.save(after)

            await self._log.add_record(
                HeistLogRecord(
                    user_id=user_id,
                    timestamp=datetime.now(timezone.utc),
                    mode=cfg.resolved_mode().value,
                    risk=cfg.resolved_risk().value,
                    items=[item.value for item in cfg.items],
                    minigame=mg.outcome.value,
                    success=outcome.success,
                    amount=outcome.amount_final,
                    heat_delta=outcome.heat_delta,
                )
            )
            await self._audit(
                "heist_resolved",
                {
                    "user_id": user_id,
                    "success": outcome.success,
                    "amount": outcome.amount_final,
                    "heat_delta": outcome.heat_delta,
                    "balance": after.balance,
                },
            )
            logger.info(
                "Heist for %s %s: %+d, heat %+d (mode=%s risk=%s minigame=%s)",
                user_id,
                "succeeded" if outcome.success else "failed",
                outcome.amount_final,
                outcome.heat_delta,
                cfg.resolved_mode().value,
                cfg.resolved_risk().value,
                mg.outcome.value,
            )

            await self._events.publish(
                events.HEIST_RESOLVED,
                events.HeistResolved(
                    user_id=user_id,
                    config=cfg,
                    minigame=mg,
                    before=before,
                    after=replace(after),
                    outcome=outcome,
                ),
            )
            if unlocked:
                await self._events.publish(
                    events.ITEMS_UNLOCKED,
                    events.ItemsUnlocked(user_id=user_id, items=tuple(unlocked), pp=after.pp),
                )
            return view

    async def reset(self, user_id: int) -> SoloSession:
        async with self._sessions.lock_for(user_id):
            session = await self._sessions.get_or_create(user_id)
            session.reset()
            return session

    async def forecast(self, user_id: int) -> HeistForecast:
        async with self._sessions.lock_for(user_id):
            session = await self._sessions.get_or_create(user_id)
            profile = await self._profiles.get_or_create(user_id)
            return forecast(profile, session.active_config())

    async def history(self, user_id: int, limit: int | None = None) -> Sequence[HeistLogRecord]:
        return await self._log.recent_for_user(
            user_id, limit or self._session_config.history_limit
        )

    async def _sync_profile(self, user_id: int) -> PlayerProfile:
        profile = await self._profiles.get_or_create(user_id)
        profile.balance = await self._ledger.get_balance(user_id)
        await self._profiles.save(profile)
        return profile

    async def _save_settings(self, session: SoloSession) -> None:
        cfg = session.active_config()
        await self._settings.save(
            SettingsRecord(
                user_id=session.user_id,
                mode=cfg.mode.value if cfg.mode else None,
                risk=cfg.risk.value if cfg.risk else None,
                loadout=[item.value for item in cfg.items],
            )
        )

    async def _audit(self, action: str, payload: dict) -> None:
        if not self._audit_config.enabled:
            return
        await self._audit_store.add_entry(
            action,
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "channel_id": self._audit_config.log_channel_id,
                **payload,
            },
        )

    def _now(self) -> float | None:
        return self._clock() if self._clock else None


def _parse_enum(enum_cls, value: str | None):
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Ignoring unknown stored %s '%s'", enum_cls.__name__, value)
        return None
