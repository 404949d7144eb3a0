"""Per-player solo heist sessions.

A session walks through three phases: ``CONFIG`` (pick mode, risk and
loadout), ``IN_SIMON`` (reproduce the sequence) and ``RESOLVED``. Leaving a
running minigame is only possible by resolving it.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import Iterable

from . import minigames
from .exceptions import IncompleteConfig, InvalidTransition, SessionLocked
from .items import MAX_LOADOUT, aggregate, available_items
from .types import (
    CrimeMode,
    HeistOutcome,
    ItemKey,
    MinigameKind,
    MinigameResult,
    PlayerProfile,
    Risk,
    SimonSpec,
    SoloHeistConfig,
)


class SessionPhase(str, Enum):
    CONFIG = "config"
    IN_SIMON = "in_simon"
    RESOLVED = "resolved"


@dataclass(slots=True)
class ResolvedView:
    outcome: HeistOutcome
    config: SoloHeistConfig
    minigame: MinigameResult
    before: PlayerProfile
    after: PlayerProfile
    newly_unlocked: list[ItemKey] = field(default_factory=list)


def parse_item_keys(keys: Iterable[ItemKey | str]) -> list[ItemKey]:
    """Turn stored or user-supplied keys into catalog items, skipping unknown ones."""
    parsed: list[ItemKey] = []
    for key in keys:
        try:
            parsed.append(ItemKey(key))
        except ValueError:
            continue
    return parsed


@dataclass(slots=True)
class SoloSession:
    user_id: int
    phase: SessionPhase = SessionPhase.CONFIG
    config: SoloHeistConfig = field(default_factory=SoloHeistConfig)
    base_config: SoloHeistConfig = field(default_factory=SoloHeistConfig)
    spec: SimonSpec | None = None
    attempt: minigames.SimonAttempt | None = None
    reveal_until: float | None = None
    reveals_left: int = 0
    resolved: ResolvedView | None = None

    def set_mode(self, mode: CrimeMode) -> SoloHeistConfig:
        self._require(SessionPhase.CONFIG, "change mode")
        self.config.mode = mode
        return self.config

    def set_risk(self, risk: Risk) -> SoloHeistConfig:
        self._require(SessionPhase.CONFIG, "change risk")
        self.config.risk = risk
        return self.config

    def select_items(
        self,
        keys: Iterable[ItemKey | str],
        pp: int,
        *,
        max_items: int = MAX_LOADOUT,
    ) -> SoloHeistConfig:
        """Replace the loadout, dropping unknown, locked and surplus picks."""
        self._require(SessionPhase.CONFIG, "change items")
        unlocked = set(available_items(pp))
        picked: list[ItemKey] = []
        for item in parse_item_keys(keys):
            if len(picked) >= max_items:
                break
            if item in unlocked and item not in picked:
                picked.append(item)
        self.config.items = picked
        return self.config

    def start(self, *, rng: Random | None = None, now: float | None = None) -> SimonSpec:
        self._require(SessionPhase.CONFIG, "start a heist")
        if self.config.mode is None or self.config.risk is None:
            raise IncompleteConfig("Pick a mode and a risk level before starting")
        now = time.monotonic() if now is None else now

        cfg = self.config.copy()
        cfg.minigame = MinigameKind.SIMON
        effects = aggregate(cfg.items)
        spec = minigames.simon_spec_for(cfg.risk, effects.simon_seq_delta)
        sequence = minigames.gen_simon_seq(spec, rng=rng)

        self.base_config = cfg
        self.spec = spec
        self.attempt = minigames.SimonAttempt(sequence)
        self.reveals_left = minigames.simon_reveals(cfg.risk)
        self.reveal_until = now + self.preview_seconds()
        self.phase = SessionPhase.IN_SIMON
        return spec

    def preview_seconds(self) -> float:
        cfg = self.active_config()
        length = len(self.attempt.sequence) if self.attempt else 0
        time_mult = aggregate(cfg.items).simon_time_mult
        return minigames.simon_preview_ms(cfg.resolved_risk(), length, time_mult) / 1000.0

    def revealing(self, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        return self.reveal_until is not None and now < self.reveal_until

    def reveal(self, now: float | None = None) -> bool:
        """Show the sequence again; returns False when no preview can start."""
        self._require(SessionPhase.IN_SIMON, "reveal the sequence")
        now = time.monotonic() if now is None else now
        if self.attempt is None or self.attempt.finished:
            return False
        if self.revealing(now) or self.reveals_left <= 0:
            return False
        self.reveals_left -= 1
        self.reveal_until = now + self.preview_seconds()
        return True

    def press(self, symbol: str, now: float | None = None) -> MinigameResult | None:
        """Feed one symbol; input is ignored while the sequence is on screen."""
        self._require(SessionPhase.IN_SIMON, "enter symbols")
        now = time.monotonic() if now is None else now
        if self.revealing(now):
            return None
        self.reveal_until = None
        return self.attempt.press(symbol)

    def active_config(self) -> SoloHeistConfig:
        if self.phase is SessionPhase.CONFIG:
            return self.config
        return self.base_config

    def minigame_result(self) -> MinigameResult:
        if self.phase is SessionPhase.IN_SIMON and self.attempt and self.attempt.result is not None:
            return self.attempt.result
        if self.phase is SessionPhase.RESOLVED and self.resolved is not None:
            return self.resolved.minigame
        return MinigameResult.not_played()

    def ensure_resolvable(self) -> None:
        if self.phase is SessionPhase.RESOLVED:
            raise InvalidTransition("resolve", self.phase.value)

    def mark_resolved(self, view: ResolvedView) -> None:
        self.ensure_resolvable()
        self.resolved = view
        self.phase = SessionPhase.RESOLVED

    def reset(self) -> None:
        if self.phase is SessionPhase.IN_SIMON:
            raise SessionLocked("return to configuration", self.phase.value)
        self.phase = SessionPhase.CONFIG
        self.config = SoloHeistConfig()
        self.base_config = SoloHeistConfig()
        self.spec = None
        self.attempt = None
        self.reveal_until = None
        self.reveals_left = 0
        self.resolved = None

    def _require(self, phase: SessionPhase, action: str) -> None:
        if self.phase is not phase:
            raise InvalidTransition(action, self.phase.value)


class SessionRegistry:
    """Sessions and per-player locks keyed by user id."""

    def __init__(self) -> None:
        self._sessions: dict[int, SoloSession] = {}
        self._locks: dict[int, asyncio.Lock] = {}
        self._create_lock = asyncio.Lock()

    async def get_or_create(self, user_id: int) -> SoloSession:
        session = self._sessions.get(user_id)
        if session is not None:
            return session
        async with self._create_lock:
            return self._sessions.setdefault(user_id, SoloSession(user_id))

    async def replace(self, user_id: int) -> SoloSession:
        async with self._create_lock:
            session = SoloSession(user_id)
            self._sessions[user_id] = session
            return session

    def get(self, user_id: int) -> SoloSession | None:
        return self._sessions.get(user_id)

    def lock_for(self, user_id: int) -> asyncio.Lock:
        return self._locks.setdefault(user_id, asyncio.Lock())

    def __len__(self) -> int:
        return len(self._sessions)
