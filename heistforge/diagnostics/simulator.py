"""Heist balance simulation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import product
from random import Random
from typing import Iterable, Sequence

from ..domain.core import resolve_solo
from ..domain.types import (
    DEFAULT_SKILL,
    CrimeMode,
    ItemKey,
    MinigameOutcome,
    MinigameResult,
    PlayerProfile,
    Risk,
    SoloHeistConfig,
)


@dataclass(slots=True)
class SimulationResult:
    mode: CrimeMode
    risk: Risk
    items: tuple[ItemKey, ...]
    minigame: MinigameOutcome
    runs: int
    successes: int = 0
    total_amount: int = 0
    total_heat: int = 0
    biggest_win: int = 0
    biggest_loss: int = 0

    @property
    def success_rate(self) -> float:
        return self.successes / self.runs if self.runs else 0.0

    @property
    def mean_amount(self) -> float:
        return self.total_amount / self.runs if self.runs else 0.0

    @property
    def mean_heat(self) -> float:
        return self.total_heat / self.runs if self.runs else 0.0

    def merge(self, success: bool, amount: int, heat_delta: int) -> None:
        if success:
            self.successes += 1
        self.total_amount += amount
        self.total_heat += heat_delta
        self.biggest_win = max(self.biggest_win, amount)
        self.biggest_loss = min(self.biggest_loss, amount)


class HeistSimulator:
    """Monte-Carlo simulation to evaluate heist payouts per setup.

    Every run starts from the same profile, so results measure the setup
    rather than a player's progression.
    """

    def __init__(self, *, rng: Random | None = None, thief_skill: int = DEFAULT_SKILL) -> None:
        self._rng = rng or Random()
        self._thief_skill = thief_skill

    def simulate(
        self,
        mode: CrimeMode,
        risk: Risk,
        *,
        items: Iterable[ItemKey] = (),
        minigame: MinigameResult | None = None,
        runs: int = 1000,
    ) -> SimulationResult:
        if runs <= 0:
            raise ValueError("runs must be positive")
        mg = minigame or MinigameResult.not_played()
        loadout = tuple(items)
        cfg = SoloHeistConfig(mode=mode, risk=risk, items=list(loadout))
        profile = PlayerProfile(user_id=0, thief_skill=self._thief_skill)
        result = SimulationResult(
            mode=mode, risk=risk, items=loadout, minigame=mg.outcome, runs=runs
        )
        for _ in range(runs):
            _, outcome = resolve_solo(profile, cfg, mg, rng=self._rng)
            result.merge(outcome.success, outcome.amount_final, outcome.heat_delta)
        return result

    def sweep(
        self,
        *,
        modes: Sequence[CrimeMode] | None = None,
        risks: Sequence[Risk] | None = None,
        items: Iterable[ItemKey] = (),
        minigame: MinigameResult | None = None,
        runs: int = 1000,
    ) -> list[SimulationResult]:
        """Simulate every mode and risk combination with the same loadout."""
        loadout = tuple(items)
        return [
            self.simulate(mode, risk, items=loadout, minigame=minigame, runs=runs)
            for mode, risk in product(modes or list(CrimeMode), risks or list(Risk))
        ]
