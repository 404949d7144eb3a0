"""Risk and reward tuning: base chances, payouts and the HEAT escalation model.

Everything here is a pure function of mode, risk and heat. Heat is bucketed
into five bands whose baseline penalties are scaled by the chosen risk tier
and play style, so both choices compound the punishment of a hot player
instead of overriding it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .types import CrimeMode, Risk

_RISK_BASE_CHANCE = {
    Risk.LOW: 62.0,
    Risk.MEDIUM: 52.0,
    Risk.HIGH: 42.0,
    Risk.HARDCORE: 32.0,
}

_MODE_CHANCE_BUMP = {
    CrimeMode.STANDARD: 0.0,
    CrimeMode.SZYBKI: -3.0,
    CrimeMode.OSTROZNY: 3.0,
    CrimeMode.SHADOW: 2.0,
    CrimeMode.HARDCORE: -6.0,
    CrimeMode.RYZYKOWNY: -4.0,
    CrimeMode.PLANOWANY: 4.0,
    CrimeMode.SZALONY: -8.0,
}

_RISK_REWARD = {
    Risk.LOW: (300, 600),
    Risk.MEDIUM: (600, 1200),
    Risk.HIGH: (1200, 2400),
    Risk.HARDCORE: (2400, 4200),
}

_MODE_REWARD_BUMP_PCT = {
    CrimeMode.PLANOWANY: 115,
    CrimeMode.SHADOW: 115,
    CrimeMode.OSTROZNY: 105,
    CrimeMode.STANDARD: 100,
    CrimeMode.RYZYKOWNY: 110,
    CrimeMode.SZYBKI: 95,
    CrimeMode.HARDCORE: 120,
    CrimeMode.SZALONY: 125,
}

_RISK_HEAT = {
    Risk.LOW: 4,
    Risk.MEDIUM: 7,
    Risk.HIGH: 10,
    Risk.HARDCORE: 14,
}


def base_chance(mode: CrimeMode, risk: Risk) -> float:
    """Base success chance in percentage points, within [5, 95]."""
    return _clamp(_RISK_BASE_CHANCE[risk] + _MODE_CHANCE_BUMP[mode], 5.0, 95.0)


def reward_range(mode: CrimeMode, risk: Risk) -> tuple[int, int]:
    low, high = _RISK_REWARD[risk]
    bump = _MODE_REWARD_BUMP_PCT[mode]
    return low * bump // 100, high * bump // 100


def heat_gain(risk: Risk) -> int:
    return _RISK_HEAT[risk]


@dataclass(frozen=True, slots=True)
class HeatEffects:
    chance_mult: float = 1.0
    reward_mult: float = 1.0
    qte_window_mult: float = 1.0
    simon_seq_delta: int = 0
    extra_cooldown_secs: int = 0
    ambush_chance_pct: int = 0


@dataclass(frozen=True, slots=True)
class _ModeScale:
    all: float
    simon: float
    ambush: float


# (upper bound inclusive, baseline effects)
_HEAT_BANDS: tuple[tuple[int, HeatEffects], ...] = (
    (24, HeatEffects()),
    (49, HeatEffects(0.95, 0.95, 0.95, 0, 0, 0)),
    (74, HeatEffects(0.90, 0.90, 0.85, 1, 2, 0)),
    (89, HeatEffects(0.80, 0.85, 0.75, 2, 5, 0)),
    (100, HeatEffects(0.65, 0.75, 0.60, 3, 10, 20)),
)

_RISK_FACTOR = {
    Risk.LOW: 0.70,
    Risk.MEDIUM: 1.00,
    Risk.HIGH: 1.25,
    Risk.HARDCORE: 1.50,
}

_MODE_SCALE = {
    CrimeMode.STANDARD: _ModeScale(1.00, 1.00, 1.00),
    CrimeMode.SZYBKI: _ModeScale(1.10, 1.00, 1.10),
    CrimeMode.OSTROZNY: _ModeScale(0.85, 0.85, 0.85),
    # stealth keeps ambushes rare
    CrimeMode.SHADOW: _ModeScale(0.90, 0.90, 0.50),
    CrimeMode.HARDCORE: _ModeScale(1.60, 1.30, 1.60),
    CrimeMode.RYZYKOWNY: _ModeScale(1.25, 1.15, 1.40),
    CrimeMode.PLANOWANY: _ModeScale(0.90, 0.85, 0.90),
    CrimeMode.SZALONY: _ModeScale(1.40, 1.25, 1.50),
}

MAX_EXTRA_COOLDOWN_SECS = 60
MAX_AMBUSH_PCT = 100


def base_heat_effects(heat: int) -> HeatEffects:
    """Baseline band for ``heat``, before risk and mode scaling."""
    level = int(_clamp(heat, 0, 100))
    for upper, effects in _HEAT_BANDS:
        if level <= upper:
            return effects
    return _HEAT_BANDS[-1][1]


def mix_mult(base_mult: float, risk_factor: float, mode_factor: float) -> float:
    """Scale the penalty carried by a multiplier (``1 - mult``) and rebuild it."""
    penalty = max(0.0, 1.0 - base_mult)
    scaled = _clamp(penalty * risk_factor * mode_factor, 0.0, 0.95)
    return _clamp(1.0 - scaled, 0.05, 1.25)


def heat_effects(mode: CrimeMode, risk: Risk, heat: int) -> HeatEffects:
    base = base_heat_effects(heat)
    rf = _RISK_FACTOR[risk]
    ms = _MODE_SCALE[mode]
    return HeatEffects(
        chance_mult=mix_mult(base.chance_mult, rf, ms.all),
        reward_mult=mix_mult(base.reward_mult, rf, ms.all),
        qte_window_mult=mix_mult(base.qte_window_mult, rf, ms.all),
        simon_seq_delta=round_half_up(base.simon_seq_delta * rf * ms.simon),
        extra_cooldown_secs=min(
            round_half_up(base.extra_cooldown_secs * rf * ms.all), MAX_EXTRA_COOLDOWN_SECS
        ),
        ambush_chance_pct=min(
            round_half_up(base.ambush_chance_pct * rf * ms.ambush), MAX_AMBUSH_PCT
        ),
    )


def format_heat_summary(effects: HeatEffects) -> str:
    parts = [
        f"Chance ×{effects.chance_mult:.2f}",
        f"Loot ×{effects.reward_mult:.2f}",
        f"QTE window ×{effects.qte_window_mult:.2f}",
    ]
    if effects.simon_seq_delta:
        parts.append(f"Simon +{effects.simon_seq_delta}")
    if effects.extra_cooldown_secs > 0:
        parts.append(f"+{effects.extra_cooldown_secs}s cooldown")
    if effects.ambush_chance_pct > 0:
        parts.append(f"Ambush {effects.ambush_chance_pct}%")
    return " • ".join(parts)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


__all__ = [
    "HeatEffects",
    "base_chance",
    "base_heat_effects",
    "format_heat_summary",
    "heat_effects",
    "heat_gain",
    "mix_mult",
    "reward_range",
    "round_half_up",
]
