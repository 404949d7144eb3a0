"""Solo heist resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from random import Random

from . import balance
from .items import ItemEffects, aggregate
from .types import (
    SKILL_CAP,
    HeistOutcome,
    MinigameOutcome,
    MinigameResult,
    PlayerProfile,
    SoloHeistConfig,
)

logger = logging.getLogger(__name__)

SKILL_CHANCE_MAX = 15.0
FAIL_PENALTY_SHARE = 0.35
FAIL_EXTRA_HEAT = 2
MIN_CHANCE = 1.0
MAX_CHANCE = 99.0

_MINIGAME_FLAT_BONUS = {
    MinigameOutcome.SUCCESS: 18.0,
    MinigameOutcome.FAIL: -22.0,
    MinigameOutcome.NOT_PLAYED: -10.0,
}


def minigame_bonus(mg: MinigameResult) -> float:
    """Chance points contributed by the skill check.

    Near misses score linearly: a partial result ``diff`` away from the ideal
    gives ``12 - diff / 25`` points, nothing beyond 300.
    """
    if mg.outcome is MinigameOutcome.PARTIAL:
        return max(0.0, min(12.0, 12.0 - mg.diff / 25.0))
    return _MINIGAME_FLAT_BONUS[mg.outcome]


def success_chance(
    profile: PlayerProfile,
    cfg: SoloHeistConfig,
    mg: MinigameResult,
    effects: ItemEffects | None = None,
) -> float:
    """Final success chance in percentage points, within [1, 99]."""
    effects = effects or aggregate(cfg.items)
    chance = balance.base_chance(cfg.resolved_mode(), cfg.resolved_risk())
    chance += (min(profile.thief_skill, SKILL_CAP) / SKILL_CAP) * SKILL_CHANCE_MAX
    chance += effects.success_pp_bonus
    chance += minigame_bonus(mg)
    return max(MIN_CHANCE, min(MAX_CHANCE, chance))


def resolve_solo(
    profile: PlayerProfile,
    cfg: SoloHeistConfig,
    mg: MinigameResult,
    *,
    rng: Random | None = None,
) -> tuple[PlayerProfile, HeistOutcome]:
    """Roll one solo heist and return the updated profile with its outcome.

    The input profile is left untouched. Randomness comes only from ``rng``:
    one ``random()`` draw for the success roll, then one ``randint`` draw for
    the loot, which is taken whether or not the roll succeeds because it also
    sizes the failure penalty. Heat penalties from
    :func:`balance.heat_effects` are not applied here.
    """
    rng = rng or Random()
    mode = cfg.resolved_mode()
    risk = cfg.resolved_risk()
    effects = aggregate(cfg.items)

    chance = success_chance(profile, cfg, mg, effects)
    roll = rng.random() * 100.0
    success = roll < chance

    min_reward, max_reward = balance.reward_range(mode, risk)
    reward = rng.randint(min_reward, max_reward)

    heat_delta = balance.round_half_up(balance.heat_gain(risk) * effects.heat_mult)

    if success:
        amount = reward
    else:
        amount = -balance.round_half_up(reward * FAIL_PENALTY_SHARE * effects.fail_penalty_mult)
        heat_delta += FAIL_EXTRA_HEAT

    updated = replace(
        profile,
        balance=profile.balance + amount,
        heat=profile.heat + heat_delta,
        thief_skill=profile.thief_skill + 1 if profile.thief_skill < SKILL_CAP else profile.thief_skill,
        pp=profile.pp + 1 if success else profile.pp,
    )
    outcome = HeistOutcome(
        success=success,
        amount_base=amount,
        amount_final=amount,
        heat_delta=heat_delta,
    )
    logger.debug(
        "Resolved heist for %s: mode=%s risk=%s chance=%.1f roll=%.1f reward=%d -> %s",
        profile.user_id,
        mode.value,
        risk.value,
        chance,
        roll,
        reward,
        outcome,
    )
    return updated, outcome


@dataclass(frozen=True, slots=True)
class HeistForecast:
    """What a player would face with a given setup, without rolling anything."""

    chance_if_success: float
    chance_if_fail: float
    chance_if_skipped: float
    reward_min: int
    reward_max: int
    heat_on_success: int
    heat_on_fail: int
    heat: balance.HeatEffects
    heat_summary: str


def forecast(profile: PlayerProfile, cfg: SoloHeistConfig) -> HeistForecast:
    mode = cfg.resolved_mode()
    risk = cfg.resolved_risk()
    effects = aggregate(cfg.items)
    reward_min, reward_max = balance.reward_range(mode, risk)
    heat_gain = balance.round_half_up(balance.heat_gain(risk) * effects.heat_mult)
    heat = balance.heat_effects(mode, risk, profile.heat)
    return HeistForecast(
        chance_if_success=success_chance(profile, cfg, MinigameResult.success(), effects),
        chance_if_fail=success_chance(profile, cfg, MinigameResult.fail(), effects),
        chance_if_skipped=success_chance(profile, cfg, MinigameResult.not_played(), effects),
        reward_min=reward_min,
        reward_max=reward_max,
        heat_on_success=heat_gain,
        heat_on_fail=heat_gain + FAIL_EXTRA_HEAT,
        heat=heat,
        heat_summary=balance.format_heat_summary(heat),
    )


__all__ = [
    "HeistForecast",
    "forecast",
    "minigame_bonus",
    "resolve_solo",
    "success_chance",
]
