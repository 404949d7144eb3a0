from itertools import product

import pytest

from heistforge.domain import balance
from heistforge.domain.types import CrimeMode, Risk


def test_base_chance_combines_risk_and_mode():
    assert balance.base_chance(CrimeMode.STANDARD, Risk.MEDIUM) == 52
    assert balance.base_chance(CrimeMode.PLANOWANY, Risk.LOW) == 66
    assert balance.base_chance(CrimeMode.SZALONY, Risk.HARDCORE) == 24


def test_base_chance_always_in_band():
    for mode, risk in product(CrimeMode, Risk):
        assert 5 <= balance.base_chance(mode, risk) <= 95


def test_reward_range_scales_by_mode():
    assert balance.reward_range(CrimeMode.STANDARD, Risk.MEDIUM) == (600, 1200)
    assert balance.reward_range(CrimeMode.SHADOW, Risk.LOW) == (345, 690)
    assert balance.reward_range(CrimeMode.SZYBKI, Risk.HIGH) == (1140, 2280)
    assert balance.reward_range(CrimeMode.SZALONY, Risk.HARDCORE) == (3000, 5250)


def test_reward_range_is_ordered():
    for mode, risk in product(CrimeMode, Risk):
        low, high = balance.reward_range(mode, risk)
        assert 0 < low <= high


def test_heat_gain_per_risk():
    assert [balance.heat_gain(risk) for risk in Risk] == [4, 7, 10, 14]


def test_cool_player_has_no_heat_penalty():
    for mode, risk in product(CrimeMode, Risk):
        assert balance.heat_effects(mode, risk, 10) == balance.HeatEffects()


def test_heat_bands_boundaries():
    assert balance.base_heat_effects(24).chance_mult == 1.0
    assert balance.base_heat_effects(25).chance_mult == 0.95
    assert balance.base_heat_effects(75).simon_seq_delta == 2
    assert balance.base_heat_effects(90).ambush_chance_pct == 20
    assert balance.base_heat_effects(-5) == balance.base_heat_effects(0)
    assert balance.base_heat_effects(400) == balance.base_heat_effects(100)


def test_medium_standard_heat_matches_baseline():
    effects = balance.heat_effects(CrimeMode.STANDARD, Risk.MEDIUM, 60)
    assert effects.chance_mult == pytest.approx(0.90)
    assert effects.qte_window_mult == pytest.approx(0.85)
    assert effects.simon_seq_delta == 1
    assert effects.extra_cooldown_secs == 2


def test_hardcore_heat_compounds_to_the_heaviest_ambush():
    hot = balance.heat_effects(CrimeMode.HARDCORE, Risk.HARDCORE, 95)
    assert hot.ambush_chance_pct == 48
    assert hot.chance_mult == pytest.approx(0.16)
    assert hot.simon_seq_delta == 6
    assert hot.extra_cooldown_secs == 24
    for mode, risk in product(CrimeMode, Risk):
        effects = balance.heat_effects(mode, risk, 95)
        assert effects.ambush_chance_pct <= hot.ambush_chance_pct
        assert effects.ambush_chance_pct <= balance.MAX_AMBUSH_PCT
        assert effects.extra_cooldown_secs <= balance.MAX_EXTRA_COOLDOWN_SECS


def test_stealth_keeps_ambush_rare():
    shadow = balance.heat_effects(CrimeMode.SHADOW, Risk.MEDIUM, 95)
    standard = balance.heat_effects(CrimeMode.STANDARD, Risk.MEDIUM, 95)
    assert shadow.ambush_chance_pct == 10
    assert standard.ambush_chance_pct == 20


def test_mix_mult_bounds():
    assert balance.mix_mult(1.0, 1.5, 1.6) == 1.0
    assert balance.mix_mult(1.3, 1.0, 1.0) == 1.0
    assert balance.mix_mult(0.0, 1.5, 1.6) == pytest.approx(0.05)
    assert balance.mix_mult(0.8, 0.7, 1.0) == pytest.approx(0.86)


def test_heat_multipliers_stay_in_band():
    for mode, risk, heat in product(CrimeMode, Risk, (0, 30, 60, 80, 100)):
        effects = balance.heat_effects(mode, risk, heat)
        for mult in (effects.chance_mult, effects.reward_mult, effects.qte_window_mult):
            assert 0.05 <= mult <= 1.25


def test_format_heat_summary():
    assert balance.format_heat_summary(balance.HeatEffects()) == (
        "Chance ×1.00 • Loot ×1.00 • QTE window ×1.00"
    )
    summary = balance.format_heat_summary(
        balance.heat_effects(CrimeMode.STANDARD, Risk.MEDIUM, 95)
    )
    assert summary.endswith("Simon +3 • +10s cooldown • Ambush 20%")


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.5, 1), (1.49, 1), (2.5, 3), (-2.5, -3), (-0.4, 0), (210.0, 210)],
)
def test_round_half_up(value, expected):
    assert balance.round_half_up(value) == expected
