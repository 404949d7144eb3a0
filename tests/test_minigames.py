from random import Random

import pytest

from heistforge.domain import minigames
from heistforge.domain.types import MinigameOutcome, MinigameResult, Risk


def test_qte_scoring_bands():
    spec = minigames.qte_spec_for(Risk.MEDIUM)
    assert spec.window_ms == 150
    assert minigames.score_qte(1200, spec) == MinigameResult.success()
    assert minigames.score_qte(1050, spec) == MinigameResult.success()
    assert minigames.score_qte(1400, spec) == MinigameResult.partial(200)
    assert minigames.score_qte(1501, spec).outcome is MinigameOutcome.FAIL


def test_qte_window_has_a_floor():
    assert minigames.qte_spec_for(Risk.LOW, window_bonus_ms=-500).window_ms == 40
    assert minigames.qte_spec_for(Risk.HARDCORE, window_bonus_ms=40).window_ms == 110


@pytest.mark.parametrize(
    ("risk", "length"),
    [(Risk.LOW, 4), (Risk.MEDIUM, 5), (Risk.HIGH, 6), (Risk.HARDCORE, 7)],
)
def test_simon_base_length_per_risk(risk, length):
    assert minigames.simon_spec_for(risk, 0).length == length


def test_simon_length_is_clamped():
    assert minigames.simon_spec_for(Risk.MEDIUM, -2).length == 3
    assert minigames.simon_spec_for(Risk.LOW, -2).length == 3
    assert minigames.simon_spec_for(Risk.HARDCORE, 5).length == 8


def test_sequence_uses_alphabet_and_seed():
    spec = minigames.simon_spec_for(Risk.HIGH)
    first = minigames.gen_simon_seq(spec, rng=Random(7))
    again = minigames.gen_simon_seq(spec, rng=Random(7))
    assert first == again
    assert len(first) == 6
    assert set(first) <= set(minigames.SIMON_ALPHABET)


def test_check_step_is_lenient_about_case_and_spaces():
    assert minigames.check_simon_step("A", " a ")
    assert not minigames.check_simon_step("A", "B")


def test_preview_duration():
    assert minigames.simon_preview_ms(Risk.MEDIUM, 5) == 3750
    assert minigames.simon_preview_ms(Risk.LOW, 4, 1.3) == 4940
    assert minigames.simon_preview_ms(Risk.HARDCORE, 1) == 500
    assert minigames.simon_preview_ms(Risk.LOW, 20) == 12_000


def test_reveals_shrink_with_risk():
    assert [minigames.simon_reveals(risk) for risk in Risk] == [2, 1, 0, 0]


def test_attempt_succeeds_on_full_sequence():
    attempt = minigames.SimonAttempt(["A", "C", "C"])
    assert attempt.press("a") is None
    assert attempt.press("C") is None
    assert attempt.press("c") == MinigameResult.success()
    assert attempt.finished


def test_attempt_fails_on_first_mistake_and_stays_failed():
    attempt = minigames.SimonAttempt(["B", "D"])
    assert attempt.press("B") is None
    assert attempt.press("A") == MinigameResult.fail()
    assert attempt.press("D") == MinigameResult.fail()
    assert attempt.cursor == 1
