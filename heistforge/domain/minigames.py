"""Skill checks run before a heist is resolved.

Two games share one contract: build a spec sized by risk and modifiers, then
score a finished attempt into a :class:`MinigameResult`. Timing is enforced by
the caller's clock; the specs only carry the numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Sequence

from .balance import round_half_up
from .types import MinigameResult, QteSpec, Risk, SimonSpec

QTE_TARGET_MS = 1200
QTE_MIN_WINDOW_MS = 40
SIMON_ALPHABET: tuple[str, ...] = ("A", "B", "C", "D")
SIMON_MIN_LENGTH = 3
SIMON_MAX_LENGTH = 8

_QTE_WINDOW = {
    Risk.LOW: 220,
    Risk.MEDIUM: 150,
    Risk.HIGH: 100,
    Risk.HARDCORE: 70,
}

_SIMON_LENGTH = {
    Risk.LOW: 4,
    Risk.MEDIUM: 5,
    Risk.HIGH: 6,
    Risk.HARDCORE: 7,
}

_SIMON_PREVIEW_PER_SYMBOL_MS = {
    Risk.LOW: 950,
    Risk.MEDIUM: 750,
    Risk.HIGH: 550,
    Risk.HARDCORE: 380,
}

_SIMON_EXTRA_REVEALS = {
    Risk.LOW: 2,
    Risk.MEDIUM: 1,
    Risk.HIGH: 0,
    Risk.HARDCORE: 0,
}


def qte_spec_for(risk: Risk, window_bonus_ms: int = 0) -> QteSpec:
    return QteSpec(
        target_ms=QTE_TARGET_MS,
        window_ms=max(_QTE_WINDOW[risk] + window_bonus_ms, QTE_MIN_WINDOW_MS),
    )


def score_qte(elapsed_ms: int, spec: QteSpec) -> MinigameResult:
    diff = abs(elapsed_ms - spec.target_ms)
    if diff <= spec.window_ms:
        return MinigameResult.success()
    if diff <= spec.window_ms * 2:
        return MinigameResult.partial(diff)
    return MinigameResult.fail()


def simon_spec_for(risk: Risk, length_delta: int = 0) -> SimonSpec:
    length = _SIMON_LENGTH[risk] + length_delta
    return SimonSpec(
        length=max(SIMON_MIN_LENGTH, min(SIMON_MAX_LENGTH, length)),
        alphabet=SIMON_ALPHABET,
    )


def gen_simon_seq(spec: SimonSpec, *, rng: Random | None = None) -> list[str]:
    """Draw ``spec.length`` symbols independently; repeats are allowed."""
    rng = rng or Random()
    return [rng.choice(spec.alphabet) for _ in range(spec.length)]


def check_simon_step(expected: str, got: str) -> bool:
    return expected.strip().upper() == got.strip().upper()


def simon_preview_ms(risk: Risk, length: int, time_mult: float = 1.0) -> int:
    """How long the sequence stays visible before input opens."""
    per_symbol = round_half_up(_SIMON_PREVIEW_PER_SYMBOL_MS[risk] * time_mult)
    return max(500, min(12_000, per_symbol * length))


def simon_reveals(risk: Risk) -> int:
    """Extra previews a player may request during one attempt."""
    return _SIMON_EXTRA_REVEALS[risk]


@dataclass(slots=True)
class SimonAttempt:
    """Progress of one player through a generated sequence.

    A wrong symbol ends the attempt as a failure; reaching the end of the
    sequence ends it as a success.
    """

    sequence: Sequence[str]
    cursor: int = 0
    result: MinigameResult | None = field(default=None)

    @property
    def finished(self) -> bool:
        return self.result is not None

    def press(self, symbol: str) -> MinigameResult | None:
        if self.result is not None:
            return self.result
        if self.cursor >= len(self.sequence):
            self.result = MinigameResult.success()
            return self.result
        if not check_simon_step(self.sequence[self.cursor], symbol):
            self.result = MinigameResult.fail()
            return self.result
        self.cursor += 1
        if self.cursor >= len(self.sequence):
            self.result = MinigameResult.success()
        return self.result


__all__ = [
    "QTE_TARGET_MS",
    "SIMON_ALPHABET",
    "SimonAttempt",
    "check_simon_step",
    "gen_simon_seq",
    "qte_spec_for",
    "score_qte",
    "simon_preview_ms",
    "simon_reveals",
    "simon_spec_for",
]
