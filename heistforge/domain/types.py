"""Shared vocabulary of the heist engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence


SKILL_CAP = 50
DEFAULT_SKILL = 5


class CrimeMode(str, Enum):
    STANDARD = "standard"
    SZYBKI = "szybki"
    OSTROZNY = "ostrozny"
    SHADOW = "shadow"
    HARDCORE = "hardcore"
    RYZYKOWNY = "ryzykowny"
    PLANOWANY = "planowany"
    SZALONY = "szalony"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]


_MODE_LABELS = {
    CrimeMode.STANDARD: "Standard",
    CrimeMode.SZYBKI: "Szybki",
    CrimeMode.OSTROZNY: "Ostrożny",
    CrimeMode.SHADOW: "Shadow",
    CrimeMode.HARDCORE: "Hardcore",
    CrimeMode.RYZYKOWNY: "Ryzykowny",
    CrimeMode.PLANOWANY: "Planowany",
    CrimeMode.SZALONY: "Szalony",
}


class Risk(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    HARDCORE = "hardcore"


class MinigameKind(str, Enum):
    QTE = "qte"
    SIMON = "simon"


class ItemKey(str, Enum):
    HACKER_LAPTOP = "laptop"
    PRO_GLOVES = "gloves"
    TOOLKIT = "toolkit"
    ADRENALINE = "adrenaline"
    SMOKE_GRENADE = "smoke"
    LOCKPICK_SET = "lockpick"


class MinigameOutcome(str, Enum):
    NOT_PLAYED = "not_played"
    SUCCESS = "success"
    PARTIAL = "partial"
    FAIL = "fail"


@dataclass(frozen=True, slots=True)
class MinigameResult:
    """Result of a skill check.

    ``diff`` is only meaningful for ``PARTIAL`` and holds the distance from the
    ideal (milliseconds for the reaction game); smaller is better.
    """

    outcome: MinigameOutcome
    diff: int = 0

    @classmethod
    def not_played(cls) -> "MinigameResult":
        return cls(MinigameOutcome.NOT_PLAYED)

    @classmethod
    def success(cls) -> "MinigameResult":
        return cls(MinigameOutcome.SUCCESS)

    @classmethod
    def partial(cls, diff: int) -> "MinigameResult":
        return cls(MinigameOutcome.PARTIAL, abs(int(diff)))

    @classmethod
    def fail(cls) -> "MinigameResult":
        return cls(MinigameOutcome.FAIL)


@dataclass(slots=True)
class PlayerProfile:
    user_id: int
    balance: int = 0
    heat: int = 0
    thief_skill: int = DEFAULT_SKILL
    pp: int = 0

    @classmethod
    def fresh(cls, user_id: int) -> "PlayerProfile":
        return cls(user_id=user_id)


@dataclass(slots=True)
class SoloHeistConfig:
    """Options chosen for one attempt. Unset mode/risk fall back to defaults."""

    mode: CrimeMode | None = None
    risk: Risk | None = None
    minigame: MinigameKind = MinigameKind.QTE
    items: list[ItemKey] = field(default_factory=list)

    def resolved_mode(self) -> CrimeMode:
        return self.mode or CrimeMode.STANDARD

    def resolved_risk(self) -> Risk:
        return self.risk or Risk.MEDIUM

    def copy(self) -> "SoloHeistConfig":
        return SoloHeistConfig(
            mode=self.mode,
            risk=self.risk,
            minigame=self.minigame,
            items=list(self.items),
        )


@dataclass(slots=True)
class HeistOutcome:
    success: bool
    amount_base: int
    amount_final: int
    heat_delta: int


@dataclass(frozen=True, slots=True)
class QteSpec:
    target_ms: int
    window_ms: int


@dataclass(frozen=True, slots=True)
class SimonSpec:
    length: int
    alphabet: Sequence[str]
