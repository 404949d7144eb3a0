"""Item catalog and loadout effect aggregation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .types import ItemKey

logger = logging.getLogger(__name__)

MAX_LOADOUT = 3


@dataclass(frozen=True, slots=True)
class ItemEffects:
    """Combined effect of a loadout. Built by :func:`aggregate`, never stored."""

    qte_window_mult: float = 1.0
    qte_grace_ms: int = 0
    simon_seq_delta: int = 0
    simon_time_mult: float = 1.0
    timer_extend_pct: float = 0.0
    heat_reduce_pct: float = 0.0
    payout_bonus_pct: float = 0.0
    # Read by the resolver; no catalog item feeds it yet.
    success_pp_bonus: float = 0.0
    heat_mult: float = 1.0
    fail_penalty_mult: float = 1.0

    @classmethod
    def neutral(cls) -> "ItemEffects":
        return cls()

    def clamped(self) -> "ItemEffects":
        return ItemEffects(
            qte_window_mult=_clamp(self.qte_window_mult, 0.9, 1.5),
            qte_grace_ms=int(_clamp(self.qte_grace_ms, 0, 120)),
            simon_seq_delta=int(_clamp(self.simon_seq_delta, -2, 0)),
            simon_time_mult=_clamp(self.simon_time_mult, 1.0, 1.3),
            timer_extend_pct=_clamp(self.timer_extend_pct, 0.0, 0.25),
            heat_reduce_pct=_clamp(self.heat_reduce_pct, 0.0, 0.15),
            payout_bonus_pct=_clamp(self.payout_bonus_pct, 0.0, 0.15),
            success_pp_bonus=_clamp(self.success_pp_bonus, 0.0, 0.15),
            heat_mult=_clamp(self.heat_mult, 0.8, 1.2),
            fail_penalty_mult=_clamp(self.fail_penalty_mult, 0.7, 1.2),
        )


@dataclass(frozen=True, slots=True)
class ItemMeta:
    name: str
    required_pp: int
    description: str = ""


ITEM_META: tuple[tuple[ItemKey, ItemMeta], ...] = (
    (ItemKey.LOCKPICK_SET, ItemMeta("Zestaw wytrychów", 0, "Shorter sequence to reproduce.")),
    (ItemKey.PRO_GLOVES, ItemMeta("Rękawice PRO", 5, "Shorter sequence and a little more time.")),
    (ItemKey.TOOLKIT, ItemMeta("Zestaw narzędzi", 10, "Cleaner job, bigger payout.")),
    (ItemKey.SMOKE_GRENADE, ItemMeta("Granat dymny", 15, "Less heat and longer timers.")),
    (ItemKey.HACKER_LAPTOP, ItemMeta("Laptop hakera", 22, "Wider reaction window.")),
    (ItemKey.ADRENALINE, ItemMeta("Adrenalina", 30, "Softer failures, slightly hotter.")),
)

_META_BY_KEY = dict(ITEM_META)


def item_meta(key: ItemKey) -> ItemMeta:
    return _META_BY_KEY[key]


def item_name(key: ItemKey) -> str:
    return _META_BY_KEY[key].name


def required_pp(key: ItemKey) -> int:
    return _META_BY_KEY[key].required_pp


def available_items(pp: int) -> list[ItemKey]:
    """Items unlocked at the given progress level, in catalog order."""
    return [key for key, meta in ITEM_META if pp >= meta.required_pp]


def newly_unlocked(pp_before: int, pp_after: int) -> list[ItemKey]:
    before = set(available_items(pp_before))
    return [key for key in available_items(pp_after) if key not in before]


def aggregate(items: Iterable[ItemKey]) -> ItemEffects:
    """Fold item contributions into one bundle and clamp every field.

    Contributions are sums and products, so the order of ``items`` does not
    matter. Oversized or locked loadouts are not rejected here.
    """
    loadout = list(items)
    window = 1.0
    grace = 0
    seq_delta = 0
    time_mult = 1.0
    timer_extend = 0.0
    heat_reduce = 0.0
    payout = 0.0
    heat_mult = 1.0
    fail_mult = 1.0

    for item in loadout:
        if item is ItemKey.HACKER_LAPTOP:
            grace += 40
            window *= 1.10
        elif item is ItemKey.PRO_GLOVES:
            seq_delta -= 1
            time_mult *= 1.05
        elif item is ItemKey.TOOLKIT:
            payout += 0.05
        elif item is ItemKey.ADRENALINE:
            window *= 1.05
            time_mult *= 1.08
            fail_mult *= 0.9
            heat_mult *= 1.05
        elif item is ItemKey.SMOKE_GRENADE:
            heat_reduce += 0.08
            timer_extend += 0.05
        elif item is ItemKey.LOCKPICK_SET:
            seq_delta -= 1

    effects = ItemEffects(
        qte_window_mult=window,
        qte_grace_ms=grace,
        simon_seq_delta=seq_delta,
        simon_time_mult=time_mult,
        timer_extend_pct=timer_extend,
        heat_reduce_pct=heat_reduce,
        payout_bonus_pct=payout,
        heat_mult=heat_mult,
        fail_penalty_mult=fail_mult,
    ).clamped()
    logger.debug("Aggregated loadout %s into %s", [item.value for item in loadout], effects)
    return effects


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


__all__ = [
    "ITEM_META",
    "MAX_LOADOUT",
    "ItemEffects",
    "ItemMeta",
    "aggregate",
    "available_items",
    "item_meta",
    "item_name",
    "newly_unlocked",
    "required_pp",
]
