"""Scripted random source for deterministic heist tests."""

from __future__ import annotations

from collections import deque
from random import Random
from typing import Iterable


class SequenceRandom(Random):
    """``Random`` whose ``random()`` and ``randint()`` replay scripted values.

    Once a script runs dry the regular seeded generator takes over. A scripted
    integer outside the requested range raises ``ValueError``.
    """

    def __init__(
        self,
        *,
        floats: Iterable[float] = (),
        ints: Iterable[int] = (),
        seed: int = 0,
    ) -> None:
        super().__init__(seed)
        self._floats = deque(floats)
        self._ints = deque(ints)

    # keeps choice() and randrange() on the seeded bit source
    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)

    def random(self) -> float:
        if self._floats:
            return self._floats.popleft()
        return super().random()

    def randint(self, a: int, b: int) -> int:
        if self._ints:
            value = self._ints.popleft()
            if not a <= value <= b:
                raise ValueError(f"Scripted integer {value} is outside [{a}, {b}]")
            return value
        return super().randint(a, b)

    def push_floats(self, *values: float) -> None:
        self._floats.extend(values)

    def push_ints(self, *values: int) -> None:
        self._ints.extend(values)
