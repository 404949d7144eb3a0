"""Factories for tests and prototyping."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Iterable

from faker import Faker

from ..domain.types import SKILL_CAP, PlayerProfile


@dataclass(slots=True)
class ProfileFactory:
    faker: Faker = field(default_factory=Faker)
    rng: Random = field(default_factory=Random)

    def build(
        self,
        user_id: int | None = None,
        *,
        balance: int | None = None,
        heat: int | None = None,
        thief_skill: int | None = None,
        pp: int | None = None,
    ) -> PlayerProfile:
        user_id = user_id or self.faker.unique.random_int(min=1, max=10**9)
        return PlayerProfile(
            user_id=user_id,
            balance=self.rng.randint(0, 5000) if balance is None else balance,
            heat=self.rng.randint(0, 100) if heat is None else heat,
            thief_skill=self.rng.randint(0, SKILL_CAP) if thief_skill is None else thief_skill,
            pp=self.rng.randint(0, 40) if pp is None else pp,
        )

    def batch(self, count: int) -> Iterable[PlayerProfile]:
        for _ in range(count):
            yield self.build()
