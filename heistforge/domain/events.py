"""Heist event payloads and the async bus that carries them."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, DefaultDict, Iterable

from .types import HeistOutcome, ItemKey, MinigameResult, PlayerProfile, SoloHeistConfig

HEIST_STARTED = "heist.started"
HEIST_RESOLVED = "heist.resolved"
ITEMS_UNLOCKED = "heist.items.unlocked"

EventListener = Callable[[Any], Awaitable[None]]


@dataclass(slots=True)
class HeistStarted:
    user_id: int
    config: SoloHeistConfig
    sequence_length: int


@dataclass(slots=True)
class HeistResolved:
    user_id: int
    config: SoloHeistConfig
    minigame: MinigameResult
    before: PlayerProfile
    after: PlayerProfile
    outcome: HeistOutcome


@dataclass(slots=True)
class ItemsUnlocked:
    user_id: int
    items: tuple[ItemKey, ...]
    pp: int


class EventBus:
    """Async pub-sub; listeners run in subscription order."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[EventListener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: EventListener) -> None:
        self._listeners[event_name].append(listener)

    async def publish(self, event_name: str, payload: Any) -> None:
        for listener in list(self._listeners.get(event_name, ())):
            await listener(payload)

    def clear(self) -> None:
        self._listeners.clear()

    def listeners(self, event_name: str) -> Iterable[EventListener]:
        return tuple(self._listeners.get(event_name, ()))
