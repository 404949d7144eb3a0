"""Domain models and services."""

from .balance import HeatEffects, base_chance, heat_effects, heat_gain, reward_range
from .core import HeistForecast, forecast, resolve_solo, success_chance
from .events import EventBus
from .exceptions import HeistForgeError, IncompleteConfig, InvalidTransition, SessionLocked
from .heists import HeistService
from .items import ItemEffects, aggregate, available_items
from .session import ResolvedView, SessionPhase, SessionRegistry, SoloSession
from .types import (
    CrimeMode,
    HeistOutcome,
    ItemKey,
    MinigameKind,
    MinigameOutcome,
    MinigameResult,
    PlayerProfile,
    QteSpec,
    Risk,
    SimonSpec,
    SoloHeistConfig,
)

__all__ = [
    "CrimeMode",
    "EventBus",
    "HeatEffects",
    "HeistForecast",
    "HeistForgeError",
    "HeistOutcome",
    "HeistService",
    "IncompleteConfig",
    "InvalidTransition",
    "ItemEffects",
    "ItemKey",
    "MinigameKind",
    "MinigameOutcome",
    "MinigameResult",
    "PlayerProfile",
    "QteSpec",
    "ResolvedView",
    "Risk",
    "SessionLocked",
    "SessionPhase",
    "SessionRegistry",
    "SimonSpec",
    "SoloHeistConfig",
    "SoloSession",
    "aggregate",
    "available_items",
    "base_chance",
    "forecast",
    "heat_effects",
    "heat_gain",
    "resolve_solo",
    "reward_range",
    "success_chance",
]
