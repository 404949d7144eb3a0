"""HeistForge public API."""

from .app import HeistApp
from .config import HeistForgeConfig
from .domain import (
    CrimeMode,
    ItemKey,
    MinigameResult,
    PlayerProfile,
    Risk,
    SoloHeistConfig,
    resolve_solo,
)

__all__ = [
    "CrimeMode",
    "HeistApp",
    "HeistForgeConfig",
    "ItemKey",
    "MinigameResult",
    "PlayerProfile",
    "Risk",
    "SoloHeistConfig",
    "resolve_solo",
]
