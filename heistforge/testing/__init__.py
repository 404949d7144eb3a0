"""Testing utilities for HeistForge."""

from .factory import ProfileFactory
from .fixtures import app_fixture, memory_app
from .rng import SequenceRandom

__all__ = [
    "ProfileFactory",
    "SequenceRandom",
    "app_fixture",
    "memory_app",
]
