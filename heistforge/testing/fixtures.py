"""Pytest fixtures for HeistForge."""

from __future__ import annotations

import pytest

from ..app import HeistApp
from ..config import HeistForgeConfig


@pytest.fixture()
def memory_app() -> HeistApp:
    return HeistApp(HeistForgeConfig(rng_seed=1234))


def app_fixture(**kwargs) -> HeistApp:
    """Helper for ad-hoc tests where pytest is not available."""
    return HeistApp(HeistForgeConfig(**kwargs))
