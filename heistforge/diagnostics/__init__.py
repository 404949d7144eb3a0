"""Balance diagnostics for HeistForge."""

from .simulator import HeistSimulator, SimulationResult

__all__ = ["HeistSimulator", "SimulationResult"]
