"""Exceptions raised by HeistForge services.

The resolution engine itself never raises; these cover the session layer
that drives players through it.
"""


class HeistForgeError(RuntimeError):
    """Base class for service exceptions."""


class InvalidTransition(HeistForgeError):
    """Raised when a session action does not apply to its current phase."""

    def __init__(self, action: str, phase: str) -> None:
        super().__init__(f"Cannot {action} while session is in phase {phase}")
        self.action = action
        self.phase = phase


class SessionLocked(InvalidTransition):
    """Raised when a player tries to leave a running minigame."""


class IncompleteConfig(HeistForgeError):
    """Raised when a heist is started without a chosen mode and risk."""
