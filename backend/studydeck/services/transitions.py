from __future__ import annotations

from enum import Enum


class InvalidTransitionError(Exception):
    """Raised when an engine action does not apply to its current state.

    The engine is left exactly as it was before the call.
    """

    def __init__(self, action: str, state: Enum) -> None:
        super().__init__(f"cannot {action} while {state.value}")
        self.action = action
        self.state = state


def require_state(action: str, current: Enum, *allowed: Enum) -> None:
    if current not in allowed:
        raise InvalidTransitionError(action, current)
