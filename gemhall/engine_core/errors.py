"""
Engine errors.

Every error carries a machine-readable code so the API layer
can map it to a structured response without parsing messages.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for all game errors."""
    code = "GAME_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class NotYourTurn(GameError):
    """An action was submitted for a player who is not the current actor."""
    code = "NOT_YOUR_TURN"


class IllegalAction(GameError):
    """An action is not a member of the legal-action set."""
    code = "ILLEGAL_ACTION"


class IllegalTransition(GameError):
    """The transition function refused to apply an action."""
    code = "INVALID_TRANSITION"
