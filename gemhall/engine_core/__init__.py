"""
Engine Core - Deterministic game state management.

The engine is the runtime that:
1. Holds GameState
2. Validates moves against the rules
3. Generates legal actions
4. Applies actions via the reducer
"""

from .state import (
    ALL_COLORS,
    COLORS,
    GOLD,
    TIERS,
    Card,
    GamePhase,
    GameState,
    Gems,
    Noble,
    PendingDiscard,
    PlayerState,
)
from .action import Action, ActionType, ActionPayload, MAIN_ACTIONS
from .errors import GameError, IllegalAction, IllegalTransition, NotYourTurn
from .reducer import Reducer, apply_action, install_pending_discard
from .action_generator import (
    ActionGenerator,
    auto_discard,
    gem_take_options,
    is_action_legal,
    legal_actions,
)

__all__ = [
    "ALL_COLORS",
    "COLORS",
    "GOLD",
    "TIERS",
    "Card",
    "GamePhase",
    "GameState",
    "Gems",
    "Noble",
    "PendingDiscard",
    "PlayerState",
    "Action",
    "ActionType",
    "ActionPayload",
    "MAIN_ACTIONS",
    "GameError",
    "IllegalAction",
    "IllegalTransition",
    "NotYourTurn",
    "Reducer",
    "apply_action",
    "install_pending_discard",
    "ActionGenerator",
    "auto_discard",
    "gem_take_options",
    "is_action_legal",
    "legal_actions",
]
