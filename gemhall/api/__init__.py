"""
API Module - HTTP interface.

Exposes the engine via REST API. A client:
1. Creates a game session against 1-3 computer opponents
2. Reads the game state and its legal actions
3. Submits actions; computer turns run before the response returns
4. Ends the session when done

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    ActionRequest,
    CreateSessionRequest,
    # Responses
    ActionsResponse,
    ErrorResponse,
    GameStateResponse,
    SessionResponse,
    TurnResponse,
    # Shared
    ActionInfo,
    CardInfo,
    NobleInfo,
    PlayerInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "ActionRequest",
    "CreateSessionRequest",
    # Responses
    "ActionsResponse",
    "ErrorResponse",
    "GameStateResponse",
    "SessionResponse",
    "TurnResponse",
    # Shared
    "ActionInfo",
    "CardInfo",
    "NobleInfo",
    "PlayerInfo",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
