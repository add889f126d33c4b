"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a client and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- NOT_YOUR_TURN: Action submitted for a player who is not the current actor
- ILLEGAL_ACTION: Action is not in the legal-action set
- INVALID_TRANSITION: The engine refused the action (afford, limit, ownership)
- VALIDATION_ERROR: Request could not be turned into an action
- GAME_FINISHED: The game is over
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..bots.profile import Difficulty
from ..engine_core.action import ActionType


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    YOUR_TURN = "your_turn"
    OPPONENT_TURN = "opponent_turn"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    ILLEGAL_ACTION = "ILLEGAL_ACTION"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    GAME_FINISHED = "GAME_FINISHED"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Development card for display."""
    card_id: str
    tier: int
    points: int
    bonus: str
    cost: dict[str, int] = Field(default_factory=dict, description="Non-zero colors only")


class NobleInfo(BaseModel):
    """Noble tile for display."""
    noble_id: str
    points: int
    requirement: dict[str, int] = Field(default_factory=dict)


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    is_human: bool
    difficulty: Optional[str] = None
    is_current_turn: bool = False
    points: int = 0
    gems: dict[str, int] = Field(default_factory=dict)
    gem_count: int = 0
    bonuses: dict[str, int] = Field(default_factory=dict)
    purchased: list[CardInfo] = Field(default_factory=list)
    reserved: list[CardInfo] = Field(default_factory=list)
    nobles: list[NobleInfo] = Field(default_factory=list)


class PendingDiscardInfo(BaseModel):
    """A discard the player must make before anything else."""
    player_idx: int
    count: int


class ActionInfo(BaseModel):
    """A legal action, in the shape accepted by POST /actions."""
    action_type: ActionType
    player_idx: int
    gems: list[str] = Field(default_factory=list)
    card_id: Optional[str] = None
    noble_id: Optional[str] = None
    description: str = ""


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    player_name: str = Field("You", description="Display name for the human player")
    opponents: list[Difficulty] = Field(
        default_factory=lambda: [Difficulty.MEDIUM],
        min_length=1,
        max_length=3,
        description="Difficulty of each computer opponent",
    )
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")


class ActionRequest(BaseModel):
    """An action submitted by the human player."""
    action_type: ActionType
    player_idx: Optional[int] = Field(
        None, description="Acting player (defaults to the human seat)"
    )
    gems: list[str] = Field(default_factory=list, description="take_gems / discard_gems")
    card_id: Optional[str] = Field(None, description="reserve_card / purchase_card")
    noble_id: Optional[str] = Field(None, description="claim_noble")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    phase: str
    turn_number: int
    current_player_idx: int
    action_taken: bool = False
    players: list[PlayerInfo] = Field(default_factory=list)
    pool: dict[str, int] = Field(default_factory=dict)
    displayed: dict[str, list[CardInfo]] = Field(
        default_factory=dict, description="Face-up cards keyed by tier"
    )
    deck_sizes: dict[str, int] = Field(default_factory=dict)
    nobles: list[NobleInfo] = Field(default_factory=list)
    pending_discard: Optional[PendingDiscardInfo] = None
    endgame_trigger_idx: Optional[int] = None
    winner_idx: Optional[int] = None
    winner_name: Optional[str] = None
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    players: list[PlayerInfo] = Field(default_factory=list)
    current_player_idx: int = 0
    turn_number: int = 0
    created_at: float = 0.0
    opponents: list[str] = Field(default_factory=list)
    api_version: str = "v1"


class ActionsResponse(BaseModel):
    """Legal actions for a player."""
    session_id: str
    player_idx: int
    actions: list[ActionInfo] = Field(default_factory=list)


class TurnResponse(BaseModel):
    """Result of submitting an action."""
    session_id: str
    success: bool
    status: SessionStatus
    applied_actions: list[str] = Field(
        default_factory=list,
        description="Everything applied in this request, computer turns included",
    )
    game_state: GameStateResponse
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
