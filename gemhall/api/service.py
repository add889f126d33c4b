"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Manages sessions
3. Maps engine errors to structured error responses
4. Formats game state for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

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
    PendingDiscardInfo,
    PlayerInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..engine_core.state import COLORS, TIERS, Card, GameState, Noble, PlayerState
from ..engine_core.action import Action, ActionType
from ..engine_core.errors import GameError, IllegalAction, NotYourTurn
from ..content import get_card_by_id, get_noble_by_id
from ..session import Session, SessionManager

logger = logging.getLogger(__name__)


class RequestError(ValueError):
    """A request that names something the game does not have."""


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create session
        session_response = await service.create_session(CreateSessionRequest())

        # Play
        actions = service.get_actions(session_id)
        turn = await service.submit_action(session_id, ActionRequest(...))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    async def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new game session.

        Computer opponents that sit before the human have already
        played when this returns.
        """
        session = await self.session_manager.create_session(
            player_name=request.player_name,
            opponents=[d.value for d in request.opponents],
            seed=request.random_seed,
        )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """
        Get session status.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._session_to_response(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Get current game state.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._build_game_state(session)

    def get_actions(
        self, session_id: str, player_idx: int | None = None
    ) -> ActionsResponse | ErrorResponse:
        """
        Legal actions for a player (the human seat by default).

        Empty when it is not that player's turn.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        if player_idx is None:
            player_idx = session.human_player_idx
        actions = session.controller.get_valid_actions(session.game_state, player_idx)
        return ActionsResponse(
            session_id=session_id,
            player_idx=player_idx,
            actions=[_action_info(action) for action in actions],
        )

    async def submit_action(
        self, session_id: str, request: ActionRequest
    ) -> TurnResponse | ErrorResponse:
        """
        Apply a human action, then any computer turns that follow it.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        state = session.game_state
        if state.is_finished:
            return ErrorResponse(
                error="Game is finished",
                error_code=ErrorCode.GAME_FINISHED,
                details={"winner_idx": state.winner_idx},
            )

        try:
            action = self._build_action(session, request)
        except RequestError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)

        try:
            await session.submit(action)
        except GameError as e:
            logger.info("Rejected %s in session %s: %s", action.describe(), session_id, e)
            return _error_for(e)

        return TurnResponse(
            session_id=session_id,
            success=True,
            status=_status(session),
            applied_actions=list(session.last_actions),
            game_state=self._build_game_state(session),
        )

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """
        End a game session.
        """
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """
        List active session IDs.
        """
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _build_action(self, session: Session, request: ActionRequest) -> Action:
        """Resolve ids in a request against the catalog."""
        player_idx = (
            session.human_player_idx if request.player_idx is None else request.player_idx
        )
        kind = request.action_type

        if kind == ActionType.TAKE_GEMS:
            return Action.take_gems(player_idx, request.gems)
        if kind == ActionType.DISCARD_GEMS:
            return Action.discard_gems(player_idx, request.gems)
        if kind in (ActionType.RESERVE_CARD, ActionType.PURCHASE_CARD):
            if not request.card_id:
                raise RequestError(f"{kind.value} requires card_id")
            card = get_card_by_id(request.card_id)
            if card is None:
                raise RequestError(f"Unknown card: {request.card_id}")
            if kind == ActionType.RESERVE_CARD:
                return Action.reserve(player_idx, card)
            return Action.purchase(player_idx, card)
        if kind == ActionType.CLAIM_NOBLE:
            if not request.noble_id:
                raise RequestError("claim_noble requires noble_id")
            noble = get_noble_by_id(request.noble_id)
            if noble is None:
                raise RequestError(f"Unknown noble: {request.noble_id}")
            return Action.claim_noble(player_idx, noble)
        return Action.end_turn(player_idx)

    def _session_to_response(self, session: Session) -> SessionResponse:
        """Convert Session to SessionResponse."""
        state = session.game_state
        return SessionResponse(
            session_id=session.session_id,
            status=_status(session),
            players=_player_infos(state),
            current_player_idx=state.current_player_idx,
            turn_number=state.turn_number,
            created_at=session.created_at,
            opponents=list(session.metadata.get("opponents", [])),
        )

    def _build_game_state(self, session: Session) -> GameStateResponse:
        state = session.game_state
        winner = state.winner
        return GameStateResponse(
            session_id=session.session_id,
            status=_status(session),
            phase=state.phase.value,
            turn_number=state.turn_number,
            current_player_idx=state.current_player_idx,
            action_taken=state.action_taken,
            players=_player_infos(state),
            pool=state.pool.to_dict(),
            displayed={
                str(tier): [_card_info(c) for c in state.displayed.get(tier, ())]
                for tier in TIERS
            },
            deck_sizes={str(tier): size for tier, size in state.deck_sizes.items()},
            nobles=[_noble_info(n) for n in state.nobles],
            pending_discard=(
                PendingDiscardInfo(
                    player_idx=state.pending_discard.player_idx,
                    count=state.pending_discard.count,
                )
                if state.pending_discard else None
            ),
            endgame_trigger_idx=state.endgame_trigger_idx,
            winner_idx=state.winner_idx,
            winner_name=winner.name if winner else None,
        )


def _session_not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error="Session not found",
        error_code=ErrorCode.SESSION_NOT_FOUND,
        details={"session_id": session_id},
    )


def _error_for(error: GameError) -> ErrorResponse:
    """Structured response for an engine error."""
    if error.code == "GAME_FINISHED":
        code = ErrorCode.GAME_FINISHED
    elif isinstance(error, NotYourTurn):
        code = ErrorCode.NOT_YOUR_TURN
    elif isinstance(error, IllegalAction):
        code = ErrorCode.ILLEGAL_ACTION
    else:
        code = ErrorCode.INVALID_TRANSITION
    return ErrorResponse(
        error=str(error),
        error_code=code,
        details={"reason": error.code},
    )


def _status(session: Session) -> SessionStatus:
    if session.game_state.is_finished:
        return SessionStatus.GAME_OVER
    if session.is_human_turn():
        return SessionStatus.YOUR_TURN
    return SessionStatus.OPPONENT_TURN


def _card_info(card: Card) -> CardInfo:
    return CardInfo(
        card_id=card.card_id,
        tier=card.tier,
        points=card.points,
        bonus=card.bonus,
        cost={color: n for color, n in card.cost.items() if n},
    )


def _noble_info(noble: Noble) -> NobleInfo:
    return NobleInfo(
        noble_id=noble.noble_id,
        points=noble.points,
        requirement={color: n for color, n in noble.requirement.items() if n},
    )


def _player_info(player: PlayerState, is_current: bool) -> PlayerInfo:
    return PlayerInfo(
        player_id=player.player_id,
        name=player.name,
        is_human=player.is_human,
        difficulty=player.difficulty,
        is_current_turn=is_current,
        points=player.points,
        gems=player.gems.to_dict(),
        gem_count=player.gems.total,
        bonuses={color: player.bonus_count(color) for color in COLORS},
        purchased=[_card_info(c) for c in player.purchased],
        reserved=[_card_info(c) for c in player.reserved],
        nobles=[_noble_info(n) for n in player.nobles],
    )


def _player_infos(state: GameState) -> list[PlayerInfo]:
    return [
        _player_info(p, idx == state.current_player_idx and not state.is_finished)
        for idx, p in enumerate(state.players)
    ]


def _action_info(action: Action) -> ActionInfo:
    return ActionInfo(
        action_type=action.action_type,
        player_idx=action.player_idx,
        gems=list(action.gems),
        card_id=action.card.card_id if action.card else None,
        noble_id=action.noble.noble_id if action.noble else None,
        description=action.describe(),
    )
