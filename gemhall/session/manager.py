"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Caller starts a session -> a game is dealt and bots are created
2. During the game:
   - The human submits actions
   - The turn controller applies them and plays the computer turns
3. Game ends or caller deletes the session -> session dropped

PERSISTENCE RULES:
- Sessions are in-memory only
- A finished game is never saved
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import random
import time
import uuid

from ..config import get_settings
from ..engine_core.state import GameState, GamePhase
from ..engine_core.action import Action
from ..engine_core.reducer import apply_action
from ..bots import BotPolicy, create_bots
from ..content import create_game, random_ai_names
from .turn_controller import Delay, TurnController

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # Caller quit


@dataclass
class Session:
    """
    An in-memory game session.

    Contains:
    - The current canonical game state
    - The turn controller and its bots
    - A lock serialising turns
    - Session metadata
    """
    session_id: str
    game_state: GameState
    controller: TurnController
    created_at: float

    state: SessionState = SessionState.ACTIVE
    human_player_idx: int = 0

    # Actions applied during the last request, human and computer
    last_actions: list[str] = field(default_factory=list)

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def is_human_turn(self) -> bool:
        return (
            not self.game_state.is_finished
            and self.game_state.current_player_idx == self.human_player_idx
        )

    def record_action(self, player_name: str, action: Action) -> None:
        self.last_actions.append(f"{player_name}: {action.describe()}")

    async def submit(self, action: Action) -> GameState:
        """
        Run one human action through the controller.

        The session's state is only replaced once the whole computer
        chain has settled; on error it is left untouched.
        """
        async with self.lock:
            self.last_actions = []
            new_state = await self.controller.execute_turn(self.game_state, action)
            self.game_state = new_state
            if new_state.phase == GamePhase.FINISHED:
                self.state = SessionState.GAME_OVER
            return new_state


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Deal new games and build their bots
    - Track active sessions
    - Clean up finished or stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        *,
        delay: Delay | None = None,
        think_time: float | None = None,
    ):
        self._sessions: dict[str, Session] = {}
        self._delay = delay
        self._think_time = think_time

    async def create_session(
        self,
        player_name: str = "You",
        opponents: list[str] | None = None,
        seed: int | None = None,
        bots: dict[int, BotPolicy] | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            player_name: Name of the human player (always seat 0)
            opponents: Difficulty per computer opponent (1-3 entries)
            seed: Seed for dealing and for the bots
            bots: Bot registry override (defaults to one StrategyBot per opponent)

        Returns:
            New Session, already advanced to the human's first turn
        """
        opponents = opponents or [get_settings().default_difficulty]
        rng = random.Random(seed)

        session_id = str(uuid.uuid4())
        names = [player_name] + random_ai_names(len(opponents), rng)
        game_state = create_game(
            names, rng=rng, humans=1, difficulties=opponents, game_id=session_id
        )

        if bots is None:
            bots = create_bots(game_state, rng)

        controller = TurnController(
            apply_action,
            bots,
            delay=self._delay,
            think_time=self._think_time,
        )
        session = Session(
            session_id=session_id,
            game_state=game_state,
            controller=controller,
            created_at=time.time(),
            metadata={"seed": seed, "opponents": list(opponents)},
        )
        controller.on_action = session.record_action

        # The human sits first, but a custom registry may change that
        if not game_state.current_player.is_human:
            session.game_state = await controller.run_ai_turns(game_state)

        self._sessions[session_id] = session
        logger.info(
            "Created session %s with %d opponents (%s)",
            session_id, len(opponents), ", ".join(opponents),
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        if session.game_state.is_finished:
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Drop finished sessions older than max_age.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
