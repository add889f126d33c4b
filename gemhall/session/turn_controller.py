"""
Turn Controller - Orchestrates turn flow and computer opponents.

Responsibilities:
- Validate submitted actions against the legal-action set
- Apply actions through the injected transition function
- Install discard obligations when a player goes over the gem cap
- Award eligible nobles at the end of each turn
- Drive phase changes (setup -> active -> endgame -> finished)
- Chain computer turns until a human is next or the game ends

The controller holds no game state. Every call takes a state and
returns a new one; intermediate states of a computer chain are never
handed back to the caller.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Mapping

from ..config import get_settings
from ..engine_core.state import GameState, GamePhase
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import auto_discard, is_action_legal, legal_actions
from ..engine_core.errors import GameError, IllegalAction, NotYourTurn
from ..engine_core.reducer import install_pending_discard
from ..engine_core import rules
from ..bots.policy import BotPolicy

logger = logging.getLogger(__name__)


Transition = Callable[[GameState, Action], GameState]
Delay = Callable[[float], Awaitable[None]]
# Receives the acting player's name and the action, never a state
ActionListener = Callable[[str, Action], None]


async def no_delay(seconds: float) -> None:
    """Delay strategy for tests and simulations."""
    return None


class TurnController:
    """
    Runs turns for one game.

    Usage:
        controller = TurnController(apply_action, create_bots(state))
        state = await controller.execute_turn(state, Action.take_gems(0, ["red", "blue", "green"]))
        state = await controller.execute_turn(state, Action.end_turn(0))
        # state.current_player_idx is the human again, or the game is over
    """

    def __init__(
        self,
        transition: Transition,
        bots: Mapping[int, BotPolicy],
        *,
        delay: Delay | None = None,
        think_time: float | None = None,
        max_chain_turns: int | None = None,
        on_action: ActionListener | None = None,
    ):
        """
        Args:
            transition: Pure (state, action) -> state function
            bots: Player index -> bot. Computer seats without an entry are skipped.
            delay: Coroutine awaited before each bot decision (asyncio.sleep by default)
            think_time: Seconds passed to `delay`
            max_chain_turns: Safety bound on consecutive computer turns
            on_action: Called with (player_name, action) for every applied action
        """
        settings = get_settings()
        self.transition = transition
        self.bots = dict(bots)
        self.delay = delay or asyncio.sleep
        self.think_time = settings.ai_think_time if think_time is None else think_time
        self.max_chain_turns = (
            settings.max_chain_turns if max_chain_turns is None else max_chain_turns
        )
        self.on_action = on_action

    def get_valid_actions(self, state: GameState, player_idx: int) -> list[Action]:
        """All legal actions for a player."""
        return legal_actions(state, player_idx)

    async def execute_turn(self, state: GameState, action: Action) -> GameState:
        """
        Execute a human action and any computer turns that follow.

        Raises:
            NotYourTurn: the action is for someone other than the current actor
            IllegalAction: the action is not in the legal-action set
            IllegalTransition: the transition function refused the action
        """
        if action.player_idx != state.current_player_idx:
            raise NotYourTurn(
                f"Cannot execute action for player {action.player_idx}. "
                f"Current player is {state.current_player_idx}"
            )

        if not is_action_legal(state, action):
            raise IllegalAction(
                f"Invalid action: {action.describe()} for player {action.player_idx}"
            )

        if action.action_type == ActionType.END_TURN:
            new_state = self._finish_turn(state, action.player_idx)
            if not new_state.is_finished:
                new_state = await self.run_ai_turns(new_state)
            return new_state

        new_state = self._apply(state, action)
        if action.action_type != ActionType.DISCARD_GEMS:
            new_state = install_pending_discard(new_state, action.player_idx)
        return self.check_end_game(new_state)

    async def run_ai_turns(self, state: GameState) -> GameState:
        """
        Play computer turns until a human is next or the game is finished.

        Stops early (with a warning) after max_chain_turns turns.
        """
        turns = 0
        while not state.is_finished:
            player_idx = state.current_player_idx
            if state.players[player_idx].is_human:
                break

            if turns >= self.max_chain_turns:
                logger.warning(
                    "Stopping computer chain after %d turns in game %s",
                    turns, state.game_id,
                )
                break

            state = await self._play_ai_turn(state, player_idx)
            turns += 1

        return state

    def check_end_game(self, state: GameState) -> GameState:
        """
        Evaluate end-of-game phase changes.

        - any player at WINNING_POINTS moves the game to endgame and
          records the current actor as the trigger
        - back at the trigger player after the final round, the game
          is finished and the winner recorded
        """
        if state.phase in (GamePhase.SETUP, GamePhase.ACTIVE) and rules.is_game_over(state):
            logger.info(
                "Player %d reached %d points, final round begins",
                state.current_player_idx, rules.WINNING_POINTS,
            )
            state = state._copy_with(
                phase=GamePhase.ENDGAME,
                endgame_trigger_idx=state.current_player_idx,
                endgame_turn=state.turn_number,
            )

        if (
            state.phase == GamePhase.ENDGAME
            and state.current_player_idx == state.endgame_trigger_idx
            and state.turn_number > state.endgame_turn
        ):
            winner_idx = self.determine_winner(state)
            logger.info(
                "Game %s finished, winner %s", state.game_id, state.players[winner_idx].name
            )
            state = state._copy_with(phase=GamePhase.FINISHED, winner_idx=winner_idx)

        return state

    def determine_winner(self, state: GameState) -> int:
        """Index of the first player with the highest points."""
        best_idx = 0
        for idx, player in enumerate(state.players):
            if player.points > state.players[best_idx].points:
                best_idx = idx
        return best_idx

    async def _play_ai_turn(self, state: GameState, player_idx: int) -> GameState:
        """One full computer turn: discard, decide, apply, end."""
        if state.pending_discard and state.pending_discard.player_idx == player_idx:
            state = self._resolve_discard(state, player_idx)

        bot = self.bots.get(player_idx)
        if bot is None:
            logger.info("No bot registered for player %d, skipping turn", player_idx)
            return self._finish_turn(state, player_idx)

        await self.delay(self.think_time)

        action = self._ask_bot(bot, state, player_idx)
        if action.action_type != ActionType.END_TURN:
            try:
                state = self._apply(state, action)
            except GameError as e:
                logger.warning(
                    "Bot action %s for player %d was rejected (%s), ending turn",
                    action.describe(), player_idx, e.code,
                )
            else:
                state = install_pending_discard(state, player_idx)
                if state.pending_discard:
                    state = self._resolve_discard(state, player_idx)
                state = self.check_end_game(state)

        return self._finish_turn(state, player_idx)

    def _ask_bot(self, bot: BotPolicy, state: GameState, player_idx: int) -> Action:
        """The bot's proposal, or end-turn if it fails or proposes something illegal."""
        try:
            action = bot.decide_action(state, player_idx)
        except Exception:
            logger.warning(
                "Bot decision failed for player %d, ending turn", player_idx, exc_info=True
            )
            return Action.end_turn(player_idx)

        if (
            not isinstance(action, Action)
            or action.player_idx != player_idx
            or not is_action_legal(state, action)
        ):
            logger.warning(
                "Bot for player %d proposed an illegal action (%r), ending turn",
                player_idx, action,
            )
            return Action.end_turn(player_idx)
        return action

    def _resolve_discard(self, state: GameState, player_idx: int) -> GameState:
        """Shed excess gems for a computer player."""
        count = state.pending_discard.count
        gems = auto_discard(state.players[player_idx].gems, count)
        return self._apply(state, Action.discard_gems(player_idx, gems))

    def _finish_turn(self, state: GameState, player_idx: int) -> GameState:
        """Award nobles, end the turn and evaluate the phase."""
        state = self._award_nobles(state, player_idx)
        state = self.check_end_game(state)
        state = self._apply(state, Action.end_turn(player_idx))
        return self.check_end_game(state)

    def _award_nobles(self, state: GameState, player_idx: int) -> GameState:
        for noble in rules.eligible_nobles(state, player_idx):
            logger.info("Player %d is visited by noble %s", player_idx, noble.noble_id)
            state = self._apply(state, Action.claim_noble(player_idx, noble))
        return state

    def _apply(self, state: GameState, action: Action) -> GameState:
        new_state = self.transition(state, action)
        if self.on_action is not None:
            self.on_action(new_state.players[action.player_idx].name, action)
        return new_state
