"""
Reducer - Applies actions to game state.

The reducer is the single point of state change.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Copy-on-write: the input state is never modified
- Fails loudly: an illegal transition raises IllegalTransition
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .state import GameState, GamePhase, Gems, Card, GOLD, PendingDiscard
from .action import Action, ActionType
from .errors import IllegalTransition
from . import rules

logger = logging.getLogger(__name__)


# ActionType -> handler method. Checked for completeness at import time.
_HANDLERS = {
    ActionType.TAKE_GEMS: "_handle_take_gems",
    ActionType.DISCARD_GEMS: "_handle_discard_gems",
    ActionType.RESERVE_CARD: "_handle_reserve_card",
    ActionType.PURCHASE_CARD: "_handle_purchase_card",
    ActionType.CLAIM_NOBLE: "_handle_claim_noble",
    ActionType.END_TURN: "_handle_end_turn",
}

_unhandled = set(ActionType) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f"Reducer has no handler for {sorted(t.value for t in _unhandled)}")


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: Action) -> GameState:
        """
        Apply an action to the game state.

        Returns the new state or raises IllegalTransition.
        """
        self._validate_action(state, action)

        handler = self._get_handler(action.action_type)
        new_state = handler(state, action)
        logger.debug(
            "Player %d %s", action.player_idx, action.describe()
        )
        return new_state

    def _validate_action(self, state: GameState, action: Action) -> None:
        """Checks shared by every action type."""
        if state.phase == GamePhase.FINISHED:
            raise IllegalTransition("Game is finished - no actions allowed", "GAME_FINISHED")

        if not state.has_player(action.player_idx):
            raise IllegalTransition(
                f"Invalid player index: {action.player_idx}", "INVALID_PLAYER"
            )

        if action.player_idx != state.current_player_idx:
            raise IllegalTransition(
                f"Not player {action.player_idx}'s turn", "INVALID_PLAYER"
            )

        if state.pending_discard and action.action_type != ActionType.DISCARD_GEMS:
            raise IllegalTransition(
                "Gems must be discarded before anything else", "DISCARD_PENDING"
            )

        if action.is_main and state.action_taken:
            raise IllegalTransition(
                "Only one take, reserve or purchase per turn", "ACTION_ALREADY_TAKEN"
            )

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        name = _HANDLERS.get(action_type)
        if name is None:
            raise TypeError(f"No handler for action type: {action_type!r}")
        return getattr(self, name)

    def _handle_take_gems(self, state: GameState, action: Action) -> GameState:
        """Move gems from the pool to the player."""
        player = state.players[action.player_idx]
        if not rules.validate_take(action.gems, state.pool, player.gems):
            raise IllegalTransition(
                f"Cannot take {list(action.gems)}", "INVALID_TAKE"
            )

        taken = Gems.from_selection(action.gems)
        new_player = player._copy_with(gems=player.gems.plus(taken))
        new_state = state.with_player(action.player_idx, new_player)
        return new_state._copy_with(pool=state.pool.minus(taken), action_taken=True)

    def _handle_discard_gems(self, state: GameState, action: Action) -> GameState:
        """Return gems to the pool and clear the discard obligation."""
        pending = state.pending_discard
        if not pending or pending.player_idx != action.player_idx:
            raise IllegalTransition("No pending discard for this player", "INVALID_DISCARD")

        if len(action.gems) != pending.count:
            raise IllegalTransition(
                f"Must discard exactly {pending.count} gems", "INVALID_DISCARD"
            )

        try:
            discarded = Gems.from_selection(action.gems)
        except ValueError as e:
            raise IllegalTransition(str(e), "INVALID_DISCARD") from e

        player = state.players[action.player_idx]
        if not player.gems.covers(discarded):
            raise IllegalTransition("Cannot discard gems not owned", "INVALID_DISCARD")

        new_player = player._copy_with(gems=player.gems.minus(discarded))
        new_state = state.with_player(action.player_idx, new_player)
        return new_state._copy_with(
            pool=state.pool.plus(discarded),
            pending_discard=None,
        )

    def _handle_reserve_card(self, state: GameState, action: Action) -> GameState:
        """Move a displayed card to the player's reserve and hand out one gold."""
        player = state.players[action.player_idx]

        if not rules.can_reserve(player):
            raise IllegalTransition(
                f"Maximum of {rules.MAX_RESERVED} reserved cards reached", "RESERVE_LIMIT"
            )

        card = None
        if action.card is not None:
            card = _find_card(state.displayed.get(action.card.tier, ()), action.card)
        if card is None:
            raise IllegalTransition("Card is not on display", "CARD_NOT_AVAILABLE")

        new_state = self._take_from_display(state, card)

        # Gold only moves if the pool still has one
        gems = player.gems
        pool = new_state.pool
        if pool.gold > 0:
            gems = gems.with_count(GOLD, gems.gold + 1)
            pool = pool.with_count(GOLD, pool.gold - 1)

        new_player = player._copy_with(reserved=player.reserved + (card,), gems=gems)
        new_state = new_state.with_player(action.player_idx, new_player)
        return new_state._copy_with(pool=pool, action_taken=True)

    def _handle_purchase_card(self, state: GameState, action: Action) -> GameState:
        """Buy a displayed or reserved card."""
        player = state.players[action.player_idx]
        if action.card is None:
            raise IllegalTransition("No card given", "CARD_NOT_AVAILABLE")

        card = _find_card(state.displayed.get(action.card.tier, ()), action.card)
        from_display = card is not None
        if card is None:
            card = _find_card(player.reserved, action.card)
        if card is None:
            raise IllegalTransition(
                "Card not found in displayed or reserved cards", "CARD_NOT_AVAILABLE"
            )

        if not rules.can_purchase(player, card):
            raise IllegalTransition(f"Cannot afford {card.card_id}", "CANNOT_AFFORD")

        payment = rules.payment_for(player, card)

        new_state = state
        reserved = player.reserved
        if from_display:
            new_state = self._take_from_display(state, card)
        else:
            reserved = tuple(c for c in player.reserved if c != card)

        new_player = player._copy_with(
            gems=player.gems.minus(payment),
            purchased=player.purchased + (card,),
            reserved=reserved,
            points=player.points + card.points,
        )
        new_state = new_state.with_player(action.player_idx, new_player)
        return new_state._copy_with(pool=new_state.pool.plus(payment), action_taken=True)

    def _handle_claim_noble(self, state: GameState, action: Action) -> GameState:
        """Move a noble from the pool to the player."""
        noble = next((n for n in state.nobles if n == action.noble), None)
        if noble is None:
            raise IllegalTransition("Noble is not available", "NOBLE_NOT_AVAILABLE")

        player = state.players[action.player_idx]
        if not rules.can_claim_noble(player, noble):
            raise IllegalTransition(
                f"Requirements for {noble.noble_id} not met", "NOBLE_REQUIREMENT"
            )

        new_player = player._copy_with(
            nobles=player.nobles + (noble,),
            points=player.points + noble.points,
        )
        new_state = state.with_player(action.player_idx, new_player)
        return new_state._copy_with(
            nobles=tuple(n for n in state.nobles if n != noble),
        )

    def _handle_end_turn(self, state: GameState, action: Action) -> GameState:
        """Advance to the next player. The first full round ends setup."""
        next_idx = (action.player_idx + 1) % state.num_players

        phase = state.phase
        if phase == GamePhase.SETUP and next_idx == 0:
            phase = GamePhase.ACTIVE
            logger.info("First round complete, game is active")

        return state._copy_with(
            current_player_idx=next_idx,
            phase=phase,
            action_taken=False,
            turn_number=state.turn_number + 1,
        )

    def _take_from_display(self, state: GameState, card: Card) -> GameState:
        """Remove a face-up card and refill its slot from the tier deck."""
        tier = card.tier
        row = list(state.displayed.get(tier, ()))
        deck = state.decks.get(tier, ())
        slot = row.index(card)

        if deck:
            row[slot] = deck[0]
            deck = deck[1:]
        else:
            row.pop(slot)

        return state.with_tier(tier, tuple(row), tuple(deck))


def _find_card(cards: tuple[Card, ...], wanted: Card) -> Card | None:
    """The state's own copy of a card, looked up by id."""
    return next((c for c in cards if c == wanted), None)


def apply_action(state: GameState, action: Action) -> GameState:
    """
    Convenience function to apply an action.

    This is the transition function handed to the TurnController.
    """
    return Reducer().apply(state, action)


def install_pending_discard(state: GameState, player_idx: int) -> GameState:
    """Record a discard obligation if the player is over the gem cap."""
    excess = rules.excess_gems(state.players[player_idx])
    if excess <= 0:
        return state
    return state._copy_with(pending_discard=PendingDiscard(player_idx=player_idx, count=excess))
