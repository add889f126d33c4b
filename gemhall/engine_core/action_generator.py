"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Bots to enumerate possible moves
2. UI to show available actions
3. Validation (is this action in legal_actions?)

Design: Generates Action objects, not just action types.
This ensures all generated actions are fully specified.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from itertools import combinations

from .state import ALL_COLORS, COLORS, GOLD, GameState, GamePhase, Gems, PlayerState
from .action import Action, ActionType, normalize_selection
from . import rules


def gem_take_options(pool: Gems, player_gems: Gems) -> list[tuple[str, ...]]:
    """
    Enumerate every legal gem selection.

    Order: single colors, two of a color (pile >= 4), three
    distinct colors, then two distinct colors when fewer than
    three colors remain in the pool.
    """
    available = rules.available_colors(pool)
    candidates: list[tuple[str, ...]] = []

    candidates.extend((color,) for color in available)
    candidates.extend((color, color) for color in available)
    candidates.extend(combinations(available, 3))
    if len(available) < 3:
        candidates.extend(combinations(available, 2))

    return [
        selection for selection in candidates
        if rules.validate_take(selection, pool, player_gems)
    ]


def auto_discard(player_gems: Gems, count: int) -> tuple[str, ...]:
    """
    Pick gems to shed: largest holding first, gold last.

    Ties keep the canonical color order.
    """
    colored = sorted(COLORS, key=lambda color: -player_gems[color])
    remaining = count
    chosen: list[str] = []
    for color in colored + [GOLD]:
        if remaining == 0:
            break
        shed = min(player_gems[color], remaining)
        chosen.extend([color] * shed)
        remaining -= shed
    return tuple(chosen)


@dataclass
class ActionGenerator:
    """
    Generates legal actions for one player in a game state.
    """

    def generate(self, state: GameState, player_idx: int) -> list[Action]:
        """
        Generate all legal actions for a player.

        Returns a list of fully-specified Action objects. Players
        other than the current actor get an empty list.
        """
        if state.phase == GamePhase.FINISHED or not state.has_player(player_idx):
            return []

        if player_idx != state.current_player_idx:
            return []

        player = state.players[player_idx]

        # A pending discard blocks everything else
        if state.pending_discard:
            if state.pending_discard.player_idx != player_idx:
                return []
            gems = auto_discard(player.gems, state.pending_discard.count)
            return [Action.discard_gems(player_idx, gems)]

        actions = [Action.end_turn(player_idx)]

        if not state.action_taken:
            actions.extend(self._generate_take_actions(state, player_idx, player))
            actions.extend(self._generate_reserve_actions(state, player_idx, player))
            actions.extend(self._generate_purchase_actions(state, player_idx, player))

        actions.extend(self._generate_noble_actions(state, player_idx, player))
        return actions

    def _generate_take_actions(
        self, state: GameState, player_idx: int, player: PlayerState
    ) -> list[Action]:
        return [
            Action.take_gems(player_idx, selection)
            for selection in gem_take_options(state.pool, player.gems)
        ]

    def _generate_reserve_actions(
        self, state: GameState, player_idx: int, player: PlayerState
    ) -> list[Action]:
        if not rules.can_reserve(player):
            return []
        return [Action.reserve(player_idx, card) for card in state.all_displayed()]

    def _generate_purchase_actions(
        self, state: GameState, player_idx: int, player: PlayerState
    ) -> list[Action]:
        candidates = state.all_displayed() + list(player.reserved)
        return [
            Action.purchase(player_idx, card)
            for card in candidates
            if rules.can_purchase(player, card)
        ]

    def _generate_noble_actions(
        self, state: GameState, player_idx: int, player: PlayerState
    ) -> list[Action]:
        return [
            Action.claim_noble(player_idx, noble)
            for noble in rules.eligible_nobles(state, player_idx)
        ]


def legal_actions(state: GameState, player_idx: int) -> list[Action]:
    """
    Convenience function to get legal actions for a player.
    """
    return ActionGenerator().generate(state, player_idx)


def is_action_legal(state: GameState, action: Action) -> bool:
    """
    Check an action against the legal set.

    Discards match on actor and gem count; which gems are shed is the
    player's choice and ownership is checked by the reducer.
    Takes are compared in canonical color order.
    """
    legal = legal_actions(state, action.player_idx)
    if action.action_type == ActionType.DISCARD_GEMS:
        if any(g not in ALL_COLORS for g in action.gems):
            return False
        return any(
            a.action_type == ActionType.DISCARD_GEMS and len(a.gems) == len(action.gems)
            for a in legal
        )
    if action.action_type == ActionType.TAKE_GEMS:
        action = replace(
            action, payload=replace(action.payload, gems=normalize_selection(action.gems))
        )
    return action in legal
