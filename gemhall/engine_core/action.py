"""
Action System - The closed set of moves a player can make.

Actions represent:
1. Main actions (take gems, reserve a card, purchase a card), one per turn
2. Follow-ups (discard excess gems, claim a noble)
3. Ending the turn

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .state import ALL_COLORS, Card, Noble


class ActionType(Enum):
    """Types of actions in the system."""
    TAKE_GEMS = "take_gems"
    DISCARD_GEMS = "discard_gems"
    RESERVE_CARD = "reserve_card"
    PURCHASE_CARD = "purchase_card"
    CLAIM_NOBLE = "claim_noble"
    END_TURN = "end_turn"


# A player gets one of these per turn
MAIN_ACTIONS = frozenset({
    ActionType.TAKE_GEMS,
    ActionType.RESERVE_CARD,
    ActionType.PURCHASE_CARD,
})


def normalize_selection(gems: Iterable[str]) -> tuple[str, ...]:
    """Sort a gem selection into canonical color order."""
    order = {color: idx for idx, color in enumerate(ALL_COLORS)}
    return tuple(sorted(gems, key=lambda color: order.get(color, len(order))))


@dataclass(frozen=True)
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    gems: tuple[str, ...] = ()
    card: Card | None = None
    noble: Noble | None = None


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Validated before application
    - Applied atomically by the reducer
    - Comparable, so membership in a legal-action list is a plain `in`
    """
    action_type: ActionType
    player_idx: int
    payload: ActionPayload = ActionPayload()

    @property
    def is_main(self) -> bool:
        return self.action_type in MAIN_ACTIONS

    @property
    def gems(self) -> tuple[str, ...]:
        return self.payload.gems

    @property
    def card(self) -> Card | None:
        return self.payload.card

    @property
    def noble(self) -> Noble | None:
        return self.payload.noble

    @classmethod
    def take_gems(cls, player_idx: int, gems: Iterable[str]) -> Action:
        """Factory for taking gems from the pool."""
        return cls(
            action_type=ActionType.TAKE_GEMS,
            player_idx=player_idx,
            payload=ActionPayload(gems=normalize_selection(gems)),
        )

    @classmethod
    def discard_gems(cls, player_idx: int, gems: Iterable[str]) -> Action:
        """Factory for returning excess gems to the pool."""
        return cls(
            action_type=ActionType.DISCARD_GEMS,
            player_idx=player_idx,
            payload=ActionPayload(gems=normalize_selection(gems)),
        )

    @classmethod
    def reserve(cls, player_idx: int, card: Card) -> Action:
        """Factory for reserving a displayed card."""
        return cls(
            action_type=ActionType.RESERVE_CARD,
            player_idx=player_idx,
            payload=ActionPayload(card=card),
        )

    @classmethod
    def purchase(cls, player_idx: int, card: Card) -> Action:
        """Factory for purchasing a displayed or reserved card."""
        return cls(
            action_type=ActionType.PURCHASE_CARD,
            player_idx=player_idx,
            payload=ActionPayload(card=card),
        )

    @classmethod
    def claim_noble(cls, player_idx: int, noble: Noble) -> Action:
        """Factory for claiming a noble."""
        return cls(
            action_type=ActionType.CLAIM_NOBLE,
            player_idx=player_idx,
            payload=ActionPayload(noble=noble),
        )

    @classmethod
    def end_turn(cls, player_idx: int) -> Action:
        """Factory for ending the turn."""
        return cls(action_type=ActionType.END_TURN, player_idx=player_idx)

    def describe(self) -> str:
        """Short human-readable form, used in logs and API responses."""
        kind = self.action_type
        if kind in (ActionType.TAKE_GEMS, ActionType.DISCARD_GEMS):
            verb = "takes" if kind == ActionType.TAKE_GEMS else "discards"
            return f"{verb} {', '.join(self.gems)}"
        if kind == ActionType.RESERVE_CARD:
            return f"reserves {self.card.card_id}"
        if kind == ActionType.PURCHASE_CARD:
            return f"purchases {self.card.card_id}"
        if kind == ActionType.CLAIM_NOBLE:
            return f"claims {self.noble.noble_id}"
        return "ends turn"
