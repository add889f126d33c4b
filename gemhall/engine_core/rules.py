"""
Rules - Pure validation and arithmetic over gems, cards and nobles.

Used by the reducer, the action generator and the bots to
enforce game invariants. Every function is deterministic and
side-effect free; nothing here holds state.
"""

from __future__ import annotations
from typing import Iterable, Sequence

from .state import COLORS, GOLD, Card, Gems, GameState, Noble, PlayerState


# Maximum gems a player can hold at once (gold included)
MAX_GEMS = 10

# Maximum cards a player can reserve at once
MAX_RESERVED = 3

# Points needed to trigger the end of the game
WINNING_POINTS = 15

# Face-up cards per tier
DISPLAY_SIZE = 4

# A pile needs this many gems before two of that color may be taken
TAKE_TWO_MIN_POOL = 4


def count_gems(gems: Gems) -> int:
    """Total number of gems, gold included."""
    return gems.total


def available_colors(pool: Gems) -> list[str]:
    """Non-gold colors with at least one gem left in the pool."""
    return [color for color in COLORS if pool[color] > 0]


def can_take_resources(selection: Sequence[str], pool: Gems) -> bool:
    """
    Check the shape of a gem selection.

    Legal shapes:
    - one gem of any color
    - two of one color, if that pile holds at least 4
    - three distinct colors
    - two distinct colors, only when fewer than 3 colors remain in the pool

    Gold is never taken this way.
    """
    if not 1 <= len(selection) <= 3:
        return False
    if any(color not in COLORS for color in selection):
        return False

    distinct = set(selection)
    if len(selection) == 1:
        return True
    if len(selection) == 2:
        if len(distinct) == 1:
            return pool[selection[0]] >= TAKE_TWO_MIN_POOL
        return len(available_colors(pool)) < 3
    return len(distinct) == 3


def can_afford(player_gems: Gems, cost: Gems) -> bool:
    """
    Check whether gems cover a cost.

    Colored gems pay first; any shortfall must be covered by gold.
    """
    gold_needed = 0
    for color in COLORS:
        shortfall = cost[color] - player_gems[color]
        if shortfall > 0:
            gold_needed += shortfall
    return gold_needed <= player_gems.gold


def bonus_discount(player: PlayerState) -> Gems:
    """Per color, the number of purchased cards granting that bonus."""
    counts = {color: 0 for color in COLORS}
    for card in player.purchased:
        if card.bonus in counts:
            counts[card.bonus] += 1
    return Gems.of(counts)


def effective_cost(player: PlayerState, card: Card) -> Gems:
    """Card cost after the player's permanent bonus discount."""
    discount = bonus_discount(player)
    return Gems.of({
        color: max(0, card.cost[color] - discount[color])
        for color in COLORS
    })


def can_purchase(player: PlayerState, card: Card) -> bool:
    return can_afford(player.gems, effective_cost(player, card))


def payment_for(player: PlayerState, card: Card) -> Gems:
    """
    Gems actually spent on a purchase.

    Colored gems are spent first, gold covers the remainder.
    The caller must have checked can_purchase.
    """
    cost = effective_cost(player, card)
    spent: dict[str, int] = {}
    gold_needed = 0
    for color in COLORS:
        paid = min(cost[color], player.gems[color])
        spent[color] = paid
        gold_needed += cost[color] - paid
    spent[GOLD] = gold_needed
    return Gems.of(spent)


def can_reserve(player: PlayerState) -> bool:
    return len(player.reserved) < MAX_RESERVED


def can_claim_noble(player: PlayerState, noble: Noble) -> bool:
    """Nobles are checked against bonus totals, never against held gems."""
    return can_afford(bonus_discount(player), noble.requirement)


def eligible_nobles(state: GameState, player_idx: int) -> list[Noble]:
    """Nobles in the pool that a player currently qualifies for."""
    if not state.has_player(player_idx):
        return []
    player = state.players[player_idx]
    return [noble for noble in state.nobles if can_claim_noble(player, noble)]


def validate_take(selection: Sequence[str], pool: Gems, player_gems: Gems) -> bool:
    """
    Full legality of a gem take.

    Combines the shape rules with pool availability and the
    player's post-take cap.
    """
    selection = list(selection)
    if not can_take_resources(selection, pool):
        return False

    wanted = Gems.from_selection(selection)
    if not pool.covers(wanted):
        return False

    return count_gems(player_gems) + len(selection) <= MAX_GEMS


def excess_gems(player: PlayerState) -> int:
    """How many gems a player holds above the cap (0 if within)."""
    return max(0, count_gems(player.gems) - MAX_GEMS)


def is_game_over(state: GameState) -> bool:
    """True once any player has reached WINNING_POINTS."""
    return any(p.points >= WINNING_POINTS for p in state.players)


def card_deficit(player: PlayerState, card: Card, gems: Gems | None = None) -> tuple[int, int]:
    """
    Gems still missing for a card.

    Returns (missing_after_gold, total_missing). `gems` overrides the
    player's holdings, which lets callers simulate a take.
    """
    gems = gems if gems is not None else player.gems
    cost = effective_cost(player, card)
    total_missing = sum(max(0, cost[color] - gems[color]) for color in COLORS)
    return max(0, total_missing - gems.gold), total_missing


def missing_for_noble(bonuses: Gems, noble: Noble) -> int:
    """Card bonuses still needed before a noble would visit."""
    return sum(max(0, noble.requirement[color] - bonuses[color]) for color in COLORS)


def bonuses_with(player: PlayerState, cards: Iterable[Card]) -> Gems:
    """Bonus totals if the given cards were also purchased."""
    bonuses = bonus_discount(player)
    for card in cards:
        if card.bonus in COLORS:
            bonuses = bonuses.with_count(card.bonus, bonuses[card.bonus] + 1)
    return bonuses
