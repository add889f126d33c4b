"""
Content - The read-only catalog and game setup.

This module contains:
- The 90 development cards, by tier
- The 10 noble tiles
- Names for computer opponents
- create_game, which deals the initial state
"""

from .cards import ALL_CARDS, CARDS_BY_TIER, TIER_1_CARDS, TIER_2_CARDS, TIER_3_CARDS, get_card_by_id
from .nobles import NOBLES, get_noble_by_id
from .names import AI_NAMES, random_ai_names
from .setup import GEMS_PER_PLAYER_COUNT, GOLD_GEMS, create_game

__all__ = [
    "ALL_CARDS",
    "CARDS_BY_TIER",
    "TIER_1_CARDS",
    "TIER_2_CARDS",
    "TIER_3_CARDS",
    "get_card_by_id",
    "NOBLES",
    "get_noble_by_id",
    "AI_NAMES",
    "random_ai_names",
    "GEMS_PER_PLAYER_COUNT",
    "GOLD_GEMS",
    "create_game",
]
