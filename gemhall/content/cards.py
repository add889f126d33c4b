"""
Gem Hall Cards - The standard development card catalog.

90 cards across three tiers:
- Tier 1 (40 cards): 0-1 points, 3-4 gem costs
- Tier 2 (30 cards): 1-3 points, 7-9 gem costs
- Tier 3 (20 cards): 3-5 points, 10-12 gem costs

Every color appears as a bonus on the same number of cards per tier.
"""

from __future__ import annotations

from ..engine_core.state import Card, Gems, TIERS


def _card(card_id: str, points: int, bonus: str, **cost: int) -> Card:
    tier = int(card_id[1])
    return Card(card_id=card_id, tier=tier, points=points, bonus=bonus, cost=Gems.of(cost))


TIER_1_CARDS: list[Card] = [
    # Red bonus
    _card("L1-01", 0, "red", white=2, black=2),
    _card("L1-02", 0, "red", blue=3),
    _card("L1-03", 1, "red", green=3, white=1),
    _card("L1-04", 0, "red", blue=2, green=2),
    _card("L1-05", 1, "red", white=4),
    _card("L1-06", 0, "red", black=3, white=2),
    _card("L1-07", 0, "red", green=2, blue=1),
    _card("L1-08", 1, "red", black=4),
    # Blue bonus
    _card("L1-09", 0, "blue", red=2, green=2),
    _card("L1-10", 0, "blue", white=3),
    _card("L1-11", 1, "blue", black=3, white=1),
    _card("L1-12", 0, "blue", red=3, black=1),
    _card("L1-13", 1, "blue", green=4),
    _card("L1-14", 0, "blue", white=2, black=2),
    _card("L1-15", 0, "blue", red=1, green=3),
    _card("L1-16", 1, "blue", white=4),
    # Green bonus
    _card("L1-17", 0, "green", red=3, blue=1),
    _card("L1-18", 0, "green", black=3),
    _card("L1-19", 1, "green", white=3, black=1),
    _card("L1-20", 0, "green", red=2, white=2),
    _card("L1-21", 1, "green", blue=4),
    _card("L1-22", 0, "green", red=3, white=1),
    _card("L1-23", 0, "green", blue=2, black=2),
    _card("L1-24", 1, "green", red=4),
    # White bonus
    _card("L1-25", 0, "white", red=3, green=1),
    _card("L1-26", 0, "white", black=3),
    _card("L1-27", 1, "white", blue=3, black=1),
    _card("L1-28", 0, "white", red=2, blue=2),
    _card("L1-29", 1, "white", green=4),
    _card("L1-30", 0, "white", blue=3, green=1),
    _card("L1-31", 0, "white", red=2, black=2),
    _card("L1-32", 1, "white", black=4),
    # Black bonus
    _card("L1-33", 0, "black", red=3, white=1),
    _card("L1-34", 0, "black", green=3),
    _card("L1-35", 1, "black", blue=3, green=1),
    _card("L1-36", 0, "black", red=2, green=2),
    _card("L1-37", 1, "black", white=4),
    _card("L1-38", 0, "black", blue=3, white=1),
    _card("L1-39", 0, "black", green=2, white=2),
    _card("L1-40", 1, "black", blue=4),
]

TIER_2_CARDS: list[Card] = [
    # Red bonus
    _card("L2-01", 1, "red", white=5, black=3),
    _card("L2-02", 2, "red", blue=5, green=2),
    _card("L2-03", 1, "red", green=6, black=1),
    _card("L2-04", 3, "red", white=6, black=3),
    _card("L2-05", 2, "red", blue=3, green=4, black=2),
    _card("L2-06", 1, "red", white=4, blue=3),
    # Blue bonus
    _card("L2-07", 1, "blue", red=5, black=3),
    _card("L2-08", 2, "blue", green=5, white=2),
    _card("L2-09", 1, "blue", white=6, black=1),
    _card("L2-10", 3, "blue", red=6, black=3),
    _card("L2-11", 2, "blue", red=3, white=4, black=2),
    _card("L2-12", 1, "blue", green=4, black=3),
    # Green bonus
    _card("L2-13", 1, "green", red=5, white=3),
    _card("L2-14", 2, "green", blue=5, black=2),
    _card("L2-15", 1, "green", black=6, white=1),
    _card("L2-16", 3, "green", red=6, white=3),
    _card("L2-17", 2, "green", blue=3, white=4, red=2),
    _card("L2-18", 1, "green", red=4, blue=3),
    # White bonus
    _card("L2-19", 1, "white", red=5, green=3),
    _card("L2-20", 2, "white", blue=5, red=2),
    _card("L2-21", 1, "white", red=6, green=1),
    _card("L2-22", 3, "white", blue=6, green=3),
    _card("L2-23", 2, "white", blue=3, green=4, red=2),
    _card("L2-24", 1, "white", black=4, green=3),
    # Black bonus
    _card("L2-25", 1, "black", red=5, green=3),
    _card("L2-26", 2, "black", blue=5, white=2),
    _card("L2-27", 1, "black", white=6, green=1),
    _card("L2-28", 3, "black", red=6, white=3),
    _card("L2-29", 2, "black", blue=3, white=4, green=2),
    _card("L2-30", 1, "black", blue=4, green=3),
]

TIER_3_CARDS: list[Card] = [
    # Red bonus
    _card("L3-01", 3, "red", white=7, black=3),
    _card("L3-02", 4, "red", blue=7, green=2, black=1),
    _card("L3-03", 5, "red", green=6, black=4, white=2),
    _card("L3-04", 4, "red", white=8, blue=2),
    # Blue bonus
    _card("L3-05", 3, "blue", red=7, black=3),
    _card("L3-06", 4, "blue", green=7, white=2, black=1),
    _card("L3-07", 5, "blue", white=6, black=4, red=2),
    _card("L3-08", 4, "blue", red=8, green=2),
    # Green bonus
    _card("L3-09", 3, "green", red=7, white=3),
    _card("L3-10", 4, "green", blue=7, black=2, white=1),
    _card("L3-11", 5, "green", black=6, white=4, red=2),
    _card("L3-12", 4, "green", red=8, black=2),
    # White bonus
    _card("L3-13", 3, "white", red=7, green=3),
    _card("L3-14", 4, "white", blue=7, red=2, green=1),
    _card("L3-15", 5, "white", red=6, green=4, blue=2),
    _card("L3-16", 4, "white", blue=8, green=2),
    # Black bonus
    _card("L3-17", 3, "black", red=7, green=3),
    _card("L3-18", 4, "black", blue=7, white=2, green=1),
    _card("L3-19", 5, "black", white=6, green=4, blue=2),
    _card("L3-20", 4, "black", blue=8, red=2),
]

CARDS_BY_TIER: dict[int, list[Card]] = {
    1: TIER_1_CARDS,
    2: TIER_2_CARDS,
    3: TIER_3_CARDS,
}

ALL_CARDS: list[Card] = [card for tier in TIERS for card in CARDS_BY_TIER[tier]]

_CARDS_BY_ID = {card.card_id: card for card in ALL_CARDS}


def get_card_by_id(card_id: str) -> Card | None:
    return _CARDS_BY_ID.get(card_id)
