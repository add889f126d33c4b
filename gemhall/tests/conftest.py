"""
Pytest fixtures for Gem Hall tests.
"""

import random

import pytest

from ..engine_core.state import (
    COLORS,
    Card,
    GamePhase,
    GameState,
    Gems,
    Noble,
    PlayerState,
)
from ..content import create_game


class ScriptedRandom(random.Random):
    """
    Random source whose random() replays a fixed sequence.

    Once the script runs out it keeps returning `fallback`.
    """

    def __init__(self, values=(), fallback: float = 0.99):
        super().__init__(0)
        self._values = list(values)
        self.fallback = fallback

    def random(self) -> float:
        if self._values:
            return self._values.pop(0)
        return self.fallback


def make_card(card_id: str, tier: int = 1, points: int = 0, bonus: str = "red", **cost) -> Card:
    return Card(card_id=card_id, tier=tier, points=points, bonus=bonus, cost=Gems.of(cost))


def make_noble(noble_id: str, points: int = 3, **requirement) -> Noble:
    return Noble(noble_id=noble_id, points=points, requirement=Gems.of(requirement))


def bonus_cards(color: str, count: int, prefix: str = "B") -> tuple[Card, ...]:
    """Zero-cost purchased cards that grant `count` bonuses of a color."""
    return tuple(
        make_card(f"{prefix}-{color}-{n}", bonus=color)
        for n in range(count)
    )


def full_pool(per_color: int = 4, gold: int = 5) -> Gems:
    return Gems.of({**{color: per_color for color in COLORS}, "gold": gold})


# Cards used by the hand-built state
CHEAP_RED = make_card("T1-A", 1, 0, "red", blue=1)
BLUE_ONE = make_card("T1-B", 1, 1, "blue", white=2, green=1)
GREEN_ZERO = make_card("T1-C", 1, 0, "green", red=3)
WHITE_TWO = make_card("T1-D", 1, 2, "white", black=4)
DECK_NEXT = make_card("T1-E", 1, 0, "black", red=1)
DECK_LAST = make_card("T1-F", 1, 0, "black", green=1)
TIER_TWO = make_card("T2-A", 2, 2, "black", white=5)


@pytest.fixture
def simple_state() -> GameState:
    """
    Hand-built 2-player game in the active phase.

    Seat 0 is human, seat 1 a computer player. Nobody holds
    anything; the pool has 4 of each color and 5 gold.
    """
    players = (
        PlayerState(player_id="human_1", name="Alice"),
        PlayerState(player_id="bot_1", name="Bob", is_human=False, difficulty="medium"),
    )
    return GameState(
        game_id="test_game",
        players=players,
        current_player_idx=0,
        decks={1: (DECK_NEXT, DECK_LAST), 2: (), 3: ()},
        displayed={1: (CHEAP_RED, BLUE_ONE, GREEN_ZERO, WHITE_TWO), 2: (TIER_TWO,), 3: ()},
        nobles=(make_noble("NB-1", red=2), make_noble("NB-2", blue=3, white=3)),
        pool=full_pool(),
        phase=GamePhase.ACTIVE,
    )


@pytest.fixture
def two_player_state() -> GameState:
    """A freshly dealt 2-player game (human first, medium bot second)."""
    return create_game(
        ["Alice", "Bob"],
        rng=random.Random(42),
        humans=1,
        difficulties=["medium"],
        game_id="test_game",
    )


@pytest.fixture
def bot_only_state() -> GameState:
    """A freshly dealt 3-player game with no human seats."""
    return create_game(
        ["P1", "P2", "P3"],
        rng=random.Random(7),
        humans=0,
        difficulties=["easy", "medium", "hard"],
        game_id="bot_game",
    )


def with_player(state: GameState, idx: int, **changes) -> GameState:
    """Replace fields on one player."""
    return state.with_player(idx, state.players[idx]._copy_with(**changes))
