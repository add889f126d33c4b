"""
Gem Hall Game Setup - Creates initial game state.

This module handles:
- Creating players (humans first, then computer opponents)
- Shuffling tier decks with an injected random source
- Dealing the face-up display
- Drawing nobles and filling the gem pool

The setup follows the base rules for 2-4 players.
"""

from __future__ import annotations
import logging
import random
from typing import Sequence

from ..engine_core.state import (
    COLORS,
    GOLD,
    TIERS,
    GameState,
    GamePhase,
    Gems,
    PlayerState,
)
from ..engine_core.rules import DISPLAY_SIZE
from .cards import CARDS_BY_TIER
from .nobles import NOBLES

logger = logging.getLogger(__name__)


# Gems per color in the pool, by player count
GEMS_PER_PLAYER_COUNT = {2: 4, 3: 5, 4: 7}

GOLD_GEMS = 5

MIN_PLAYERS = 2
MAX_PLAYERS = 4


def create_game(
    player_names: Sequence[str],
    *,
    rng: random.Random | None = None,
    humans: int = 1,
    difficulties: Sequence[str] | None = None,
    game_id: str | None = None,
) -> GameState:
    """
    Set up a new game.

    Args:
        player_names: One name per seat, in turn order
        rng: Random source for shuffling (a fresh one if omitted)
        humans: How many leading seats are human (0 for bot-only games)
        difficulties: Difficulty labels for the computer seats, in order
        game_id: Identifier for the game (generated if omitted)

    Returns:
        Initial GameState in the setup phase
    """
    num_players = len(player_names)
    if num_players < MIN_PLAYERS or num_players > MAX_PLAYERS:
        raise ValueError(
            f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {num_players}"
        )
    if humans < 0 or humans > num_players:
        raise ValueError(f"Invalid number of human players: {humans}")

    rng = rng or random.Random()

    players = _create_players(player_names, humans, difficulties)

    decks: dict[int, tuple] = {}
    displayed: dict[int, tuple] = {}
    for tier in TIERS:
        cards = list(CARDS_BY_TIER[tier])
        rng.shuffle(cards)
        displayed[tier] = tuple(cards[:DISPLAY_SIZE])
        decks[tier] = tuple(cards[DISPLAY_SIZE:])

    nobles = rng.sample(NOBLES, num_players + 1)

    per_color = GEMS_PER_PLAYER_COUNT[num_players]
    pool = Gems.of({**{color: per_color for color in COLORS}, GOLD: GOLD_GEMS})

    state = GameState(
        game_id=game_id or f"gemhall_{rng.randint(0, 999999)}",
        players=tuple(players),
        current_player_idx=0,
        decks=decks,
        displayed=displayed,
        nobles=tuple(nobles),
        pool=pool,
        phase=GamePhase.SETUP,
    )
    logger.info(
        "Created game %s with %d players (%d human)", state.game_id, num_players, humans
    )
    return state


def _create_players(
    names: Sequence[str],
    humans: int,
    difficulties: Sequence[str] | None,
) -> list[PlayerState]:
    """Create player states."""
    players = []
    for idx, name in enumerate(names):
        if idx < humans:
            players.append(PlayerState(player_id=f"human_{idx + 1}", name=name))
            continue

        bot_number = idx - humans
        difficulty = "medium"
        if difficulties and bot_number < len(difficulties):
            difficulty = difficulties[bot_number]
        players.append(PlayerState(
            player_id=f"bot_{bot_number + 1}",
            name=name,
            is_human=False,
            difficulty=difficulty,
        ))
    return players
