"""
Bot Profiles - Per-instance play styles for computer opponents.

A profile is rolled once when a bot is created and adjusts:
- Focus colors (favoured when taking gems and scoring cards)
- Reservation threshold (card points that make a reserve worthwhile)
- Randomness (probability of a random move instead of a deliberate one)
- Noble tolerance (how many bonuses away a noble still counts as reachable)
- Gold threshold (how much gold a preferred purchase may spend)

Two bots of the same difficulty usually end up with different profiles.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import random

from ..engine_core.state import COLORS


class Difficulty(str, Enum):
    """Bot difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class AIProfile:
    """
    Randomized parameters for one bot instance.
    """
    focus_colors: tuple[str, ...]
    reserve_points_min: int = 3
    random_move_chance: float = 0.25
    noble_missing_max: int = 1
    gold_afford_threshold: int = 1

    def is_focus(self, color: str) -> bool:
        return color in self.focus_colors


def create_profile(
    difficulty: Difficulty | str,
    rng: random.Random | None = None,
) -> AIProfile:
    """
    Roll a profile for a difficulty tier.

    Args:
        difficulty: Tier to roll for
        rng: Random source (a fresh one if omitted)
    """
    difficulty = Difficulty(difficulty)
    rng = rng or random.Random()

    focus_colors = tuple(rng.sample(COLORS, 2))

    if difficulty == Difficulty.EASY:
        return AIProfile(
            focus_colors=focus_colors,
            reserve_points_min=3,
            random_move_chance=0.7,
            noble_missing_max=2,
            gold_afford_threshold=1,
        )

    if difficulty == Difficulty.HARD:
        return AIProfile(
            focus_colors=focus_colors,
            reserve_points_min=3 if rng.random() < 0.5 else 2,
            random_move_chance=0.05,
            noble_missing_max=1,
            gold_afford_threshold=1 if rng.random() < 0.5 else 2,
        )

    return AIProfile(
        focus_colors=focus_colors,
        reserve_points_min=2 if rng.random() < 0.4 else 3,
        random_move_chance=0.25,
        noble_missing_max=1 if rng.random() < 0.5 else 2,
        gold_afford_threshold=1 if rng.random() < 0.5 else 2,
    )
