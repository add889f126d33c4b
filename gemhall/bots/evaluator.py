"""
Card Evaluator - Scores cards and gem takes for bot decision-making.

The evaluator assigns a numeric score to a card based on:
- Position features (points, tier, colors already owned)
- Noble features (nobles the card would complete)
- Economy features (cost efficiency, how close the card is to affordable)

Weights differ per difficulty; the profile adds per-instance bias.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from ..engine_core.state import COLORS, Card, Gems, GameState, Noble, PlayerState
from ..engine_core import rules
from .profile import AIProfile, Difficulty


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weights for the deliberate strategies.

    Higher values = more importance.
    """
    # Cost efficiency: max(0, cost_ceiling - total_cost) * cost_weight
    cost_ceiling: int = 6
    cost_weight: float = 2.0

    # Near-term affordability: max(0, deficit_ceiling - deficit) * deficit_weight
    deficit_ceiling: int = 3
    deficit_weight: float = 3.0

    # Tier 1 cards while the player has fewer than EARLY_GAME_POINTS
    early_tier1_bonus: float = 4.0

    # Flat bonus for cards worth at least HIGH_POINTS
    high_points_bonus: float = 0.0

    # Gem takes: penalty per missing gem on a target, bonus per focus color taken
    take_deficit_penalty: float = 4.0
    focus_take_bonus: float = 2.0
    target_count: int = 2

    # Reservations
    block_bonus: float = 8.0
    reserve_deficit_ceiling: int = 3
    reserve_deficit_weight: float = 2.0


MEDIUM_WEIGHTS = ScoringWeights()

HARD_WEIGHTS = ScoringWeights(
    cost_ceiling=7,
    cost_weight=3.0,
    deficit_ceiling=4,
    deficit_weight=5.0,
    early_tier1_bonus=8.0,
    high_points_bonus=6.0,
    take_deficit_penalty=6.0,
    focus_take_bonus=3.0,
    target_count=3,
    block_bonus=15.0,
    reserve_deficit_ceiling=4,
    reserve_deficit_weight=3.0,
)

WEIGHTS: dict[Difficulty, ScoringWeights] = {
    Difficulty.EASY: MEDIUM_WEIGHTS,
    Difficulty.MEDIUM: MEDIUM_WEIGHTS,
    Difficulty.HARD: HARD_WEIGHTS,
}

EARLY_GAME_POINTS = 6
HIGH_POINTS = 3
MAX_BASE_SCORE = 100


class CardEvaluator:
    """
    Evaluates cards and gem takes using weighted heuristics.

    Used by bots for 1-ply decisions:
    1. Score every candidate card
    2. Pick targets
    3. Simulate each gem take against those targets
    """

    def __init__(self, profile: AIProfile, weights: ScoringWeights | None = None):
        self.profile = profile
        self.weights = weights or MEDIUM_WEIGHTS

    def evaluate_card(self, card: Card, player: PlayerState, nobles: Sequence[Noble]) -> float:
        """
        Base value of a card, capped at 100.

        Points weigh 15 each, each noble the card completes 10, lower
        tiers up to 15, a new bonus color 3 and a focus color 6.
        """
        score = card.points * 15.0
        score += len(self.nobles_completed_by(player, card, nobles)) * 10

        score += (4 - card.tier) * 5

        if player.bonus_count(card.bonus) == 0:
            score += 3

        if self.profile.is_focus(card.bonus):
            score += 6

        return min(score, MAX_BASE_SCORE)

    def score_card(self, card: Card, player: PlayerState, nobles: Sequence[Noble]) -> float:
        """Base value plus the difficulty's economy terms."""
        w = self.weights
        score = self.evaluate_card(card, player, nobles)

        total_cost = card.cost.colored_total
        deficit, _ = rules.card_deficit(player, card)

        score += max(0, w.cost_ceiling - total_cost) * w.cost_weight
        score += max(0, w.deficit_ceiling - deficit) * w.deficit_weight
        if player.points < EARLY_GAME_POINTS and card.tier == 1:
            score += w.early_tier1_bonus
        if card.points >= HIGH_POINTS:
            score += w.high_points_bonus
        return score

    def best_card(
        self, cards: Sequence[Card], player: PlayerState, nobles: Sequence[Noble]
    ) -> Card | None:
        """Highest scored card; the first one wins ties."""
        best: Card | None = None
        best_score = float("-inf")
        for card in cards:
            score = self.score_card(card, player, nobles)
            if score > best_score:
                best, best_score = card, score
        return best

    def select_targets(
        self, cards: Sequence[Card], player: PlayerState, nobles: Sequence[Noble]
    ) -> list[Card]:
        """The top-N cards worth collecting gems for."""
        ranked = sorted(
            cards,
            key=lambda card: -self.score_card(card, player, nobles),
        )
        return ranked[:self.weights.target_count]

    def score_gem_take(
        self,
        selection: Sequence[str],
        player: PlayerState,
        targets: Sequence[Card],
        nobles: Sequence[Noble],
    ) -> float:
        """Value of holding the gems a take would leave the player with."""
        w = self.weights
        simulated = player.gems.plus(Gems.from_selection(selection))

        score = 0.0
        for card in targets:
            deficit, _ = rules.card_deficit(player, card, simulated)
            score += self.score_card(card, player, nobles) - deficit * w.take_deficit_penalty

        focus_hits = sum(1 for color in selection if self.profile.is_focus(color))
        return score + focus_hits * w.focus_take_bonus

    def choose_gem_take(
        self,
        options: Sequence[tuple[str, ...]],
        player: PlayerState,
        targets: Sequence[Card],
        nobles: Sequence[Noble],
    ) -> tuple[str, ...] | None:
        """Best take among the options; the first one wins ties."""
        best: tuple[str, ...] | None = None
        best_score = float("-inf")
        for selection in options:
            score = self.score_gem_take(selection, player, targets, nobles)
            if score > best_score:
                best, best_score = selection, score
        return best

    def score_reserve(
        self,
        card: Card,
        player: PlayerState,
        nobles: Sequence[Noble],
        opponent_needs: Sequence[Gems],
    ) -> float:
        w = self.weights
        score = self.score_card(card, player, nobles)
        if blocks_opponent(card, opponent_needs):
            score += w.block_bonus
        deficit, _ = rules.card_deficit(player, card)
        score += max(0, w.reserve_deficit_ceiling - deficit) * w.reserve_deficit_weight
        return score

    def best_reserve(
        self,
        cards: Sequence[Card],
        player: PlayerState,
        nobles: Sequence[Noble],
        opponent_needs: Sequence[Gems],
    ) -> Card | None:
        best: Card | None = None
        best_score = float("-inf")
        for card in cards:
            score = self.score_reserve(card, player, nobles, opponent_needs)
            if score > best_score:
                best, best_score = card, score
        return best

    def reachable_nobles(self, player: PlayerState, nobles: Sequence[Noble]) -> list[Noble]:
        """Nobles within the profile's bonus tolerance."""
        bonuses = rules.bonus_discount(player)
        return [
            noble for noble in nobles
            if rules.missing_for_noble(bonuses, noble) <= self.profile.noble_missing_max
        ]

    def nobles_completed_by(
        self, player: PlayerState, card: Card, nobles: Sequence[Noble]
    ) -> list[Noble]:
        """Nobles the player would newly qualify for after buying the card."""
        before = rules.bonus_discount(player)
        after = rules.bonuses_with(player, [card])
        return [
            noble for noble in nobles
            if rules.missing_for_noble(after, noble) == 0
            and rules.missing_for_noble(before, noble) > 0
        ]

    def gold_needed(self, player: PlayerState, card: Card) -> int:
        return rules.payment_for(player, card).gold

    def within_gold_threshold(self, player: PlayerState, card: Card) -> bool:
        return self.gold_needed(player, card) <= self.profile.gold_afford_threshold

    def should_reserve(self, card: Card, state: GameState, player_idx: int) -> bool:
        """
        Decide if a card is worth reserving.

        High-point cards always are; tier 2-3 cards are when they
        block an opponent or carry any points.
        """
        if card.points >= self.profile.reserve_points_min:
            return True

        blocking = blocks_opponent(card, opponent_needs(state, player_idx))
        return card.tier >= 2 and (blocking or card.points >= 1)


def opponent_needs(state: GameState, player_idx: int) -> list[Gems]:
    """Costs of displayed cards that some opponent can already afford."""
    needs = []
    displayed = state.all_displayed()
    for idx, opponent in enumerate(state.players):
        if idx == player_idx:
            continue
        needs.extend(card.cost for card in displayed if rules.can_purchase(opponent, card))
    return needs


def blocks_opponent(card: Card, needs: Sequence[Gems]) -> bool:
    """True if the card's bonus color appears in any opponent's need."""
    return any(need[card.bonus] > 0 for need in needs if card.bonus in COLORS)


def is_opening_turn(player: PlayerState) -> bool:
    """No gems held and nothing purchased yet."""
    return player.gems.total == 0 and not player.purchased
