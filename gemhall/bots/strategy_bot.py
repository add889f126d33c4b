"""
Strategy Bot - Heuristic computer opponent in three difficulty tiers.

This is the bot that:
- Plays one main action per decision (the controller ends the turn)
- Follows a fixed priority ladder per difficulty
- Draws every random choice from an injected random source
- Only ever returns an action from the legal-action list

The bot does NOT:
- Search more than one move ahead
- Coordinate with other bots
- Learn from games
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence, TypeVar
import random

from ..engine_core.action import Action, ActionType
from ..engine_core.rules import WINNING_POINTS, card_deficit
from .policy import BotPolicy, BotDecision
from .profile import AIProfile, Difficulty, create_profile
from .evaluator import CardEvaluator, WEIGHTS, is_opening_turn, opponent_needs

if TYPE_CHECKING:
    from ..engine_core.state import Card, GameState, Noble, PlayerState

T = TypeVar("T")

EASY_PURCHASE_CHANCE = 0.35
EASY_RESERVE_CHANCE = 0.25

# Hard bots reserve anything this close to affordable
HARD_RESERVE_DEFICIT = 2


@dataclass
class _Options:
    """Legal actions for one decision, split by type."""
    purchases: list[Action]
    reserves: list[Action]
    takes: list[Action]
    end_turn: Action | None
    other: list[Action]

    @classmethod
    def split(cls, legal_actions: Sequence[Action]) -> _Options:
        purchases, reserves, takes, other = [], [], [], []
        end_turn = None
        for action in legal_actions:
            kind = action.action_type
            if kind == ActionType.PURCHASE_CARD:
                purchases.append(action)
            elif kind == ActionType.RESERVE_CARD:
                reserves.append(action)
            elif kind == ActionType.TAKE_GEMS:
                takes.append(action)
            elif kind == ActionType.END_TURN:
                end_turn = action
            else:
                other.append(action)
        return cls(purchases, reserves, takes, end_turn, other)

    @property
    def has_main(self) -> bool:
        return bool(self.purchases or self.reserves or self.takes)

    def preferred_takes(self) -> list[Action]:
        """Full takes (two or three gems) when there are any, else singles."""
        full = [a for a in self.takes if len(a.gems) >= 2]
        return full or self.takes


@dataclass
class StrategyBot(BotPolicy):
    """
    Heuristic opponent for one difficulty tier.

    Usage:
        bot = StrategyBot(player_id="bot_1", difficulty=Difficulty.HARD, rng=random.Random(7))
        action = bot.decide_action(state, player_idx=1)
    """
    player_id: str
    difficulty: Difficulty = Difficulty.MEDIUM
    profile: AIProfile = None  # type: ignore
    rng: random.Random = None  # type: ignore

    def __post_init__(self):
        self.difficulty = Difficulty(self.difficulty)
        if self.rng is None:
            self.rng = random.Random()
        if self.profile is None:
            self.profile = create_profile(self.difficulty, self.rng)
        self.evaluator = CardEvaluator(self.profile, WEIGHTS[self.difficulty])

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select an action by walking the difficulty's priority ladder.

        Pending discards and turns with the main action already used
        are answered directly; everything else goes to the tier.
        """
        if not legal_actions:
            raise ValueError("No legal actions available")

        player_idx = legal_actions[0].player_idx
        options = _Options.split(legal_actions)

        if options.end_turn is None:
            # Only a discard is possible
            return self._decision(legal_actions[0], "Forced", legal_actions)

        if not options.has_main:
            action = options.other[0] if options.other else options.end_turn
            return self._decision(action, "Main action already used", legal_actions)

        player = state.players[player_idx]
        if self.difficulty == Difficulty.EASY:
            action, reason = self._easy(player, options)
        else:
            action, reason = self._deliberate(state, player_idx, player, options)
        return self._decision(action, reason, legal_actions)

    def get_name(self) -> str:
        return f"StrategyBot({self.player_id}, {self.difficulty.value})"

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    def _easy(self, player: PlayerState, options: _Options) -> tuple[Action, str]:
        """Mostly random, with a weak bias toward buying."""
        if options.purchases and self.rng.random() < EASY_PURCHASE_CHANCE:
            return self._pick(options.purchases), "Impulse purchase"

        takes = options.preferred_takes()
        if takes:
            return self._pick_weighted_take(takes), "Gathering gems"

        if (
            options.reserves
            and not is_opening_turn(player)
            and self.rng.random() < EASY_RESERVE_CHANCE
        ):
            return self._pick(options.reserves), "Random reserve"

        if options.purchases:
            return self._pick(options.purchases), "Fallback purchase"

        return options.end_turn, "Nothing to do"

    def _deliberate(
        self,
        state: GameState,
        player_idx: int,
        player: PlayerState,
        options: _Options,
    ) -> tuple[Action, str]:
        """The medium/hard ladder."""
        hard = self.difficulty == Difficulty.HARD
        evaluator = self.evaluator
        nobles = list(state.nobles)

        purchases_by_card = {a.card: a for a in options.purchases}
        affordable = list(purchases_by_card)

        # A winning purchase is never traded for a random move
        if hard:
            winning = [
                card for card in affordable
                if self._points_after(player, card, nobles) >= WINNING_POINTS
            ]
            if winning:
                card = evaluator.best_card(winning, player, nobles)
                return purchases_by_card[card], "Winning purchase"

        if self.rng.random() < self.profile.random_move_chance:
            return self._random_move(player, options), "Random move"

        reachable = evaluator.reachable_nobles(player, nobles)
        if affordable and reachable:
            noble_cards = [
                card for card in affordable
                if evaluator.nobles_completed_by(player, card, reachable)
            ]
            if noble_cards:
                card = evaluator.best_card(noble_cards, player, nobles)
                return purchases_by_card[card], "Purchase toward a noble"

        if affordable:
            cheap = [card for card in affordable if evaluator.within_gold_threshold(player, card)]
            card = evaluator.best_card(cheap or affordable, player, nobles)
            return purchases_by_card[card], "Best affordable purchase"

        takes = options.preferred_takes()
        if takes:
            takes_by_gems = {a.gems: a for a in takes}
            targets = evaluator.select_targets(state.all_displayed(), player, nobles)
            selection = evaluator.choose_gem_take(list(takes_by_gems), player, targets, nobles)
            if selection is not None:
                return takes_by_gems[selection], "Collecting toward targets"

        if options.reserves and not is_opening_turn(player):
            reserves_by_card = {a.card: a for a in options.reserves}
            needs = opponent_needs(state, player_idx)
            card = evaluator.best_reserve(list(reserves_by_card), player, nobles, needs)
            if card is not None:
                close = hard and card_deficit(player, card)[0] <= HARD_RESERVE_DEFICIT
                if close or evaluator.should_reserve(card, state, player_idx):
                    return reserves_by_card[card], "Reserving"

        return options.end_turn, "No useful move"

    def _random_move(self, player: PlayerState, options: _Options) -> Action:
        moves: list[Action] = []
        if options.purchases:
            moves.append(self._pick(options.purchases))
        moves.extend(options.preferred_takes())
        if options.reserves and not is_opening_turn(player):
            moves.append(self._pick(options.reserves))
        moves.append(options.end_turn)
        return self._pick(moves)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _pick(self, items: Sequence[T]) -> T:
        """Uniform pick driven by a single rng.random() draw."""
        idx = int(self.rng.random() * len(items))
        return items[min(idx, len(items) - 1)]

    def _pick_weighted_take(self, takes: Sequence[Action]) -> Action:
        """Focus colors make a take more likely."""
        weighted: list[Action] = []
        for action in takes:
            hits = sum(1 for color in action.gems if self.profile.is_focus(color))
            weighted.extend([action] * (1 + hits))
        return self._pick(weighted)

    def _points_after(self, player: PlayerState, card: Card, nobles: Sequence[Noble]) -> int:
        completed = self.evaluator.nobles_completed_by(player, card, nobles)
        return player.points + card.points + sum(n.points for n in completed)

    def _decision(self, action: Action, reason: str, legal_actions: Sequence[Action]) -> BotDecision:
        return BotDecision(
            action=action,
            explanation=f"{reason}: {action.describe()}",
            evaluated_actions=len(legal_actions),
            evaluation_details={"difficulty": self.difficulty.value},
        )


def create_bots(
    state: GameState,
    rng: random.Random | None = None,
) -> dict[int, BotPolicy]:
    """
    Build the bot registry for every computer seat in a game.

    Each bot gets its own random source seeded from `rng`, so a
    seeded registry replays identically.
    """
    rng = rng or random.Random()
    bots: dict[int, BotPolicy] = {}
    for idx, player in enumerate(state.players):
        if player.is_human:
            continue
        bot_rng = random.Random(rng.randrange(2**32))
        bots[idx] = StrategyBot(
            player_id=player.player_id,
            difficulty=Difficulty(player.difficulty or Difficulty.MEDIUM),
            rng=bot_rng,
        )
    return bots
