"""
Tests for bot policies.

Tests:
- Bots only return legal actions
- Difficulty ladders pick the expected move
- Profiles and the card evaluator
"""

import random

import pytest

from ..engine_core.state import COLORS, Gems
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import legal_actions
from ..engine_core.reducer import apply_action, install_pending_discard
from ..bots.policy import FirstLegalPolicy, RandomPolicy
from ..bots.profile import AIProfile, Difficulty, create_profile
from ..bots.evaluator import (
    CardEvaluator,
    HARD_WEIGHTS,
    MEDIUM_WEIGHTS,
    blocks_opponent,
    is_opening_turn,
    opponent_needs,
)
from ..bots.strategy_bot import StrategyBot, create_bots
from .conftest import (
    BLUE_ONE,
    CHEAP_RED,
    GREEN_ZERO,
    WHITE_TWO,
    ScriptedRandom,
    bonus_cards,
    make_card,
    make_noble,
    with_player,
)


PROFILE = AIProfile(focus_colors=("red", "blue"), random_move_chance=0.25)


def bot_turn(state):
    """Hand the turn to seat 1."""
    return state._copy_with(current_player_idx=1)


class TestSimplePolicies:
    """Tests for the baseline policies."""

    def test_first_legal_ends_turn(self, simple_state):
        assert FirstLegalPolicy().decide_action(simple_state, 0) == Action.end_turn(0)

    def test_random_policy_is_legal(self, simple_state):
        policy = RandomPolicy(seed=42)
        legal = legal_actions(simple_state, 0)
        for _ in range(20):
            assert policy.decide_action(simple_state, 0) in legal

    def test_random_policy_reproducible(self, simple_state):
        a = [RandomPolicy(seed=1).decide_action(simple_state, 0) for _ in range(5)]
        b = [RandomPolicy(seed=1).decide_action(simple_state, 0) for _ in range(5)]
        assert a == b

    def test_no_legal_actions(self, simple_state):
        with pytest.raises(ValueError):
            FirstLegalPolicy().decide_action(simple_state, 1)


class TestStrategyBotLegality:
    """Whatever the tier, the bot stays inside the legal set."""

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_legal_through_a_game(self, bot_only_state, difficulty):
        bot = StrategyBot(player_id="bot", difficulty=difficulty, rng=random.Random(11))
        state = bot_only_state
        for _ in range(30):
            idx = state.current_player_idx
            action = bot.decide_action(state, idx)
            assert action in legal_actions(state, idx)

            state = apply_action(state, action)
            state = install_pending_discard(state, idx)
            if state.pending_discard:
                state = apply_action(state, bot.decide_action(state, idx))
            if action.action_type != ActionType.END_TURN:
                state = apply_action(state, Action.end_turn(idx))

    def test_forced_discard(self, simple_state):
        state = with_player(simple_state, 1, gems=Gems.of({"red": 12}))
        state = install_pending_discard(bot_turn(state), 1)
        bot = StrategyBot(player_id="bot_1", profile=PROFILE, rng=ScriptedRandom())
        assert bot.decide_action(state, 1) == Action.discard_gems(1, ["red", "red"])

    def test_main_action_used_claims_noble(self, simple_state):
        state = with_player(simple_state, 1, purchased=bonus_cards("red", 2))
        state = bot_turn(state)._copy_with(action_taken=True)
        bot = StrategyBot(player_id="bot_1", profile=PROFILE, rng=ScriptedRandom())

        action = bot.decide_action(state, 1)
        assert action.action_type == ActionType.CLAIM_NOBLE

    def test_main_action_used_ends_turn(self, simple_state):
        state = bot_turn(simple_state)._copy_with(action_taken=True)
        bot = StrategyBot(player_id="bot_1", profile=PROFILE, rng=ScriptedRandom())
        assert bot.decide_action(state, 1) == Action.end_turn(1)


class TestEasyBot:
    """Tests for the easy ladder."""

    def test_impulse_purchase(self, simple_state):
        state = with_player(bot_turn(simple_state), 1, gems=Gems.of({"blue": 1}))
        bot = StrategyBot(
            player_id="bot_1", difficulty=Difficulty.EASY, profile=PROFILE,
            rng=ScriptedRandom([0.1, 0.0]),
        )
        assert bot.decide_action(state, 1) == Action.purchase(1, CHEAP_RED)

    def test_otherwise_gathers_gems(self, simple_state):
        state = bot_turn(simple_state)
        bot = StrategyBot(
            player_id="bot_1", difficulty=Difficulty.EASY, profile=PROFILE,
            rng=ScriptedRandom([0.0]),
        )
        action = bot.decide_action(state, 1)
        assert action.action_type == ActionType.TAKE_GEMS
        assert len(action.gems) >= 2


class TestDeliberateBots:
    """Tests for the medium and hard ladders."""

    def make_bot(self, difficulty, rng=None, **profile_changes):
        profile = AIProfile(
            focus_colors=("black", "white"),
            random_move_chance=0.05,
            **profile_changes,
        )
        return StrategyBot(
            player_id="bot_1", difficulty=difficulty, profile=profile,
            rng=rng or ScriptedRandom(fallback=0.99),
        )

    def test_random_move_branch(self, simple_state):
        state = bot_turn(simple_state)
        bot = StrategyBot(
            player_id="bot_1", difficulty=Difficulty.MEDIUM, profile=PROFILE,
            rng=ScriptedRandom([0.0], fallback=0.0),
        )
        action = bot.decide_action(state, 1)
        assert action in legal_actions(state, 1)

    def test_hard_takes_the_win(self, simple_state):
        state = with_player(
            bot_turn(simple_state), 1,
            points=13,
            gems=Gems.of({"blue": 1, "black": 4}),
        )
        bot = self.make_bot(Difficulty.HARD)
        assert bot.decide_action(state, 1) == Action.purchase(1, WHITE_TWO)

    def test_hard_win_beats_random_move(self, simple_state):
        state = with_player(
            bot_turn(simple_state), 1,
            points=13,
            gems=Gems.of({"blue": 1, "black": 4}),
        )
        bot = self.make_bot(Difficulty.HARD, rng=ScriptedRandom([0.01]))
        assert bot.decide_action(state, 1) == Action.purchase(1, WHITE_TWO)

    def test_purchase_toward_noble(self, simple_state):
        # One red bonus away from NB-1; both cards are affordable
        state = with_player(
            bot_turn(simple_state), 1,
            purchased=bonus_cards("red", 1),
            gems=Gems.of({"blue": 1, "white": 2, "green": 1}),
        )
        bot = self.make_bot(Difficulty.MEDIUM)
        assert bot.decide_action(state, 1) == Action.purchase(1, CHEAP_RED)

    def test_best_affordable_purchase(self, simple_state):
        state = with_player(bot_turn(simple_state), 1, gems=Gems.of({"red": 3}))
        bot = self.make_bot(Difficulty.MEDIUM)
        assert bot.decide_action(state, 1) == Action.purchase(1, GREEN_ZERO)

    def test_takes_gems_toward_targets(self, simple_state):
        state = bot_turn(simple_state)
        bot = self.make_bot(Difficulty.MEDIUM)
        action = bot.decide_action(state, 1)
        assert action.action_type == ActionType.TAKE_GEMS
        assert len(action.gems) >= 2
        # Both targets are paid in the focus colors
        assert {"white", "black"} & set(action.gems)

    def test_reserves_when_nothing_to_take(self, simple_state):
        state = with_player(
            bot_turn(simple_state), 1, gems=Gems.of({"green": 10})
        )
        bot = self.make_bot(Difficulty.MEDIUM, reserve_points_min=2)
        action = bot.decide_action(state, 1)
        assert action.action_type == ActionType.RESERVE_CARD
        assert action.card.points >= 2

    def test_ends_turn_when_stuck(self, simple_state):
        state = with_player(
            bot_turn(simple_state), 1,
            gems=Gems.of({"green": 10}),
            reserved=tuple(make_card(f"H{n}", black=7) for n in range(3)),
        )
        bot = self.make_bot(Difficulty.MEDIUM)
        assert bot.decide_action(state, 1) == Action.end_turn(1)


class TestProfiles:
    """Tests for profile rolls."""

    @pytest.mark.parametrize("difficulty,chance", [
        (Difficulty.EASY, 0.7),
        (Difficulty.MEDIUM, 0.25),
        (Difficulty.HARD, 0.05),
    ])
    def test_random_move_chance(self, difficulty, chance):
        profile = create_profile(difficulty, random.Random(1))
        assert profile.random_move_chance == chance

    def test_focus_colors(self):
        profile = create_profile("medium", random.Random(5))
        assert len(set(profile.focus_colors)) == 2
        assert all(color in COLORS for color in profile.focus_colors)

    def test_same_seed_same_profile(self):
        assert create_profile("hard", random.Random(9)) == create_profile("hard", random.Random(9))

    def test_unknown_difficulty(self):
        with pytest.raises(ValueError):
            create_profile("impossible")


class TestCardEvaluator:
    """Tests for card and take scoring."""

    @pytest.fixture
    def evaluator(self):
        return CardEvaluator(AIProfile(focus_colors=("red", "blue")), MEDIUM_WEIGHTS)

    def test_evaluate_card(self, evaluator, simple_state):
        player = simple_state.players[0]
        card = make_card("X", 1, 1, "red", white=1)
        # 15 points + 15 tier + 3 new color + 6 focus
        assert evaluator.evaluate_card(card, player, ()) == 39

    def test_evaluate_card_counts_nobles(self, evaluator, simple_state):
        player = simple_state.players[0]._copy_with(purchased=bonus_cards("green", 2))
        card = make_card("X", 1, 0, "green", white=1)
        noble = make_noble("N", green=3)
        with_noble = evaluator.evaluate_card(card, player, [noble])
        without = evaluator.evaluate_card(card, player, [])
        assert with_noble - without == 10

    def test_evaluate_card_capped(self, evaluator, simple_state):
        card = make_card("X", 3, 9, "red", white=1)
        assert evaluator.evaluate_card(card, simple_state.players[0], ()) == 100

    def test_nobles_completed_only_counts_new(self, evaluator, simple_state):
        player = simple_state.players[0]._copy_with(purchased=bonus_cards("red", 2))
        done = make_noble("DONE", red=2)
        next_one = make_noble("NEXT", red=3)
        completed = evaluator.nobles_completed_by(player, make_card("X", bonus="red"), [done, next_one])
        assert completed == [next_one]

    def test_best_card_prefers_cheap_close_cards(self, evaluator, simple_state):
        player = simple_state.players[0]._copy_with(gems=Gems.of({"blue": 1}))
        best = evaluator.best_card([GREEN_ZERO, CHEAP_RED], player, ())
        assert best == CHEAP_RED

    def test_choose_gem_take_follows_target(self, evaluator, simple_state):
        player = simple_state.players[0]
        target = make_card("X", 1, 0, "green", white=1, black=1, green=1)
        options = [("red", "blue", "white"), ("white", "black", "green")]
        assert evaluator.choose_gem_take(options, player, [target], ()) == options[1]

    def test_hard_weights_reward_points(self, simple_state):
        player = simple_state.players[0]
        card = make_card("X", 3, 4, "black", white=7)
        medium = CardEvaluator(PROFILE, MEDIUM_WEIGHTS).score_card(card, player, ())
        hard = CardEvaluator(PROFILE, HARD_WEIGHTS).score_card(card, player, ())
        assert hard > medium

    def test_should_reserve(self, evaluator, simple_state):
        assert evaluator.should_reserve(make_card("X", 1, 3), simple_state, 0)
        assert evaluator.should_reserve(make_card("Y", 2, 1), simple_state, 0)
        assert not evaluator.should_reserve(make_card("Z", 1, 0), simple_state, 0)

    def test_opponent_needs_and_blocking(self, simple_state):
        state = with_player(simple_state, 1, gems=Gems.of({"blue": 1}))
        needs = opponent_needs(state, 0)
        assert needs == [CHEAP_RED.cost]
        assert blocks_opponent(make_card("X", bonus="blue"), needs)
        assert not blocks_opponent(make_card("Y", bonus="red"), needs)

    def test_opening_turn(self, simple_state):
        player = simple_state.players[0]
        assert is_opening_turn(player)
        assert not is_opening_turn(player._copy_with(gems=Gems.of({"red": 1})))


class TestCreateBots:
    """Tests for the bot registry."""

    def test_one_bot_per_computer_seat(self, two_player_state):
        bots = create_bots(two_player_state, random.Random(1))
        assert list(bots) == [1]
        assert isinstance(bots[1], StrategyBot)
        assert bots[1].difficulty == Difficulty.MEDIUM
        assert bots[1].player_id == "bot_1"

    def test_difficulties_follow_players(self, bot_only_state):
        bots = create_bots(bot_only_state, random.Random(1))
        assert [bots[i].difficulty for i in range(3)] == [
            Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD,
        ]

    def test_seeded_registry_replays(self, bot_only_state):
        a = create_bots(bot_only_state, random.Random(4))
        b = create_bots(bot_only_state, random.Random(4))
        assert [bot.profile for bot in a.values()] == [bot.profile for bot in b.values()]

    def test_get_name(self, two_player_state):
        bot = create_bots(two_player_state, random.Random(1))[1]
        assert bot.get_name() == "StrategyBot(bot_1, medium)"
