"""
Bots module - Computer opponent implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- CardEvaluator: Scores cards and gem takes
- StrategyBot: The easy/medium/hard heuristic opponent
- AIProfile: Per-instance randomized play style
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .profile import AIProfile, Difficulty, create_profile
from .evaluator import CardEvaluator, ScoringWeights, WEIGHTS
from .strategy_bot import StrategyBot, create_bots

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "AIProfile",
    "Difficulty",
    "create_profile",
    "CardEvaluator",
    "ScoringWeights",
    "WEIGHTS",
    "StrategyBot",
    "create_bots",
]
