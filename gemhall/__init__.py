"""
Gem Hall - Turn-based gem trading game engine

A deterministic, rules-driven engine for a gem collection game played
against computer opponents. It provides:
- State management and a pure transition function
- Legal action generation
- An async turn controller that chains computer turns
- Three tiers of heuristic bots
"""

__version__ = "0.1.0"
