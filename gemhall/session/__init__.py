"""
Session Module - Runs games.

A session represents one play-through of a game:
- Created when a caller starts a game
- Holds the current game state and the turn controller
- Plays the computer turns after each human action
- Dropped when the game ends or the caller leaves

Sessions are in-memory only.
"""

from .turn_controller import TurnController, no_delay
from .manager import SessionManager, Session, SessionState
from .simulation import GameRecord, SimulationReport, play_game, run_simulation

__all__ = [
    "TurnController",
    "no_delay",
    "SessionManager",
    "Session",
    "SessionState",
    "GameRecord",
    "SimulationReport",
    "play_game",
    "run_simulation",
]
