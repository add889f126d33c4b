"""
Simulation - Bot-only games for balance testing.

Plays many games between computer opponents and aggregates:
- Win rates per seat and per difficulty
- Average game length (completed turns)
- Average final points per difficulty
- The most and least purchased cards, and the most claimed nobles
"""

from __future__ import annotations
import asyncio
from collections import Counter
from dataclasses import dataclass, field
import logging
import random
from typing import Sequence

from ..engine_core.state import GameState
from ..engine_core.reducer import apply_action
from ..bots import Difficulty, create_bots
from ..content import ALL_CARDS, create_game
from .turn_controller import TurnController, no_delay

logger = logging.getLogger(__name__)


@dataclass
class GameRecord:
    """Outcome of one simulated game."""
    game_id: str
    finished: bool
    turns: int
    winner_idx: int | None
    difficulties: list[str]
    final_points: list[int]
    cards_purchased: list[str] = field(default_factory=list)
    nobles_claimed: list[str] = field(default_factory=list)

    @property
    def winner_difficulty(self) -> str | None:
        if self.winner_idx is None:
            return None
        return self.difficulties[self.winner_idx]


@dataclass
class SimulationReport:
    """Aggregate over a batch of games with the same seating."""
    difficulties: list[str]
    records: list[GameRecord] = field(default_factory=list)

    @property
    def total_games(self) -> int:
        return len(self.records)

    @property
    def finished_games(self) -> list[GameRecord]:
        return [r for r in self.records if r.finished]

    @property
    def avg_turns(self) -> float:
        finished = self.finished_games
        if not finished:
            return 0.0
        return sum(r.turns for r in finished) / len(finished)

    def seat_win_rates(self) -> dict[str, float]:
        """Win rate per seat, keyed like "P1 (hard)"."""
        finished = self.finished_games
        wins = Counter(r.winner_idx for r in finished)
        return {
            self.seat_label(idx): (wins[idx] / len(finished) if finished else 0.0)
            for idx in range(len(self.difficulties))
        }

    def difficulty_stats(self) -> dict[str, dict[str, float]]:
        """Average points and win rate per difficulty."""
        stats: dict[str, dict[str, float]] = {}
        finished = self.finished_games
        for difficulty in dict.fromkeys(self.difficulties):
            seats = [i for i, d in enumerate(self.difficulties) if d == difficulty]
            points = [r.final_points[i] for r in finished for i in seats]
            wins = sum(1 for r in finished if r.winner_idx in seats)
            stats[difficulty] = {
                "avg_points": sum(points) / len(points) if points else 0.0,
                "win_rate": wins / len(finished) if finished else 0.0,
            }
        return stats

    def card_counts(self) -> Counter:
        counts: Counter = Counter({card.card_id: 0 for card in ALL_CARDS})
        for record in self.records:
            counts.update(record.cards_purchased)
        return counts

    def top_cards(self, n: int = 5) -> list[tuple[str, int]]:
        return self.card_counts().most_common(n)

    def bottom_cards(self, n: int = 5) -> list[tuple[str, int]]:
        ranked = sorted(self.card_counts().items(), key=lambda item: (item[1], item[0]))
        return ranked[:n]

    def top_nobles(self, n: int = 3) -> list[tuple[str, int]]:
        counts: Counter = Counter()
        for record in self.records:
            counts.update(record.nobles_claimed)
        return counts.most_common(n)

    def seat_label(self, idx: int) -> str:
        return f"P{idx + 1} ({self.difficulties[idx]})"

    def format(self) -> str:
        """Plain-text summary for the CLI."""
        lines = [
            f"Configuration: {len(self.difficulties)} players - {', '.join(self.difficulties)}",
            f"Games: {self.total_games} ({len(self.finished_games)} finished)",
            f"Average game length: {self.avg_turns:.1f} turns",
            "",
            "Win rates:",
        ]
        for label, rate in self.seat_win_rates().items():
            lines.append(f"  {label}: {rate:.1%}")

        lines.append("")
        lines.append("By difficulty:")
        for difficulty, stats in self.difficulty_stats().items():
            lines.append(
                f"  {difficulty}: avg {stats['avg_points']:.1f} points, "
                f"win rate {stats['win_rate']:.1%}"
            )

        lines.append("")
        lines.append("Most purchased cards:")
        for card_id, count in self.top_cards():
            lines.append(f"  {card_id}: {count}")
        lines.append("Least purchased cards:")
        for card_id, count in self.bottom_cards():
            lines.append(f"  {card_id}: {count}")
        lines.append("Most claimed nobles:")
        for noble_id, count in self.top_nobles():
            lines.append(f"  {noble_id}: {count}")
        return "\n".join(lines)


def record_game(state: GameState, difficulties: Sequence[str]) -> GameRecord:
    """Summarise a final state."""
    return GameRecord(
        game_id=state.game_id,
        finished=state.is_finished,
        turns=state.turn_number,
        winner_idx=state.winner_idx,
        difficulties=list(difficulties),
        final_points=[p.points for p in state.players],
        cards_purchased=[c.card_id for p in state.players for c in p.purchased],
        nobles_claimed=[n.noble_id for p in state.players for n in p.nobles],
    )


async def play_game(
    difficulties: Sequence[str],
    rng: random.Random,
    max_chain_turns: int | None = None,
) -> GameRecord:
    """Play one bot-only game to the end (or the chain bound)."""
    names = [f"P{idx + 1}" for idx in range(len(difficulties))]
    state = create_game(names, rng=rng, humans=0, difficulties=difficulties)
    bots = create_bots(state, rng)

    controller = TurnController(
        apply_action,
        bots,
        delay=no_delay,
        think_time=0,
        max_chain_turns=max_chain_turns,
    )
    state = await controller.run_ai_turns(state)
    if not state.is_finished:
        logger.warning("Game %s did not finish after %d turns", state.game_id, state.turn_number)
    return record_game(state, difficulties)


async def run_simulation_async(
    difficulties: Sequence[str],
    games: int,
    seed: int | None = None,
    max_chain_turns: int | None = None,
) -> SimulationReport:
    difficulties = [Difficulty(d).value for d in difficulties]
    rng = random.Random(seed)
    report = SimulationReport(difficulties=difficulties)
    for game_number in range(games):
        record = await play_game(difficulties, rng, max_chain_turns)
        report.records.append(record)
        logger.debug(
            "Game %d: winner %s after %d turns",
            game_number + 1, record.winner_idx, record.turns,
        )
    return report


def run_simulation(
    difficulties: Sequence[str],
    games: int,
    seed: int | None = None,
    max_chain_turns: int | None = None,
) -> SimulationReport:
    """
    Run a batch of bot-only games.

    Args:
        difficulties: One difficulty per seat (2-4 entries)
        games: Number of games to play
        seed: Seed for deals and bots
        max_chain_turns: Per-game safety bound on turns
    """
    return asyncio.run(run_simulation_async(difficulties, games, seed, max_chain_turns))
