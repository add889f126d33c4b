"""
Game State - Immutable-friendly containers for a Gem Hall game.

Design principles:
- Copy-on-write: every change returns a new object, nothing is aliased
- Cards and nobles are catalog items identified by id
- Gem collections never go negative
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Iterator, Mapping


COLORS: tuple[str, ...] = ("red", "blue", "green", "white", "black")
GOLD = "gold"
ALL_COLORS: tuple[str, ...] = COLORS + (GOLD,)

TIERS: tuple[int, ...] = (1, 2, 3)


class GamePhase(Enum):
    """High-level game phases. Transitions only move forward."""
    SETUP = "setup"
    ACTIVE = "active"
    ENDGAME = "endgame"
    FINISHED = "finished"


@dataclass(frozen=True)
class Gems:
    """
    A collection of gem tokens, one count per color plus gold.

    Used for player holdings, the shared pool, card costs,
    noble requirements and bonus totals.
    """
    red: int = 0
    blue: int = 0
    green: int = 0
    white: int = 0
    black: int = 0
    gold: int = 0

    def __post_init__(self):
        for color in ALL_COLORS:
            if getattr(self, color) < 0:
                raise ValueError(f"Gem count for {color} cannot be negative")

    @classmethod
    def of(cls, counts: Mapping[str, int] | None = None) -> Gems:
        """Build from a mapping; missing colors are 0."""
        counts = counts or {}
        unknown = set(counts) - set(ALL_COLORS)
        if unknown:
            raise ValueError(f"Unknown gem colors: {sorted(unknown)}")
        return cls(**{color: int(counts.get(color, 0)) for color in ALL_COLORS})

    @classmethod
    def from_selection(cls, selection: Iterable[str]) -> Gems:
        """Count a list of color names, e.g. ["red", "red"] -> red=2."""
        counts: dict[str, int] = {}
        for color in selection:
            counts[color] = counts.get(color, 0) + 1
        return cls.of(counts)

    def __getitem__(self, color: str) -> int:
        if color not in ALL_COLORS:
            raise KeyError(color)
        return getattr(self, color)

    def items(self) -> Iterator[tuple[str, int]]:
        for color in ALL_COLORS:
            yield color, getattr(self, color)

    @property
    def total(self) -> int:
        return sum(count for _, count in self.items())

    @property
    def colored_total(self) -> int:
        return self.total - self.gold

    def plus(self, other: Gems) -> Gems:
        return Gems(**{color: self[color] + other[color] for color in ALL_COLORS})

    def minus(self, other: Gems) -> Gems:
        """Subtract; raises ValueError if any color would go negative."""
        return Gems(**{color: self[color] - other[color] for color in ALL_COLORS})

    def with_count(self, color: str, count: int) -> Gems:
        return replace(self, **{color: count})

    def covers(self, other: Gems) -> bool:
        """True if every color count here is at least the other's."""
        return all(self[color] >= other[color] for color in ALL_COLORS)

    def to_dict(self) -> dict[str, int]:
        return dict(self.items())


@dataclass(frozen=True, eq=False)
class Card:
    """
    A development card from the content catalog.

    Identity is the card_id; the catalog never repeats an id.
    """
    card_id: str
    tier: int
    points: int
    bonus: str  # Color granted as a permanent discount once purchased
    cost: Gems = field(default_factory=Gems)

    def __hash__(self):
        return hash(self.card_id)

    def __eq__(self, other):
        if not isinstance(other, Card):
            return False
        return self.card_id == other.card_id


@dataclass(frozen=True, eq=False)
class Noble:
    """A noble tile, awarded for bonus totals (not held gems)."""
    noble_id: str
    points: int
    requirement: Gems = field(default_factory=Gems)

    def __hash__(self):
        return hash(self.noble_id)

    def __eq__(self, other):
        if not isinstance(other, Noble):
            return False
        return self.noble_id == other.noble_id


@dataclass(frozen=True)
class PendingDiscard:
    """A player must shed `count` gems before the turn can end."""
    player_idx: int
    count: int


@dataclass
class PlayerState:
    """
    State for a single player.

    Card sequences are tuples so a copied player never shares
    a mutable list with the state it was copied from.
    """
    player_id: str
    name: str
    is_human: bool = True
    difficulty: str | None = None  # Label for computer players

    gems: Gems = field(default_factory=Gems)
    purchased: tuple[Card, ...] = ()
    reserved: tuple[Card, ...] = ()
    points: int = 0
    nobles: tuple[Noble, ...] = ()

    def bonus_count(self, color: str) -> int:
        return sum(1 for card in self.purchased if card.bonus == color)

    def _copy_with(self, **kwargs) -> PlayerState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    game_id: str = "game"

    players: tuple[PlayerState, ...] = ()
    current_player_idx: int = 0

    # Tier -> cards. Decks are drawn from the front.
    decks: dict[int, tuple[Card, ...]] = field(default_factory=dict)
    displayed: dict[int, tuple[Card, ...]] = field(default_factory=dict)

    nobles: tuple[Noble, ...] = ()
    pool: Gems = field(default_factory=Gems)

    phase: GamePhase = GamePhase.SETUP
    winner_idx: int | None = None
    pending_discard: PendingDiscard | None = None
    # Who reached the winning points, and on which turn
    endgame_trigger_idx: int | None = None
    endgame_turn: int | None = None

    # Whether the current player has already taken, reserved or purchased
    action_taken: bool = False
    turn_number: int = 0

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_idx]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def winner(self) -> PlayerState | None:
        if self.winner_idx is None:
            return None
        return self.players[self.winner_idx]

    @property
    def is_finished(self) -> bool:
        return self.phase == GamePhase.FINISHED

    @property
    def deck_sizes(self) -> dict[int, int]:
        return {tier: len(self.decks.get(tier, ())) for tier in TIERS}

    def all_displayed(self) -> list[Card]:
        """Face-up cards, tier 1 first."""
        cards: list[Card] = []
        for tier in TIERS:
            cards.extend(self.displayed.get(tier, ()))
        return cards

    def has_player(self, player_idx: int) -> bool:
        return 0 <= player_idx < len(self.players)

    def with_player(self, player_idx: int, player: PlayerState) -> GameState:
        """Return new state with the player at an index replaced."""
        new_players = tuple(
            player if idx == player_idx else p
            for idx, p in enumerate(self.players)
        )
        return self._copy_with(players=new_players)

    def with_tier(
        self,
        tier: int,
        displayed: tuple[Card, ...],
        deck: tuple[Card, ...],
    ) -> GameState:
        """Return new state with one tier's display and deck replaced."""
        new_displayed = dict(self.displayed)
        new_displayed[tier] = displayed
        new_decks = dict(self.decks)
        new_decks[tier] = deck
        return self._copy_with(displayed=new_displayed, decks=new_decks)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
