"""
Game State - Cards, statuses and the immutable snapshots handed to renderers.

Design principles:
- Cards are mutated only by GameSession
- Snapshots are frozen: renderers cannot corrupt the session
- Hidden card faces never leak into a snapshot
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .difficulty import Difficulty
    from .scoring import MemoryRating


class CardState(Enum):
    """Visibility of a single card."""
    HIDDEN = "hidden"
    FLIPPED = "flipped"
    MATCHED = "matched"


class GameStatus(Enum):
    """Lifecycle of a game session."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.LOST)


@dataclass
class Card:
    """
    A card on the table.

    `hinted` is a transient marker set by a hint and cleared by the next flip.
    """
    index: int
    symbol: str
    state: CardState = CardState.HIDDEN
    hinted: bool = False

    @property
    def is_revealed(self) -> bool:
        return self.state in (CardState.FLIPPED, CardState.MATCHED)

    def view(self) -> CardView:
        return CardView(
            index=self.index,
            symbol=self.symbol if self.is_revealed else None,
            state=self.state,
            hinted=self.hinted,
        )


@dataclass(frozen=True)
class CardView:
    """Render-safe view of a card. `symbol` is None while the card is face down."""
    index: int
    symbol: str | None
    state: CardState
    hinted: bool = False


@dataclass(frozen=True)
class GameResult:
    """Outcome of a finished session, as shown on the result screen."""
    won: bool
    difficulty: Difficulty
    matched_pair_count: int
    total_pairs: int
    move_count: int
    max_moves: int
    elapsed_seconds: int
    score: int
    rating: MemoryRating | None = None

    @property
    def headline(self) -> str:
        return "Victory!" if self.won else "Game Over"

    @property
    def message(self) -> str:
        if self.won:
            return "Congratulations! You've found all pairs!"
        return "Sorry! You've run out of moves. Try again?"


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable picture of a session, emitted after every state change."""
    difficulty: Difficulty | None
    rows: int
    cols: int
    cards: tuple[CardView, ...]
    move_count: int
    max_moves: int
    matched_pair_count: int
    total_pairs: int
    elapsed_seconds: int
    hints_remaining: int
    status: GameStatus
    progress: float
    progress_level: str
    result: GameResult | None = None

    @property
    def flipped_indices(self) -> tuple[int, ...]:
        return tuple(c.index for c in self.cards if c.state == CardState.FLIPPED)

    @property
    def hinted_indices(self) -> tuple[int, ...]:
        return tuple(c.index for c in self.cards if c.hinted)
