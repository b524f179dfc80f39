"""
Difficulty - Static configuration table for the three game modes.

Each difficulty fixes:
- Grid dimensions (rows x cols, always an even card count)
- Move budget (turns allowed before the game is lost)
- Hint budget
- Score multiplier applied on a win
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Difficulty(Enum):
    """Named difficulty levels."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Difficulty | str) -> Difficulty:
        """Resolve a Difficulty from an enum member or its (case-insensitive) name."""
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty: {value!r} (expected one of: {names})") from None


@dataclass(frozen=True)
class DifficultyConfig:
    """Grid, budget and scoring parameters for one difficulty."""
    difficulty: Difficulty
    rows: int
    cols: int
    max_moves: int
    hints: int
    multiplier: float

    @property
    def card_count(self) -> int:
        return self.rows * self.cols

    @property
    def total_pairs(self) -> int:
        return self.card_count // 2


DIFFICULTIES: dict[Difficulty, DifficultyConfig] = {
    Difficulty.EASY: DifficultyConfig(
        difficulty=Difficulty.EASY, rows=4, cols=4, max_moves=25, hints=2, multiplier=1,
    ),
    Difficulty.MEDIUM: DifficultyConfig(
        difficulty=Difficulty.MEDIUM, rows=4, cols=5, max_moves=30, hints=3, multiplier=1.5,
    ),
    Difficulty.HARD: DifficultyConfig(
        difficulty=Difficulty.HARD, rows=5, cols=6, max_moves=45, hints=4, multiplier=2,
    ),
}


# Card faces. Thirty symbols covers the largest grid (hard, 15 pairs) twice over.
SYMBOL_ALPHABET: tuple[str, ...] = (
    "🐶", "🐱", "🐭", "🐹", "🐰", "🦊", "🐻", "🐼", "🐨", "🐯",
    "🦁", "🐮", "🐷", "🐸", "🐵", "🐔", "🦄", "🐙", "🦋", "🦀",
    "🐢", "🦓", "🦒", "🐬", "🦩", "🦜", "🦚", "🦉", "🐝", "🦂",
)


def get_config(difficulty: Difficulty | str) -> DifficultyConfig:
    """Look up the configuration for a difficulty (enum or name)."""
    return DIFFICULTIES[Difficulty.parse(difficulty)]
