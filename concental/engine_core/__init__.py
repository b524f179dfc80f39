"""
Engine Core - The memory game state machine and scoring model.

The engine:
1. Looks up a difficulty configuration
2. Deals a shuffled deck of paired cards
3. Runs turns (two flips, deferred match/mismatch resolution)
4. Tracks moves, hints and play time
5. Decides win/loss and scores the result
"""

from .difficulty import Difficulty, DifficultyConfig, DIFFICULTIES, SYMBOL_ALPHABET, get_config
from .state import Card, CardState, CardView, GameStatus, GameSnapshot, GameResult
from .deck import DeckError, build_deck
from .scheduler import Scheduler, ScheduledCall, ManualScheduler, AsyncioScheduler
from .scoring import MemoryRating, RATING_TIERS, calculate_score, memory_rating
from .game import GameSession, TurnDelays, IMMEDIATE

__all__ = [
    "Difficulty",
    "DifficultyConfig",
    "DIFFICULTIES",
    "SYMBOL_ALPHABET",
    "get_config",
    "Card",
    "CardState",
    "CardView",
    "GameStatus",
    "GameSnapshot",
    "GameResult",
    "DeckError",
    "build_deck",
    "Scheduler",
    "ScheduledCall",
    "ManualScheduler",
    "AsyncioScheduler",
    "MemoryRating",
    "RATING_TIERS",
    "calculate_score",
    "memory_rating",
    "GameSession",
    "TurnDelays",
    "IMMEDIATE",
]
