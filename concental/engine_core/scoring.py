"""
Scoring - Final score, memory rating and move-budget progress.

All functions here are pure: they take plain numbers and return values,
so the result screen can be recomputed from any finished snapshot.

Score on a win:
    floor((pairs * 100 + time_bonus + move_efficiency * 10) * multiplier)
    time_bonus      = max(1, 300 - elapsed_seconds)
    move_efficiency = max(0, max_moves - move_count)
"""

from __future__ import annotations
import math
from dataclasses import dataclass

TIME_BONUS_CEILING = 300
PAIR_POINTS = 100
SPARE_MOVE_POINTS = 10


@dataclass(frozen=True)
class MemoryRating:
    """One tier of the five-star memory rating."""
    stars: int
    label: str
    threshold: int  # minimum efficiency percentage for this tier

    @property
    def display(self) -> str:
        return "★" * self.stars + "☆" * (5 - self.stars) + f" ({self.label})"


# Highest tier first; a tier applies when efficiency >= threshold.
RATING_TIERS: tuple[MemoryRating, ...] = (
    MemoryRating(stars=5, label="Photographic Memory!", threshold=80),
    MemoryRating(stars=4, label="Excellent!", threshold=60),
    MemoryRating(stars=3, label="Good Job!", threshold=40),
    MemoryRating(stars=2, label="Keep Practicing!", threshold=20),
    MemoryRating(stars=1, label="Better Luck Next Time!", threshold=0),
)


def calculate_score(
    won: bool,
    total_pairs: int,
    elapsed_seconds: int,
    move_count: int,
    max_moves: int,
    multiplier: float,
) -> int:
    """Final score for a session. Zero unless the game was won."""
    if not won:
        return 0
    time_bonus = max(1, TIME_BONUS_CEILING - elapsed_seconds)
    move_efficiency = max(0, max_moves - move_count)
    base = total_pairs * PAIR_POINTS + time_bonus + move_efficiency * SPARE_MOVE_POINTS
    return math.floor(base * multiplier)


def move_efficiency(move_count: int, max_moves: int) -> float:
    """Percentage of the move budget left unused."""
    return (max_moves - move_count) / max_moves * 100


def memory_rating(move_count: int, max_moves: int) -> MemoryRating:
    """
    Bucket move efficiency into a rating tier.

    Thresholds are compared as integers (remaining * 100 >= threshold * max)
    so boundary values such as exactly 80% land in the upper tier.
    """
    remaining = max_moves - move_count
    for tier in RATING_TIERS:
        if remaining * 100 >= tier.threshold * max_moves:
            return tier
    return RATING_TIERS[-1]


def progress_ratio(move_count: int, max_moves: int) -> float:
    """Share of the move budget still available, clamped at zero."""
    return max(0.0, (max_moves - move_count) / max_moves)


def progress_level(ratio: float) -> str:
    """Colour band for the move bar: critical under 25%, warning under 50%."""
    if ratio < 0.25:
        return "critical"
    if ratio < 0.5:
        return "warning"
    return "normal"
