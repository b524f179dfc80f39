"""
Deck - Builds the shuffled card layout for a session.

The deck is:
1. The first `total_pairs` distinct symbols of the alphabet
2. Each symbol duplicated
3. Shuffled uniformly (Fisher-Yates via Random.shuffle)
4. Indexed sequentially, all face down
"""

from __future__ import annotations
import random
from typing import Sequence

from .state import Card, CardState


class DeckError(ValueError):
    """Raised when a deck cannot be built for the requested size."""

    def __init__(self, pairs_needed: int, alphabet_size: int):
        self.pairs_needed = pairs_needed
        self.alphabet_size = alphabet_size
        super().__init__(
            f"Need {pairs_needed} distinct symbols but the alphabet only has {alphabet_size}"
        )


def build_deck(
    total_pairs: int,
    alphabet: Sequence[str],
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Build a shuffled deck of face-down cards.

    Args:
        total_pairs: Number of pairs on the table
        alphabet: Symbols to draw from (must be distinct)
        rng: Random source, for deterministic games

    Returns:
        Cards ordered by position, indices 0..2*total_pairs-1

    Raises:
        DeckError: if the alphabet is smaller than total_pairs
    """
    if total_pairs < 1:
        raise ValueError("A deck needs at least one pair")
    symbols = list(dict.fromkeys(alphabet))
    if total_pairs > len(symbols):
        raise DeckError(total_pairs, len(symbols))

    rng = rng or random.Random()
    chosen = symbols[:total_pairs]
    values = chosen + chosen
    rng.shuffle(values)

    return [Card(index=i, symbol=value, state=CardState.HIDDEN) for i, value in enumerate(values)]
