"""
Helpers for driving a GameSession to a known position.
"""

from ..engine_core import CardState, GameSession


def pairs_by_symbol(game: GameSession) -> dict[str, list[int]]:
    """Map each symbol to the two indices holding it."""
    pairs: dict[str, list[int]] = {}
    for card in game.cards:
        pairs.setdefault(card.symbol, []).append(card.index)
    return pairs


def unmatched_pairs(game: GameSession) -> list[tuple[int, int]]:
    return [
        (first, second)
        for first, second in pairs_by_symbol(game).values()
        if game.cards[first].state != CardState.MATCHED
    ]


def mismatch(game: GameSession) -> tuple[int, int]:
    """Two hidden cards with different symbols."""
    hidden = [c for c in game.cards if c.state == CardState.HIDDEN]
    first = hidden[0]
    second = next(c for c in hidden if c.symbol != first.symbol)
    return first.index, second.index


def play_turn(game: GameSession, first: int, second: int):
    game.select_card(first)
    return game.select_card(second)


def play_mismatches(game: GameSession, count: int):
    for _ in range(count):
        play_turn(game, *mismatch(game))


def play_perfect_game(game: GameSession):
    for first, second in unmatched_pairs(game):
        play_turn(game, first, second)
