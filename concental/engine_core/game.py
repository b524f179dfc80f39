"""
Game Session - The turn/match state machine.

A session owns the deck, the flip state, the counters and the timer.
It reacts to exactly four things:
1. start(difficulty)   - deal a fresh shuffled deck
2. select_card(index)  - flip a card; two flips make a turn
3. use_hint()          - spend a hint to mark candidate cards
4. tick()              - one second of play time (scheduled, not called directly)

Every operation returns the current GameSnapshot. Invalid calls
(unknown index, card already up, game over, no hints left) are no-ops
that return the unchanged snapshot; they never raise.

Turn resolution is deferred through the Scheduler: a matching pair is
locked in after `delays.match` seconds, a mismatch is turned back down
after `delays.mismatch` seconds. While a turn is pending the two flipped
cards block further flips, so at most one turn is ever in flight.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Callable, Sequence

from .deck import build_deck
from .difficulty import Difficulty, DifficultyConfig, SYMBOL_ALPHABET, get_config
from .scheduler import ManualScheduler, ScheduledCall, Scheduler
from .scoring import (
    MemoryRating,
    calculate_score,
    memory_rating,
    progress_level,
    progress_ratio,
)
from .state import Card, CardState, GameResult, GameSnapshot, GameStatus

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0

RenderCallback = Callable[[GameSnapshot], None]


@dataclass(frozen=True)
class TurnDelays:
    """Seconds before a completed turn is resolved. Zero resolves inline."""
    match: float = 0.5
    mismatch: float = 1.0


IMMEDIATE = TurnDelays(match=0.0, mismatch=0.0)


class GameSession:
    """
    One play-through of the memory game.

    Usage:
        session = GameSession(on_render=draw)
        session.start("medium")
        session.select_card(3)
        session.select_card(11)   # completes a turn
        session.use_hint()

    Args:
        rng: Random source for shuffling and hint selection
        scheduler: Where deferred turn resolution and the ticker run
        delays: Match / mismatch resolution delays
        alphabet: Card faces to draw symbols from
        on_render: Called with a fresh snapshot after every state change
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        delays: TurnDelays | None = None,
        alphabet: Sequence[str] = SYMBOL_ALPHABET,
        on_render: RenderCallback | None = None,
    ):
        self.rng = rng or random.Random()
        self.scheduler = scheduler or ManualScheduler()
        self.delays = delays or TurnDelays()
        self.alphabet = tuple(alphabet)
        self.on_render = on_render

        self.config: DifficultyConfig | None = None
        self.cards: list[Card] = []
        self.flipped: list[int] = []
        self.matched_pair_count = 0
        self.move_count = 0
        self.elapsed_seconds = 0
        self.hints_remaining = 0
        self.status = GameStatus.NOT_STARTED

        self._ticker: ScheduledCall | None = None
        self._pending_turn: ScheduledCall | None = None

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def difficulty(self) -> Difficulty | None:
        return self.config.difficulty if self.config else None

    @property
    def total_pairs(self) -> int:
        return self.config.total_pairs if self.config else 0

    @property
    def max_moves(self) -> int:
        return self.config.max_moves if self.config else 0

    @property
    def progress(self) -> float:
        """Remaining share of the move budget, for the progress bar."""
        if not self.config:
            return 1.0
        return progress_ratio(self.move_count, self.config.max_moves)

    @property
    def turn_pending(self) -> bool:
        return len(self.flipped) >= 2

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, difficulty: Difficulty | str = Difficulty.EASY) -> GameSnapshot:
        """
        Deal a new game.

        Raises:
            ValueError: unknown difficulty name
            DeckError: the alphabet is too small for the grid
        """
        config = get_config(difficulty)
        # Build before touching state so a bad config leaves the old game intact
        cards = build_deck(config.total_pairs, self.alphabet, self.rng)

        self._cancel_timers()
        self.config = config
        self.cards = cards
        self.flipped = []
        self.matched_pair_count = 0
        self.move_count = 0
        self.elapsed_seconds = 0
        self.hints_remaining = config.hints
        self.status = GameStatus.NOT_STARTED

        logger.debug("Dealt %s game: %d cards", config.difficulty.value, len(cards))
        self._render()
        return self.current_snapshot()

    def restart(self) -> GameSnapshot:
        """Deal again at the current difficulty."""
        return self.start(self.config.difficulty if self.config else Difficulty.EASY)

    def close(self):
        """Cancel the ticker and any pending turn. The session stays readable."""
        self._cancel_timers()

    # ------------------------------------------------------------------
    # Player input
    # ------------------------------------------------------------------

    def select_card(self, index: int) -> GameSnapshot:
        """Flip the card at `index`. Two accepted flips complete a turn."""
        if not self._accepts_flip(index):
            return self.current_snapshot()

        for card in self.cards:
            card.hinted = False

        if self.status == GameStatus.NOT_STARTED:
            self.status = GameStatus.RUNNING
            self._ticker = self.scheduler.call_every(TICK_INTERVAL, self.tick)

        self.cards[index].state = CardState.FLIPPED
        self.flipped.append(index)

        if len(self.flipped) == 2:
            self._complete_turn()

        self._render()
        return self.current_snapshot()

    def use_hint(self) -> GameSnapshot:
        """
        Spend a hint.

        - One card up: mark its partner
        - No card up: mark both cards of a random unmatched pair
        - Two cards up: nothing to mark, the hint is still spent
        """
        if self.hints_remaining <= 0 or self.status != GameStatus.RUNNING:
            return self.current_snapshot()

        self.hints_remaining -= 1
        for index in self._hint_targets():
            self.cards[index].hinted = True

        self._render()
        return self.current_snapshot()

    def tick(self):
        """Advance the play clock by one second."""
        if self.status != GameStatus.RUNNING:
            return
        self.elapsed_seconds += 1
        self._render()

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def score(self, won: bool | None = None) -> int:
        """Final score; zero unless won. `won` defaults to the session status."""
        if won is None:
            won = self.status == GameStatus.WON
        if not self.config:
            return 0
        return calculate_score(
            won=won,
            total_pairs=self.config.total_pairs,
            elapsed_seconds=self.elapsed_seconds,
            move_count=self.move_count,
            max_moves=self.config.max_moves,
            multiplier=self.config.multiplier,
        )

    def memory_rating(self, won: bool | None = None) -> MemoryRating | None:
        """Five-tier rating; only meaningful (and only returned) for a win."""
        if won is None:
            won = self.status == GameStatus.WON
        if not won or not self.config:
            return None
        return memory_rating(self.move_count, self.config.max_moves)

    def result(self) -> GameResult | None:
        """Result screen data, or None while the game is still open."""
        if not self.status.is_terminal:
            return None
        won = self.status == GameStatus.WON
        return GameResult(
            won=won,
            difficulty=self.config.difficulty,
            matched_pair_count=self.matched_pair_count,
            total_pairs=self.total_pairs,
            move_count=self.move_count,
            max_moves=self.max_moves,
            elapsed_seconds=self.elapsed_seconds,
            score=self.score(won),
            rating=self.memory_rating(won),
        )

    def current_snapshot(self) -> GameSnapshot:
        ratio = self.progress
        return GameSnapshot(
            difficulty=self.difficulty,
            rows=self.config.rows if self.config else 0,
            cols=self.config.cols if self.config else 0,
            cards=tuple(card.view() for card in self.cards),
            move_count=self.move_count,
            max_moves=self.max_moves,
            matched_pair_count=self.matched_pair_count,
            total_pairs=self.total_pairs,
            elapsed_seconds=self.elapsed_seconds,
            hints_remaining=self.hints_remaining,
            status=self.status,
            progress=ratio,
            progress_level=progress_level(ratio),
            result=self.result(),
        )

    # ------------------------------------------------------------------
    # Turn handling
    # ------------------------------------------------------------------

    def _accepts_flip(self, index: int) -> bool:
        if self.status.is_terminal or self.turn_pending:
            return False
        # bool is an int subclass; JSON `true` must not select card 1
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if not 0 <= index < len(self.cards):
            return False
        return self.cards[index].state == CardState.HIDDEN

    def _complete_turn(self):
        self.move_count += 1
        first, second = (self.cards[i] for i in self.flipped)
        delay = self.delays.match if first.symbol == second.symbol else self.delays.mismatch

        if delay <= 0:
            self._resolve_turn()
        else:
            self._pending_turn = self.scheduler.call_later(delay, self._resolve_scheduled_turn)

    def _resolve_scheduled_turn(self):
        self._pending_turn = None
        self._resolve_turn()
        self._render()

    def _resolve_turn(self):
        if len(self.flipped) != 2:
            return
        first, second = (self.cards[i] for i in self.flipped)
        if first.symbol == second.symbol:
            first.state = CardState.MATCHED
            second.state = CardState.MATCHED
            self.matched_pair_count += 1
        else:
            first.state = CardState.HIDDEN
            second.state = CardState.HIDDEN
        self.flipped.clear()
        self._check_game_status()

    def _check_game_status(self):
        if self.matched_pair_count == self.total_pairs:
            self._end_game(won=True)
        elif self.move_count >= self.max_moves:
            self._end_game(won=False)

    def _end_game(self, won: bool):
        self.status = GameStatus.WON if won else GameStatus.LOST
        self._cancel_timers()

        if not won:
            for card in self.cards:
                if card.state != CardState.MATCHED:
                    card.state = CardState.FLIPPED

        logger.debug(
            "Game %s after %d moves, %ds, %d/%d pairs",
            self.status.value, self.move_count, self.elapsed_seconds,
            self.matched_pair_count, self.total_pairs,
        )

    def _hint_targets(self) -> list[int]:
        if len(self.flipped) == 1:
            symbol = self.cards[self.flipped[0]].symbol
            partners = [
                c.index for c in self.cards
                if c.state == CardState.HIDDEN and c.symbol == symbol
            ]
            return partners[:1]

        if not self.flipped:
            unmatched: dict[str, list[int]] = {}
            for card in self.cards:
                if card.state != CardState.MATCHED:
                    unmatched.setdefault(card.symbol, []).append(card.index)
            eligible = [symbol for symbol, indices in unmatched.items() if len(indices) >= 2]
            if not eligible:
                return []
            return unmatched[self.rng.choice(eligible)][:2]

        return []

    def _cancel_timers(self):
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        if self._pending_turn is not None:
            self._pending_turn.cancel()
            self._pending_turn = None

    def _render(self):
        if self.on_render is not None:
            self.on_render(self.current_snapshot())
