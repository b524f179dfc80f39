"""
Tests for hints.
"""

import random

from ..engine_core import CardState, Difficulty, GameSession, GameStatus, IMMEDIATE
from .helpers import mismatch, play_mismatches, play_turn, unmatched_pairs


class TestHintEligibility:
    """Tests for when a hint may be spent."""

    def test_no_hint_before_first_flip(self, session):
        """Hints need a running game."""
        snapshot = session.use_hint()

        assert snapshot.status == GameStatus.NOT_STARTED
        assert snapshot.hints_remaining == 2
        assert snapshot.hinted_indices == ()

    def test_budget_never_negative(self, session):
        """Each effective hint costs one; an empty budget is a no-op."""
        session.select_card(0)
        counts = []
        for _ in range(4):
            counts.append(session.use_hint().hints_remaining)

        assert counts == [1, 0, 0, 0]

    def test_mid_turn_hint_spent_without_marks(self, delayed_session):
        """With two cards awaiting resolution the hint is spent but marks nothing."""
        game = delayed_session
        play_turn(game, *mismatch(game))

        snapshot = game.use_hint()

        assert snapshot.hints_remaining == 1
        assert snapshot.hinted_indices == ()
        assert snapshot.move_count == 1
        assert game.turn_pending


class TestHintTargets:
    """Tests for which cards a hint marks."""

    def test_one_flipped_marks_partner(self, session):
        """With one card up, the hint points at its partner."""
        session.select_card(0)
        snapshot = session.use_hint()

        assert snapshot.hints_remaining == 1
        assert len(snapshot.hinted_indices) == 1
        partner = snapshot.hinted_indices[0]
        assert partner != 0
        assert session.cards[partner].symbol == session.cards[0].symbol
        assert session.cards[partner].state == CardState.HIDDEN

    def test_none_flipped_marks_a_pair(self, session):
        """Between turns, the hint marks both cards of one unmatched pair."""
        play_turn(session, *unmatched_pairs(session)[0])
        snapshot = session.use_hint()

        assert snapshot.hints_remaining == 1
        first, second = snapshot.hinted_indices
        assert session.cards[first].symbol == session.cards[second].symbol
        assert session.cards[first].state == CardState.HIDDEN
        assert session.cards[second].state == CardState.HIDDEN

    def test_pair_hint_skips_matched_symbols(self, scheduler):
        """Only symbols with two unmatched cards are candidates."""
        game = GameSession(rng=random.Random(11), scheduler=scheduler, delays=IMMEDIATE)
        game.start(Difficulty.HARD)
        pairs = unmatched_pairs(game)
        for first, second in pairs[:-1]:
            play_turn(game, first, second)

        snapshot = game.use_hint()

        assert set(snapshot.hinted_indices) == set(pairs[-1])

    def test_pair_choice_uses_rng(self, scheduler):
        """The hinted pair is drawn from the injected random source."""
        chosen = set()
        for seed in range(10):
            game = GameSession(rng=random.Random(seed), scheduler=scheduler, delays=IMMEDIATE)
            game.start(Difficulty.HARD)
            play_turn(game, *mismatch(game))
            chosen.add(game.cards[game.use_hint().hinted_indices[0]].symbol)

        assert len(chosen) > 1

    def test_hint_cleared_by_next_flip(self, session):
        """Hint markers disappear on the next accepted flip."""
        session.select_card(0)
        partner = session.use_hint().hinted_indices[0]
        snapshot = session.select_card(partner)

        assert snapshot.hinted_indices == ()
        assert not any(card.hinted for card in session.cards)

    def test_hint_survives_rejected_flip(self, session):
        """A no-op selection does not clear the hint."""
        session.select_card(0)
        session.use_hint()
        snapshot = session.select_card(0)

        assert len(snapshot.hinted_indices) == 1

    def test_hint_does_not_count_as_move(self, session):
        play_mismatches(session, 2)
        session.use_hint()
        assert session.move_count == 2
