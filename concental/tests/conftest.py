"""
Pytest fixtures for Concental tests.
"""

import random

import pytest

from ..engine_core import Difficulty, GameSession, ManualScheduler, IMMEDIATE


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock; nothing runs until a test advances it."""
    return ManualScheduler()


@pytest.fixture
def session(scheduler: ManualScheduler) -> GameSession:
    """Easy game whose turns resolve inline."""
    game = GameSession(rng=random.Random(1234), scheduler=scheduler, delays=IMMEDIATE)
    game.start(Difficulty.EASY)
    return game


@pytest.fixture
def delayed_session(scheduler: ManualScheduler) -> GameSession:
    """Easy game with the default 0.5s / 1.0s resolution delays."""
    game = GameSession(rng=random.Random(1234), scheduler=scheduler)
    game.start(Difficulty.EASY)
    return game
