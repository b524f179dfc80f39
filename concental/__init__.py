"""
Concental - Memory Matching Game Engine

An in-memory engine for the classic concentration card game:
- Shuffled paired decks at three difficulties
- Turn/match state machine with deferred resolution
- Move and hint budgets, play clock
- Scoring and a five-tier memory rating
"""

__version__ = "0.1.0"
