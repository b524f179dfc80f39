"""
Session Module - Manages ephemeral game sessions.

A session represents one player's table:
- Created when the player picks a difficulty
- Holds the GameSession state machine
- Can be restarted for another game
- Destroyed when the player leaves or the session goes stale

Sessions are EPHEMERAL: nothing is written anywhere.
"""

from .manager import SessionManager, Session

__all__ = [
    "SessionManager",
    "Session",
]
