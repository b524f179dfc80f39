"""
Session Manager - Creates and tracks independent game sessions.

LIFECYCLE:
1. Player picks a difficulty -> session created, deck dealt
2. During game: cards selected, hints used, clock ticking
3. Game ends (won/lost) -> session stays readable for the result screen
4. Player can:
   - Play again (restart the same session)
   - Leave (session ended, timers cancelled, memory freed)

PERSISTENCE RULES:
- NO database
- Sessions are in-memory only
- Stale sessions are swept by age
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import random
import time
import uuid

from ..engine_core import (
    Difficulty,
    GameSession,
    GameSnapshot,
    ManualScheduler,
    Scheduler,
    TurnDelays,
)

logger = logging.getLogger(__name__)

SchedulerFactory = Callable[[], Scheduler]


@dataclass
class Session:
    """
    A registered game session.

    Contains:
    - The GameSession state machine
    - Timestamps for stale-session cleanup
    - Render listeners (e.g. WebSocket broadcasters)
    """
    session_id: str
    game: GameSession
    created_at: float
    last_active: float
    listeners: list[Callable[[str, GameSnapshot], None]] = field(default_factory=list)

    def is_active(self) -> bool:
        """Check if the game is still being played."""
        return not self.game.status.is_terminal

    def touch(self):
        self.last_active = time.time()

    def notify(self, snapshot: GameSnapshot):
        """Fan a render out to every listener."""
        for listener in list(self.listeners):
            listener(self.session_id, snapshot)


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their own scheduler and random source
    - Track sessions by ID
    - Cancel timers when sessions end

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        scheduler_factory: SchedulerFactory | None = None,
        delays: TurnDelays | None = None,
    ):
        self._sessions: dict[str, Session] = {}
        self.scheduler_factory = scheduler_factory or ManualScheduler
        self.delays = delays or TurnDelays()

    def create_session(
        self,
        difficulty: Difficulty | str = Difficulty.EASY,
        seed: int | None = None,
    ) -> Session:
        """
        Create a new game session and deal its first game.

        Args:
            difficulty: Difficulty enum or name
            seed: Optional seed for a reproducible deal

        Returns:
            New Session with status NOT_STARTED

        Raises:
            ValueError: unknown difficulty or undealable deck
        """
        session_id = str(uuid.uuid4())
        now = time.time()

        session = Session(
            session_id=session_id,
            game=GameSession(
                rng=random.Random(seed),
                scheduler=self.scheduler_factory(),
                delays=self.delays,
            ),
            created_at=now,
            last_active=now,
        )
        session.game.on_render = session.notify
        session.game.start(difficulty)

        self._sessions[session_id] = session
        logger.info("Created session %s (%s)", session_id, session.game.difficulty.value)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        session = self._sessions.get(session_id)
        if session:
            session.touch()
        return session

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        Cancels the clock and any pending turn, drops listeners and
        removes the session from memory.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.game.close()
        session.listeners.clear()
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[str]:
        """List IDs of all registered sessions."""
        return list(self._sessions)

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game is not finished."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        End sessions idle for longer than max_age.

        Called periodically to free memory. Returns the number removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
