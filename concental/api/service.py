"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to GameSession calls
2. Manages sessions
3. Formats snapshots for the browser

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Invalid moves are not errors: they return the unchanged state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    RestartRequest,
    # Responses
    GameStateResponse,
    DifficultyListResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    DifficultyInfo,
    RatingInfo,
    ResultInfo,
    # Enums
    ErrorCode,
)
from ..engine_core import DIFFICULTIES, GameResult, GameSnapshot
from ..session import SessionManager, Session

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service for the browser front end.

    Usage:
        service = APIService()

        # Create session
        state = service.create_session(CreateSessionRequest(difficulty="hard"))

        # Play
        state = service.select_card(state.session_id, 4)
        state = service.use_hint(state.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def list_difficulties(self) -> DifficultyListResponse:
        """Return the static difficulty table."""
        return DifficultyListResponse(
            difficulties=[
                DifficultyInfo(
                    name=config.difficulty.value,
                    rows=config.rows,
                    cols=config.cols,
                    total_pairs=config.total_pairs,
                    max_moves=config.max_moves,
                    hints=config.hints,
                    multiplier=config.multiplier,
                )
                for config in DIFFICULTIES.values()
            ]
        )

    def create_session(self, request: CreateSessionRequest) -> GameStateResponse:
        """
        Create a new game session.

        Raises:
            ValueError: unknown difficulty
        """
        session = self.session_manager.create_session(
            difficulty=request.difficulty,
            seed=request.seed,
        )
        return self._state_response(session)

    def get_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """Get the current render state of a session."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._state_response(session)

    def select_card(self, session_id: str, index: int) -> GameStateResponse | ErrorResponse:
        """Flip a card. Rejected flips return the unchanged state."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        snapshot = session.game.select_card(index)
        return self.snapshot_to_response(session_id, snapshot)

    def use_hint(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """Spend a hint. Ineffective hints return the unchanged state."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        snapshot = session.game.use_hint()
        return self.snapshot_to_response(session_id, snapshot)

    def restart(
        self,
        session_id: str,
        request: RestartRequest | None = None,
    ) -> GameStateResponse | ErrorResponse:
        """
        Deal a new game, optionally at another difficulty.

        Raises:
            ValueError: unknown difficulty
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        if request and request.difficulty:
            snapshot = session.game.start(request.difficulty)
        else:
            snapshot = session.game.restart()
        logger.info("Restarted session %s (%s)", session_id, snapshot.difficulty.value)
        return self.snapshot_to_response(session_id, snapshot)

    def get_result(self, session_id: str) -> ResultInfo | ErrorResponse:
        """Final result; an error while the game is still being played."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        result = session.game.result()
        if result is None:
            return ErrorResponse(
                error="Game is not finished",
                error_code=ErrorCode.GAME_NOT_FINISHED,
                details={"status": session.game.status.value},
            )
        return self._result_info(result)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session."""
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List session IDs."""
        return self.session_manager.list_sessions()

    def get_session(self, session_id: str) -> Session | None:
        return self.session_manager.get_session(session_id)

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def snapshot_to_response(self, session_id: str, snapshot: GameSnapshot) -> GameStateResponse:
        """Convert an engine snapshot into the API state model."""
        return GameStateResponse(
            session_id=session_id,
            difficulty=snapshot.difficulty.value,
            rows=snapshot.rows,
            cols=snapshot.cols,
            cards=[
                CardInfo(
                    index=card.index,
                    symbol=card.symbol,
                    state=card.state.value,
                    hinted=card.hinted,
                )
                for card in snapshot.cards
            ],
            move_count=snapshot.move_count,
            max_moves=snapshot.max_moves,
            matched_pair_count=snapshot.matched_pair_count,
            total_pairs=snapshot.total_pairs,
            elapsed_seconds=snapshot.elapsed_seconds,
            hints_remaining=snapshot.hints_remaining,
            status=snapshot.status.value,
            progress=snapshot.progress,
            progress_level=snapshot.progress_level,
            result=self._result_info(snapshot.result) if snapshot.result else None,
        )

    def _state_response(self, session: Session) -> GameStateResponse:
        return self.snapshot_to_response(session.session_id, session.game.current_snapshot())

    def _result_info(self, result: GameResult) -> ResultInfo:
        return ResultInfo(
            won=result.won,
            headline=result.headline,
            message=result.message,
            difficulty=result.difficulty.value,
            matched_pair_count=result.matched_pair_count,
            total_pairs=result.total_pairs,
            move_count=result.move_count,
            max_moves=result.max_moves,
            elapsed_seconds=result.elapsed_seconds,
            score=result.score,
            rating=RatingInfo(
                stars=result.rating.stars,
                label=result.rating.label,
                display=result.rating.display,
            ) if result.rating else None,
        )

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Session not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
        )
