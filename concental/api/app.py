"""
FastAPI Application - REST + WebSocket API for the browser front end.

Endpoints:
    GET    /api/v1/difficulties              Difficulty table
    POST   /api/v1/sessions                  Create game session
    GET    /api/v1/sessions                  List sessions
    GET    /api/v1/sessions/{id}             Get render state
    DELETE /api/v1/sessions/{id}             End session
    POST   /api/v1/sessions/{id}/restart     Deal again
    POST   /api/v1/sessions/{id}/cards/{i}   Select a card
    POST   /api/v1/sessions/{id}/hint        Use a hint
    GET    /api/v1/sessions/{id}/result      Final result
    WS     /api/v1/sessions/{id}/ws          Push every state change

Turn resolution and the play clock run on the server's event loop, so a
mismatch turns back down on its own after the delay and the WebSocket
receives the new state without the browser polling.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import asyncio
import json
import logging
import os

# Environment configuration
CONCENTAL_ENV = os.getenv("CONCENTAL_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
MATCH_DELAY = float(os.getenv("CONCENTAL_MATCH_DELAY", "0.5"))
MISMATCH_DELAY = float(os.getenv("CONCENTAL_MISMATCH_DELAY", "1.0"))
SESSION_TTL = int(os.getenv("CONCENTAL_SESSION_TTL", "3600"))

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, WebSocket, WebSocketDisconnect
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        RestartRequest,
        # Response models
        GameStateResponse,
        DifficultyListResponse,
        ResultInfo,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        ErrorResponse,
        # Enums
        ErrorCode,
    )
    from ..engine_core import AsyncioScheduler, GameSnapshot, TurnDelays
    from ..session import SessionManager
    from .. import __version__

    app = FastAPI(
        title="Concental API",
        description="""
Memory matching game engine.

## Turn Flow

1. `POST /sessions/{id}/cards/{i}` flips a card
2. The second flip of a turn counts a move; the pair stays face up
3. After a short delay the pair is locked in (match) or turned back down
4. Subscribe to `/sessions/{id}/ws` to receive the resolved state

Invalid moves (card already up, game over, no hints left) are not errors:
they return the unchanged state.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_DIFFICULTY` | Difficulty not recognised |
| `GAME_NOT_FINISHED` | Result requested before the game ended |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    api_service = service or APIService(
        session_manager=SessionManager(
            scheduler_factory=AsyncioScheduler,
            delays=TurnDelays(match=MATCH_DELAY, mismatch=MISMATCH_DELAY),
        )
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_to_json(response: ErrorResponse) -> JSONResponse:
        """Map a service ErrorResponse onto its HTTP status."""
        status_codes = {
            ErrorCode.SESSION_NOT_FOUND: 404,
            ErrorCode.GAME_NOT_FINISHED: 409,
        }
        return make_error_response(
            response.error_code,
            response.error,
            status_code=status_codes.get(response.error_code, 400),
            details=response.details,
        )

    # =========================================================================
    # Difficulty Endpoint
    # =========================================================================

    @app.get(
        "/api/v1/difficulties",
        response_model=DifficultyListResponse,
        tags=["Game"],
        summary="List difficulty levels",
    )
    async def list_difficulties() -> DifficultyListResponse:
        """Grid sizes, move budgets and hint budgets per difficulty."""
        return api_service.list_difficulties()

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid difficulty"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        body: Optional[CreateSessionRequest] = None,
    ) -> Union[GameStateResponse, JSONResponse]:
        """Create a session and deal its first game. The clock starts on the first flip."""
        api_service.session_manager.cleanup_stale_sessions(SESSION_TTL)
        try:
            return api_service.create_session(body or CreateSessionRequest())
        except ValueError as e:
            return make_error_response(ErrorCode.INVALID_DIFFICULTY, str(e))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get current game state",
    )
    async def get_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the complete render state of a session."""
        response = api_service.get_state(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a game session and release its timers."""
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=GameStateResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid difficulty"},
            404: {"model": ErrorResponse},
        },
        tags=["Sessions"],
        summary="Deal a new game",
    )
    async def restart(
        session_id: str,
        body: Optional[RestartRequest] = None,
    ) -> Union[GameStateResponse, JSONResponse]:
        """Replay at the current difficulty, or switch difficulty."""
        try:
            response = api_service.restart(session_id, body)
        except ValueError as e:
            return make_error_response(ErrorCode.INVALID_DIFFICULTY, str(e))
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    # =========================================================================
    # Game Loop Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/cards/{index}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Select a card",
    )
    async def select_card(session_id: str, index: int) -> Union[GameStateResponse, JSONResponse]:
        """
        Flip the card at `index`.

        Ignored (state returned unchanged) when the card is already up or
        matched, two cards are awaiting resolution, or the game is over.
        """
        response = api_service.select_card(session_id, index)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/hint",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Use a hint",
    )
    async def use_hint(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Mark the partner of the flipped card, or a random unmatched pair."""
        response = api_service.use_hint(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/result",
        response_model=ResultInfo,
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Game still running"},
        },
        tags=["Game Loop"],
        summary="Get the final result",
    )
    async def get_result(session_id: str) -> Union[ResultInfo, JSONResponse]:
        """Score, memory rating and summary for a finished game."""
        response = api_service.get_result(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    # =========================================================================
    # WebSocket
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def session_websocket(websocket: WebSocket, session_id: str):
        """
        Push every state change of a session.

        Server messages:  {"type": "snapshot", "payload": GameStateResponse}
        Client messages:  {"type": "ping"} | {"type": "select", "index": n} | {"type": "hint"}
        """
        await websocket.accept()

        session = api_service.get_session(session_id)
        if not session:
            await websocket.send_json({
                "type": "error",
                "payload": {"error_code": ErrorCode.SESSION_NOT_FOUND.value},
            })
            await websocket.close()
            return

        loop = asyncio.get_running_loop()

        async def push(snapshot: GameSnapshot):
            payload = api_service.snapshot_to_response(session_id, snapshot)
            try:
                await websocket.send_json({"type": "snapshot", "payload": payload.model_dump(mode="json")})
            except Exception:
                logger.debug("Dropping dead websocket for session %s", session_id)
                if listener in session.listeners:
                    session.listeners.remove(listener)

        def listener(_session_id: str, snapshot: GameSnapshot):
            asyncio.run_coroutine_threadsafe(push(snapshot), loop)

        session.listeners.append(listener)
        await push(session.game.current_snapshot())

        try:
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue

                if not isinstance(message, dict):
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Expected a JSON object"},
                    })
                    continue

                session.touch()
                message_type = message.get("type")
                if message_type == "ping":
                    await websocket.send_json({"type": "pong"})
                elif message_type == "select":
                    session.game.select_card(message.get("index"))
                elif message_type == "hint":
                    session.game.use_hint()
        except WebSocketDisconnect:
            pass
        finally:
            if listener in session.listeners:
                session.listeners.remove(listener)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="concental",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Concental API",
            "version": __version__,
            "environment": CONCENTAL_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn concental.api.app:app
app = create_app()
