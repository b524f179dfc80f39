"""
API Module - Browser front end interface.

Exposes the engine via REST + WebSocket for a browser client.
The client:
1. Picks a difficulty and creates a session
2. Selects cards and uses hints
3. Renders every pushed state change
4. Shows the result screen when the game ends

All state is session-scoped. No accounts, no persistence.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    RestartRequest,
    # Responses
    GameStateResponse,
    DifficultyListResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    DifficultyInfo,
    RatingInfo,
    ResultInfo,
    # Enums
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "RestartRequest",
    # Responses
    "GameStateResponse",
    "DifficultyListResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "DifficultyInfo",
    "RatingInfo",
    "ResultInfo",
    # Enums
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
