"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the browser front end and the engine.
Card faces are only present once a card is flipped or matched.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- INVALID_DIFFICULTY: Difficulty name not recognised, or deck cannot be dealt
- GAME_NOT_FINISHED: Result requested while the game is still open
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class DifficultyName(str, Enum):
    """Difficulty values."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class GameStatusName(str, Enum):
    """Game status values."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    WON = "won"
    LOST = "lost"


class CardStateName(str, Enum):
    """Card visibility values."""
    HIDDEN = "hidden"
    FLIPPED = "flipped"
    MATCHED = "matched"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_DIFFICULTY = "INVALID_DIFFICULTY"
    GAME_NOT_FINISHED = "GAME_NOT_FINISHED"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    index: int = Field(..., ge=0)
    symbol: Optional[str] = Field(None, description="Face value; null while face down")
    state: CardStateName
    hinted: bool = False

    model_config = {"from_attributes": True}


class DifficultyInfo(BaseModel):
    """One row of the difficulty table."""
    name: DifficultyName
    rows: int
    cols: int
    total_pairs: int
    max_moves: int
    hints: int
    multiplier: float

    model_config = {"from_attributes": True}


class RatingInfo(BaseModel):
    """Memory rating tier."""
    stars: int = Field(..., ge=1, le=5)
    label: str
    display: str


class ResultInfo(BaseModel):
    """Final result of a finished game."""
    won: bool
    headline: str
    message: str
    difficulty: DifficultyName
    matched_pair_count: int
    total_pairs: int
    move_count: int
    max_moves: int
    elapsed_seconds: int
    score: int
    rating: Optional[RatingInfo] = None


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    difficulty: str = Field("easy", description="easy, medium or hard")
    seed: Optional[int] = Field(None, description="Seed for a reproducible deal")


class RestartRequest(BaseModel):
    """Request to deal a new game in an existing session."""
    difficulty: Optional[str] = Field(
        None, description="Switch difficulty; omit to replay the current one"
    )


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Complete render state of a session."""
    session_id: str
    difficulty: DifficultyName
    rows: int
    cols: int
    cards: list[CardInfo]
    move_count: int
    max_moves: int
    matched_pair_count: int
    total_pairs: int
    elapsed_seconds: int
    hints_remaining: int
    status: GameStatusName
    progress: float = Field(..., ge=0.0, le=1.0, description="Share of move budget left")
    progress_level: str = Field(..., description="normal, warning or critical")
    result: Optional[ResultInfo] = None

    api_version: str = "v1"


class DifficultyListResponse(BaseModel):
    """Response listing the difficulty table."""
    difficulties: list[DifficultyInfo]


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
