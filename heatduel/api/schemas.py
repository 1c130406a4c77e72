"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between clients and the duel engine.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- INVALID_MODE: Play submitted with the wrong method for the duel mode
- INVALID_CARD: Hand index does not name a card in hand
- INVALID_PHASE: The play would resolve a turn that is not open
- GAME_OVER: The duel already has a winner
- BOT_SIDE: The side is played by a bot
- VALIDATION_ERROR: Malformed request (bad deck, unknown policy, ...)
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..decks import CardRecord


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    YOUR_TURN = "your_turn"
    WAITING_TURN_START = "waiting_turn_start"
    STALLED = "stalled"
    GAME_OVER = "game_over"


class SideName(str, Enum):
    P1 = "p1"
    P2 = "p2"


class GameMode(str, Enum):
    CLASSIC = "classic"
    SIMULTANEOUS = "simultaneous"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_MODE = "INVALID_MODE"
    INVALID_CARD = "INVALID_CARD"
    INVALID_PHASE = "INVALID_PHASE"
    GAME_OVER = "GAME_OVER"
    BOT_SIDE = "BOT_SIDE"
    ALREADY_STARTED = "ALREADY_STARTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    name: str
    type: str = Field(description="attack or defense")
    damage: Optional[float] = None
    heat_change: Optional[float] = None
    heal: Optional[float] = None


class PlayerInfo(BaseModel):
    """One side of the duel."""
    side: SideName
    hp: float
    heat: float
    skipped: bool = False
    is_bot: bool = False
    is_current_turn: bool = False
    hand_size: int = 0
    deck_size: int = 0
    hand: Optional[list[CardInfo]] = Field(
        None, description="Cards in hand; hidden for bot sides"
    )
    has_selected_card: bool = Field(
        False, description="Simultaneous mode: a card is waiting for the reveal"
    )


# =============================================================================
# Requests
# =============================================================================

class CreateDuelRequest(BaseModel):
    """Request to start a new duel."""
    mode: GameMode = Field(GameMode.CLASSIC, description="classic or simultaneous")
    bot_sides: list[SideName] = Field(
        default_factory=lambda: [SideName.P2],
        description="Sides played by bots; empty for two human players",
    )
    policy: str = Field("first_attack", description="Bot policy name")
    seed: Optional[int] = Field(None, description="Seed for randomised bots")
    deck_p1: Optional[list[CardRecord]] = Field(None, description="Defaults to the standard deck")
    deck_p2: Optional[list[CardRecord]] = Field(None, description="Defaults to the standard deck")
    deck_copies: int = Field(2, ge=1, le=50, description="Copies of the standard cards per default deck")


class PlayRequest(BaseModel):
    """A card play for a human side."""
    side: SideName
    hand_index: int = Field(..., description="Index into the side's hand")


# =============================================================================
# Responses
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    api_version: str = Field("v1", description="API version")


class DuelStateResponse(BaseModel):
    """Full duel state for display."""
    session_id: str
    status: SessionStatus
    mode: GameMode
    turn: SideName
    phase: str
    turn_number: int
    players: list[PlayerInfo]
    awaiting: list[SideName] = Field(default_factory=list)
    winner: Optional[SideName] = None
    log_size: int = 0
    api_version: str = "v1"


class PlayResponse(BaseModel):
    """Outcome of creating a duel or submitting a play."""
    session_id: str
    success: bool = True
    loop_state: str
    log_lines: list[str] = Field(default_factory=list)
    bot_actions: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    state: DuelStateResponse


class LogResponse(BaseModel):
    session_id: str
    offset: int = 0
    total: int = 0
    lines: list[str] = Field(default_factory=list)


class SessionListResponse(BaseModel):
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
