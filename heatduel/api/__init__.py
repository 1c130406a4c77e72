"""
API Module - HTTP interface for heat duels.

Clients:
1. Create a duel (against bots or another human)
2. Submit card plays for their side
3. Read the duel state and the game log
4. End the duel

All state is session-scoped and in-memory.
"""

from .schemas import (
    # Requests
    CreateDuelRequest,
    PlayRequest,
    # Responses
    DuelStateResponse,
    PlayResponse,
    LogResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    CardInfo,
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateDuelRequest",
    "PlayRequest",
    # Responses
    "DuelStateResponse",
    "PlayResponse",
    "LogResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "CardInfo",
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
