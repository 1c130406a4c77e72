"""
FastAPI Application - REST API for heat duels.

Endpoints:
    GET    /health                          Health check
    GET    /                                API info
    POST   /api/v1/duels                    Create a duel and start its first turn
    GET    /api/v1/duels                    List active duels
    GET    /api/v1/duels/{id}               Get duel state
    GET    /api/v1/duels/{id}/log           Get game log lines (?since=offset)
    POST   /api/v1/duels/{id}/plays         Play a card for a human side
    DELETE /api/v1/duels/{id}               End a duel

Bot Flow:
    Every create/play response already includes the bot answers and any
    turn starts that followed. The response stops when a human side must
    play, the duel is over, or the duel cannot go on.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings
from ..decks import DeckFormatError
from .service import APIService
from .schemas import (
    CreateDuelRequest,
    PlayRequest,
    DuelStateResponse,
    PlayResponse,
    LogResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    ErrorCode,
)

logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or (service.settings if service else Settings.from_env())
    api_service = service or APIService(settings=settings)

    app = FastAPI(
        title="Heat Duel API",
        description="""
Two-player card duel where every card changes the player's heat.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Duel does not exist or has ended |
| `INVALID_MODE` | Play does not fit the duel mode |
| `INVALID_CARD` | No card at that hand index |
| `INVALID_PHASE` | The play would resolve a turn that is not open |
| `GAME_OVER` | The duel already has a winner |
| `BOT_SIDE` | That side is played by a bot |
| `VALIDATION_ERROR` | Malformed request |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=message, error_code=error_code).model_dump(mode="json"),
        )

    def from_error(error: ErrorResponse) -> JSONResponse:
        status_code = 404 if error.error_code is ErrorCode.SESSION_NOT_FOUND else 400
        return make_error_response(error.error_code, error.error, status_code)

    # =========================================================================
    # Duel Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/duels",
        response_model=PlayResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid deck or policy"}},
        tags=["Duels"],
        summary="Create a duel",
    )
    async def create_duel(request: CreateDuelRequest) -> Union[PlayResponse, JSONResponse]:
        """
        Create a duel and start its first turn.

        Decks default to the standard deck; bots on `bot_sides` play
        immediately if the duel is waiting on them.
        """
        try:
            return api_service.create_duel(request)
        except (ValueError, DeckFormatError) as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    @app.get(
        "/api/v1/duels",
        response_model=SessionListResponse,
        tags=["Duels"],
        summary="List active duels",
    )
    async def list_duels() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/duels/{session_id}",
        response_model=DuelStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Duels"],
        summary="Get duel state",
    )
    async def get_duel(session_id: str) -> Union[DuelStateResponse, JSONResponse]:
        """Current duel state; bot hands are hidden."""
        response = api_service.get_duel_state(session_id)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.get(
        "/api/v1/duels/{session_id}/log",
        response_model=LogResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Duels"],
        summary="Get game log",
    )
    async def get_log(
        session_id: str,
        since: Annotated[int, Query(ge=0, description="First log line to return")] = 0,
    ) -> Union[LogResponse, JSONResponse]:
        response = api_service.get_log(session_id, since)
        if isinstance(response, ErrorResponse):
            return from_error(response)
        return response

    @app.post(
        "/api/v1/duels/{session_id}/plays",
        response_model=PlayResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Play rejected"},
            404: {"model": ErrorResponse, "description": "Duel not found"},
        },
        tags=["Game Loop"],
        summary="Play a card",
    )
    async def submit_play(
        session_id: str,
        request: PlayRequest,
    ) -> Union[PlayResponse, JSONResponse]:
        """
        Play a card for a human side.

        In classic mode the attacker plays during the action phase and the
        defender answers; in simultaneous mode both sides select a card and
        the turn resolves once both are in.
        """
        response = api_service.submit_play(session_id, request)
        if isinstance(response, ErrorResponse):
            logger.debug("Play rejected for %s: %s", session_id, response.error)
            return from_error(response)
        return response

    @app.delete(
        "/api/v1/duels/{session_id}",
        response_model=EndSessionResponse,
        tags=["Duels"],
        summary="End a duel",
    )
    async def end_duel(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a duel; a pending turn start is cancelled."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # System
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
            service="heatduel",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Heat Duel API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn heatduel.api.app:app
app = create_app()
