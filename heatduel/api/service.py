"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session and engine calls
2. Manages sessions and their game loops
3. Formats duel state for clients

This layer is framework-agnostic; app.py wraps it with FastAPI.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    CreateDuelRequest,
    PlayRequest,
    CardInfo,
    PlayerInfo,
    DuelStateResponse,
    PlayResponse,
    LogResponse,
    ErrorResponse,
    ErrorCode,
    SessionStatus,
    SideName,
    GameMode,
)
from ..bots import POLICIES
from ..config import Settings
from ..decks import standard_deck
from ..engine_core.action_generator import awaiting_sides
from ..engine_core.state import Card, Side
from ..session import SessionManager, Session, GameLoop, LoopState, TurnResult


def _card_info(card: Card) -> CardInfo:
    return CardInfo(
        name=card.name,
        type=card.card_type.value,
        damage=card.damage,
        heat_change=card.heat_change,
        heal=card.heal,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Start a duel against a bot
        response = service.create_duel(CreateDuelRequest())

        # Play the first card in hand
        response = service.submit_play(response.session_id, PlayRequest(side="p1", hand_index=0))
    """
    settings: Settings = field(default_factory=Settings)
    session_manager: SessionManager | None = None

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(settings=self.settings)

    def create_duel(self, request: CreateDuelRequest) -> PlayResponse:
        """
        Create a duel session and start its first turn.

        Raises:
            ValueError: unknown bot policy
        """
        if request.policy not in POLICIES:
            raise ValueError(
                f"Unknown bot policy: {request.policy} (expected one of {sorted(POLICIES)})"
            )

        deck_p1 = (
            [record.to_card() for record in request.deck_p1]
            if request.deck_p1 is not None
            else standard_deck(request.deck_copies)
        )
        deck_p2 = (
            [record.to_card() for record in request.deck_p2]
            if request.deck_p2 is not None
            else standard_deck(request.deck_copies)
        )

        session = self.session_manager.create_session(
            deck_p1,
            deck_p2,
            mode=request.mode.value,
            bot_sides=[side.value for side in request.bot_sides],
            policy=request.policy,
            seed=request.seed,
        )
        game_loop = GameLoop(session, max_auto_turns=self.settings.max_auto_turns)
        self._game_loops[session.session_id] = game_loop

        return self._play_response(session, game_loop.start())

    def get_duel_state(self, session_id: str) -> DuelStateResponse | ErrorResponse:
        """Get the current duel state."""
        session = self.session_manager.get_session(session_id)
        if session is None:
            return self._not_found(session_id)
        return self._state_response(session)

    def get_log(self, session_id: str, since: int = 0) -> LogResponse | ErrorResponse:
        """Game log lines from offset `since` on."""
        session = self.session_manager.get_session(session_id)
        if session is None:
            return self._not_found(session_id)
        log = session.engine.log
        since = max(0, since)
        return LogResponse(
            session_id=session_id,
            offset=since,
            total=len(log),
            lines=log[since:],
        )

    def submit_play(self, session_id: str, request: PlayRequest) -> PlayResponse | ErrorResponse:
        """Play a card for a human side and let the bots answer."""
        session = self.session_manager.get_session(session_id)
        game_loop = self._game_loops.get(session_id)
        if session is None or game_loop is None:
            return self._not_found(session_id)

        result = game_loop.submit_play(request.side.value, request.hand_index)
        if not result.success:
            return ErrorResponse(
                error="; ".join(result.errors),
                error_code=self._error_code(result.error_code),
            )
        return self._play_response(session, result)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session; its pending turn start is cancelled."""
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List active session IDs."""
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _play_response(self, session: Session, result: TurnResult) -> PlayResponse:
        return PlayResponse(
            session_id=session.session_id,
            success=result.success,
            loop_state=result.loop_state.value,
            log_lines=result.log_lines,
            bot_actions=result.bot_actions,
            warnings=result.warnings,
            state=self._state_response(session),
        )

    def _state_response(self, session: Session) -> DuelStateResponse:
        engine = session.engine
        state = engine.state
        game_loop = self._game_loops.get(session.session_id)
        awaiting = awaiting_sides(engine)

        players = []
        for side in Side:
            player = state.player(side)
            is_bot = session.is_bot(side)
            players.append(PlayerInfo(
                side=SideName(side.value),
                hp=player.hp,
                heat=player.heat,
                skipped=player.skipped,
                is_bot=is_bot,
                is_current_turn=side is state.turn,
                hand_size=len(player.hand),
                deck_size=len(player.deck),
                hand=None if is_bot else [_card_info(c) for c in player.hand],
                has_selected_card=player.selected_card is not None,
            ))

        return DuelStateResponse(
            session_id=session.session_id,
            status=self._status(session, game_loop, awaiting),
            mode=GameMode(engine.mode.value),
            turn=SideName(state.turn.value),
            phase=state.phase.value,
            turn_number=state.turn_number,
            players=players,
            awaiting=[SideName(s.value) for s in awaiting],
            winner=SideName(state.winner.value) if state.winner else None,
            log_size=len(state.log),
        )

    @staticmethod
    def _status(session: Session, game_loop: GameLoop | None, awaiting: list[Side]) -> SessionStatus:
        if session.engine.is_over:
            return SessionStatus.GAME_OVER
        if game_loop is not None and game_loop.state is LoopState.STALLED:
            return SessionStatus.STALLED
        if session.scheduler.pending:
            return SessionStatus.WAITING_TURN_START
        if any(not session.is_bot(side) for side in awaiting):
            return SessionStatus.YOUR_TURN
        return SessionStatus.ACTIVE

    @staticmethod
    def _error_code(code: str | None) -> ErrorCode:
        try:
            return ErrorCode(code)
        except ValueError:
            return ErrorCode.INTERNAL_ERROR

    @staticmethod
    def _not_found(session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )
