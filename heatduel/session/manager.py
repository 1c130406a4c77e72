"""
Session Manager - Creates and manages duel sessions.

LIFECYCLE:
1. Host creates a session -> engine, scheduler and bots are built
2. During the duel:
   - Human plays are submitted through the session's GameLoop
   - Bots answer, pending turn starts are ticked
3. Duel ends or host ends the session -> engine closed, session dropped

PERSISTENCE RULES:
- Sessions are in-memory only
- Ending a session cancels its pending turn start
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence
import logging
import time
import uuid

from ..bots import BotPolicy, create_policy
from ..config import Settings
from ..engine_core.duel import DuelEngine
from ..engine_core.scheduler import ManualScheduler
from ..engine_core.state import Card, Mode, Side

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a duel session."""
    ACTIVE = "active"  # Duel in progress
    GAME_OVER = "game_over"  # A side won
    ABANDONED = "abandoned"  # Ended by the host


@dataclass
class Session:
    """
    A duel session.

    Contains:
    - The engine and the scheduler that starts its turns
    - Bots for the sides not played by a human
    - Session metadata
    """
    session_id: str
    engine: DuelEngine
    scheduler: ManualScheduler
    created_at: float

    state: SessionState = SessionState.ACTIVE
    bots: dict[Side, BotPolicy] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def mode(self) -> Mode:
        return self.engine.mode

    @property
    def human_sides(self) -> list[Side]:
        return [side for side in Side if side not in self.bots]

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state is SessionState.ACTIVE

    def is_bot(self, side: Side) -> bool:
        return side in self.bots


class SessionManager:
    """
    Manages duel sessions.

    Responsibilities:
    - Create sessions
    - Track active sessions
    - Close engines of ended sessions
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        deck_p1: Sequence[Card],
        deck_p2: Sequence[Card],
        mode: Mode | str = Mode.CLASSIC,
        bot_sides: Sequence[Side | str] = (Side.P2,),
        policy: str = "first_attack",
        seed: int | None = None,
    ) -> Session:
        """
        Create a new duel session.

        Args:
            deck_p1, deck_p2: Decks, front card drawn first
            mode: classic or simultaneous
            bot_sides: Sides played by bots (empty for two humans)
            policy: Bot policy name
            seed: Seed for randomised policies

        Returns:
            New Session; its first turn has not started yet
        """
        scheduler = ManualScheduler()
        engine = DuelEngine(
            deck_p1,
            deck_p2,
            Mode(mode),
            scheduler=scheduler,
            turn_delay=self.settings.turn_delay,
        )

        bots: dict[Side, BotPolicy] = {}
        for i, side in enumerate(Side(s) for s in bot_sides):
            bots[side] = create_policy(policy, None if seed is None else seed + i)

        session = Session(
            session_id=str(uuid.uuid4()),
            engine=engine,
            scheduler=scheduler,
            created_at=time.time(),
            bots=bots,
            metadata={"policy": policy, "seed": seed},
        )
        self._sessions[session.session_id] = session
        logger.debug("Session %s created (mode=%s, bots=%s)",
                     session.session_id, engine.mode.value, [s.value for s in bots])
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        The engine is closed, so a turn start still pending is dropped.
        Returns False if no such session exists.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        session.engine.close()
        session.scheduler.clear()
        if reason == "completed" and session.engine.is_over:
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        logger.debug("Session %s ended (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        End finished sessions older than max_age.

        Called periodically to free memory. Returns the removed IDs.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
            and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
