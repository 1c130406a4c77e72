"""
Session Module - Manages in-memory duel sessions.

A session represents one duel:
- Created when a host starts a duel
- Holds the engine, its scheduler and the bots
- Runs bot plays and scheduled turn starts between human plays
- Closed when the duel ends or the host ends it
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
