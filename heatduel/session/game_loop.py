"""
Game Loop - Drives a session between human plays.

The loop:
1. Host starts the duel (first turn)
2. Bots play whenever the duel is waiting on their side
3. Pending turn starts are ticked on the session's scheduler
4. Control returns when a human must play, the duel is over, or the
   duel cannot go on (the awaited side has an empty hand)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.action import Action
from ..engine_core.action_generator import awaiting_sides, legal_actions
from ..engine_core.reducer import apply_action
from ..engine_core.state import Side

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    NOT_STARTED = "not_started"
    RUNNING_BOTS = "running_bots"
    WAITING_HUMAN = "waiting_human"
    STALLED = "stalled"
    TURN_LIMIT = "turn_limit"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of driving the loop.

    Contains the log lines produced, what the bots did, and which sides
    the duel is now waiting on.
    """
    success: bool
    loop_state: LoopState

    log_lines: list[str] = field(default_factory=list)
    bot_actions: list[str] = field(default_factory=list)
    awaiting: list[Side] = field(default_factory=list)

    errors: list[str] = field(default_factory=list)
    error_code: str | None = None
    warnings: list[str] = field(default_factory=list)

    winner: Side | None = None


class GameLoop:
    """
    The main loop driver for one session.

    Usage:
        loop = GameLoop(session)
        result = loop.start()

        while result.loop_state == LoopState.WAITING_HUMAN:
            result = loop.submit_play(Side.P1, choose_index(...))
    """

    def __init__(self, session: Session, max_auto_turns: int = 50):
        self.session = session
        self.max_auto_turns = max_auto_turns
        self.state = LoopState.NOT_STARTED

    @property
    def engine(self):
        return self.session.engine

    def start(self) -> TurnResult:
        """Start the first turn and let the bots play."""
        if self.state is not LoopState.NOT_STARTED:
            return self._failure("Duel already started", "ALREADY_STARTED")

        log_start = len(self.engine.log)
        result = apply_action(self.engine, Action.start_turn())
        if not result.success:
            return self._failure(result.error, result.error_code)
        return self._run_bots(log_start)

    def submit_play(self, side: Side | str, hand_index: int) -> TurnResult:
        """
        Play a card for a human side, then let the bots answer.

        The mode of the session decides between classic and simultaneous
        submission.
        """
        side = Side(side)
        if self.engine.is_over:
            return self._failure("The duel is over", "GAME_OVER")
        if self.session.is_bot(side):
            return self._failure(f"{side} is played by a bot", "BOT_SIDE")

        log_start = len(self.engine.log)
        result = apply_action(self.engine, Action.play(side, hand_index, self.engine.mode))
        if not result.success:
            return self._failure(result.error, result.error_code)
        return self._run_bots(log_start)

    def advance(self) -> TurnResult:
        """Tick pending turn starts and let the bots play."""
        return self._run_bots(len(self.engine.log))

    def _run_bots(self, log_start: int) -> TurnResult:
        """
        Run bots and scheduled turn starts until a human must act.
        """
        from .manager import SessionState

        self.state = LoopState.RUNNING_BOTS
        engine = self.engine
        scheduler = self.session.scheduler
        bot_actions: list[str] = []
        warnings: list[str] = []
        turns_started = 0

        while not engine.is_over:
            if scheduler.pending:
                if turns_started >= self.max_auto_turns:
                    self.state = LoopState.TURN_LIMIT
                    warnings.append(f"Stopped after {turns_started} automatic turns")
                    break
                scheduler.tick()
                turns_started += 1
                continue

            waiting = awaiting_sides(engine)
            bot_side = next((s for s in waiting if self.session.is_bot(s)), None)

            if bot_side is None:
                if any(not engine.state.player(s).hand for s in waiting):
                    self.state = LoopState.STALLED
                    warnings.append("An awaited side has no card to play")
                else:
                    self.state = LoopState.WAITING_HUMAN
                break

            legal = legal_actions(engine, bot_side)
            if not legal:
                logger.warning("Session %s: %s has no card to play",
                               self.session.session_id, bot_side)
                self.state = LoopState.STALLED
                warnings.append(f"{bot_side} has no card to play")
                break

            bot = self.session.bots[bot_side]
            decision = bot.select_action(engine.state, bot_side, legal)
            result = apply_action(engine, decision.action)
            if not result.success:
                logger.warning("Session %s: bot action %s rejected: %s",
                               self.session.session_id, decision.action, result.error)
                self.state = LoopState.STALLED
                warnings.append(f"{bot_side} bot action rejected: {result.error}")
                break
            bot_actions.append(f"{bot_side}: {decision.explanation}")

        if engine.is_over:
            self.state = LoopState.GAME_OVER
            self.session.state = SessionState.GAME_OVER

        return TurnResult(
            success=True,
            loop_state=self.state,
            log_lines=engine.log[log_start:],
            bot_actions=bot_actions,
            awaiting=awaiting_sides(engine),
            warnings=warnings,
            winner=engine.winner,
        )

    def _failure(self, error: str, error_code: str | None) -> TurnResult:
        return TurnResult(
            success=False,
            loop_state=self.state,
            awaiting=awaiting_sides(self.engine),
            errors=[error],
            error_code=error_code,
            winner=self.engine.winner,
        )
