"""
Action System - Actions and results.

Actions represent the calls a player, bot or host makes on a duel:
1. Start the next turn
2. Play a card (classic mode)
3. Pick a card (simultaneous mode)

Bots return actions, sessions apply them through the reducer, and the
reducer reports the outcome as an ActionResult.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .state import Side, Mode


class ActionType(Enum):
    """Types of actions on a duel."""
    START_TURN = "start_turn"
    PLAY_CARD = "play_card"
    PLAY_CARD_SIMULTANEOUS = "play_card_simultaneous"


@dataclass(frozen=True)
class ActionPayload:
    side: Side | None = None
    hand_index: int | None = None


@dataclass(frozen=True)
class Action:
    """A complete action to apply to a duel."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def start_turn(cls) -> Action:
        return cls(action_type=ActionType.START_TURN)

    @classmethod
    def play(cls, side: Side | str, hand_index: int, mode: Mode = Mode.CLASSIC) -> Action:
        """Factory for a card play; the mode picks the submission method."""
        action_type = (
            ActionType.PLAY_CARD
            if mode is Mode.CLASSIC
            else ActionType.PLAY_CARD_SIMULTANEOUS
        )
        return cls(
            action_type=action_type,
            payload=ActionPayload(side=Side(side), hand_index=hand_index),
        )

    def __str__(self) -> str:
        if self.action_type is ActionType.START_TURN:
            return "start_turn"
        return f"{self.action_type.value}({self.payload.side}, {self.payload.hand_index})"


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action succeeded
    - Errors (if failed)
    - Game log lines written while applying it
    """
    success: bool
    error: str | None = None
    error_code: str | None = None

    log_lines: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def ok(cls, log_lines: list[str] | None = None) -> ActionResult:
        return cls(success=True, log_lines=log_lines or [])
