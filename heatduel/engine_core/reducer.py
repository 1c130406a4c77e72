"""
Reducer - Applies actions to a duel.

The reducer is the single seam between actions and the engine:
- Dispatches each action type to the matching engine entry point
- Reports engine errors as failed ActionResults instead of raising
- Collects the game log lines the action produced
"""

from __future__ import annotations
from typing import Callable

from .action import Action, ActionType, ActionResult
from .duel import DuelEngine
from .errors import DuelError

Handler = Callable[[DuelEngine, Action], None]


def _handle_start_turn(engine: DuelEngine, action: Action) -> None:
    engine.start_turn()


def _handle_play_card(engine: DuelEngine, action: Action) -> None:
    engine.play_card(action.payload.side, action.payload.hand_index)


def _handle_play_card_simultaneous(engine: DuelEngine, action: Action) -> None:
    engine.play_card_simultaneous(action.payload.side, action.payload.hand_index)


HANDLERS: dict[ActionType, Handler] = {
    ActionType.START_TURN: _handle_start_turn,
    ActionType.PLAY_CARD: _handle_play_card,
    ActionType.PLAY_CARD_SIMULTANEOUS: _handle_play_card_simultaneous,
}


def apply_action(engine: DuelEngine, action: Action) -> ActionResult:
    """
    Apply an action to a duel.

    Returns ActionResult with the new log lines, or the error that
    rejected the action. Rejected actions leave the duel untouched.
    """
    handler = HANDLERS.get(action.action_type)
    if handler is None:
        return ActionResult.failure(
            f"No handler for action type: {action.action_type}",
            error_code="NO_HANDLER",
        )

    log_start = len(engine.log)
    try:
        handler(engine, action)
    except DuelError as e:
        return ActionResult.failure(str(e), error_code=e.error_code)
    return ActionResult.ok(engine.log[log_start:])
