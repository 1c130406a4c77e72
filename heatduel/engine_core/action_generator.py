"""
Action Generator - Which side is expected to play, and with what.

The engine itself accepts plays permissively (see DuelEngine.play_card);
this module describes the plays that advance the duel, for bots and for
hosts that drive a duel loop.
"""

from __future__ import annotations

from .action import Action
from .duel import DuelEngine
from .state import Side, Phase, Mode


def awaiting_sides(engine: DuelEngine) -> list[Side]:
    """
    Sides whose play the current phase is waiting for.

    Classic: the active side in the action phase, the defender in the
    defense phase. Simultaneous: every side that has not picked yet.
    """
    state = engine.state
    if state.is_over:
        return []

    if state.mode is Mode.CLASSIC:
        if state.phase is Phase.ACTION:
            return [state.turn]
        if state.phase is Phase.DEFENSE:
            return [state.turn.opponent]
        return []

    if state.phase is not Phase.ACTION:
        return []
    return [side for side in Side if state.player(side).selected_card is None]


def legal_actions(engine: DuelEngine, side: Side) -> list[Action]:
    """One play per card in hand, if the duel is waiting on this side."""
    if side not in awaiting_sides(engine):
        return []
    hand = engine.state.player(side).hand
    return [Action.play(side, i, engine.mode) for i in range(len(hand))]
