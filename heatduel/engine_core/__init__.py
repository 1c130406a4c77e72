"""
Engine Core - Duel state, turn control and resolution.

The engine is the runtime that:
1. Holds the GameState of one duel
2. Starts turns and alternates sides
3. Accepts card plays (classic or simultaneous)
4. Resolves heat, damage, heal, insert attacks and overheat
5. Detects the winner and schedules the next turn
"""

from .state import (
    GameState, PlayerState, Card, CardType, Side, Phase, Mode,
    MAX_HP, OVERHEAT_THRESHOLD, INSERT_HEAT_GAP,
)
from .errors import (
    DuelError, InvalidModeError, InvalidCardError, PhaseTransitionError, GameOverError,
)
from .resolution import Resolver, DamageRoll, compute_damage, check_game_over
from .scheduler import TurnScheduler, ScheduledTurn, ManualScheduler, AsyncioScheduler
from .duel import DuelEngine, create_duel, DEFAULT_TURN_DELAY
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import apply_action
from .action_generator import awaiting_sides, legal_actions

__all__ = [
    "GameState",
    "PlayerState",
    "Card",
    "CardType",
    "Side",
    "Phase",
    "Mode",
    "MAX_HP",
    "OVERHEAT_THRESHOLD",
    "INSERT_HEAT_GAP",
    "DuelError",
    "InvalidModeError",
    "InvalidCardError",
    "PhaseTransitionError",
    "GameOverError",
    "Resolver",
    "DamageRoll",
    "compute_damage",
    "check_game_over",
    "TurnScheduler",
    "ScheduledTurn",
    "ManualScheduler",
    "AsyncioScheduler",
    "DuelEngine",
    "create_duel",
    "DEFAULT_TURN_DELAY",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "apply_action",
    "awaiting_sides",
    "legal_actions",
]
