"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes the duel state and the plays open to its side and
returns a decision. Policies never mutate the state; the session applies
the chosen action through the reducer.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable
import random

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.state import GameState, Side


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains the action to take and a short explanation for logs/UI.
    """
    action: Action
    explanation: str = ""
    confidence: float = 1.0
    evaluated_actions: int = 0


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    Implementations range from fixed heuristics to random play.
    """

    @abstractmethod
    def select_action(
        self,
        state: GameState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current duel state (read only)
            side: The side the bot plays
            legal_actions: Plays open to that side

        Returns:
            BotDecision with the selected action

        Raises:
            ValueError: if legal_actions is empty
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class FirstAttackPolicy(BotPolicy):
    """
    Plays the first attack card in hand, or the first card if it holds
    no attack card.
    """

    def select_action(
        self,
        state: GameState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        hand = state.player(side).hand
        for action in legal_actions:
            card = hand[action.payload.hand_index]
            if card.is_attack:
                return BotDecision(
                    action=action,
                    explanation=f"First attack card: {card.name}",
                    evaluated_actions=len(legal_actions),
                )

        first = hand[legal_actions[0].payload.hand_index]
        return BotDecision(
            action=legal_actions[0],
            explanation=f"No attack card, playing {first.name}",
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal action.

    Used for deterministic testing.
    """

    def select_action(
        self,
        state: GameState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=legal_actions[0],
            explanation="Selected first legal action",
            evaluated_actions=1,
        )


class RandomPolicy(BotPolicy):
    """Selects actions uniformly at random."""

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(
        self,
        state: GameState,
        side: Side,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=self.rng.choice(legal_actions),
            explanation="Selected randomly",
            confidence=1.0 / len(legal_actions),
            evaluated_actions=len(legal_actions),
        )


# name -> factory taking an optional seed
POLICIES: dict[str, Callable[[int | None], BotPolicy]] = {
    "first_attack": lambda seed: FirstAttackPolicy(),
    "first_legal": lambda seed: FirstLegalPolicy(),
    "random": lambda seed: RandomPolicy(seed),
}


def create_policy(name: str, seed: int | None = None) -> BotPolicy:
    """Build a policy by name. Raises KeyError for unknown names."""
    if name not in POLICIES:
        raise KeyError(f"Unknown bot policy: {name}")
    return POLICIES[name](seed)
