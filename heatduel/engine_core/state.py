"""
Game State - State container for a single duel.

Design principles:
- One GameState per duel, owned by its DuelEngine
- Mutated in place by the engine, never by callers
- Closed enumerations for sides, phases, modes and card types
- Cards are immutable values; optional effects are explicit None
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .errors import PhaseTransitionError

MAX_HP = 100
OVERHEAT_THRESHOLD = 100
INSERT_HEAT_GAP = 50


class Side(Enum):
    """The two combatants."""
    P1 = "p1"
    P2 = "p2"

    @property
    def opponent(self) -> Side:
        return Side.P2 if self is Side.P1 else Side.P1

    def __str__(self) -> str:
        return self.value


class Phase(Enum):
    """Phases of a single turn."""
    START = "start"
    ACTION = "action"
    DEFENSE = "defense"
    INSERT = "insert"
    END = "end"


# Every phase change the engine may make. START -> START only happens
# for the very first turn of a duel.
ALLOWED_TRANSITIONS: dict[Phase, frozenset[Phase]] = {
    Phase.START: frozenset({Phase.START, Phase.ACTION, Phase.END}),
    Phase.ACTION: frozenset({Phase.DEFENSE, Phase.INSERT, Phase.END}),
    Phase.DEFENSE: frozenset({Phase.INSERT, Phase.END}),
    Phase.INSERT: frozenset({Phase.END}),
    Phase.END: frozenset({Phase.START}),
}


class Mode(Enum):
    """How plays are submitted and resolved."""
    CLASSIC = "classic"  # attacker plays, then defender responds
    SIMULTANEOUS = "simultaneous"  # both pick face down, then reveal


class CardType(Enum):
    ATTACK = "attack"
    DEFENSE = "defense"


@dataclass(frozen=True)
class Card:
    """
    A card definition.

    Any subset of damage/heat_change/heal may be set. Damage only
    applies when the card is an attack.
    """
    name: str
    card_type: CardType
    damage: float | None = None
    heat_change: float | None = None
    heal: float | None = None

    @property
    def is_attack(self) -> bool:
        return self.card_type is CardType.ATTACK

    def __str__(self) -> str:
        return self.name


@dataclass
class PlayerState:
    """State for one side of the duel."""
    hp: float = MAX_HP
    heat: float = 0
    skipped: bool = False
    hand: list[Card] = field(default_factory=list)
    deck: list[Card] = field(default_factory=list)

    # Simultaneous mode only: card waiting for the reveal
    selected_card: Card | None = None

    def draw(self) -> Card | None:
        """Move the front card of the deck to the end of the hand."""
        if not self.deck:
            return None
        card = self.deck.pop(0)
        self.hand.append(card)
        return card

    def first_attack_card(self) -> Card | None:
        """First attack card in hand order, if any."""
        for card in self.hand:
            if card.is_attack:
                return card
        return None

    @property
    def is_defeated(self) -> bool:
        return self.hp <= 0


@dataclass
class GameState:
    """
    Complete duel state at a point in time.

    The log is a human-readable trace of game events; no rule reads it.
    """
    players: dict[Side, PlayerState]
    mode: Mode = Mode.CLASSIC
    turn: Side = Side.P1
    phase: Phase = Phase.START
    log: list[str] = field(default_factory=list)

    turn_number: int = 0
    winner: Side | None = None

    @classmethod
    def create(
        cls,
        deck_p1: list[Card],
        deck_p2: list[Card],
        mode: Mode = Mode.CLASSIC,
    ) -> GameState:
        """Fresh state; the decks are copied so callers keep their lists."""
        return cls(
            players={
                Side.P1: PlayerState(deck=list(deck_p1)),
                Side.P2: PlayerState(deck=list(deck_p2)),
            },
            mode=mode,
        )

    @property
    def active(self) -> PlayerState:
        return self.players[self.turn]

    @property
    def opponent(self) -> PlayerState:
        return self.players[self.turn.opponent]

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def player(self, side: Side) -> PlayerState:
        return self.players[side]

    def can_enter(self, phase: Phase) -> bool:
        return phase in ALLOWED_TRANSITIONS[self.phase]

    def set_phase(self, phase: Phase) -> None:
        """Move to another phase, rejecting transitions outside the table."""
        if not self.can_enter(phase):
            raise PhaseTransitionError(self.phase, phase)
        self.phase = phase
