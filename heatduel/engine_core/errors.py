"""
Engine errors.

All errors are raised synchronously before any state is mutated.
Game-rule edge cases (empty deck, no card for an insert attack) are not
errors; they resolve as no-ops.
"""


class DuelError(Exception):
    """Base class for errors raised by the duel engine."""

    error_code = "DUEL_ERROR"


class InvalidModeError(DuelError):
    """A play method was called in the wrong mode."""

    error_code = "INVALID_MODE"


class InvalidCardError(DuelError):
    """The hand index does not name a card in hand."""

    error_code = "INVALID_CARD"

    def __init__(self, side, hand_index: int):
        self.side = side
        self.hand_index = hand_index
        super().__init__(f"Invalid card: {side} has no card at hand index {hand_index}")


class PhaseTransitionError(DuelError):
    """A phase change outside the transition table was requested."""

    error_code = "INVALID_PHASE"

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move from phase '{current.value}' to '{requested.value}'")


class GameOverError(DuelError):
    """A play was submitted after the duel was decided."""

    error_code = "GAME_OVER"

    def __init__(self, winner):
        self.winner = winner
        super().__init__(f"The duel is over: {winner} won")
