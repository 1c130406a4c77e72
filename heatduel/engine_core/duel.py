"""
Duel Engine - Turn controller and play submission.

The engine owns one GameState and is the only thing that mutates it.
Entry points:
- start_turn(): begin the active side's turn (draws, skip handling)
- play_card(): classic mode, attacker then defender
- play_card_simultaneous(): simultaneous mode, resolved on reveal

A turn ends inside the last play that completes it. If the duel goes
on, the next start_turn() is handed to the scheduler; the engine keeps
the handle so the pending start can be cancelled.
"""

from __future__ import annotations
from typing import Sequence
import logging

from .errors import GameOverError, InvalidModeError, InvalidCardError, PhaseTransitionError
from .resolution import Resolver, check_game_over
from .scheduler import TurnScheduler, ScheduledTurn, ManualScheduler
from .state import GameState, Card, CardType, Side, Phase, Mode

logger = logging.getLogger(__name__)

DEFAULT_TURN_DELAY = 1.0

# (p1 card type, p2 card type) -> (side whose attack may trigger an insert, log line)
SIMULTANEOUS_PAIRINGS: dict[tuple[CardType, CardType], tuple[Side | None, str]] = {
    (CardType.ATTACK, CardType.ATTACK): (None, "Attack meets attack! Both sides trade blows!"),
    (CardType.ATTACK, CardType.DEFENSE): (Side.P1, "p1 attacks, p2 defends!"),
    (CardType.DEFENSE, CardType.ATTACK): (Side.P2, "p2 attacks, p1 defends!"),
    (CardType.DEFENSE, CardType.DEFENSE): (None, "Both sides defend, nobody is hurt."),
}


class DuelEngine:
    """
    A single duel between p1 and p2.

    Usage:
        engine = DuelEngine(deck_p1, deck_p2, Mode.CLASSIC)
        engine.start_turn()
        engine.play_card(Side.P1, 0)  # attacker
        engine.play_card(Side.P2, 0)  # defender, resolves the turn
        engine.scheduler.tick()       # next turn starts

    Engines share nothing; each owns its state, its resolver and its
    pending turn handle.
    """

    def __init__(
        self,
        deck_p1: Sequence[Card],
        deck_p2: Sequence[Card],
        mode: Mode | str = Mode.CLASSIC,
        scheduler: TurnScheduler | None = None,
        turn_delay: float = DEFAULT_TURN_DELAY,
    ):
        self.state = GameState.create(list(deck_p1), list(deck_p2), Mode(mode))
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.turn_delay = turn_delay

        self._resolver = Resolver(state=self.state, log=self._log)
        self._pending: ScheduledTurn | None = None
        self._closed = False

        self._log(f"Game initialised. Mode: {self.state.mode.value}")

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def log(self) -> list[str]:
        return self.state.log

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def is_over(self) -> bool:
        return self.state.is_over

    @property
    def winner(self) -> Side | None:
        return self.state.winner

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_pending_turn(self) -> bool:
        return self._pending is not None and not self._pending.cancelled

    # =========================================================================
    # Turn controller
    # =========================================================================

    def start_turn(self) -> None:
        """
        Start the active side's turn.

        A side flagged as skipped loses the whole turn: the flag is
        cleared and the turn ends without drawing. Otherwise both sides
        draw one card (active side first) and the action phase opens.
        """
        if self.state.is_over:
            logger.debug("start_turn ignored: duel is over")
            return
        if not self.state.can_enter(Phase.START):
            raise PhaseTransitionError(self.state.phase, Phase.START)

        self._cancel_pending()

        state = self.state
        state.set_phase(Phase.START)
        state.turn_number += 1
        active_side = state.turn

        if state.active.skipped:
            self._log(f"{active_side} skips the turn due to overheat!")
            state.active.skipped = False
            self._end_turn()
            return

        self._draw(active_side)
        self._draw(active_side.opponent)

        self._log(f"=== {active_side} turn start ===")
        state.set_phase(Phase.ACTION)

    def _end_turn(self) -> None:
        state = self.state
        self._log(f"=== {state.turn} turn end ===")

        state.turn = state.turn.opponent
        state.set_phase(Phase.END)

        winner = check_game_over(state)
        if winner is not None:
            state.winner = winner
            self._log(f"{winner} wins!")
            self._log("Game over!")
            return

        self._pending = self.scheduler.schedule(self.turn_delay, self._scheduled_start)

    def _scheduled_start(self) -> None:
        self._pending = None
        if self._closed:
            logger.debug("Scheduled turn start dropped: engine closed")
            return
        self.start_turn()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def close(self) -> None:
        """Cancel any pending turn start; later scheduled starts are ignored."""
        self._cancel_pending()
        self._closed = True

    def __enter__(self) -> DuelEngine:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # Classic mode
    # =========================================================================

    def play_card(self, side: Side | str, hand_index: int) -> None:
        """
        Play a card in classic mode.

        The active side's play in the action phase hands over to the
        defender; the defender's play in the defense phase resolves the
        turn. Any other play applies its effects without changing phase.
        """
        if self.state.is_over:
            raise GameOverError(self.state.winner)
        if self.state.mode is not Mode.CLASSIC:
            raise InvalidModeError("play_card is only valid in classic mode")

        side = Side(side)
        player = self.state.player(side)
        card = self._card_at(side, hand_index)

        player.hand.pop(hand_index)
        self._log(f"{side} plays [{card.name}]")
        self._resolver.apply_card_effects(side, card)

        if self.state.phase is Phase.ACTION and side is self.state.turn:
            self.state.set_phase(Phase.DEFENSE)
            self._log(f"{side.opponent} to defend.")
        elif self.state.phase is Phase.DEFENSE and side is not self.state.turn:
            self._resolve_turn()

    def _resolve_turn(self) -> None:
        active_side = self.state.turn
        opponent_side = active_side.opponent

        self._resolver.check_insert_turn(active_side, opponent_side)

        self._resolver.check_overheat(active_side)
        self._resolver.check_overheat(opponent_side)

        self._end_turn()

    # =========================================================================
    # Simultaneous mode
    # =========================================================================

    def play_card_simultaneous(self, side: Side | str, hand_index: int) -> None:
        """
        Pick a card face down in simultaneous mode.

        The card leaves the hand now and is revealed, with the other
        side's pick, once both sides have chosen.
        """
        if self.state.is_over:
            raise GameOverError(self.state.winner)
        if self.state.mode is not Mode.SIMULTANEOUS:
            raise InvalidModeError("play_card_simultaneous is only valid in simultaneous mode")

        side = Side(side)
        player = self.state.player(side)
        card = self._card_at(side, hand_index)

        other = self.state.player(side.opponent)
        if other.selected_card is not None and self.state.phase is not Phase.ACTION:
            # The reveal would resolve a turn that is not open
            raise PhaseTransitionError(self.state.phase, Phase.END)

        player.selected_card = card
        player.hand.pop(hand_index)
        self._log(f"{side} selected a card")

        if all(p.selected_card is not None for p in self.state.players.values()):
            self._resolve_simultaneous_turn()

    def _resolve_simultaneous_turn(self) -> None:
        p1 = self.state.player(Side.P1)
        p2 = self.state.player(Side.P2)
        p1_card, p2_card = p1.selected_card, p2.selected_card

        self._log(f"Reveal: p1 plays [{p1_card.name}], p2 plays [{p2_card.name}]")

        attacker, message = SIMULTANEOUS_PAIRINGS[(p1_card.card_type, p2_card.card_type)]
        self._log(message)

        self._resolver.apply_card_effects(Side.P1, p1_card)
        self._resolver.apply_card_effects(Side.P2, p2_card)

        if attacker is not None:
            self._resolver.check_insert_turn(attacker, attacker.opponent)

        p1.selected_card = None
        p2.selected_card = None

        self._resolver.check_overheat(Side.P1)
        self._resolver.check_overheat(Side.P2)

        self._end_turn()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _card_at(self, side: Side, hand_index: int) -> Card:
        hand = self.state.player(side).hand
        if not 0 <= hand_index < len(hand):
            raise InvalidCardError(side, hand_index)
        return hand[hand_index]

    def _draw(self, side: Side) -> None:
        card = self.state.player(side).draw()
        if card is not None:
            self._log(f"{side} draws a card: [{card.name}]")

    def _log(self, message: str) -> None:
        self.state.log.append(message)
        logger.info(message)


def create_duel(
    deck_p1: Sequence[Card],
    deck_p2: Sequence[Card],
    mode: Mode | str = Mode.CLASSIC,
    scheduler: TurnScheduler | None = None,
    turn_delay: float = DEFAULT_TURN_DELAY,
) -> DuelEngine:
    """Create a duel; mode may be given as 'classic' or 'simultaneous'."""
    return DuelEngine(deck_p1, deck_p2, Mode(mode), scheduler=scheduler, turn_delay=turn_delay)
