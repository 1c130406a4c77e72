"""
Tests for the duel engine.

Tests:
- Turn start (draws, skips)
- Classic plays and turn resolution
- Simultaneous picks and reveal
- Scheduling of the next turn
- Errors leave the duel untouched
"""

import pytest

from ..engine_core.duel import DuelEngine, create_duel
from ..engine_core.errors import (
    GameOverError, InvalidModeError, InvalidCardError, PhaseTransitionError,
)
from ..engine_core.state import Side, Phase, Mode, OVERHEAT_THRESHOLD


class TestStartTurn:
    """Tests for starting a turn."""

    def test_init_logs_mode(self, make_engine):
        engine = make_engine([], [], Mode.SIMULTANEOUS)
        assert engine.log == ["Game initialised. Mode: simultaneous"]

    def test_both_sides_draw_active_first(self, make_engine, strike, guard):
        engine = make_engine([strike], [guard])
        engine.start_turn()

        assert engine.state.phase is Phase.ACTION
        assert engine.state.turn_number == 1
        assert engine.state.player(Side.P1).hand == [strike]
        assert engine.state.player(Side.P2).hand == [guard]
        assert engine.log[1:] == [
            "p1 draws a card: [Strike]",
            "p2 draws a card: [Guard]",
            "=== p1 turn start ===",
        ]

    def test_empty_decks_do_not_draw(self, make_engine):
        engine = make_engine([], [])
        engine.start_turn()

        assert engine.state.phase is Phase.ACTION
        assert engine.log[1:] == ["=== p1 turn start ==="]

    def test_mid_turn_start_rejected(self, make_engine, strike):
        engine = make_engine([strike], [])
        engine.start_turn()

        with pytest.raises(PhaseTransitionError):
            engine.start_turn()
        assert engine.state.turn_number == 1

    def test_start_after_game_over_is_noop(self, make_engine, finisher, guard):
        engine = make_engine([finisher], [guard])
        engine.start_turn()
        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)
        log_size = len(engine.log)

        engine.start_turn()
        assert len(engine.log) == log_size


class TestClassicTurn:
    """Tests for classic mode plays."""

    def test_attack_hands_over_to_defender(self, make_engine, strike, guard):
        engine = make_engine([strike], [guard])
        engine.start_turn()
        engine.play_card(Side.P1, 0)

        assert engine.state.phase is Phase.DEFENSE
        assert engine.state.player(Side.P1).hand == []
        assert engine.state.player(Side.P1).heat == 30
        assert engine.state.player(Side.P2).hp == 95
        assert engine.log[-4:] == [
            "p1 plays [Strike]",
            "p1 heat +30 = 30",
            "p1 deals 5 damage to p2! (base: 25, attack x0.30, defense x0.70)",
            "p2 to defend.",
        ]

    def test_defense_resolves_turn(self, make_engine, scheduler, strike, guard):
        engine = make_engine([strike], [guard])
        engine.start_turn()
        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)

        assert engine.state.phase is Phase.END
        assert engine.state.turn is Side.P2
        assert engine.log[-1] == "=== p1 turn end ==="
        assert engine.has_pending_turn
        assert scheduler.pending

    def test_scheduled_start_opens_next_turn(self, make_engine, scheduler, strike, guard):
        engine = make_engine([strike], [guard, strike])
        engine.start_turn()
        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)

        assert scheduler.tick()
        assert engine.state.turn is Side.P2
        assert engine.state.phase is Phase.ACTION
        assert engine.state.turn_number == 2
        assert engine.log[-1] == "=== p2 turn start ==="
        assert not engine.has_pending_turn

    def test_out_of_turn_play_applies_effects_only(self, make_engine, strike, jab):
        engine = make_engine([strike], [jab])
        engine.start_turn()

        engine.play_card(Side.P2, 0)

        assert engine.state.phase is Phase.ACTION
        assert engine.state.player(Side.P2).heat == 20
        assert engine.state.player(Side.P2).hand == []

    def test_insert_attack_keeps_card_in_hand(self, make_engine, inferno, guard, jab):
        engine = make_engine([inferno], [guard])
        engine.start_turn()
        engine.state.player(Side.P2).hand.append(jab)

        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)

        p1 = engine.state.player(Side.P1)
        p2 = engine.state.player(Side.P2)
        # Inferno: 10 * 0.6 * 0.4; Jab insert: 40 * 0.2 * (1 - 0.6)
        assert p2.hp == 98
        assert p1.hp == 97
        assert p2.hand == [jab]
        assert "p2 insert attack: [Jab]" in engine.log
        assert engine.state.phase is Phase.END

    def test_gap_of_fifty_grants_nothing(self, make_engine, guard, jab):
        from ..engine_core.state import Card, CardType
        blaze = Card(name="Blaze", card_type=CardType.ATTACK, damage=10, heat_change=50)
        engine = make_engine([blaze], [guard])
        engine.start_turn()
        engine.state.player(Side.P2).hand.append(jab)

        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)

        assert engine.state.player(Side.P1).hp == 100
        assert engine.state.player(Side.P2).heat == 0
        assert not any("insert" in line for line in engine.log)

    def test_game_over(self, make_engine, scheduler, finisher, guard):
        engine = make_engine([finisher], [guard])
        engine.start_turn()
        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)

        assert engine.is_over
        assert engine.winner is Side.P1
        assert engine.log[-2:] == ["p1 wins!", "Game over!"]
        assert not engine.has_pending_turn
        assert not scheduler.pending

    def test_simultaneous_play_rejected(self, make_engine, strike):
        engine = make_engine([strike], [])
        engine.start_turn()

        with pytest.raises(InvalidModeError):
            engine.play_card_simultaneous(Side.P1, 0)


class TestOverheatAndSkip:
    """Tests for overheat and the skipped turn that follows."""

    def test_overheat_skips_next_own_turn(self, make_engine, scheduler, overclock, guard):
        engine = make_engine([overclock, guard], [guard, guard, guard])

        # Turn 1: p1 overheats
        engine.start_turn()
        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)
        p1 = engine.state.player(Side.P1)
        assert p1.skipped
        assert p1.heat == 0
        assert all(p.heat <= OVERHEAT_THRESHOLD for p in engine.state.players.values())

        # Turn 2: p2 plays normally
        scheduler.tick()
        engine.play_card(Side.P2, 0)
        engine.play_card(Side.P1, 0)
        assert engine.state.turn is Side.P1

        # Turn 3: p1 skips, nobody draws
        p2_deck = list(engine.state.player(Side.P2).deck)
        scheduler.tick()

        assert "p1 skips the turn due to overheat!" in engine.log
        assert not p1.skipped
        assert engine.state.turn is Side.P2
        assert engine.state.phase is Phase.END
        assert engine.state.player(Side.P2).deck == p2_deck
        assert engine.state.turn_number == 3
        assert engine.has_pending_turn


class TestSimultaneousTurn:
    """Tests for simultaneous picks."""

    def test_pick_is_hidden_until_both_chose(self, make_engine, strike, guard):
        engine = make_engine([strike], [guard], Mode.SIMULTANEOUS)
        engine.start_turn()
        engine.play_card_simultaneous(Side.P1, 0)

        p1 = engine.state.player(Side.P1)
        assert p1.selected_card is strike
        assert p1.hand == []
        assert p1.heat == 0
        assert engine.log[-1] == "p1 selected a card"
        assert engine.state.phase is Phase.ACTION

    def test_attack_meets_attack_has_no_insert(self, make_engine, jab):
        from ..engine_core.state import Card, CardType
        torch = Card(name="Torch", card_type=CardType.ATTACK, damage=10, heat_change=80)
        engine = make_engine([torch], [jab], Mode.SIMULTANEOUS)
        engine.start_turn()
        engine.state.player(Side.P2).hand.append(jab)

        engine.play_card_simultaneous(Side.P1, 0)
        engine.play_card_simultaneous(Side.P2, 0)

        # Torch: 10 * 0.8 * 0.2; Jab: 40 * 0.2 * 0.8
        assert engine.state.player(Side.P2).hp == 99
        assert engine.state.player(Side.P1).hp == 94
        assert "Reveal: p1 plays [Torch], p2 plays [Jab]" in engine.log
        assert "Attack meets attack! Both sides trade blows!" in engine.log
        assert not any("insert" in line for line in engine.log)
        assert engine.state.player(Side.P1).selected_card is None
        assert engine.state.player(Side.P2).selected_card is None
        assert engine.state.turn is Side.P2

    def test_attack_against_defense_can_insert(self, make_engine, guard, jab):
        from ..engine_core.state import Card, CardType
        torch = Card(name="Torch", card_type=CardType.ATTACK, damage=10, heat_change=80)
        engine = make_engine([torch], [guard], Mode.SIMULTANEOUS)
        engine.start_turn()
        engine.state.player(Side.P2).hand.append(jab)

        engine.play_card_simultaneous(Side.P2, 0)
        engine.play_card_simultaneous(Side.P1, 0)

        assert "p1 attacks, p2 defends!" in engine.log
        assert "p2 insert attack: [Jab]" in engine.log
        # Jab insert: 40 * 0.2 * (1 - 0.8)
        assert engine.state.player(Side.P1).hp == 99
        assert engine.state.player(Side.P2).hand == [jab]

    def test_defense_against_attack_lets_p1_insert(self, make_engine, guard, jab):
        from ..engine_core.state import Card, CardType
        torch = Card(name="Torch", card_type=CardType.ATTACK, damage=10, heat_change=80)
        engine = make_engine([guard], [torch], Mode.SIMULTANEOUS)
        engine.start_turn()
        engine.state.player(Side.P1).hand.append(jab)

        engine.play_card_simultaneous(Side.P1, 0)
        engine.play_card_simultaneous(Side.P2, 0)

        p1 = engine.state.player(Side.P1)
        p2 = engine.state.player(Side.P2)
        assert "p2 attacks, p1 defends!" in engine.log
        assert "p1 insert attack: [Jab]" in engine.log
        # Torch: 10 * 0.8 * 0.2; Jab insert: 40 * 0.2 * (1 - 0.8)
        assert p1.hp == 99
        assert p2.hp == 99
        assert p1.heat == 20
        assert p1.hand == [jab]

    def test_both_defend(self, make_engine, guard):
        engine = make_engine([guard], [guard], Mode.SIMULTANEOUS)
        engine.start_turn()
        engine.play_card_simultaneous(Side.P1, 0)
        engine.play_card_simultaneous(Side.P2, 0)

        assert "Both sides defend, nobody is hurt." in engine.log
        assert engine.state.phase is Phase.END

    def test_second_pick_replaces_first(self, make_engine, strike, guard):
        engine = make_engine([strike, guard], [], Mode.SIMULTANEOUS)
        engine.start_turn()
        engine.state.player(Side.P1).draw()

        engine.play_card_simultaneous(Side.P1, 0)
        engine.play_card_simultaneous(Side.P1, 0)

        p1 = engine.state.player(Side.P1)
        assert p1.selected_card is guard
        assert p1.hand == []

    def test_reveal_outside_action_rejected(self, make_engine, guard):
        engine = make_engine([guard, guard], [guard, guard], Mode.SIMULTANEOUS)
        engine.start_turn()
        engine.state.player(Side.P1).draw()
        engine.state.player(Side.P2).draw()
        engine.play_card_simultaneous(Side.P1, 0)
        engine.play_card_simultaneous(Side.P2, 0)
        assert engine.state.phase is Phase.END

        engine.play_card_simultaneous(Side.P1, 0)
        with pytest.raises(PhaseTransitionError):
            engine.play_card_simultaneous(Side.P2, 0)
        assert engine.state.player(Side.P2).hand == [guard]
        assert engine.state.player(Side.P2).selected_card is None

    def test_classic_play_rejected(self, make_engine, strike):
        engine = make_engine([strike], [], Mode.SIMULTANEOUS)
        engine.start_turn()

        with pytest.raises(InvalidModeError):
            engine.play_card(Side.P1, 0)


class TestErrors:
    """Rejected plays leave the duel untouched."""

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_bad_hand_index(self, make_engine, strike, index):
        engine = make_engine([strike], [])
        engine.start_turn()
        log_size = len(engine.log)

        with pytest.raises(InvalidCardError) as exc_info:
            engine.play_card(Side.P1, index)

        assert exc_info.value.error_code == "INVALID_CARD"
        assert engine.state.player(Side.P1).hand == [strike]
        assert len(engine.log) == log_size
        assert engine.state.phase is Phase.ACTION

    def test_bad_side_name(self, make_engine, strike):
        engine = make_engine([strike], [])
        engine.start_turn()

        with pytest.raises(ValueError):
            engine.play_card("p3", 0)


class TestPlaysAfterGameOver:
    """A decided duel accepts no more plays."""

    def test_classic_play_rejected(self, make_engine, finisher, guard, bandage):
        engine = make_engine([finisher], [guard])
        engine.start_turn()
        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)
        engine.state.player(Side.P2).hand.append(bandage)
        hp = engine.state.player(Side.P2).hp
        log_size = len(engine.log)

        with pytest.raises(GameOverError) as exc_info:
            engine.play_card(Side.P2, 0)

        assert exc_info.value.error_code == "GAME_OVER"
        assert engine.state.player(Side.P2).hp == hp
        assert engine.state.player(Side.P2).hand == [bandage]
        assert len(engine.log) == log_size
        assert engine.winner is Side.P1

    def test_simultaneous_pick_rejected(self, make_engine, finisher, guard, bandage):
        engine = make_engine([finisher], [guard], Mode.SIMULTANEOUS)
        engine.start_turn()
        engine.play_card_simultaneous(Side.P1, 0)
        engine.play_card_simultaneous(Side.P2, 0)
        assert engine.is_over
        engine.state.player(Side.P2).hand.append(bandage)

        with pytest.raises(GameOverError):
            engine.play_card_simultaneous(Side.P2, 0)

        assert engine.state.player(Side.P2).selected_card is None
        assert engine.state.player(Side.P2).hand == [bandage]


class TestClose:
    """Tests for cancelling the pending turn start."""

    def test_close_cancels_pending(self, make_engine, scheduler, strike, guard):
        engine = make_engine([strike], [guard])
        engine.start_turn()
        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)

        engine.close()

        assert engine.closed
        assert not engine.has_pending_turn
        assert not scheduler.tick()
        assert engine.state.turn_number == 1

    def test_manual_start_cancels_pending(self, make_engine, scheduler, strike, guard):
        engine = make_engine([strike], [guard])
        engine.start_turn()
        engine.play_card(Side.P1, 0)
        engine.play_card(Side.P2, 0)

        engine.start_turn()

        assert engine.state.turn_number == 2
        assert not scheduler.tick()
        assert engine.state.turn_number == 2

    def test_context_manager_closes(self, scheduler, strike, guard):
        with DuelEngine([strike], [guard], scheduler=scheduler) as engine:
            engine.start_turn()
            engine.play_card(Side.P1, 0)
            engine.play_card(Side.P2, 0)
        assert engine.closed
        assert not scheduler.pending


def test_create_duel_accepts_mode_name():
    engine = create_duel([], [], "simultaneous")
    assert engine.mode is Mode.SIMULTANEOUS
