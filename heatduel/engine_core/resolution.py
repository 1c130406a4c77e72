"""
Resolution - Card effects, insert attacks, overheat and game over.

The resolver applies the effects of one played card at a time:
1. Heat change for the acting side (unclamped)
2. Damage, scaled by the attack and defense multipliers
3. Healing, capped at MAX_HP

Heat is only clamped by the overheat check, which the turn controller
runs once all of a turn's effects are applied.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import math

from .state import (
    GameState, Card, Side, Phase,
    MAX_HP, OVERHEAT_THRESHOLD, INSERT_HEAT_GAP,
)


def fmt_number(value: float) -> str:
    """Format a number for the game log (no trailing '.0' on whole numbers)."""
    return f"{value:g}"


@dataclass(frozen=True)
class DamageRoll:
    """Breakdown of a damage computation."""
    base: float
    attack_multiplier: float
    defense_multiplier: float
    final: int


def compute_damage(base: float, attacker_heat: float, reference_heat: float) -> DamageRoll:
    """
    Damage dealt by an attack.

    attacker_heat scales the strike up; reference_heat tempers it.
    For a normal attack the reference is the attacker's own heat, for an
    insert attack it is the heat of the side being struck.
    """
    attack_multiplier = attacker_heat / 100
    defense_multiplier = 1 - reference_heat / 100
    raw = base * attack_multiplier
    raw *= defense_multiplier
    return DamageRoll(
        base=base,
        attack_multiplier=attack_multiplier,
        defense_multiplier=defense_multiplier,
        final=math.floor(max(0, raw)),
    )


@dataclass
class Resolver:
    """
    Applies card effects to a GameState.

    Does not own the state; the DuelEngine passes in the state it owns
    together with the function used to append to the game log.
    """
    state: GameState
    log: Callable[[str], None]

    def apply_card_effects(self, side: Side, card: Card, is_insert_attack: bool = False) -> None:
        """Apply heat change, damage and heal of a card, in that order."""
        player = self.state.player(side)
        opponent_side = side.opponent
        opponent = self.state.player(opponent_side)

        if card.heat_change is not None:
            player.heat += card.heat_change
            sign = "+" if card.heat_change > 0 else ""
            self.log(
                f"{side} heat {sign}{fmt_number(card.heat_change)} = {fmt_number(player.heat)}"
            )

        if card.damage is not None and card.is_attack:
            reference_heat = opponent.heat if is_insert_attack else player.heat
            roll = compute_damage(card.damage, player.heat, reference_heat)
            opponent.hp -= roll.final
            self.log(
                f"{side} deals {roll.final} damage to {opponent_side}! "
                f"(base: {fmt_number(roll.base)}, "
                f"attack x{roll.attack_multiplier:.2f}, "
                f"defense x{roll.defense_multiplier:.2f})"
            )

        if card.heal is not None:
            player.hp = min(MAX_HP, player.hp + card.heal)
            self.log(f"{side} heals {fmt_number(card.heal)}, HP: {fmt_number(player.hp)}")

    def check_insert_turn(self, attacker: Side, defender: Side) -> Card | None:
        """
        Grant the defender a bonus strike when the heat gap is too wide.

        The strike uses the defender's first attack card in hand and
        leaves that card in hand. Returns the card used, if any.
        """
        heat_diff = self.state.player(attacker).heat - self.state.player(defender).heat
        if heat_diff <= INSERT_HEAT_GAP:
            return None

        self.log(
            f"{defender} gains an insert attack from the heat gap "
            f"({fmt_number(heat_diff)} > {INSERT_HEAT_GAP})!"
        )
        attack_card = self.state.player(defender).first_attack_card()
        if attack_card is None:
            return None

        self.state.set_phase(Phase.INSERT)
        self.log(f"{defender} insert attack: [{attack_card.name}]")
        self.apply_card_effects(defender, attack_card, is_insert_attack=True)
        return attack_card

    def check_overheat(self, side: Side) -> bool:
        """Reset heat and skip the next turn if heat went past the threshold."""
        player = self.state.player(side)
        if player.heat <= OVERHEAT_THRESHOLD:
            return False
        self.log(f"{side} overheats! Skips the next turn, heat reset to 0.")
        player.skipped = True
        player.heat = 0
        return True


def check_game_over(state: GameState) -> Side | None:
    """
    Winner of the duel, if any.

    p1 is checked first, so when both sides are down p2 wins.
    """
    if state.player(Side.P1).is_defeated:
        return Side.P2
    if state.player(Side.P2).is_defeated:
        return Side.P1
    return None
