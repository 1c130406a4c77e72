"""
Pytest fixtures for Heat Duel tests.
"""

import pytest

from ..engine_core.duel import DuelEngine
from ..engine_core.scheduler import ManualScheduler
from ..engine_core.state import Card, CardType, Mode


@pytest.fixture
def strike() -> Card:
    """25 damage, +30 heat."""
    return Card(name="Strike", card_type=CardType.ATTACK, damage=25, heat_change=30)


@pytest.fixture
def jab() -> Card:
    """40 damage, +20 heat."""
    return Card(name="Jab", card_type=CardType.ATTACK, damage=40, heat_change=20)


@pytest.fixture
def inferno() -> Card:
    """10 damage, +60 heat."""
    return Card(name="Inferno", card_type=CardType.ATTACK, damage=10, heat_change=60)


@pytest.fixture
def finisher() -> Card:
    """Enough damage to end a duel in one play."""
    return Card(name="Finisher", card_type=CardType.ATTACK, damage=1000, heat_change=50)


@pytest.fixture
def guard() -> Card:
    """Defense card with no effect."""
    return Card(name="Guard", card_type=CardType.DEFENSE)


@pytest.fixture
def overclock() -> Card:
    """Defense card pushing heat past the overheat threshold."""
    return Card(name="Overclock", card_type=CardType.DEFENSE, heat_change=110)


@pytest.fixture
def bandage() -> Card:
    return Card(name="Bandage", card_type=CardType.DEFENSE, heal=30)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def make_engine(scheduler):
    """Factory for engines sharing the test's ManualScheduler."""

    def _make(deck_p1, deck_p2, mode=Mode.CLASSIC):
        return DuelEngine(deck_p1, deck_p2, mode, scheduler=scheduler, turn_delay=0)

    return _make
