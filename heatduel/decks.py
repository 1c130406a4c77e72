"""
Decks - Card records and deck loading.

Card data is authored outside the engine as flat records:

    {"name": "Heavy Strike", "type": "attack", "damage": 25, "heatChange": 30}

`damage`, `heatChange` and `heal` are optional; `damage` and `heal` must
be non-negative. Records are validated with pydantic and turned into
immutable engine Cards.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Optional, Union
import json
import logging

from pydantic import BaseModel, Field, ValidationError

from .engine_core.state import Card, CardType

logger = logging.getLogger(__name__)

Number = Union[int, float]


class DeckFormatError(ValueError):
    """Raised when card or deck data is malformed."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or []
        super().__init__(message)


class CardRecord(BaseModel):
    """A card as written in deck files and API requests."""
    name: str = Field(..., min_length=1)
    type: CardType
    damage: Optional[Number] = Field(None, ge=0)
    heat_change: Optional[Number] = Field(None, alias="heatChange")
    heal: Optional[Number] = Field(None, ge=0)

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def to_card(self) -> Card:
        return Card(
            name=self.name,
            card_type=self.type,
            damage=self.damage,
            heat_change=self.heat_change,
            heal=self.heal,
        )

    @classmethod
    def from_card(cls, card: Card) -> CardRecord:
        return cls(
            name=card.name,
            type=card.card_type,
            damage=card.damage,
            heat_change=card.heat_change,
            heal=card.heal,
        )


def card_from_dict(data: dict[str, Any]) -> Card:
    """Parse one card record."""
    try:
        return CardRecord.model_validate(data).to_card()
    except ValidationError as e:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise DeckFormatError(f"Invalid card record: {data!r}", errors) from e


def cards_from_records(records: list[dict[str, Any]]) -> list[Card]:
    """Parse a deck given as a list of card records, keeping order."""
    if not isinstance(records, list):
        raise DeckFormatError("A deck must be a list of card records")
    return [card_from_dict(record) for record in records]


def load_deck(path: str | Path) -> list[Card]:
    """Load a deck from a JSON file containing a list of card records."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise DeckFormatError(f"Invalid JSON in {path}: {e}") from e
    deck = cards_from_records(raw)
    logger.debug("Loaded %d cards from %s", len(deck), path)
    return deck


# =============================================================================
# Standard cards
# =============================================================================

HEAVY_STRIKE = Card(name="Heavy Strike", card_type=CardType.ATTACK, damage=25, heat_change=30)
QUICK_JAB = Card(name="Quick Jab", card_type=CardType.ATTACK, damage=10, heat_change=10)
BLOCK = Card(name="Block", card_type=CardType.DEFENSE, heat_change=-20)
VENT = Card(name="Vent", card_type=CardType.DEFENSE, heat_change=-40)

STANDARD_CARDS: tuple[Card, ...] = (HEAVY_STRIKE, QUICK_JAB, BLOCK, VENT)


def standard_deck(copies: int = 2) -> list[Card]:
    """The standard cards repeated `copies` times, in order."""
    return list(STANDARD_CARDS) * copies
