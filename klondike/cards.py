"""Card-related data structures and helpers for Klondike."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class Suit(Enum):
    HEARTS = "HEARTS"
    DIAMONDS = "DIAMONDS"
    CLUBS = "CLUBS"
    SPADES = "SPADES"


class Rank(Enum):
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


class Color(Enum):
    RED = "RED"
    BLACK = "BLACK"


# Rank order from Ace (low) to King (high).
RANK_ORDER: list[Rank] = list(Rank)

RANK_VALUES: dict[Rank, int] = {rank: index + 1 for index, rank in enumerate(RANK_ORDER)}

RED_SUITS = frozenset({Suit.HEARTS, Suit.DIAMONDS})

# Suit order used for the foundation row.
FOUNDATION_SUITS: list[Suit] = [Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES]


@dataclass(frozen=True)
class Card:
    """Immutable representation of one physical playing card.

    Turning a card over produces a new value with the same ``id``.
    """

    id: str
    rank: Rank
    suit: Suit
    face_up: bool = False

    @property
    def color(self) -> Color:
        return Color.RED if self.suit in RED_SUITS else Color.BLACK

    @property
    def value(self) -> int:
        return RANK_VALUES[self.rank]

    def flip(self) -> Card:
        return replace(self, face_up=not self.face_up)

    def turned_up(self) -> Card:
        return self if self.face_up else self.flip()

    def turned_down(self) -> Card:
        return self.flip() if self.face_up else self

    def can_stack_on_tableau(self, target: Card) -> bool:
        """Return True if this card may sit on ``target`` in a tableau column.

        The card must be exactly one rank lower and of the opposite color.
        """
        return self.value == target.value - 1 and self.color is not target.color

    def can_place_on_foundation(self, top_card: Optional[Card]) -> bool:
        """Return True if this card continues a foundation topped by ``top_card``."""
        if top_card is None:
            return self.rank is Rank.ACE
        return self.suit is top_card.suit and self.value == top_card.value + 1


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"
