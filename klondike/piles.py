"""Pile representations: tableau columns, foundations, stock and waste."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Iterable, List, Optional, Type

from .cards import Card, Rank, Suit
from .errors import InsufficientCards

FOUNDATION_SIZE = 13


class PileType(Enum):
    TABLEAU = "TABLEAU"
    FOUNDATION = "FOUNDATION"
    STOCK = "STOCK"
    WASTE = "WASTE"


@dataclass
class Pile:
    """Ordered stack of cards; index 0 is the bottom, the last card is the top."""

    kind: ClassVar[PileType]

    id: str
    cards: List[Card] = field(default_factory=list)

    @property
    def top_card(self) -> Optional[Card]:
        return self.cards[-1] if self.cards else None

    @property
    def visible_cards(self) -> List[Card]:
        """Cards from the first face-up card (scanning from the bottom) to the top."""
        for index, card in enumerate(self.cards):
            if card.face_up:
                return self.cards[index:]
        return []

    def is_empty(self) -> bool:
        return not self.cards

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def add_cards(self, cards: Iterable[Card]) -> None:
        self.cards.extend(cards)

    def remove_top_card(self) -> Optional[Card]:
        if not self.cards:
            return None
        return self.cards.pop()

    def remove_cards(self, count: int) -> List[Card]:
        """Remove and return the top ``count`` cards, keeping their order."""
        if count > len(self.cards):
            raise InsufficientCards(
                f"Pile {self.id} holds {len(self.cards)} cards; cannot remove {count}."
            )
        if count <= 0:
            return []
        removed = self.cards[-count:]
        del self.cards[-count:]
        return removed

    def flip_top_card(self) -> None:
        top = self.top_card
        if top is not None and not top.face_up:
            self.cards[-1] = top.flip()

    def can_accept_card(self, card: Card) -> bool:
        raise NotImplementedError

    def can_move_sequence(self, start_index: int) -> bool:
        return False

    def is_foundation_complete(self) -> bool:
        return False


@dataclass
class TableauPile(Pile):
    kind: ClassVar[PileType] = PileType.TABLEAU

    def can_accept_card(self, card: Card) -> bool:
        top = self.top_card
        if top is None:
            return card.rank is Rank.KING
        return top.face_up and card.can_stack_on_tableau(top)

    def can_move_sequence(self, start_index: int) -> bool:
        if start_index < 0 or start_index >= len(self.cards):
            return False
        run = self.cards[start_index:]
        if not run[0].face_up:
            return False
        for previous, card in zip(run, run[1:]):
            if not card.can_stack_on_tableau(previous):
                return False
        return True


@dataclass
class FoundationPile(Pile):
    kind: ClassVar[PileType] = PileType.FOUNDATION

    foundation_suit: Optional[Suit] = None

    def can_accept_card(self, card: Card) -> bool:
        if self.foundation_suit is not None and self.cards and card.suit is not self.foundation_suit:
            return False
        return card.can_place_on_foundation(self.top_card)

    def add_card(self, card: Card) -> None:
        self.add_cards([card])

    def add_cards(self, cards: Iterable[Card]) -> None:
        incoming = list(cards)
        # The ace that opens a foundation decides its suit.
        if not self.cards and incoming:
            self.foundation_suit = incoming[0].suit
        self.cards.extend(incoming)

    def is_foundation_complete(self) -> bool:
        return len(self.cards) == FOUNDATION_SIZE


@dataclass
class StockPile(Pile):
    kind: ClassVar[PileType] = PileType.STOCK

    def can_accept_card(self, card: Card) -> bool:
        return True


@dataclass
class WastePile(Pile):
    kind: ClassVar[PileType] = PileType.WASTE

    def can_accept_card(self, card: Card) -> bool:
        return True


PILE_CLASSES: Dict[PileType, Type[Pile]] = {
    PileType.TABLEAU: TableauPile,
    PileType.FOUNDATION: FoundationPile,
    PileType.STOCK: StockPile,
    PileType.WASTE: WastePile,
}


def make_pile(
    kind: PileType,
    pile_id: str,
    cards: Iterable[Card] = (),
    *,
    foundation_suit: Optional[Suit] = None,
) -> Pile:
    """Build the pile class matching ``kind``."""
    if kind is PileType.FOUNDATION:
        return FoundationPile(pile_id, list(cards), foundation_suit)
    return PILE_CLASSES[kind](pile_id, list(cards))
