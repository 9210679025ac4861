"""Game state management for Klondike."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from .cards import Card
from .errors import InvalidOperation
from .piles import FoundationPile, Pile, StockPile, TableauPile, WastePile

TABLEAU_COUNT = 7
FOUNDATION_COUNT = 4
DECK_SIZE = 52


class GameStatus(Enum):
    PLAYING = "PLAYING"
    WON = "WON"
    LOST = "LOST"


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds, the precision stored on disk."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass(frozen=True)
class Move:
    from_pile: str
    to_pile: str
    card_count: int
    timestamp: datetime


@dataclass
class GameState:
    id: str
    tableau_piles: List[TableauPile]
    foundation_piles: List[FoundationPile]
    stock: StockPile
    waste: WastePile
    status: GameStatus = GameStatus.PLAYING
    moves: List[Move] = field(default_factory=list)
    score: int = 0
    start_time: datetime = field(default_factory=utc_now)
    end_time: Optional[datetime] = None

    def __post_init__(self) -> None:
        if len(self.tableau_piles) != TABLEAU_COUNT:
            raise ValueError(f"GameState needs exactly {TABLEAU_COUNT} tableau piles.")
        if len(self.foundation_piles) != FOUNDATION_COUNT:
            raise ValueError(f"GameState needs exactly {FOUNDATION_COUNT} foundation piles.")

    def all_piles(self) -> List[Pile]:
        return [*self.tableau_piles, *self.foundation_piles, self.stock, self.waste]

    def get_pile_by_id(self, pile_id: str) -> Optional[Pile]:
        for pile in self.all_piles():
            if pile.id == pile_id:
                return pile
        return None

    def total_cards(self) -> int:
        return sum(len(pile.cards) for pile in self.all_piles())

    def is_playing(self) -> bool:
        return self.status is GameStatus.PLAYING

    def record_move(self, from_pile: str, to_pile: str, card_count: int) -> None:
        self.moves.append(Move(from_pile, to_pile, card_count, utc_now()))

    def add_score(self, points: int) -> None:
        self.score = max(0, self.score + points)

    def check_win_condition(self) -> bool:
        """Mark the game WON once every foundation holds A through K."""
        if self.status is not GameStatus.PLAYING:
            return False
        if all(pile.is_foundation_complete() for pile in self.foundation_piles):
            self._finish(GameStatus.WON)
            return True
        return False

    def check_lose_condition(self) -> bool:
        """Mark the game LOST when nothing is left to draw and no tableau card can move.

        Only cards already face up are considered; cards still hidden under
        face-down cards are ignored.
        """
        if not self.stock.is_empty() or not self.waste.is_empty():
            return False
        if self.has_available_tableau_moves() or self.status is not GameStatus.PLAYING:
            return False
        self._finish(GameStatus.LOST)
        return True

    def has_available_tableau_moves(self) -> bool:
        for source in self.tableau_piles:
            for card in source.visible_cards:
                if any(target.can_accept_card(card) for target in self.tableau_piles if target.id != source.id):
                    return True
                if any(foundation.can_accept_card(card) for foundation in self.foundation_piles):
                    return True
        return False

    def elapsed_seconds(self) -> int:
        end = self.end_time or utc_now()
        return int((end - self.start_time).total_seconds())

    def can_recycle_stock(self) -> bool:
        return self.stock.is_empty() and not self.waste.is_empty()

    def recycle_stock(self) -> None:
        """Turn the waste over to form a new face-down stock."""
        if not self.can_recycle_stock():
            raise InvalidOperation("Stock can only be recycled when it is empty and the waste is not.")
        waste_cards: List[Card] = self.waste.remove_cards(len(self.waste.cards))
        self.stock.add_cards(card.turned_down() for card in reversed(waste_cards))

    def _finish(self, status: GameStatus) -> None:
        self.status = status
        self.end_time = utc_now()
