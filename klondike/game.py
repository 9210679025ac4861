"""Klondike rules: dealing, drawing, moving and auto-completing.

Every function receives the GameState it works on, mutates it in place and
either hands it back or reports what it did. Checks always run before the
first card is removed, so a failing call leaves the state untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .cards import FOUNDATION_SUITS, Card, card_label
from .errors import (
    EmptySource,
    EmptyStock,
    IllegalDestination,
    IllegalSource,
    InsufficientCards,
    InvalidCardCount,
    InvalidDeck,
    InvalidSequence,
    InvalidState,
    PileNotFound,
)
from .piles import FoundationPile, Pile, PileType, StockPile, TableauPile, WastePile
from .rules_schema import DEFAULT_RULES, ScoringConfig
from .state import DECK_SIZE, TABLEAU_COUNT, GameState

STOCK_ID = "stock"
WASTE_ID = "waste"


def tableau_id(index: int) -> str:
    return f"tableau-{index}"


def foundation_id(index: int) -> str:
    return f"foundation-{index}"


@dataclass(frozen=True)
class MoveValidation:
    valid: bool
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        payload: dict = {"valid": self.valid}
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload


def initialize_game(game_id: str, shuffled_deck: Sequence[Card]) -> GameState:
    """Deal a new game from a shuffled 52-card deck.

    Tableau pile ``i`` receives the next ``i + 1`` cards with only the last
    one face up. The remaining 24 cards, in deck order, become the face-down
    stock.
    """
    cards = list(shuffled_deck)
    if len(cards) != DECK_SIZE:
        raise InvalidDeck(f"Deck must contain exactly {DECK_SIZE} cards, got {len(cards)}.")

    tableau_piles: List[TableauPile] = []
    position = 0
    for index in range(TABLEAU_COUNT):
        dealt = cards[position : position + index + 1]
        position += index + 1
        pile_cards = [card.turned_down() for card in dealt[:-1]]
        pile_cards.append(dealt[-1].turned_up())
        tableau_piles.append(TableauPile(tableau_id(index), pile_cards))

    foundation_piles = [
        FoundationPile(foundation_id(index), [], suit) for index, suit in enumerate(FOUNDATION_SUITS)
    ]
    stock = StockPile(STOCK_ID, [card.turned_down() for card in cards[position:]])
    waste = WastePile(WASTE_ID, [])
    return GameState(game_id, tableau_piles, foundation_piles, stock, waste)


def draw_from_stock(state: GameState, count: int = 1) -> GameState:
    """Turn up to ``count`` cards from the stock onto the waste.

    An empty stock is recycled first when possible. Drawing fewer cards than
    requested is not an error.
    """
    _require_playing(state)
    if count < 1:
        raise InvalidCardCount(f"Draw count must be at least 1, got {count}.")
    if state.stock.is_empty():
        if not state.can_recycle_stock():
            raise EmptyStock("Stock is empty and there is nothing to recycle.")
        state.recycle_stock()

    for _ in range(min(count, len(state.stock.cards))):
        card = state.stock.remove_top_card()
        assert card is not None
        state.waste.add_card(card.turned_up())
    return state


def move_cards(
    state: GameState,
    from_pile_id: str,
    to_pile_id: str,
    card_count: int = 1,
    *,
    scoring: Optional[ScoringConfig] = None,
) -> GameState:
    """Move the top ``card_count`` cards of one pile onto another."""
    source, destination = _check_move(state, from_pile_id, to_pile_id, card_count)
    scoring = scoring or DEFAULT_RULES.scoring

    moving = source.remove_cards(card_count)
    destination.add_cards(moving)
    if source.kind is PileType.TABLEAU and not source.is_empty():
        source.flip_top_card()

    state.record_move(from_pile_id, to_pile_id, card_count)
    if destination.kind is PileType.FOUNDATION:
        state.add_score(scoring.foundation_move)
    elif source.kind is PileType.WASTE and destination.kind is PileType.TABLEAU:
        state.add_score(scoring.waste_to_tableau)

    state.check_win_condition()
    return state


def auto_complete_to_foundations(state: GameState, *, scoring: Optional[ScoringConfig] = None) -> int:
    """Greedily send single cards to the foundations and return how many moved.

    The waste top is tried first, then the tableau piles in order. After
    every move the scan starts over from the waste.
    """
    _require_playing(state)
    moved = 0
    while True:
        candidate = _next_foundation_move(state)
        if candidate is None:
            return moved
        source, foundation = candidate
        move_cards(state, source.id, foundation.id, 1, scoring=scoring)
        moved += 1


def validate_move(state: GameState, from_pile_id: str, to_pile_id: str, card_count: int = 1) -> MoveValidation:
    """Report whether ``move_cards`` would accept the move, without moving anything."""
    try:
        _check_move(state, from_pile_id, to_pile_id, card_count)
    except Exception as exc:
        return MoveValidation(valid=False, reason=str(exc))
    return MoveValidation(valid=True)


def _next_foundation_move(state: GameState) -> Optional[Tuple[Pile, FoundationPile]]:
    sources: List[Pile] = [state.waste, *state.tableau_piles]
    for source in sources:
        top = source.top_card
        if top is None or not top.face_up:
            continue
        for foundation in state.foundation_piles:
            if foundation.can_accept_card(top):
                return source, foundation
    return None


def _require_playing(state: GameState) -> None:
    if not state.is_playing():
        raise InvalidState(f"Game {state.id} is {state.status.value}, not PLAYING.")


def _check_move(state: GameState, from_pile_id: str, to_pile_id: str, card_count: int) -> Tuple[Pile, Pile]:
    _require_playing(state)
    source = state.get_pile_by_id(from_pile_id)
    destination = state.get_pile_by_id(to_pile_id)
    if source is None:
        raise PileNotFound(f"Pile {from_pile_id!r} not found.")
    if destination is None:
        raise PileNotFound(f"Pile {to_pile_id!r} not found.")
    if source.is_empty():
        raise EmptySource(f"Pile {from_pile_id} is empty.")
    if source.kind is PileType.STOCK:
        raise IllegalSource("Cards cannot be moved out of the stock; draw them instead.")
    if card_count < 1:
        raise InvalidCardCount(f"Card count must be at least 1, got {card_count}.")
    if card_count > len(source.cards):
        raise InsufficientCards(f"Pile {from_pile_id} holds {len(source.cards)} cards; cannot move {card_count}.")
    if card_count > 1:
        if source.kind is not PileType.TABLEAU:
            raise InvalidSequence("Only tableau piles can move several cards at once.")
        if not source.can_move_sequence(len(source.cards) - card_count):
            raise InvalidSequence(f"The top {card_count} cards of {from_pile_id} are not a movable sequence.")

    if destination is source or destination.kind in (PileType.STOCK, PileType.WASTE):
        raise IllegalDestination(f"Cards cannot be moved onto {to_pile_id}.")
    if destination.kind is PileType.FOUNDATION and card_count > 1:
        raise IllegalDestination(f"Foundations take one card at a time, not {card_count}.")
    first = source.cards[len(source.cards) - card_count]
    if not destination.can_accept_card(first):
        raise IllegalDestination(f"{to_pile_id} does not accept the {card_label(first)}.")
    return source, destination
