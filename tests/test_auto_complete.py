import pytest

from klondike.cards import FOUNDATION_SUITS, RANK_ORDER, Card, Rank, Suit
from klondike.deck import build_deck
from klondike.errors import InvalidState
from klondike.game import auto_complete_to_foundations, initialize_game
from klondike.piles import FoundationPile, StockPile, TableauPile, WastePile
from klondike.state import GameState, GameStatus


def card(rank: Rank, suit: Suit, face_up: bool = True) -> Card:
    return Card(f"{rank.value}-{suit.value}", rank, suit, face_up)


def descending(suit: Suit):
    """King at the bottom, ace on top."""
    return [card(rank, suit) for rank in reversed(RANK_ORDER)]


def empty_state() -> GameState:
    return GameState(
        "auto",
        [TableauPile(f"tableau-{i}") for i in range(7)],
        [FoundationPile(f"foundation-{i}", [], suit) for i, suit in enumerate(FOUNDATION_SUITS)],
        StockPile("stock"),
        WastePile("waste"),
    )


def test_auto_complete_moves_every_card_and_wins():
    state = empty_state()
    state.waste.add_cards(descending(Suit.HEARTS))
    state.tableau_piles[0].add_cards(descending(Suit.SPADES))
    state.tableau_piles[1].add_cards(descending(Suit.DIAMONDS))
    state.tableau_piles[2].add_cards(descending(Suit.CLUBS))

    moved = auto_complete_to_foundations(state)

    assert moved == 52
    assert state.status is GameStatus.WON
    assert state.end_time is not None
    assert state.score == 520
    assert len(state.moves) == 52
    assert all(pile.is_foundation_complete() for pile in state.foundation_piles)
    for foundation in state.foundation_piles:
        assert {c.suit for c in foundation.cards} == {foundation.foundation_suit}
    assert [p.foundation_suit for p in state.foundation_piles] == [Suit.HEARTS, Suit.SPADES, Suit.DIAMONDS, Suit.CLUBS]


def test_auto_complete_prefers_waste_then_tableau_order():
    state = empty_state()
    state.tableau_piles[2].add_card(card(Rank.ACE, Suit.SPADES))
    state.tableau_piles[0].add_card(card(Rank.ACE, Suit.HEARTS))
    state.waste.add_card(card(Rank.ACE, Suit.CLUBS))
    state.stock.add_card(card(Rank.TWO, Suit.CLUBS, face_up=False))

    moved = auto_complete_to_foundations(state)

    assert moved == 3
    assert [move.from_pile for move in state.moves] == ["waste", "tableau-0", "tableau-2"]
    assert [move.to_pile for move in state.moves] == ["foundation-0", "foundation-1", "foundation-2"]
    assert state.status is GameStatus.PLAYING


def test_auto_complete_restarts_scan_after_each_move():
    state = empty_state()
    state.tableau_piles[0].add_card(card(Rank.TWO, Suit.HEARTS))
    state.tableau_piles[1].add_card(card(Rank.ACE, Suit.HEARTS))
    state.waste.add_cards([card(Rank.THREE, Suit.HEARTS)])

    moved = auto_complete_to_foundations(state)

    assert moved == 3
    assert [move.from_pile for move in state.moves] == ["tableau-1", "tableau-0", "waste"]


def test_auto_complete_skips_face_down_tops():
    state = empty_state()
    state.tableau_piles[0].add_card(card(Rank.ACE, Suit.HEARTS, face_up=False))

    assert auto_complete_to_foundations(state) == 0
    assert state.moves == []


def test_auto_complete_on_fresh_deal():
    state = initialize_game("fresh", build_deck())

    moved = auto_complete_to_foundations(state)

    assert moved == 1
    assert state.tableau_piles[0].is_empty()
    assert [c.id for c in state.foundation_piles[0].cards] == ["A-HEARTS"]
    assert state.score == 10


def test_auto_complete_requires_playing_game():
    state = empty_state()
    state.status = GameStatus.WON
    with pytest.raises(InvalidState):
        auto_complete_to_foundations(state)
