from random import Random

import requests

from klondike.cards import Rank, Suit
from klondike.deck import (
    DeckOfCardsApiProvider,
    RandomDeckProvider,
    api_card_to_card,
    build_deck,
    shuffled_deck,
)

API_VALUES = ["ACE", "2", "3", "4", "5", "6", "7", "8", "9", "10", "JACK", "QUEEN", "KING"]
API_SUITS = ["HEARTS", "DIAMONDS", "CLUBS", "SPADES"]


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, cards=None, error=None):
        self.cards = cards
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        if url.endswith("/new/shuffle/"):
            return FakeResponse({"success": True, "deck_id": "abc123", "remaining": 52})
        return FakeResponse({"success": True, "deck_id": "abc123", "cards": self.cards, "remaining": 0})


def api_cards():
    cards = [{"value": value, "suit": suit, "code": "", "image": ""} for suit in API_SUITS for value in API_VALUES]
    Random(3).shuffle(cards)
    return cards


def test_build_deck_is_complete_and_face_down():
    deck = build_deck()
    assert len(deck) == 52
    assert len({c.id for c in deck}) == 52
    assert len({(c.rank, c.suit) for c in deck}) == 52
    assert not any(c.face_up for c in deck)
    assert deck[0].id == "A-HEARTS"
    assert deck[-1].id == "K-SPADES"


def test_seeded_shuffles_repeat():
    assert [c.id for c in shuffled_deck(Random(5))] == [c.id for c in shuffled_deck(Random(5))]
    assert [c.id for c in RandomDeckProvider(9).get_shuffled_deck()] == [
        c.id for c in RandomDeckProvider(9).get_shuffled_deck()
    ]
    assert sorted(c.id for c in shuffled_deck()) == sorted(c.id for c in build_deck())


def test_api_card_conversion():
    queen = api_card_to_card({"value": "QUEEN", "suit": "HEARTS"})
    assert (queen.rank, queen.suit, queen.id, queen.face_up) == (Rank.QUEEN, Suit.HEARTS, "Q-HEARTS", False)
    ten = api_card_to_card({"value": "10", "suit": "clubs"})
    assert ten.rank is Rank.TEN and ten.suit is Suit.CLUBS


def test_api_provider_uses_remote_deck():
    session = FakeSession(cards=api_cards())
    provider = DeckOfCardsApiProvider("https://deck.example/api/deck/", timeout=2.0, session=session)

    deck = provider.get_shuffled_deck()

    assert len(deck) == 52
    assert len({(c.rank, c.suit) for c in deck}) == 52
    assert sorted(c.id for c in deck) == sorted(c.id for c in build_deck())
    assert session.calls[0] == ("https://deck.example/api/deck/new/shuffle/", {"deck_count": 1}, 2.0)
    assert session.calls[1] == ("https://deck.example/api/deck/abc123/draw/", {"count": 52}, 2.0)


def test_api_provider_falls_back_on_network_error():
    session = FakeSession(error=requests.ConnectionError("offline"))
    provider = DeckOfCardsApiProvider(session=session, fallback=RandomDeckProvider(1))

    deck = provider.get_shuffled_deck()

    assert [c.id for c in deck] == [c.id for c in RandomDeckProvider(1).get_shuffled_deck()]


def test_api_provider_falls_back_on_incomplete_deck():
    session = FakeSession(cards=api_cards()[:30])
    provider = DeckOfCardsApiProvider(session=session, fallback=RandomDeckProvider(2))

    deck = provider.get_shuffled_deck()

    assert [c.id for c in deck] == [c.id for c in RandomDeckProvider(2).get_shuffled_deck()]
