"""Deck creation utilities and shuffled-deck providers."""

from __future__ import annotations

from random import Random
from typing import Any, List, Mapping, Optional, Protocol

import requests

from .cards import FOUNDATION_SUITS, RANK_ORDER, Card, Rank, Suit
from .errors import InvalidDeck
from .logging_utils import get_logger
from .state import DECK_SIZE

logger = get_logger(__name__)

DEFAULT_DECK_API_URL = "https://deckofcardsapi.com/api/deck"

# deckofcardsapi.com spells out face cards and aces.
API_RANKS = {"ACE": Rank.ACE, "JACK": Rank.JACK, "QUEEN": Rank.QUEEN, "KING": Rank.KING}


def build_deck() -> List[Card]:
    """Return the ordered 52-card deck, every card face down."""
    return [Card(f"{rank.value}-{suit.value}", rank, suit) for suit in FOUNDATION_SUITS for rank in RANK_ORDER]


def shuffled_deck(rng: Optional[Random] = None) -> List[Card]:
    cards = build_deck()
    (rng or Random()).shuffle(cards)
    return cards


class DeckProvider(Protocol):
    def get_shuffled_deck(self) -> List[Card]:
        ...


class RandomDeckProvider:
    """Shuffle locally; a seed makes the deal reproducible."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = Random(seed)

    def get_shuffled_deck(self) -> List[Card]:
        return shuffled_deck(self.rng)


class DeckOfCardsApiProvider:
    """Fetch a shuffled deck from a deckofcardsapi.com compatible service.

    Any transport or payload problem falls back to a local shuffle.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_DECK_API_URL,
        *,
        timeout: float = 5.0,
        fallback: Optional[RandomDeckProvider] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.fallback = fallback or RandomDeckProvider()
        self.session = session or requests.Session()

    def get_shuffled_deck(self) -> List[Card]:
        try:
            return self._fetch_deck()
        except (requests.RequestException, InvalidDeck, KeyError, ValueError) as exc:
            logger.warning("Deck API unavailable (%s); shuffling locally.", exc)
            return self.fallback.get_shuffled_deck()

    def _fetch_deck(self) -> List[Card]:
        created = self._get_json(f"{self.base_url}/new/shuffle/", {"deck_count": 1})
        deck_id = created["deck_id"]
        drawn = self._get_json(f"{self.base_url}/{deck_id}/draw/", {"count": DECK_SIZE})
        cards = [api_card_to_card(payload) for payload in drawn["cards"]]
        if len(cards) != DECK_SIZE or len({(card.rank, card.suit) for card in cards}) != DECK_SIZE:
            raise InvalidDeck(f"Deck API returned {len(cards)} cards instead of a full deck.")
        return cards

    def _get_json(self, url: str, params: Mapping[str, Any]) -> Mapping[str, Any]:
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        if not payload.get("success"):
            raise ValueError(f"unsuccessful response from {url}")
        return payload


def api_card_to_card(payload: Mapping[str, Any]) -> Card:
    """Convert one deckofcardsapi.com card entry, e.g. ``{"value": "QUEEN", "suit": "HEARTS"}``."""
    value = str(payload["value"]).upper()
    rank = API_RANKS.get(value) or Rank(value)
    suit = Suit(str(payload["suit"]).upper())
    return Card(f"{rank.value}-{suit.value}", rank, suit)
