"""Plain-dict projection of games, as stored by repositories and sent over HTTP."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from .cards import Card, Rank, Suit
from .errors import CorruptGameState
from .piles import FoundationPile, Pile, PileType, StockPile, TableauPile, WastePile, make_pile
from .state import GameState, GameStatus, Move


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def card_to_dict(card: Card) -> Dict[str, Any]:
    return {"id": card.id, "rank": card.rank.value, "suit": card.suit.value, "faceUp": card.face_up}


def card_from_dict(payload: Mapping[str, Any]) -> Card:
    face_up = payload["faceUp"]
    if not isinstance(face_up, bool):
        raise CorruptGameState(f"Card {payload.get('id')!r} has a non-boolean faceUp value: {face_up!r}")
    return Card(
        id=str(payload["id"]),
        rank=Rank(payload["rank"]),
        suit=Suit(payload["suit"]),
        face_up=face_up,
    )


def pile_to_dict(pile: Pile) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": pile.id,
        "type": pile.kind.value,
        "cards": [card_to_dict(card) for card in pile.cards],
    }
    if isinstance(pile, FoundationPile) and pile.foundation_suit is not None:
        data["foundationSuit"] = pile.foundation_suit.value
    return data


def pile_from_dict(payload: Mapping[str, Any]) -> Pile:
    suit = payload.get("foundationSuit")
    return make_pile(
        PileType(payload["type"]),
        str(payload["id"]),
        [card_from_dict(card) for card in payload["cards"]],
        foundation_suit=Suit(suit) if suit is not None else None,
    )


def move_to_dict(move: Move) -> Dict[str, Any]:
    return {
        "from": move.from_pile,
        "to": move.to_pile,
        "cardCount": move.card_count,
        "timestamp": format_timestamp(move.timestamp),
    }


def move_from_dict(payload: Mapping[str, Any]) -> Move:
    return Move(
        from_pile=str(payload["from"]),
        to_pile=str(payload["to"]),
        card_count=int(payload["cardCount"]),
        timestamp=parse_timestamp(payload["timestamp"]),
    )


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """Return a JSON-serializable snapshot; ``endTime`` only appears once the game is over."""
    data: Dict[str, Any] = {
        "id": state.id,
        "tableauPiles": [pile_to_dict(pile) for pile in state.tableau_piles],
        "foundationPiles": [pile_to_dict(pile) for pile in state.foundation_piles],
        "stock": pile_to_dict(state.stock),
        "waste": pile_to_dict(state.waste),
        "status": state.status.value,
        "moves": [move_to_dict(move) for move in state.moves],
        "score": state.score,
        "startTime": format_timestamp(state.start_time),
    }
    if state.end_time is not None:
        data["endTime"] = format_timestamp(state.end_time)
    return data


def state_from_dict(payload: Mapping[str, Any]) -> GameState:
    try:
        tableau = [_expect(pile_from_dict(pile), TableauPile) for pile in payload["tableauPiles"]]
        foundations = [_expect(pile_from_dict(pile), FoundationPile) for pile in payload["foundationPiles"]]
        stock = _expect(pile_from_dict(payload["stock"]), StockPile)
        waste = _expect(pile_from_dict(payload["waste"]), WastePile)
        end_time = payload.get("endTime")
        return GameState(
            id=str(payload["id"]),
            tableau_piles=tableau,
            foundation_piles=foundations,
            stock=stock,
            waste=waste,
            status=GameStatus(payload["status"]),
            moves=[move_from_dict(move) for move in payload.get("moves", [])],
            score=int(payload.get("score", 0)),
            start_time=parse_timestamp(payload["startTime"]),
            end_time=parse_timestamp(end_time) if end_time is not None else None,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise CorruptGameState(f"Cannot load game state: {exc}") from exc


def _expect(pile: Pile, expected: type) -> Any:
    if not isinstance(pile, expected):
        raise ValueError(f"pile {pile.id} has type {pile.kind.value}, expected {expected.kind.value}")
    return pile
