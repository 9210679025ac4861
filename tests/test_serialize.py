import json

import pytest

from klondike.deck import build_deck
from klondike.errors import CorruptGameState
from klondike.game import auto_complete_to_foundations, draw_from_stock, initialize_game, move_cards
from klondike.serialize import (
    card_from_dict,
    card_to_dict,
    format_timestamp,
    parse_timestamp,
    state_from_dict,
    state_to_dict,
)
from klondike.state import GameStatus, utc_now


def played_game():
    state = initialize_game("round-trip", build_deck())
    auto_complete_to_foundations(state)
    draw_from_stock(state)
    move_cards(state, "waste", "tableau-0")
    return state


def test_round_trip_of_fresh_deal():
    state = initialize_game("fresh", build_deck())
    assert state_from_dict(state_to_dict(state)) == state


def test_round_trip_after_play_through_json():
    state = played_game()
    payload = json.loads(json.dumps(state_to_dict(state)))

    restored = state_from_dict(payload)

    assert restored == state
    assert restored.moves == state.moves
    assert restored.foundation_piles[0].foundation_suit is state.foundation_piles[0].foundation_suit


def test_payload_shape():
    payload = state_to_dict(played_game())

    assert set(payload) == {
        "id",
        "tableauPiles",
        "foundationPiles",
        "stock",
        "waste",
        "status",
        "moves",
        "score",
        "startTime",
    }
    assert payload["status"] == "PLAYING"
    assert payload["stock"]["type"] == "STOCK"
    assert "foundationSuit" not in payload["stock"]
    assert payload["foundationPiles"][1]["foundationSuit"] == "DIAMONDS"
    assert payload["tableauPiles"][0]["cards"][0] == {"id": "K-SPADES", "rank": "K", "suit": "SPADES", "faceUp": True}
    assert payload["moves"][0]["from"] == "tableau-0"
    assert payload["moves"][0]["cardCount"] == 1
    assert payload["startTime"].endswith("Z")


def test_end_time_present_once_finished():
    state = initialize_game("ended", build_deck())
    state.status = GameStatus.LOST
    state.end_time = utc_now()

    payload = state_to_dict(state)

    assert payload["endTime"] == format_timestamp(state.end_time)
    assert state_from_dict(payload).end_time == state.end_time


def test_card_round_trip_keeps_ten():
    payload = {"id": "10-CLUBS-3", "rank": "10", "suit": "CLUBS", "faceUp": False}
    assert card_to_dict(card_from_dict(payload)) == payload


def test_timestamp_parsing_accepts_offsets():
    moment = parse_timestamp("2024-05-01T10:20:30.123Z")
    assert format_timestamp(moment) == "2024-05-01T10:20:30.123Z"
    assert format_timestamp(parse_timestamp("2024-05-01T12:20:30.123+02:00")) == "2024-05-01T10:20:30.123Z"


def test_corrupt_payloads_are_rejected():
    payload = state_to_dict(initialize_game("corrupt", build_deck()))

    missing = dict(payload)
    del missing["stock"]
    with pytest.raises(CorruptGameState):
        state_from_dict(missing)

    swapped = dict(payload, stock=payload["waste"])
    with pytest.raises(CorruptGameState):
        state_from_dict(swapped)

    short = dict(payload, tableauPiles=payload["tableauPiles"][:6])
    with pytest.raises(CorruptGameState):
        state_from_dict(short)

    bad_rank = json.loads(json.dumps(payload))
    bad_rank["stock"]["cards"][0]["rank"] = "1"
    with pytest.raises(CorruptGameState):
        state_from_dict(bad_rank)


def test_face_up_must_be_boolean():
    payload = {"id": "A-HEARTS", "rank": "A", "suit": "HEARTS", "faceUp": "false"}
    with pytest.raises(CorruptGameState):
        card_from_dict(payload)

    state = state_to_dict(initialize_game("strings", build_deck()))
    state["stock"]["cards"][0]["faceUp"] = "false"
    with pytest.raises(CorruptGameState):
        state_from_dict(state)
