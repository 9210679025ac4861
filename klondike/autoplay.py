"""Greedy baseline player used for simulations and smoke tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .game import auto_complete_to_foundations, draw_from_stock, move_cards, validate_move
from .state import GameState, GameStatus

MoveSpec = Tuple[str, str, int]


@dataclass(frozen=True)
class PlayoutResult:
    status: GameStatus
    steps: int
    score: int
    stuck: bool


def find_tableau_move(state: GameState) -> Optional[MoveSpec]:
    """Move a whole face-up run when that uncovers a card or clears a column.

    A run already sitting at the bottom of its column is never moved onto an
    empty column.
    """
    for source in state.tableau_piles:
        visible = source.visible_cards
        if not visible:
            continue
        start = len(source.cards) - len(visible)
        for target in state.tableau_piles:
            if target is source or (start == 0 and target.is_empty()):
                continue
            if validate_move(state, source.id, target.id, len(visible)).valid:
                return source.id, target.id, len(visible)
    return None


def find_waste_move(state: GameState) -> Optional[MoveSpec]:
    if state.waste.is_empty():
        return None
    for target in state.tableau_piles:
        if validate_move(state, state.waste.id, target.id, 1).valid:
            return state.waste.id, target.id, 1
    return None


def play_out(state: GameState, *, draw_count: int = 1, max_steps: int = 5000) -> PlayoutResult:
    """Play greedily until the game ends, stalls, or ``max_steps`` actions were taken."""
    steps = 0
    idle_draws = 0
    while state.is_playing() and steps < max_steps:
        steps += 1
        if auto_complete_to_foundations(state):
            idle_draws = 0
            continue
        move = find_tableau_move(state) or find_waste_move(state)
        if move is not None:
            move_cards(state, *move)
            idle_draws = 0
            continue
        if state.stock.is_empty() and state.waste.is_empty():
            state.check_lose_condition()
            break
        # A full pass through stock and waste without progress means we are stuck.
        if idle_draws > len(state.stock.cards) + len(state.waste.cards):
            break
        draw_from_stock(state, draw_count)
        idle_draws += 1
    return PlayoutResult(status=state.status, steps=steps, score=state.score, stuck=state.is_playing())
