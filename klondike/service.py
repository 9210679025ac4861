"""Convenience service layer for the HTTP API and scripts."""

from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from .deck import DeckProvider, RandomDeckProvider
from .errors import CorruptGameState, GameNotFound
from .game import (
    MoveValidation,
    auto_complete_to_foundations,
    draw_from_stock,
    initialize_game,
    move_cards,
    validate_move,
)
from .logging_utils import get_logger
from .repository import GameRepository, InMemoryGameRepository
from .rules_schema import DEFAULT_RULES, RuleSet
from .serialize import state_from_dict, state_to_dict
from .state import GameState, GameStatus

logger = get_logger(__name__)


class KlondikeService:
    """Facade that loads a game, applies one engine operation and saves it back.

    Mutating calls for the same game id are serialized with a per-id lock.
    """

    def __init__(
        self,
        repository: Optional[GameRepository] = None,
        deck_provider: Optional[DeckProvider] = None,
        rules: Optional[RuleSet] = None,
    ) -> None:
        self.repository = repository if repository is not None else InMemoryGameRepository()
        self.deck_provider = deck_provider if deck_provider is not None else RandomDeckProvider()
        self.rules = rules or DEFAULT_RULES
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # Game lifecycle ----------------------------------------------------

    def start_new_game(self) -> GameState:
        game_id = str(uuid.uuid4())
        state = initialize_game(game_id, self.deck_provider.get_shuffled_deck())
        self.repository.save(state_to_dict(state))
        logger.info("Started game %s", game_id)
        return state

    def get_game(self, game_id: str) -> GameState:
        return self._load(game_id)

    def delete_game(self, game_id: str) -> None:
        with self._transaction(game_id, save=False):
            self.repository.delete(game_id)
        self._discard_lock(game_id)
        logger.info("Deleted game %s", game_id)

    def list_games(self, status: Optional[GameStatus] = None) -> List[GameState]:
        payloads = self.repository.find_all() if status is None else self.repository.find_by_status(status.value)
        return [state_from_dict(payload) for payload in payloads]

    def statistics(self) -> Dict[str, int]:
        games = self.list_games()
        counts = {status: 0 for status in GameStatus}
        for state in games:
            counts[state.status] += 1
        return {
            "totalGames": len(games),
            "gamesPlaying": counts[GameStatus.PLAYING],
            "gamesWon": counts[GameStatus.WON],
            "gamesLost": counts[GameStatus.LOST],
        }

    # Actions -----------------------------------------------------------

    def draw(self, game_id: str, count: Optional[int] = None) -> GameState:
        with self._transaction(game_id) as state:
            draw_from_stock(state, count if count is not None else self.rules.draw_count)
        return state

    def move(self, game_id: str, from_pile_id: str, to_pile_id: str, card_count: int = 1) -> GameState:
        logger.debug("Game %s: moving %d card(s) %s -> %s", game_id, card_count, from_pile_id, to_pile_id)
        with self._transaction(game_id) as state:
            move_cards(state, from_pile_id, to_pile_id, card_count, scoring=self.rules.scoring)
            self._settle(state)
        return state

    def validate_move(self, game_id: str, from_pile_id: str, to_pile_id: str, card_count: int = 1) -> MoveValidation:
        payload = self.repository.find_by_id(game_id)
        if payload is None:
            return MoveValidation(valid=False, reason=f"Game {game_id} not found.")
        try:
            state = state_from_dict(payload)
        except CorruptGameState as exc:
            logger.warning("Game %s cannot be validated: %s", game_id, exc)
            return MoveValidation(valid=False, reason=str(exc))
        return validate_move(state, from_pile_id, to_pile_id, card_count)

    def auto_complete(self, game_id: str) -> Tuple[GameState, int]:
        with self._transaction(game_id) as state:
            moved = auto_complete_to_foundations(state, scoring=self.rules.scoring)
            self._settle(state)
        logger.debug("Game %s: auto-complete moved %d card(s)", game_id, moved)
        return state, moved

    # Helpers -----------------------------------------------------------

    def _settle(self, state: GameState) -> None:
        if state.status is GameStatus.WON:
            logger.info("Game %s won with %d points", state.id, state.score)
        elif state.check_lose_condition():
            logger.info("Game %s lost: no moves left", state.id)

    def _load(self, game_id: str) -> GameState:
        payload = self.repository.find_by_id(game_id)
        if payload is None:
            raise GameNotFound(f"Game {game_id} not found.")
        return state_from_dict(payload)

    def _lock_for(self, game_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(game_id, threading.Lock())

    def _discard_lock(self, game_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(game_id, None)

    @contextmanager
    def _transaction(self, game_id: str, save: bool = True) -> Iterator[GameState]:
        """Hold the game's lock while it is loaded, changed and saved back.

        Locks for ids that turn out not to exist are dropped again.
        """
        with self._lock_for(game_id):
            try:
                state = self._load(game_id)
            except GameNotFound:
                self._discard_lock(game_id)
                raise
            yield state
            if save:
                self.repository.save(state_to_dict(state))
