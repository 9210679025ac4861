"""Persistence adapters for serialized games."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from .logging_utils import get_logger

logger = get_logger(__name__)

Payload = Dict[str, Any]


class GameRepository(Protocol):
    def save(self, payload: Payload) -> None:
        ...

    def find_by_id(self, game_id: str) -> Optional[Payload]:
        ...

    def delete(self, game_id: str) -> None:
        ...

    def find_all(self) -> List[Payload]:
        ...

    def find_by_status(self, status: str) -> List[Payload]:
        ...


class InMemoryGameRepository:
    """Keep games in a dict; payloads are copied on the way in and out."""

    def __init__(self) -> None:
        self._games: Dict[str, Payload] = {}

    def save(self, payload: Payload) -> None:
        self._games[payload["id"]] = copy.deepcopy(payload)

    def find_by_id(self, game_id: str) -> Optional[Payload]:
        payload = self._games.get(game_id)
        return copy.deepcopy(payload) if payload is not None else None

    def delete(self, game_id: str) -> None:
        self._games.pop(game_id, None)

    def find_all(self) -> List[Payload]:
        return [copy.deepcopy(payload) for payload in self._games.values()]

    def find_by_status(self, status: str) -> List[Payload]:
        return [payload for payload in self.find_all() if payload.get("status") == status]

    def clear(self) -> None:
        self._games.clear()

    def count(self) -> int:
        return len(self._games)


class JsonFileGameRepository:
    """Store each game as ``<id>.json`` inside a directory."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, game_id: str) -> Path:
        # Ids become file names; keep them inside the directory.
        if not game_id or Path(game_id).name != game_id or game_id.startswith("."):
            raise ValueError(f"Unsafe game id: {game_id!r}")
        return self.directory / f"{game_id}.json"

    def save(self, payload: Payload) -> None:
        path = self._path(payload["id"])
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        tmp_path.replace(path)
        logger.debug("Saved game %s to %s", payload["id"], path)

    def find_by_id(self, game_id: str) -> Optional[Payload]:
        try:
            path = self._path(game_id)
        except ValueError:
            return None
        if not path.is_file():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def delete(self, game_id: str) -> None:
        path = self._path(game_id)
        if path.exists():
            path.unlink()
            logger.debug("Deleted game %s", game_id)

    def find_all(self) -> List[Payload]:
        return [json.loads(path.read_text(encoding="utf-8")) for path in sorted(self.directory.glob("*.json"))]

    def find_by_status(self, status: str) -> List[Payload]:
        return [payload for payload in self.find_all() if payload.get("status") == status]
