"""REST service exposing the Klondike engine."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from klondike.deck import DeckOfCardsApiProvider, DeckProvider, RandomDeckProvider
from klondike.errors import GameNotFound, KlondikeError
from klondike.logging_utils import get_logger
from klondike.repository import GameRepository, InMemoryGameRepository, JsonFileGameRepository
from klondike.rules_schema import load_rules
from klondike.serialize import state_to_dict
from klondike.service import KlondikeService
from klondike.state import GameStatus

from .config import ServerSettings

logger = get_logger(__name__)


class DrawRequest(BaseModel):
    count: Optional[int] = None


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_pile_id: str = Field(alias="fromPileId", min_length=1)
    to_pile_id: str = Field(alias="toPileId", min_length=1)
    card_count: int = Field(1, alias="cardCount")


def build_service(settings: ServerSettings) -> KlondikeService:
    repository: GameRepository
    if settings.storage == "file":
        repository = JsonFileGameRepository(settings.data_dir)
    else:
        repository = InMemoryGameRepository()

    fallback = RandomDeckProvider(settings.deck_seed)
    deck_provider: DeckProvider = fallback
    if settings.deck_source == "api":
        deck_provider = DeckOfCardsApiProvider(
            settings.deck_api_url, timeout=settings.deck_api_timeout, fallback=fallback
        )
    return KlondikeService(repository=repository, deck_provider=deck_provider, rules=load_rules(settings.rules_path))


def ok(data: Any, **extra: Any) -> Dict[str, Any]:
    return {"success": True, "data": data, **extra}


def create_app(
    settings: Optional[ServerSettings] = None,
    service: Optional[KlondikeService] = None,
) -> FastAPI:
    settings = settings or ServerSettings.from_env()
    service = service or build_service(settings)

    app = FastAPI(title="Klondike Solitaire Service")
    app.state.service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(KlondikeError)
    async def handle_game_error(request: Request, exc: KlondikeError) -> JSONResponse:
        status_code = 404 if isinstance(exc, GameNotFound) else 400
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"success": False, "error": exc.kind, "message": str(exc)},
        )

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/game", status_code=201)
    def start_game() -> Dict[str, Any]:
        return ok(state_to_dict(service.start_new_game()))

    @app.get("/api/games")
    def list_games(status: Optional[GameStatus] = None) -> Dict[str, Any]:
        return ok([state_to_dict(state) for state in service.list_games(status)])

    @app.get("/api/stats")
    def statistics() -> Dict[str, Any]:
        return ok(service.statistics())

    @app.get("/api/game/{game_id}")
    def get_game(game_id: str) -> Dict[str, Any]:
        return ok(state_to_dict(service.get_game(game_id)))

    @app.delete("/api/game/{game_id}")
    def delete_game(game_id: str) -> Dict[str, Any]:
        service.delete_game(game_id)
        return ok({"id": game_id})

    @app.post("/api/game/{game_id}/draw")
    def draw(game_id: str, request: Optional[DrawRequest] = None) -> Dict[str, Any]:
        count = request.count if request is not None else None
        return ok(state_to_dict(service.draw(game_id, count)))

    @app.post("/api/game/{game_id}/move")
    def move(game_id: str, request: MoveRequest) -> Dict[str, Any]:
        state = service.move(game_id, request.from_pile_id, request.to_pile_id, request.card_count)
        return ok(state_to_dict(state))

    @app.post("/api/game/{game_id}/validate-move")
    def validate_move(game_id: str, request: MoveRequest) -> Dict[str, Any]:
        result = service.validate_move(game_id, request.from_pile_id, request.to_pile_id, request.card_count)
        return ok(result.to_dict())

    @app.post("/api/game/{game_id}/foundation-auto")
    def auto_complete(game_id: str) -> Dict[str, Any]:
        state, moved = service.auto_complete(game_id)
        return ok(state_to_dict(state), movedCount=moved)

    return app
