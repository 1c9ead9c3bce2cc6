from __future__ import annotations

import logging
from typing import Dict, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error import (
    exception_handler,
    http_exception_handler,
    illegal_move_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ...engine.errors import IllegalMoveError
from ...engine.game import Game
from ...engine.render import render
from ...eval import MaterialMobilityEvaluator, simple_eval


logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    fen: Optional[str] = Field(default=None, description="Board layout, optionally followed by w/b")


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="Board layout, optionally followed by w/b")


class MoveRequest(BaseModel):
    move: str = Field(..., min_length=1, description="Move, e.g. Nf3 or g1f3")
    notation: Literal["san", "coordinate"] = "san"


class ReplayRequest(BaseModel):
    pgn: str = Field(..., description="Movetext, e.g. '1. e4 e5 2. Nf3'")


class GameState(BaseModel):
    game_id: str
    fen: str
    side_to_move: str
    in_check: bool
    last_move: Optional[str]
    move_history: list[str]
    board: str


class Evaluation(BaseModel):
    game_id: str
    material: float
    score: float


def create_app(log_level: int | str = logging.INFO) -> FastAPI:
    app = FastAPI(title="Chess Rules API", version="0.1.0")

    logging.basicConfig(level=log_level)

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(IllegalMoveError, illegal_move_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        game = Game.new() if req is None or req.fen is None else _load(req.fen)
        game_id = store.create(game)
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        game = _load(req.fen)
        store.set(game_id, game)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        if req.notation == "coordinate":
            game.apply_coordinate(req.move)
        else:
            game.apply_san(req.move)
        logger.info("game %s: %s", game_id, req.move)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/replay", response_model=GameState)
    async def replay(game_id: str, req: ReplayRequest) -> GameState:
        # replay on a copy so a failing token leaves the stored game untouched
        game = _require_game(store, game_id).copy()
        plies = game.replay(req.pgn)
        store.set(game_id, game)
        logger.info("game %s: replayed %d half-moves", game_id, plies)
        return _state(game_id, game)

    @app.get("/api/games/{game_id}/evaluation", response_model=Evaluation)
    async def evaluation(game_id: str) -> Evaluation:
        game = _require_game(store, game_id)
        return Evaluation(
            game_id=game_id,
            material=simple_eval(game.board.squares),
            score=MaterialMobilityEvaluator().evaluate(game.board),
        )

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"game_id": game_id, "status": "deleted"}

    return app


def _load(fen: str) -> Game:
    try:
        return Game.from_fen(fen)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid FEN")


def _state(game_id: str, game: Game) -> GameState:
    return GameState(
        game_id=game_id,
        fen=game.to_fen(),
        side_to_move=game.side_to_move.name.lower(),
        in_check=game.in_check(),
        last_move=game.last_move,
        move_history=list(game.move_history),
        board=render(game.board),
    )


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


# Default app for non-factory servers
app = create_app()
