"""REST service hosting Triple Solitaire games."""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from solitaire.cards import InvalidCardText
from solitaire.config import EngineConfig
from solitaire.moves import InvalidMoveNotation, Location, parse_location
from solitaire.service import GameService
from solitaire.snapshot import SnapshotError

logger = logging.getLogger(__name__)


class StartRequest(BaseModel):
    seed: Optional[int] = Field(None, ge=0)
    auto_play: str = "always"
    auto_flip: bool = True


class MoveRequest(BaseModel):
    source: str
    destination: str
    cards: List[str]


class NotationRequest(BaseModel):
    move: str


class FlipRequest(BaseModel):
    lane: int = Field(..., ge=0, le=12)


class TickRequest(BaseModel):
    seconds: int = Field(1, ge=1)


sessions: Dict[str, GameService] = {}


app = FastAPI(title="Triple Solitaire Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def ensure_session(game_id: str) -> GameService:
    service = sessions.get(game_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return service


def serialize_state(service: GameService) -> Dict[str, Any]:
    view = asdict(service.get_game_view())
    engine = service.engine
    assert engine is not None
    summary = engine.summary()
    view["summary"] = {
        "won": summary.won,
        "durationSeconds": summary.duration_seconds,
        "moveCount": summary.move_count,
        "startTimestamp": summary.start_timestamp,
    }
    return view


def _require_applied(applied: bool, detail: str = "Illegal move") -> None:
    if not applied:
        raise HTTPException(status_code=400, detail=detail)


@app.post("/games")
def start_game(request: StartRequest) -> Dict[str, object]:
    try:
        config = EngineConfig(auto_play=request.auto_play, auto_flip=request.auto_flip)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    service = GameService(config=config)
    service.start_new_game(seed=request.seed)
    game_id = uuid.uuid4().hex
    sessions[game_id] = service
    logger.info("Started game %s", game_id)
    return {"game_id": game_id, "state": serialize_state(service)}


@app.get("/games/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    service = ensure_session(game_id)
    return {"state": serialize_state(service)}


@app.post("/games/{game_id}/stock")
def draw_stock(game_id: str) -> Dict[str, object]:
    service = ensure_session(game_id)
    _require_applied(service.draw_stock(), "Stock and waste are empty")
    return {"state": serialize_state(service)}


@app.post("/games/{game_id}/flip")
def flip(game_id: str, request: FlipRequest) -> Dict[str, object]:
    service = ensure_session(game_id)
    _require_applied(service.flip(request.lane), "Nothing to flip")
    return {"state": serialize_state(service)}


@app.post("/games/{game_id}/moves")
def move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    service = ensure_session(game_id)
    try:
        source: Location = parse_location(request.source)
        destination: Location = parse_location(request.destination)
        applied = service.drag(source, destination, request.cards)
    except (InvalidMoveNotation, InvalidCardText) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    _require_applied(applied)
    return {"state": serialize_state(service)}


@app.post("/games/{game_id}/notation")
def move_by_notation(game_id: str, request: NotationRequest) -> Dict[str, object]:
    service = ensure_session(game_id)
    try:
        applied = service.play(request.move)
    except InvalidMoveNotation as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    _require_applied(applied)
    return {"state": serialize_state(service)}


@app.post("/games/{game_id}/undo")
def undo(game_id: str) -> Dict[str, object]:
    service = ensure_session(game_id)
    _require_applied(service.undo(), "Nothing to undo")
    return {"state": serialize_state(service)}


@app.post("/games/{game_id}/pause")
def pause(game_id: str) -> Dict[str, object]:
    service = ensure_session(game_id)
    service.pause()
    return {"state": serialize_state(service)}


@app.post("/games/{game_id}/resume")
def resume(game_id: str) -> Dict[str, object]:
    service = ensure_session(game_id)
    service.resume()
    return {"state": serialize_state(service)}


@app.post("/games/{game_id}/tick")
def tick(game_id: str, request: TickRequest) -> Dict[str, object]:
    service = ensure_session(game_id)
    service.tick(request.seconds)
    return {"state": serialize_state(service)}


@app.get("/games/{game_id}/snapshot")
def save_snapshot(game_id: str) -> Dict[str, object]:
    service = ensure_session(game_id)
    return {"snapshot": service.save()}


@app.post("/games/{game_id}/snapshot")
def load_snapshot(game_id: str, payload: Dict[str, Any]) -> Dict[str, object]:
    service = ensure_session(game_id)
    try:
        service.load(payload)
    except SnapshotError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"state": serialize_state(service)}


@app.delete("/games/{game_id}")
def end_game(game_id: str) -> Dict[str, object]:
    service = ensure_session(game_id)
    del sessions[game_id]
    engine = service.engine
    assert engine is not None
    return {"summary": asdict(engine.summary())}
