"""Snapshot save/restore of zone contents.

Snapshots are JSON-compatible dicts with cards in their text form
(``"hearts7"``). Undo history is not part of a snapshot.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .cards import InvalidCardText, parse_card, serialize_card
from .deck import DECK_SIZE, FOUNDATION_COUNT, LANE_COUNT, build_deck
from .game import GameEngine
from .lane import LaneData
from .state import GameState

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotError(RuntimeError):
    """Raised when a snapshot is corrupt or from an incompatible version."""


def _validate_card_text(value: str) -> str:
    try:
        parse_card(value)
    except InvalidCardText as exc:
        raise ValueError(str(exc)) from exc
    return value


class LaneSnapshot(BaseModel):
    stack: List[str] = Field(default_factory=list)
    cascade: List[str] = Field(default_factory=list)

    @field_validator("stack", "cascade")
    @classmethod
    def validate_cards(cls, value: List[str]) -> List[str]:
        return [_validate_card_text(card) for card in value]


class GameSnapshot(BaseModel):
    version: int = SNAPSHOT_VERSION
    stock: List[str] = Field(default_factory=list)
    waste: List[str] = Field(default_factory=list)
    foundations: List[Optional[str]]
    lanes: List[LaneSnapshot]
    time_in_seconds: int = Field(0, ge=0)
    move_count: int = Field(0, ge=0)
    start_timestamp: Optional[int] = None
    autoplay_locked: List[bool] = Field(default_factory=lambda: [False] * LANE_COUNT)

    @field_validator("version")
    @classmethod
    def validate_version(cls, value: int) -> int:
        if value != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version {value}.")
        return value

    @field_validator("stock", "waste")
    @classmethod
    def validate_cards(cls, value: List[str]) -> List[str]:
        return [_validate_card_text(card) for card in value]

    @field_validator("foundations")
    @classmethod
    def validate_foundations(cls, value: List[Optional[str]]) -> List[Optional[str]]:
        if len(value) != FOUNDATION_COUNT:
            raise ValueError(f"Expected {FOUNDATION_COUNT} foundations, got {len(value)}.")
        return [None if card is None else _validate_card_text(card) for card in value]

    @field_validator("lanes")
    @classmethod
    def validate_lanes(cls, value: List[LaneSnapshot]) -> List[LaneSnapshot]:
        if len(value) != LANE_COUNT:
            raise ValueError(f"Expected {LANE_COUNT} lanes, got {len(value)}.")
        return value

    @field_validator("autoplay_locked")
    @classmethod
    def validate_autoplay_locked(cls, value: List[bool]) -> List[bool]:
        if len(value) != LANE_COUNT:
            raise ValueError(f"Expected {LANE_COUNT} lane locks, got {len(value)}.")
        return value

    @model_validator(mode="after")
    def validate_card_total(self) -> "GameSnapshot":
        cards = self.to_state().all_cards()
        if len(cards) != DECK_SIZE:
            raise ValueError(f"Snapshot holds {len(cards)} cards instead of {DECK_SIZE}.")
        if Counter(cards) != Counter(build_deck()):
            raise ValueError("Snapshot cards do not form three complete decks.")
        return self

    def to_state(self) -> GameState:
        return GameState(
            stock=[parse_card(card) for card in self.stock],
            waste=[parse_card(card) for card in self.waste],
            foundations=[None if card is None else parse_card(card) for card in self.foundations],
            lanes=[
                LaneData(
                    stack=[parse_card(card) for card in lane.stack],
                    cascade=[parse_card(card) for card in lane.cascade],
                )
                for lane in self.lanes
            ],
        )


def snapshot_state(state: GameState) -> dict[str, Any]:
    return {
        "stock": [serialize_card(card) for card in state.stock],
        "waste": [serialize_card(card) for card in state.waste],
        "foundations": [None if card is None else serialize_card(card) for card in state.foundations],
        "lanes": [
            {
                "stack": [serialize_card(card) for card in lane.stack],
                "cascade": [serialize_card(card) for card in lane.cascade],
            }
            for lane in state.lanes
        ],
    }


def take_snapshot(engine: GameEngine) -> dict[str, Any]:
    payload: dict[str, Any] = {"version": SNAPSHOT_VERSION}
    payload.update(snapshot_state(engine.state))
    payload["time_in_seconds"] = engine.time_in_seconds
    payload["move_count"] = engine.move_count
    payload["start_timestamp"] = engine.start_timestamp
    payload["autoplay_locked"] = list(engine.autoplay_locked)
    return payload


def parse_snapshot(payload: Mapping[str, Any]) -> GameSnapshot:
    """Validate a whole snapshot, raising SnapshotError on any defect."""
    if not isinstance(payload, Mapping):
        raise SnapshotError("Snapshot must be a mapping.")
    try:
        return GameSnapshot.model_validate(dict(payload))
    except ValidationError as exc:
        logger.warning("Rejected snapshot: %s", exc)
        raise SnapshotError(f"Invalid snapshot: {exc}") from exc


def restore_snapshot(engine: GameEngine, payload: Mapping[str, Any]) -> None:
    """Load ``payload`` into ``engine``. Nothing changes unless the whole snapshot is valid."""
    snapshot = parse_snapshot(payload)
    engine.load_state(
        snapshot.to_state(),
        time_in_seconds=snapshot.time_in_seconds,
        move_count=snapshot.move_count,
        start_timestamp=snapshot.start_timestamp,
        autoplay_locked=snapshot.autoplay_locked,
    )
