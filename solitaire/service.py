"""Convenience service layer for UI consumers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .cards import Card, card_label, parse_card, serialize_card
from .config import EngineConfig
from .deck import FOUNDATION_COUNT, LANE_COUNT
from .game import GameEngine
from .moves import Location, Move, parse_move, player_move
from .snapshot import restore_snapshot, take_snapshot

VISIBLE_WASTE = 3


class NoActiveGame(RuntimeError):
    """Raised when the service is used before a game was started."""


@dataclass
class CardView:
    card: str
    label: str


@dataclass
class LaneView:
    stack_size: int
    cascade: list[CardView]


@dataclass
class GameView:
    phase: str
    seed: Optional[int]
    stock_size: int
    waste: list[CardView]
    foundations: list[Optional[CardView]]
    lanes: list[LaneView]
    move_count: int
    time_in_seconds: int
    can_undo: bool
    running: bool


def _card_view(card: Card) -> CardView:
    return CardView(card=serialize_card(card), label=card_label(card))


class GameService:
    """Facade around GameEngine for UI consumers."""

    def __init__(self, engine: Optional[GameEngine] = None, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()
        self.engine = engine

    # Lifecycle ---------------------------------------------------------

    def start_new_game(self, seed: Optional[int] = None) -> GameView:
        if self.engine is None:
            self.engine = GameEngine(config=self.config)
            if seed is not None:
                self.engine.new_game(seed)
        else:
            self.engine.new_game(seed)
        return self.get_game_view()

    def has_active_game(self) -> bool:
        return self.engine is not None

    # Actions -----------------------------------------------------------

    def draw_stock(self) -> bool:
        return self._require_engine().draw_stock()

    def flip(self, lane_index: int) -> bool:
        return self._require_engine().flip(lane_index)

    def play(self, move: Move | str) -> bool:
        """Apply a player move given as a Move or in text notation."""
        if isinstance(move, str):
            move = parse_move(move)
        return self._require_engine().move(move)

    def drag(self, source: Location, destination: Location, cards: list[str]) -> bool:
        """Apply a drag of ``cards`` (deepest first, text form) between two zones."""
        move = player_move(source, destination, [parse_card(card) for card in cards])
        return self._require_engine().move(move)

    def auto_play(self) -> bool:
        """Send the first playable exposed card (lanes first, then waste) to a foundation."""
        engine = self._require_engine()
        for lane_index in range(LANE_COUNT):
            if engine.attempt_auto_move_from_cascade_to_foundation(lane_index):
                return True
        return engine.attempt_auto_move_from_waste_to_foundation()

    def undo(self) -> bool:
        return self._require_engine().undo()

    def pause(self) -> None:
        self._require_engine().pause()

    def resume(self) -> None:
        self._require_engine().resume()

    def tick(self, seconds: int = 1) -> None:
        self._require_engine().tick(seconds)

    def save(self) -> dict[str, Any]:
        return take_snapshot(self._require_engine())

    def load(self, payload: Mapping[str, Any]) -> GameView:
        """Restore a snapshot and restart the clock if the game was under way."""
        if self.engine is None:
            self.engine = GameEngine(config=self.config)
        restore_snapshot(self.engine, payload)
        self.engine.resume()
        return self.get_game_view()

    # Views -------------------------------------------------------------

    def get_game_view(self) -> GameView:
        engine = self._require_engine()
        waste = [engine.get_waste_card(index) for index in range(VISIBLE_WASTE)]
        foundations = [engine.get_foundation_card(index) for index in range(FOUNDATION_COUNT)]
        return GameView(
            phase=engine.phase.name.lower(),
            seed=engine.seed,
            stock_size=engine.get_stock_size(),
            waste=[_card_view(card) for card in waste if card is not None],
            foundations=[None if card is None else _card_view(card) for card in foundations],
            lanes=[
                LaneView(
                    stack_size=engine.get_lane_stack_size(index),
                    cascade=[_card_view(card) for card in engine.get_lane_cascade(index)],
                )
                for index in range(LANE_COUNT)
            ],
            move_count=engine.get_move_count(),
            time_in_seconds=engine.get_time_in_seconds(),
            can_undo=engine.can_undo(),
            running=engine.running,
        )

    def history(self) -> list[str]:
        return [str(move) for move in self._require_engine().history]

    # Helpers -----------------------------------------------------------

    def _require_engine(self) -> GameEngine:
        if self.engine is None:
            raise NoActiveGame("No active game.")
        return self.engine
