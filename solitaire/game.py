"""Move engine for Triple Solitaire."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from random import Random
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .cards import Card
from .config import EngineConfig
from .deck import FOUNDATION_COUNT, LANE_COUNT, deal
from .events import GameListener
from .moves import (
    UNDO_TYPES,
    WASTE,
    Location,
    Move,
    MoveType,
    ZoneKind,
    auto_play_move,
    flip_move,
    stock_move,
)
from .rules import is_cascade_acceptable, is_empty_lane_acceptable, is_foundation_acceptable, is_run
from .state import GameState

logger = logging.getLogger(__name__)

DRAW_COUNT = 3
SEED_RANGE = 2**32

CardsArg = Union[Card, Sequence[Card]]


class GamePhase(Enum):
    IN_PROGRESS = auto()
    WON = auto()


@dataclass(frozen=True)
class GameSummary:
    won: bool
    duration_seconds: int
    move_count: int
    start_timestamp: Optional[int]


def _as_run(cards: CardsArg) -> List[Card]:
    if isinstance(cards, Card):
        return [cards]
    return list(cards)


def _check_index(index: int, count: int, zone: str) -> None:
    if not 0 <= index < count:
        raise IndexError(f"{zone} index out of range: {index}")


@dataclass
class GameEngine:
    """Validate, apply and undo moves on a single game.

    The engine is the only writer of its :class:`GameState`. Illegal requests
    return ``False`` and leave the state untouched.
    """

    config: EngineConfig = field(default_factory=EngineConfig)
    rng: Optional[Random] = None
    deck: Optional[Sequence[Card]] = None
    listeners: List[GameListener] = field(default_factory=list)
    clock: Callable[[], float] = time.time

    state: GameState = field(init=False)
    phase: GamePhase = field(init=False, default=GamePhase.IN_PROGRESS)
    seed: Optional[int] = field(init=False, default=None)
    move_count: int = field(init=False, default=0)
    time_in_seconds: int = field(init=False, default=0)
    start_timestamp: Optional[int] = field(init=False, default=None)
    running: bool = field(init=False, default=False)
    _history: List[Move] = field(init=False, default_factory=list)
    _autoplay_locked: List[bool] = field(init=False, default_factory=lambda: [False] * LANE_COUNT)
    _auto_playing: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        self.new_game(deck=self.deck)

    # Lifecycle ---------------------------------------------------------

    def new_game(self, seed: Optional[int] = None, *, deck: Optional[Sequence[Card]] = None) -> None:
        """Shuffle and deal a fresh game, discarding the current one."""
        if deck is not None:
            self.seed = None
            dealt = deal(deck=deck)
        else:
            self.seed = self._choose_seed(seed)
            dealt = deal(rng=Random(self.seed))
        logger.debug("New game dealt (seed=%s)", self.seed)
        self._reset(GameState.from_deal(dealt))

    def load_state(
        self,
        state: GameState,
        *,
        time_in_seconds: int = 0,
        move_count: int = 0,
        start_timestamp: Optional[int] = None,
        autoplay_locked: Optional[Sequence[bool]] = None,
    ) -> None:
        """Replace the zones with ``state``. Undo history does not survive."""
        if autoplay_locked is not None and len(autoplay_locked) != LANE_COUNT:
            raise ValueError(f"Expected {LANE_COUNT} lane locks.")
        self.seed = None
        self._reset(state, time_in_seconds=time_in_seconds, move_count=move_count)
        self.start_timestamp = start_timestamp
        if autoplay_locked is not None:
            self._autoplay_locked = [bool(locked) for locked in autoplay_locked]
        self._check_for_win()

    def _choose_seed(self, seed: Optional[int]) -> int:
        if seed is None:
            seed = self.config.seed
        if seed is None:
            source = self.rng if self.rng is not None else Random()
            seed = source.randrange(SEED_RANGE)
        return seed

    def _reset(self, state: GameState, *, time_in_seconds: int = 0, move_count: int = 0) -> None:
        if self.config.check_invariants:
            state.check_invariants()
        self.state = state
        self.phase = GamePhase.IN_PROGRESS
        self.move_count = move_count
        self.time_in_seconds = time_in_seconds
        self.start_timestamp = None
        self.running = False
        self._history = []
        self._autoplay_locked = [False] * LANE_COUNT
        self._notify("on_time_changed", self.time_in_seconds)
        self._notify("on_move_count_changed", self.move_count)
        self._notify("on_undo_available_changed", False)
        self._notify("on_stock_changed")
        self._notify("on_waste_changed")
        for foundation_index in range(FOUNDATION_COUNT):
            self._notify("on_foundation_changed", foundation_index)
        for lane_index in range(LANE_COUNT):
            self._notify("on_lane_changed", lane_index)

    def add_listener(self, listener: GameListener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: GameListener) -> None:
        self.listeners.remove(listener)

    # Queries -----------------------------------------------------------

    def is_stock_empty(self) -> bool:
        return not self.state.stock

    def is_waste_empty(self) -> bool:
        return not self.state.waste

    def get_foundation_card(self, foundation_index: int) -> Optional[Card]:
        _check_index(foundation_index, FOUNDATION_COUNT, "Foundation")
        return self.state.foundations[foundation_index]

    def get_waste_card(self, waste_index: int) -> Optional[Card]:
        if 0 <= waste_index < len(self.state.waste):
            return self.state.waste[waste_index]
        return None

    def get_lane_cascade(self, lane_index: int) -> Tuple[Card, ...]:
        _check_index(lane_index, LANE_COUNT, "Lane")
        return tuple(self.state.lanes[lane_index].cascade)

    def get_lane_stack_size(self, lane_index: int) -> int:
        _check_index(lane_index, LANE_COUNT, "Lane")
        return len(self.state.lanes[lane_index].stack)

    def get_stock_size(self) -> int:
        return len(self.state.stock)

    def get_time_in_seconds(self) -> int:
        return self.time_in_seconds

    def get_move_count(self) -> int:
        return self.move_count

    def can_undo(self) -> bool:
        return bool(self._history) and self.phase is GamePhase.IN_PROGRESS

    @property
    def autoplay_locked(self) -> Tuple[bool, ...]:
        """Lanes excluded from auto play until the next ordinary move."""
        return tuple(self._autoplay_locked)

    @property
    def history(self) -> Tuple[Move, ...]:
        return tuple(self._history)

    def is_won(self) -> bool:
        return self.phase is GamePhase.WON

    def summary(self) -> GameSummary:
        return GameSummary(
            won=self.is_won(),
            duration_seconds=self.time_in_seconds,
            move_count=self.move_count,
            start_timestamp=self.start_timestamp,
        )

    # Drop legality -----------------------------------------------------

    def accept_foundation_drop(self, foundation_index: int, cards: CardsArg) -> bool:
        """Foundations take exactly one card, never a run."""
        run = _as_run(cards)
        if len(run) != 1 or not 0 <= foundation_index < FOUNDATION_COUNT:
            return False
        return is_foundation_acceptable(self.state.foundations[foundation_index], run[0])

    def accept_cascade_drop(self, lane_index: int, cards: CardsArg) -> bool:
        if not 0 <= lane_index < LANE_COUNT:
            return False
        run = _as_run(cards)
        exposed = self.state.lanes[lane_index].exposed_card()
        if exposed is None or not is_run(run):
            return False
        return is_cascade_acceptable(exposed, run[0])

    def accept_lane_drop(self, cards: CardsArg) -> bool:
        """Whether an empty lane takes the card or run."""
        run = _as_run(cards)
        return is_run(run) and is_empty_lane_acceptable(run[0])

    def accept_drop(self, destination: Location, cards: CardsArg) -> bool:
        if destination.kind is ZoneKind.FOUNDATION:
            return self.accept_foundation_drop(destination.index, cards)
        if destination.kind is ZoneKind.LANE:
            lane = self.state.lanes[destination.index]
            if lane.cascade:
                return self.accept_cascade_drop(destination.index, cards)
            if lane.stack:
                return False
            return self.accept_lane_drop(cards)
        return False

    def is_legal(self, move: Move) -> bool:
        """Check a PLAYER_MOVE or AUTO_PLAY without applying it."""
        if move.type not in (MoveType.PLAYER_MOVE, MoveType.AUTO_PLAY):
            return False
        cards = list(move.cards)
        if not cards or move.source == move.destination:
            return False
        if move.source.kind not in (ZoneKind.WASTE, ZoneKind.FOUNDATION, ZoneKind.LANE):
            return False
        if len(cards) > 1 and move.source.kind is not ZoneKind.LANE:
            return False
        if self.state.cards_at(move.source, len(cards)) != cards:
            return False
        return self.accept_drop(move.destination, cards)

    # Moves -------------------------------------------------------------

    def move(self, move: Move) -> bool:
        """Apply ``move`` if it is legal. Undo moves are only built by :meth:`undo`."""
        if move.type in UNDO_TYPES:
            logger.debug("Rejected %s: undo moves are internal", move)
            return False
        if self.phase is not GamePhase.IN_PROGRESS:
            logger.debug("Rejected %s: game is over", move)
            return False

        if move.type is MoveType.STOCK:
            applied = self._draw_stock()
        elif move.type is MoveType.FLIP:
            applied = self._flip(move.destination)
        else:
            applied = self._transfer(move)

        if not applied:
            logger.debug("Rejected %s", move)
        return applied

    def draw_stock(self) -> bool:
        return self.move(stock_move())

    def flip(self, lane_index: int) -> bool:
        return self.move(flip_move(lane_index))

    def attempt_auto_move_from_cascade_to_foundation(self, lane_index: int) -> bool:
        """Play the exposed card of a lane to the first foundation, scanning 0..11."""
        if not 0 <= lane_index < LANE_COUNT:
            return False
        card = self.state.lanes[lane_index].exposed_card()
        if card is None:
            return False
        return self._auto_play_to_foundation(Location.lane(lane_index), card)

    def attempt_auto_move_from_waste_to_foundation(self) -> bool:
        card = self.get_waste_card(0)
        if card is None:
            return False
        return self._auto_play_to_foundation(WASTE, card)

    def _auto_play_to_foundation(self, source: Location, card: Card) -> bool:
        for foundation_index in range(FOUNDATION_COUNT):
            if self.accept_foundation_drop(foundation_index, card):
                return self.move(auto_play_move(source, Location.foundation(foundation_index), card))
        return False

    def _draw_stock(self) -> bool:
        stock = self.state.stock
        waste = self.state.waste
        if not stock and not waste:
            return False
        if not stock:
            stock.extend(waste)
            waste.clear()
            recorded = stock_move()
            logger.debug("Recycled %d waste cards into the stock", len(stock))
        else:
            drawn: List[Card] = []
            while len(drawn) < DRAW_COUNT and stock:
                card = stock.pop()
                waste.insert(0, card)
                drawn.append(card)
            recorded = stock_move(drawn)
            logger.debug("%s", recorded)
        self._record(recorded)
        self._notify("on_waste_changed")
        self._notify("on_stock_changed")
        self._move_started(reset_autoplay_locks=True)
        self._move_completed()
        return True

    def _flip(self, location: Location) -> bool:
        if location.kind is not ZoneKind.LANE:
            return False
        lane = self.state.lanes[location.index]
        if not lane.can_flip():
            return False
        lane.cascade.append(lane.stack.pop())
        recorded = flip_move(location.index)
        logger.debug("%s (%s)", recorded, lane.cascade[-1])
        self._record(recorded)
        self._notify("on_lane_changed", location.index)
        self._autoplay_locked = [False] * LANE_COUNT
        self._move_completed()
        return True

    def _transfer(self, move: Move) -> bool:
        if not self.is_legal(move):
            return False
        source, destination = move.source, move.destination
        self.state.take(source, move.cards)
        self.state.put(destination, move.cards)
        logger.debug("%s", move)
        self._record(move)
        self._notify_location(source)
        self._notify_location(destination)

        from_foundation = source.kind is ZoneKind.FOUNDATION
        if move.type is MoveType.PLAYER_MOVE and destination.kind is ZoneKind.LANE:
            # A card pulled down from a foundation must not bounce straight back.
            if from_foundation:
                self._autoplay_locked[destination.index] = True
            self._move_started(reset_autoplay_locks=not from_foundation)
        else:
            self._move_started(reset_autoplay_locks=True)
        self._move_completed()
        return True

    # Undo --------------------------------------------------------------

    def undo(self) -> bool:
        """Reverse the most recent move. Returns False when there is nothing to undo."""
        if not self.can_undo():
            return False
        inverse = self._history.pop().to_undo()
        logger.debug("%s", inverse)
        if inverse.type is MoveType.UNDO_FLIP:
            lane = self.state.lanes[inverse.destination.index]
            lane.stack.append(lane.cascade.pop())
            self._notify("on_lane_changed", inverse.destination.index)
        elif inverse.type is MoveType.UNDO_STOCK:
            self._undo_stock(inverse.cards)
        else:
            self.state.take(inverse.source, inverse.cards)
            self.state.put(inverse.destination, inverse.cards)
            self._notify_location(inverse.source)
            self._notify_location(inverse.destination)
        if not self._history:
            self._notify("on_undo_available_changed", False)
        self._verify()
        return True

    def _undo_stock(self, cards: Sequence[Card]) -> None:
        stock = self.state.stock
        waste = self.state.waste
        if not cards:
            # The stock was empty right before the recycle.
            waste.extend(stock)
            stock.clear()
        else:
            for card in reversed(cards):
                stock.append(card)
                waste.pop(0)
        self._notify("on_waste_changed")
        self._notify("on_stock_changed")

    # Timer -------------------------------------------------------------

    def tick(self, seconds: int = 1) -> None:
        """Advance the game clock; ignored while paused or before the first move."""
        if not self.running or self.move_count == 0:
            return
        self.time_in_seconds += seconds
        self._notify("on_time_changed", self.time_in_seconds)

    def pause(self) -> None:
        self.running = False

    def resume(self) -> None:
        self.running = self.move_count > 0 and self.phase is GamePhase.IN_PROGRESS

    # Bookkeeping -------------------------------------------------------

    def _record(self, move: Move) -> None:
        self._history.append(move)
        if len(self._history) == 1:
            self._notify("on_undo_available_changed", True)

    def _move_started(self, *, reset_autoplay_locks: bool) -> None:
        self.move_count += 1
        self._notify("on_move_count_changed", self.move_count)
        if self.move_count == 1:
            self.start_timestamp = int(self.clock())
            self.resume()
        if reset_autoplay_locks:
            self._autoplay_locked = [False] * LANE_COUNT

    def _move_completed(self) -> None:
        self._verify()
        self._check_for_win()
        if self._auto_playing:
            return
        self._auto_playing = True
        try:
            while self._auto_play_step():
                pass
        finally:
            self._auto_playing = False

    def _auto_play_step(self) -> bool:
        """Make at most one automatic flip or foundation move."""
        if not self.running or self.phase is not GamePhase.IN_PROGRESS:
            return False
        if self.config.auto_flip:
            for lane_index in range(LANE_COUNT):
                if not self._autoplay_locked[lane_index] and self._flip(Location.lane(lane_index)):
                    return True

        mode = self.config.auto_play
        if mode == "never":
            return False
        if mode == "won":
            if self.state.hidden_card_count() > 0 or self.state.stock or len(self.state.waste) > 1:
                return False

        for lane_index in range(LANE_COUNT):
            if self._autoplay_locked[lane_index]:
                continue
            if self.attempt_auto_move_from_cascade_to_foundation(lane_index):
                return True
        return self.attempt_auto_move_from_waste_to_foundation()

    def _check_for_win(self) -> None:
        if self.phase is GamePhase.WON or not self.state.is_complete():
            return
        self.phase = GamePhase.WON
        self.running = False
        logger.debug("Game won in %ds with %d moves", self.time_in_seconds, self.move_count)
        self._notify("on_undo_available_changed", False)
        self._notify("on_won", self.time_in_seconds, self.move_count)

    def _verify(self) -> None:
        if self.config.check_invariants:
            self.state.check_invariants()

    def _notify_location(self, location: Location) -> None:
        if location.kind is ZoneKind.STOCK:
            self._notify("on_stock_changed")
        elif location.kind is ZoneKind.WASTE:
            self._notify("on_waste_changed")
        elif location.kind is ZoneKind.FOUNDATION:
            self._notify("on_foundation_changed", location.index)
        else:
            self._notify("on_lane_changed", location.index)

    def _notify(self, hook: str, *args) -> None:
        for listener in list(self.listeners):
            getattr(listener, hook)(*args)
