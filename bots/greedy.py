"""Baseline greedy bot."""

from __future__ import annotations

from typing import List, Optional

from solitaire.cards import KING, Card
from solitaire.deck import FOUNDATION_COUNT, LANE_COUNT
from solitaire.game import GameEngine
from solitaire.moves import WASTE, Location, Move, flip_move, player_move
from solitaire.rules import is_run

from .base import BotStrategy


def movable_run(cascade: List[Card]) -> List[Card]:
    """Return the longest legal run at the exposed end of a cascade."""
    if not cascade:
        return []
    start = len(cascade) - 1
    while start > 0 and is_run(cascade[start - 1 :]):
        start -= 1
    return cascade[start:]


def _foundation_target(engine: GameEngine, card: Card) -> Optional[Location]:
    for foundation_index in range(FOUNDATION_COUNT):
        if engine.accept_foundation_drop(foundation_index, card):
            return Location.foundation(foundation_index)
    return None


def _lane_target(engine: GameEngine, cards: List[Card], *, exclude: Optional[int] = None) -> Optional[Location]:
    for lane_index in range(LANE_COUNT):
        if lane_index == exclude:
            continue
        destination = Location.lane(lane_index)
        if engine.accept_drop(destination, cards):
            return destination
    return None


class GreedyBot(BotStrategy):
    """Foundations first, then flips, then lane moves that uncover cards, then the waste."""

    name = "Greedy"

    def choose_move(self, engine: GameEngine) -> Optional[Move]:
        state = engine.state

        for lane_index, lane in enumerate(state.lanes):
            card = lane.exposed_card()
            if card is None:
                continue
            target = _foundation_target(engine, card)
            if target is not None:
                return player_move(Location.lane(lane_index), target, [card])

        waste_card = engine.get_waste_card(0)
        if waste_card is not None:
            target = _foundation_target(engine, waste_card)
            if target is not None:
                return player_move(WASTE, target, [waste_card])

        for lane_index, lane in enumerate(state.lanes):
            if lane.can_flip():
                return flip_move(lane_index)

        for lane_index, lane in enumerate(state.lanes):
            run = movable_run(lane.cascade)
            if not run or len(run) != len(lane.cascade):
                continue
            # Moving a whole cascade only helps if it uncovers a stack card
            # or clears a lane that a King could use.
            if not lane.stack and run[0].rank == KING:
                continue
            target = _lane_target(engine, run, exclude=lane_index)
            if target is not None:
                return player_move(Location.lane(lane_index), target, run)

        if waste_card is not None:
            target = _lane_target(engine, [waste_card])
            if target is not None:
                return player_move(WASTE, target, [waste_card])

        return super().choose_move(engine)
