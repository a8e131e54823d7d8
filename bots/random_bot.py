"""Random legal-move bot."""

from __future__ import annotations

from random import Random
from typing import List, Optional

from solitaire.deck import FOUNDATION_COUNT, LANE_COUNT
from solitaire.game import GameEngine
from solitaire.moves import WASTE, Location, Move, flip_move, player_move, stock_move

from .base import BotStrategy
from .greedy import movable_run


def legal_moves(engine: GameEngine) -> List[Move]:
    """Enumerate flips, single-card and whole-run moves that the engine would accept."""
    state = engine.state
    candidates: List[Move] = []
    destinations = [Location.foundation(index) for index in range(FOUNDATION_COUNT)]
    destinations += [Location.lane(index) for index in range(LANE_COUNT)]

    sources = []
    waste_card = engine.get_waste_card(0)
    if waste_card is not None:
        sources.append((WASTE, [waste_card]))
    for lane_index, lane in enumerate(state.lanes):
        if lane.can_flip():
            candidates.append(flip_move(lane_index))
        run = movable_run(lane.cascade)
        for size in range(1, len(run) + 1):
            sources.append((Location.lane(lane_index), run[-size:]))

    for source, cards in sources:
        for destination in destinations:
            move = player_move(source, destination, cards)
            if engine.is_legal(move):
                candidates.append(move)

    if not engine.is_stock_empty() or not engine.is_waste_empty():
        candidates.append(stock_move())
    return candidates


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = Random(seed)

    def choose_move(self, engine: GameEngine) -> Optional[Move]:
        moves = legal_moves(engine)
        if not moves:
            return None
        return self.rng.choice(moves)
