"""Builders for hand-made positions used across the tests."""

from collections import Counter
from typing import Dict, Iterable, Optional, Sequence, Tuple

from solitaire.cards import ACE, Card, parse_card
from solitaire.config import EngineConfig
from solitaire.deck import build_deck
from solitaire.game import GameEngine
from solitaire.lane import LaneData
from solitaire.state import GameState


def cards(text: str) -> list[Card]:
    return [parse_card(token) for token in text.split()]


def card(text: str) -> Card:
    return parse_card(text)


def build_state(
    *,
    waste: str = "",
    foundations: Optional[Dict[int, str]] = None,
    lanes: Optional[Dict[int, Tuple[str, str]]] = None,
    stock_top: str = "",
) -> GameState:
    """Place the named cards and put every remaining card of the pack in the stock.

    ``lanes`` maps a lane index to ``(stack, cascade)`` strings. ``stock_top``
    cards end on top of the stock, the last one being the top card.
    """
    foundation_cards = [None] * 12
    placed: list[Card] = cards(waste) + cards(stock_top)
    for index, text in (foundations or {}).items():
        top = card(text)
        foundation_cards[index] = top
        placed.extend(Card(top.suit, rank) for rank in range(ACE, top.rank + 1))
    lane_data = [LaneData() for _ in range(13)]
    for index, (stack, cascade) in (lanes or {}).items():
        lane_data[index] = LaneData(stack=cards(stack), cascade=cards(cascade))
        placed.extend(lane_data[index].stack + lane_data[index].cascade)

    remaining = Counter(build_deck())
    remaining.subtract(Counter(placed))
    if any(count < 0 for count in remaining.values()):
        raise ValueError("Position uses a card more than three times.")
    filler: list[Card] = []
    for deck_card in build_deck():
        if remaining[deck_card] > 0:
            filler.append(deck_card)
            remaining[deck_card] -= 1

    return GameState(
        stock=filler + cards(stock_top),
        waste=cards(waste),
        foundations=foundation_cards,
        lanes=lane_data,
    )


def all_queens_state(kings_in_stock: int = 0) -> GameState:
    """Every foundation on a Queen; the twelve Kings sit alone in lanes 0..11.

    The last ``kings_in_stock`` Kings go to the stock instead of a lane.
    """
    suits = ["clubs", "diamonds", "hearts", "spades"]
    foundations = {index: f"{suits[index % 4]}12" for index in range(12)}
    lane_count = 12 - kings_in_stock
    lanes = {index: ("", f"{suits[index % 4]}13") for index in range(lane_count)}
    stock_top = " ".join(f"{suits[index % 4]}13" for index in range(lane_count, 12))
    return build_state(foundations=foundations, lanes=lanes, stock_top=stock_top)


def make_engine(state: Optional[GameState] = None, **config_values) -> GameEngine:
    """Engine with invariant checks on and automatic play off unless overridden."""
    values = {"check_invariants": True, "auto_play": "never", "auto_flip": False}
    values.update(config_values)
    engine = GameEngine(config=EngineConfig(**values))
    if state is not None:
        engine.load_state(state)
    return engine


def zones(engine: GameEngine) -> GameState:
    return engine.state.copy()


def lane_cards(engine: GameEngine, index: int) -> list[Card]:
    return list(engine.get_lane_cascade(index))


def flatten(groups: Iterable[Sequence[Card]]) -> list[Card]:
    return [item for group in groups for item in group]
