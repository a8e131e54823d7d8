"""Deck creation and dealing for Triple Solitaire."""

from __future__ import annotations

from dataclasses import dataclass
from random import Random
from typing import List, Optional, Sequence

from .cards import RANKS, Card, Suit
from .lane import LaneData

DECK_COUNT = 3
DECK_SIZE = DECK_COUNT * len(Suit) * len(RANKS)
STOCK_SIZE = 65
LANE_COUNT = 13
FOUNDATION_COUNT = 12


@dataclass
class Deal:
    stock: List[Card]
    lanes: List[LaneData]


def build_deck() -> List[Card]:
    """Return the ordered 156-card pack: three decks, suit by suit, Ace to King."""
    return [Card(suit, rank) for _ in range(DECK_COUNT) for suit in Suit for rank in RANKS]


def shuffled_deck(rng: Optional[Random] = None) -> List[Card]:
    cards = build_deck()
    if rng is None:
        rng = Random()
    rng.shuffle(cards)
    return cards


def deal(
    *,
    rng: Optional[Random] = None,
    deck: Optional[Sequence[Card]] = None,
) -> Deal:
    """Deal the stock and thirteen lanes.

    Lane ``i`` receives ``i`` face-down cards followed by one face-up card.
    The first card of the deck ends at the bottom of the stock.
    """
    cards = list(deck) if deck is not None else shuffled_deck(rng)
    if len(cards) != DECK_SIZE:
        raise ValueError(f"Deck must contain exactly {DECK_SIZE} cards.")

    stock = cards[:STOCK_SIZE]
    position = STOCK_SIZE
    lanes: List[LaneData] = []
    for lane_index in range(LANE_COUNT):
        stack = cards[position : position + lane_index]
        position += lane_index
        cascade = [cards[position]]
        position += 1
        lanes.append(LaneData(stack=stack, cascade=cascade))

    return Deal(stock=stock, lanes=lanes)
