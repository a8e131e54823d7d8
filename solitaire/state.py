"""Zone contents for a Triple Solitaire game."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .cards import ACE, KING, Card
from .deck import DECK_SIZE, FOUNDATION_COUNT, LANE_COUNT, Deal
from .lane import LaneData
from .moves import Location, ZoneKind
from .rules import prev_in_suit


class InvariantViolation(RuntimeError):
    """Raised when the zones no longer hold exactly one full pack."""


@dataclass
class GameState:
    """Stock, waste, foundations and lanes.

    The stock top is its last element, the waste front (most recent draw) is
    its first element and a foundation stores only its top card.
    """

    stock: List[Card] = field(default_factory=list)
    waste: List[Card] = field(default_factory=list)
    foundations: List[Optional[Card]] = field(default_factory=lambda: [None] * FOUNDATION_COUNT)
    lanes: List[LaneData] = field(default_factory=lambda: [LaneData() for _ in range(LANE_COUNT)])

    def __post_init__(self) -> None:
        if len(self.foundations) != FOUNDATION_COUNT:
            raise ValueError(f"Expected {FOUNDATION_COUNT} foundations.")
        if len(self.lanes) != LANE_COUNT:
            raise ValueError(f"Expected {LANE_COUNT} lanes.")

    @classmethod
    def from_deal(cls, dealt: Deal) -> "GameState":
        return cls(stock=list(dealt.stock), lanes=[lane.copy() for lane in dealt.lanes])

    def copy(self) -> "GameState":
        return GameState(
            stock=list(self.stock),
            waste=list(self.waste),
            foundations=list(self.foundations),
            lanes=[lane.copy() for lane in self.lanes],
        )

    # Counting ----------------------------------------------------------

    def all_cards(self) -> List[Card]:
        """Every card in play, expanding each foundation to its full run."""
        cards = list(self.stock) + list(self.waste)
        for top in self.foundations:
            if top is not None:
                cards.extend(Card(top.suit, rank) for rank in range(ACE, top.rank + 1))
        for lane in self.lanes:
            cards.extend(lane.stack)
            cards.extend(lane.cascade)
        return cards

    def foundation_card_count(self) -> int:
        return sum(card.rank for card in self.foundations if card is not None)

    def card_count(self) -> int:
        lane_cards = sum(lane.card_count() for lane in self.lanes)
        return len(self.stock) + len(self.waste) + self.foundation_card_count() + lane_cards

    def check_invariants(self) -> None:
        total = self.card_count()
        if total != DECK_SIZE:
            raise InvariantViolation(f"Expected {DECK_SIZE} cards in play, found {total}.")

    def is_complete(self) -> bool:
        return all(card is not None and card.rank == KING for card in self.foundations)

    def hidden_card_count(self) -> int:
        return sum(len(lane.stack) for lane in self.lanes)

    # Zone access -------------------------------------------------------

    def cards_at(self, location: Location, count: int) -> List[Card]:
        """Return the ``count`` movable cards at ``location``, or [] if unavailable."""
        if location.kind is ZoneKind.WASTE:
            return [self.waste[0]] if count == 1 and self.waste else []
        if location.kind is ZoneKind.FOUNDATION:
            top = self.foundations[location.index]
            return [top] if count == 1 and top is not None else []
        if location.kind is ZoneKind.LANE:
            return self.lanes[location.index].tail(count)
        return []

    def take(self, location: Location, cards: Sequence[Card]) -> None:
        """Remove ``cards`` from ``location`` without rule checks."""
        if location.kind is ZoneKind.WASTE:
            for _ in cards:
                self.waste.pop(0)
        elif location.kind is ZoneKind.FOUNDATION:
            self.foundations[location.index] = prev_in_suit(cards[0])
        elif location.kind is ZoneKind.LANE:
            del self.lanes[location.index].cascade[-len(cards) :]
        else:
            raise ValueError(f"Cannot take cards from {location}.")

    def put(self, location: Location, cards: Sequence[Card]) -> None:
        """Place ``cards`` on ``location`` without rule checks."""
        if location.kind is ZoneKind.WASTE:
            for card in cards:
                self.waste.insert(0, card)
        elif location.kind is ZoneKind.FOUNDATION:
            self.foundations[location.index] = cards[-1]
        elif location.kind is ZoneKind.LANE:
            self.lanes[location.index].cascade.extend(cards)
        else:
            raise ValueError(f"Cannot put cards on {location}.")
