"""Move records and their text notation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional, Tuple

from .cards import Card, InvalidCardText, parse_card, serialize_card
from .deck import FOUNDATION_COUNT, LANE_COUNT


class InvalidMoveNotation(ValueError):
    """Raised when a move or location cannot be parsed from text."""


class ZoneKind(Enum):
    STOCK = auto()
    WASTE = auto()
    FOUNDATION = auto()
    LANE = auto()


_ZONE_PREFIX = {
    ZoneKind.STOCK: "S",
    ZoneKind.WASTE: "W",
    ZoneKind.FOUNDATION: "F",
    ZoneKind.LANE: "L",
}


@dataclass(frozen=True)
class Location:
    kind: ZoneKind
    index: int = 0

    def __post_init__(self) -> None:
        if self.kind is ZoneKind.FOUNDATION and not 0 <= self.index < FOUNDATION_COUNT:
            raise ValueError(f"Foundation index out of range: {self.index}")
        if self.kind is ZoneKind.LANE and not 0 <= self.index < LANE_COUNT:
            raise ValueError(f"Lane index out of range: {self.index}")

    @classmethod
    def lane(cls, index: int) -> "Location":
        return cls(ZoneKind.LANE, index)

    @classmethod
    def foundation(cls, index: int) -> "Location":
        return cls(ZoneKind.FOUNDATION, index)

    def __str__(self) -> str:
        prefix = _ZONE_PREFIX[self.kind]
        if self.kind in (ZoneKind.FOUNDATION, ZoneKind.LANE):
            return f"{prefix}{self.index}"
        return prefix


STOCK = Location(ZoneKind.STOCK)
WASTE = Location(ZoneKind.WASTE)


def parse_location(text: str) -> Location:
    text = text.strip().upper()
    if text == "S":
        return STOCK
    if text == "W":
        return WASTE
    if len(text) < 2 or text[0] not in "FL" or not text[1:].isdigit():
        raise InvalidMoveNotation(f"Not a location: {text!r}")
    kind = ZoneKind.FOUNDATION if text[0] == "F" else ZoneKind.LANE
    try:
        return Location(kind, int(text[1:]))
    except ValueError as exc:
        raise InvalidMoveNotation(str(exc)) from exc


class MoveType(Enum):
    STOCK = auto()
    FLIP = auto()
    PLAYER_MOVE = auto()
    AUTO_PLAY = auto()
    UNDO = auto()
    UNDO_FLIP = auto()
    UNDO_STOCK = auto()


UNDO_TYPES = frozenset({MoveType.UNDO, MoveType.UNDO_FLIP, MoveType.UNDO_STOCK})


@dataclass(frozen=True)
class Move:
    """A single move from any source.

    ``cards`` runs from the deepest card to the exposed one. STOCK moves carry
    the cards drawn in the order they left the stock; a STOCK move with no
    cards is a recycle of the waste.
    """

    type: MoveType
    source: Location
    destination: Location
    cards: Tuple[Card, ...] = ()

    @property
    def card(self) -> Optional[Card]:
        """The single card moved, or the bottom card of a run."""
        return self.cards[0] if self.cards else None

    def to_undo(self) -> "Move":
        if self.type is MoveType.FLIP:
            return Move(MoveType.UNDO_FLIP, self.destination, self.destination)
        if self.type is MoveType.STOCK:
            return Move(MoveType.UNDO_STOCK, WASTE, STOCK, self.cards)
        return Move(MoveType.UNDO, self.destination, self.source, self.cards)

    def __str__(self) -> str:
        cards = ";".join(serialize_card(card) for card in self.cards)
        return f"{self.type.name}:{self.source}>{self.destination}:{cards}"


def stock_move(cards: Iterable[Card] = ()) -> Move:
    return Move(MoveType.STOCK, STOCK, WASTE, tuple(cards))


def flip_move(lane_index: int) -> Move:
    lane = Location.lane(lane_index)
    return Move(MoveType.FLIP, lane, lane)


def player_move(source: Location, destination: Location, cards: Iterable[Card]) -> Move:
    return Move(MoveType.PLAYER_MOVE, source, destination, tuple(cards))


def auto_play_move(source: Location, destination: Location, card: Card) -> Move:
    return Move(MoveType.AUTO_PLAY, source, destination, (card,))


def parse_move(text: str) -> Move:
    """Parse the ``TYPE:source>destination:card;card`` notation."""
    parts = text.strip().split(":")
    if len(parts) not in (2, 3):
        raise InvalidMoveNotation(f"Not a move: {text!r}")
    try:
        move_type = MoveType[parts[0].strip().upper()]
    except KeyError as exc:
        raise InvalidMoveNotation(f"Unknown move type: {parts[0]!r}") from exc
    if ">" not in parts[1]:
        raise InvalidMoveNotation(f"Move is missing '>': {text!r}")
    source_text, destination_text = parts[1].split(">", 1)
    source = parse_location(source_text)
    destination = parse_location(destination_text)
    card_text = parts[2].strip() if len(parts) == 3 else ""
    try:
        cards = tuple(parse_card(token) for token in card_text.split(";") if token.strip())
    except InvalidCardText as exc:
        raise InvalidMoveNotation(str(exc)) from exc
    return Move(move_type, source, destination, cards)
