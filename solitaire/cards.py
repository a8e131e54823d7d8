"""Card-related data structures and helpers for Triple Solitaire."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto


class InvalidCardText(ValueError):
    """Raised when a card cannot be parsed from its text form."""


class Color(Enum):
    BLACK = auto()
    RED = auto()


class Suit(Enum):
    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def color(self) -> Color:
        return SUIT_COLORS[self]


SUIT_COLORS: dict[Suit, Color] = {
    Suit.CLUBS: Color.BLACK,
    Suit.DIAMONDS: Color.RED,
    Suit.HEARTS: Color.RED,
    Suit.SPADES: Color.BLACK,
}

ACE = 1
JACK = 11
QUEEN = 12
KING = 13

RANKS: tuple[int, ...] = tuple(range(ACE, KING + 1))

RANK_NAMES: dict[int, str] = {ACE: "Ace", JACK: "Jack", QUEEN: "Queen", KING: "King"}

_CARD_TEXT = re.compile(r"^(clubs|diamonds|hearts|spades)(\d{1,2})$")


@dataclass(frozen=True)
class Card:
    """Immutable playing card. Equal suit and rank means interchangeable."""

    suit: Suit
    rank: int

    def __post_init__(self) -> None:
        if not ACE <= self.rank <= KING:
            raise ValueError(f"Rank must be between {ACE} and {KING}, got {self.rank}.")

    @property
    def color(self) -> Color:
        return self.suit.color

    def __str__(self) -> str:
        return serialize_card(self)


def serialize_card(card: Card) -> str:
    """Return the compact text form, e.g. ``hearts7``."""
    return f"{card.suit}{card.rank}"


def parse_card(text: str) -> Card:
    match = _CARD_TEXT.match(text.strip().lower()) if isinstance(text, str) else None
    if match is None:
        raise InvalidCardText(f"Not a card: {text!r}")
    rank = int(match.group(2))
    if not ACE <= rank <= KING:
        raise InvalidCardText(f"Card rank out of range: {text!r}")
    return Card(Suit[match.group(1).upper()], rank)


def card_label(card: Card) -> str:
    rank_name = RANK_NAMES.get(card.rank, str(card.rank))
    return f"{rank_name} of {card.suit.name.title()}"
