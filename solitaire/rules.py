"""Placement rules for foundations and lanes."""

from __future__ import annotations

from typing import Optional, Sequence

from .cards import ACE, KING, Card, Suit


def suit(card: Card) -> Suit:
    return card.suit


def rank(card: Card) -> int:
    return card.rank


def next_in_suit(card: Card) -> Optional[Card]:
    """Return the card one rank higher in the same suit, or None above a King."""
    if card.rank == KING:
        return None
    return Card(card.suit, card.rank + 1)


def prev_in_suit(card: Card) -> Optional[Card]:
    """Return the card one rank lower in the same suit.

    An Ace has no predecessor, which on a foundation means the pile is empty.
    """
    if card.rank == ACE:
        return None
    return Card(card.suit, card.rank - 1)


def is_foundation_acceptable(existing: Optional[Card], candidate: Card) -> bool:
    if existing is None:
        return candidate.rank == ACE
    return candidate.suit is existing.suit and candidate.rank == existing.rank + 1


def is_cascade_acceptable(exposed: Card, candidate: Card) -> bool:
    """Descending by one with alternating colors."""
    return candidate.rank == exposed.rank - 1 and candidate.color is not exposed.color


def is_empty_lane_acceptable(candidate: Card) -> bool:
    return candidate.rank == KING


def is_run(cards: Sequence[Card]) -> bool:
    """Return True if ``cards`` (deepest first) could sit together in a cascade."""
    if not cards:
        return False
    return all(is_cascade_acceptable(upper, lower) for upper, lower in zip(cards, cards[1:]))
