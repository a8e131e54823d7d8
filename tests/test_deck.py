from collections import Counter
from random import Random

import pytest

from solitaire.cards import RANKS, Card, Suit
from solitaire.deck import DECK_SIZE, STOCK_SIZE, build_deck, deal, shuffled_deck


def test_build_deck_holds_three_of_every_card():
    deck = build_deck()
    assert len(deck) == DECK_SIZE == 156
    counts = Counter(deck)
    assert len(counts) == 52
    assert all(counts[Card(suit, rank)] == 3 for suit in Suit for rank in RANKS)


def test_deal_layout_from_ordered_deck():
    deck = build_deck()
    dealt = deal(deck=deck)

    assert dealt.stock == deck[:STOCK_SIZE]
    assert dealt.lanes[0].stack == []
    assert dealt.lanes[0].cascade == [deck[65]]
    assert dealt.lanes[1].stack == [deck[66]]
    assert dealt.lanes[1].cascade == [deck[67]]
    assert dealt.lanes[12].cascade == [deck[-1]]
    for index, lane in enumerate(dealt.lanes):
        assert len(lane.stack) == index
        assert len(lane.cascade) == 1


def test_deal_uses_every_card_once():
    dealt = deal(rng=Random(5))
    dealt_cards = list(dealt.stock)
    for lane in dealt.lanes:
        dealt_cards += lane.stack + lane.cascade
    assert Counter(dealt_cards) == Counter(build_deck())


def test_same_seed_same_deal():
    assert shuffled_deck(Random(11)) == shuffled_deck(Random(11))
    first = deal(rng=Random(11))
    second = deal(rng=Random(11))
    assert first == second
    assert deal(rng=Random(12)) != first


def test_deal_rejects_wrong_deck_size():
    with pytest.raises(ValueError):
        deal(deck=build_deck()[:-1])
