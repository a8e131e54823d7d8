from random import Random

import pytest

from solitaire.config import EngineConfig
from solitaire.deck import build_deck
from solitaire.game import GameEngine
from solitaire.moves import WASTE, Location, MoveType, flip_move, player_move, stock_move

from helpers import all_queens_state, build_state, card, cards, lane_cards, make_engine, zones


def test_new_game_layout():
    engine = GameEngine(config=EngineConfig(seed=0, check_invariants=True))

    assert engine.seed == 0
    assert engine.get_stock_size() == 65
    assert engine.is_waste_empty()
    assert all(engine.get_foundation_card(index) is None for index in range(12))
    assert engine.get_lane_stack_size(0) == 0
    assert len(engine.get_lane_cascade(0)) == 1
    assert engine.get_lane_stack_size(12) == 12
    assert len(engine.get_lane_cascade(12)) == 1
    assert engine.state.card_count() == 156
    assert engine.get_move_count() == 0
    assert engine.get_time_in_seconds() == 0
    assert not engine.can_undo()


def test_same_seed_same_game():
    first = GameEngine()
    first.new_game(1234)
    second = GameEngine()
    second.new_game(1234)
    assert first.state == second.state

    second.new_game(4321)
    assert first.state != second.state


def test_config_seed_and_session_rng():
    configured = GameEngine(config=EngineConfig(seed=99))
    assert configured.seed == 99
    configured.new_game()
    assert configured.seed == 99

    one = GameEngine(rng=Random(3))
    two = GameEngine(rng=Random(3))
    assert one.seed == two.seed
    one.new_game()
    two.new_game()
    assert one.state == two.state


def test_explicit_deck_is_dealt_in_order():
    deck = build_deck()
    engine = GameEngine(deck=deck)
    assert engine.seed is None
    assert engine.state.stock == deck[:65]
    assert lane_cards(engine, 0) == [deck[65]]


def test_waste_ace_goes_to_empty_foundation():
    engine = make_engine(build_state(waste="hearts1"))
    move = player_move(WASTE, Location.foundation(3), [card("hearts1")])

    assert engine.move(move)
    assert engine.get_foundation_card(3) == card("hearts1")
    assert engine.is_waste_empty()
    assert engine.get_move_count() == 1
    assert engine.history == (move,)


def test_waste_two_cannot_start_a_foundation():
    engine = make_engine(build_state(waste="hearts2"))
    before = zones(engine)

    assert not engine.move(player_move(WASTE, Location.foundation(0), [card("hearts2")]))
    assert engine.state == before
    assert engine.get_move_count() == 0
    assert not engine.can_undo()


def test_draw_moves_three_cards_most_recent_first():
    engine = make_engine(build_state(stock_top="clubs5 clubs6 clubs7 clubs8"))
    stock_size = engine.get_stock_size()

    assert engine.draw_stock()
    assert engine.get_stock_size() == stock_size - 3
    assert engine.state.waste == cards("clubs6 clubs7 clubs8")
    assert engine.get_waste_card(0) == card("clubs6")
    assert engine.history[-1] == stock_move(cards("clubs8 clubs7 clubs6"))


def test_draw_takes_what_is_left():
    engine = make_engine(all_queens_state(kings_in_stock=2))
    assert engine.draw_stock()
    assert engine.is_stock_empty()
    assert len(engine.state.waste) == 2


def test_recycle_replays_the_same_order():
    engine = make_engine(build_state())
    assert engine.draw_stock()
    first_draw = list(engine.state.waste)
    while not engine.is_stock_empty():
        assert engine.draw_stock()
    waste_size = len(engine.state.waste)

    assert engine.draw_stock()
    assert engine.is_waste_empty()
    assert engine.get_stock_size() == waste_size
    assert engine.history[-1] == stock_move()

    assert engine.draw_stock()
    assert engine.state.waste == first_draw


def test_draw_with_empty_stock_and_waste_is_rejected():
    engine = make_engine(all_queens_state())
    assert not engine.draw_stock()
    assert not engine.can_undo()


def test_flip_needs_a_stack_and_an_empty_cascade():
    state = build_state(lanes={0: ("clubs2 clubs3", ""), 1: ("clubs4", "hearts9"), 2: ("", "")})
    engine = make_engine(state)

    assert not engine.flip(1)
    assert not engine.flip(2)
    assert engine.flip(0)
    assert lane_cards(engine, 0) == [card("clubs3")]
    assert engine.get_lane_stack_size(0) == 1
    assert engine.get_move_count() == 0
    assert engine.history == (flip_move(0),)
    assert not engine.flip(0)


def test_run_moves_between_lanes():
    state = build_state(lanes={0: ("", "hearts8 spades7 diamonds6"), 1: ("", "clubs9"), 2: ("", "diamonds8")})
    engine = make_engine(state)

    partial = player_move(Location.lane(0), Location.lane(2), cards("spades7 diamonds6"))
    assert engine.move(partial)
    assert lane_cards(engine, 0) == cards("hearts8")
    assert lane_cards(engine, 2) == cards("diamonds8 spades7 diamonds6")

    whole = player_move(Location.lane(0), Location.lane(1), cards("hearts8"))
    assert engine.move(whole)
    assert lane_cards(engine, 0) == []
    assert lane_cards(engine, 1) == cards("clubs9 hearts8")


def test_move_must_name_the_cascade_tail():
    state = build_state(lanes={0: ("", "hearts8 spades7 diamonds6"), 1: ("", "clubs9")})
    engine = make_engine(state)
    before = zones(engine)

    assert not engine.move(player_move(Location.lane(0), Location.lane(1), cards("hearts8 spades7")))
    assert not engine.move(player_move(Location.lane(0), Location.lane(1), cards("hearts8")))
    assert not engine.move(player_move(Location.lane(0), Location.lane(0), cards("diamonds6")))
    assert engine.state == before


def test_broken_run_cannot_move_together():
    state = build_state(lanes={0: ("", "hearts8 hearts7"), 1: ("", "clubs9")})
    engine = make_engine(state)
    assert not engine.move(player_move(Location.lane(0), Location.lane(1), cards("hearts8 hearts7")))


def test_only_kings_fill_a_cleared_lane():
    state = build_state(
        lanes={0: ("", ""), 1: ("clubs2", "spades13"), 2: ("", "hearts12"), 3: ("clubs3", "")}
    )
    engine = make_engine(state)

    assert not engine.move(player_move(Location.lane(2), Location.lane(0), cards("hearts12")))
    assert not engine.move(player_move(Location.lane(1), Location.lane(3), cards("spades13")))
    assert engine.move(player_move(Location.lane(1), Location.lane(0), cards("spades13")))
    assert engine.move(player_move(Location.lane(2), Location.lane(0), cards("hearts12")))
    assert lane_cards(engine, 0) == cards("spades13 hearts12")


def test_foundation_card_moves_back_down():
    state = build_state(foundations={0: "hearts5"}, lanes={0: ("", "spades6"), 1: ("", "clubs6")})
    engine = make_engine(state)

    assert engine.move(player_move(Location.foundation(0), Location.lane(0), cards("hearts5")))
    assert engine.get_foundation_card(0) == card("hearts4")
    assert lane_cards(engine, 0) == cards("spades6 hearts5")
    assert not engine.move(player_move(Location.foundation(0), Location.lane(1), cards("hearts5")))


def test_foundation_to_foundation():
    engine = make_engine(build_state(foundations={0: "hearts1"}))
    assert engine.move(player_move(Location.foundation(0), Location.foundation(1), cards("hearts1")))
    assert engine.get_foundation_card(0) is None
    assert engine.get_foundation_card(1) == card("hearts1")


def test_foundations_take_a_single_card():
    state = build_state(foundations={0: "hearts6"}, lanes={0: ("", "clubs8 hearts7")})
    engine = make_engine(state)
    assert not engine.accept_foundation_drop(0, cards("clubs8 hearts7"))
    assert not engine.move(player_move(Location.lane(0), Location.foundation(0), cards("clubs8 hearts7")))
    assert engine.move(player_move(Location.lane(0), Location.foundation(0), cards("hearts7")))


def test_waste_to_lane():
    engine = make_engine(build_state(waste="hearts5 clubs2", lanes={0: ("", "spades6")}))
    assert engine.move(player_move(WASTE, Location.lane(0), cards("hearts5")))
    assert engine.get_waste_card(0) == card("clubs2")
    assert lane_cards(engine, 0) == cards("spades6 hearts5")


def test_only_top_waste_card_is_playable():
    engine = make_engine(build_state(waste="clubs2 hearts1"))
    assert not engine.move(player_move(WASTE, Location.foundation(0), cards("hearts1")))


def test_undo_moves_are_rejected_by_move():
    engine = make_engine(build_state(waste="hearts1"))
    move = player_move(WASTE, Location.foundation(0), [card("hearts1")])
    assert engine.move(move)
    assert not engine.move(move.to_undo())
    assert engine.get_foundation_card(0) == card("hearts1")


def test_auto_move_picks_lowest_foundation():
    state = build_state(
        foundations={0: "clubs1", 2: "hearts1", 4: "hearts1"},
        lanes={0: ("", "hearts2"), 1: ("", "spades1")},
    )
    engine = make_engine(state)

    assert engine.attempt_auto_move_from_cascade_to_foundation(0)
    assert engine.get_foundation_card(2) == card("hearts2")
    assert engine.get_foundation_card(4) == card("hearts1")
    assert engine.attempt_auto_move_from_cascade_to_foundation(1)
    assert engine.get_foundation_card(1) == card("spades1")
    assert engine.history[-1].type is MoveType.AUTO_PLAY
    assert not engine.attempt_auto_move_from_cascade_to_foundation(0)


def test_auto_move_from_waste():
    engine = make_engine(build_state(waste="diamonds1"))
    assert engine.attempt_auto_move_from_waste_to_foundation()
    assert engine.get_foundation_card(0) == card("diamonds1")
    assert not engine.attempt_auto_move_from_waste_to_foundation()


def test_zone_indexes_are_bounds_checked():
    engine = make_engine(build_state(foundations={11: "hearts1"}, lanes={12: ("", "hearts2")}))

    with pytest.raises(IndexError):
        engine.get_foundation_card(-1)
    with pytest.raises(IndexError):
        engine.get_foundation_card(12)
    with pytest.raises(IndexError):
        engine.get_lane_cascade(-1)
    with pytest.raises(IndexError):
        engine.get_lane_stack_size(13)
    assert not engine.accept_foundation_drop(-1, card("hearts2"))
    assert not engine.accept_cascade_drop(-1, card("spades1"))
    assert not engine.attempt_auto_move_from_cascade_to_foundation(-1)
    assert engine.accept_foundation_drop(11, card("hearts2"))
