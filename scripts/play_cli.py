#!/usr/bin/env python3
"""Interactive CLI to play a game of Triple Solitaire in the terminal."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from solitaire.cards import RANK_NAMES, Card
from solitaire.config import AUTO_PLAY_MODES, EngineConfig
from solitaire.game import GameEngine
from solitaire.moves import InvalidMoveNotation, Move, ZoneKind, parse_location, player_move
from solitaire.service import GameService
from solitaire.snapshot import SnapshotError

SUIT_SYMBOLS = {"clubs": "C", "diamonds": "D", "hearts": "H", "spades": "S"}

HELP = """Commands:
  d                 draw from the stock
  f <lane>          flip the top stack card of a lane
  m <from> <to> [n] move n cards (default 1), e.g. 'm L3 F0' or 'm W L5'
  a                 send one card to the foundations
  u                 undo
  s <file> / l <file>  save / load a snapshot
  n                 new game
  q                 quit"""


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Triple Solitaire in the terminal.")
    parser.add_argument("--seed", type=int, default=None, help="Deal a fixed game.")
    parser.add_argument("--auto-play", default="always", choices=AUTO_PLAY_MODES)
    parser.add_argument("--no-auto-flip", action="store_true")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args()


def describe_card(card: Optional[Card]) -> str:
    if card is None:
        return "--"
    rank = RANK_NAMES[card.rank][0] if card.rank in RANK_NAMES else str(card.rank)
    return f"{rank}{SUIT_SYMBOLS[str(card.suit)]}"


def render_board(engine: GameEngine) -> List[str]:
    lines = []
    waste = " ".join(describe_card(engine.get_waste_card(index)) for index in range(3) if engine.get_waste_card(index) is not None)
    lines.append(f"Stock: {engine.get_stock_size():>2}  Waste: {waste or '--'}")
    lines.append("Foundations: " + " ".join(describe_card(engine.get_foundation_card(index)) for index in range(12)))
    for lane_index in range(13):
        hidden = "## " * engine.get_lane_stack_size(lane_index)
        cascade = " ".join(describe_card(card) for card in engine.get_lane_cascade(lane_index))
        lines.append(f"L{lane_index:<2} {hidden}{cascade}")
    lines.append(f"Moves: {engine.get_move_count()}  Time: {engine.get_time_in_seconds()}s")
    return lines


def build_move(engine: GameEngine, source_text: str, destination_text: str, count: int = 1) -> Move:
    """Read the cards to move from the source zone, so the player only names zones."""
    source = parse_location(source_text)
    destination = parse_location(destination_text)
    if source.kind is ZoneKind.LANE:
        cards = list(engine.get_lane_cascade(source.index)[-count:]) if count > 0 else []
    elif source.kind is ZoneKind.WASTE:
        card = engine.get_waste_card(0)
        cards = [card] if card is not None else []
    elif source.kind is ZoneKind.FOUNDATION:
        card = engine.get_foundation_card(source.index)
        cards = [card] if card is not None else []
    else:
        raise InvalidMoveNotation("Cards cannot be dragged from the stock.")
    if not cards:
        raise InvalidMoveNotation(f"No cards at {source}.")
    return player_move(source, destination, cards)


def handle_command(service: GameService, line: str) -> bool:
    """Run one command. Returns False when the player quits."""
    parts = line.split()
    if not parts:
        return True
    command, args = parts[0].lower(), parts[1:]
    engine = service.engine
    assert engine is not None
    try:
        if command == "q":
            return False
        if command == "d":
            ok = service.draw_stock()
        elif command == "f" and len(args) == 1 and args[0].isdigit():
            ok = service.flip(int(args[0]))
        elif command == "m" and len(args) in (2, 3):
            count = int(args[2]) if len(args) == 3 else 1
            ok = service.play(build_move(engine, args[0], args[1], count))
        elif command == "a":
            ok = service.auto_play()
        elif command == "u":
            ok = service.undo()
        elif command == "n":
            service.start_new_game()
            ok = True
        elif command == "s" and len(args) == 1:
            Path(args[0]).write_text(json.dumps(service.save(), indent=2))
            ok = True
        elif command == "l" and len(args) == 1:
            service.load(json.loads(Path(args[0]).read_text()))
            ok = True
        else:
            print(HELP)
            return True
    except (InvalidMoveNotation, SnapshotError, ValueError, OSError) as exc:
        print(f"Error: {exc}")
        return True
    if not ok:
        print("Not allowed.")
    return True


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    config = EngineConfig(seed=args.seed, auto_play=args.auto_play, auto_flip=not args.no_auto_flip)
    service = GameService(config=config)
    service.start_new_game()
    print(HELP)
    while True:
        engine = service.engine
        assert engine is not None
        print("\n" + "\n".join(render_board(engine)))
        if engine.is_won():
            summary = engine.summary()
            print(f"You won in {summary.duration_seconds}s with {summary.move_count} moves!")
        waited_from = time.monotonic()
        try:
            line = input("> ")
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break
        service.tick(int(time.monotonic() - waited_from))
        if not handle_command(service, line):
            break


if __name__ == "__main__":
    main()
