"""Play batches of seeded games with a bot."""

from __future__ import annotations

import argparse
import logging
from random import Random
from typing import Dict, Iterable, Optional

from solitaire.config import AUTO_PLAY_MODES, EngineConfig
from solitaire.game import GameEngine, GameSummary
from solitaire.moves import MoveType

from .base import BotStrategy
from .greedy import GreedyBot
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "greedy": GreedyBot,
    "random": RandomBot,
}

DEFAULT_MAX_MOVES = 2000


def play_game(
    bot: BotStrategy,
    engine: GameEngine,
    *,
    max_moves: int = DEFAULT_MAX_MOVES,
) -> GameSummary:
    """Let ``bot`` play the engine's current deal until it wins, resigns or stalls."""
    bot.on_game_start(engine)
    idle_stock_moves = 0
    submitted = 0
    while not engine.is_won() and submitted < max_moves:
        move = bot.choose_move(engine)
        if move is None:
            break
        if not engine.move(move):
            raise RuntimeError(f"{bot.name} proposed an illegal move: {move}")
        submitted += 1
        engine.tick()
        if move.type is MoveType.STOCK:
            idle_stock_moves += 1
        else:
            idle_stock_moves = 0
        # A full pass through stock and waste without another move means no progress.
        if idle_stock_moves > (engine.get_stock_size() + len(engine.state.waste)) // 3 + 2:
            logger.debug("%s stalled after %d moves", bot.name, submitted)
            break
    return engine.summary()


def run_games(
    bot: BotStrategy,
    *,
    n_games: int = 10,
    seed: Optional[int] = None,
    config: Optional[EngineConfig] = None,
    max_moves: int = DEFAULT_MAX_MOVES,
) -> dict:
    rng = Random(seed)
    engine = GameEngine(config=config or EngineConfig(), rng=rng)
    history = []
    for _ in range(n_games):
        engine.new_game()
        summary = play_game(bot, engine, max_moves=max_moves)
        history.append(
            {
                "seed": engine.seed,
                "won": summary.won,
                "moves": summary.move_count,
                "foundation_cards": engine.state.foundation_card_count(),
            }
        )
    wins = sum(1 for entry in history if entry["won"])
    return {"wins": wins, "games": n_games, "history": history}


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play Triple Solitaire games with a bot.")
    parser.add_argument("--bot", default="greedy", choices=BOT_REGISTRY.keys())
    parser.add_argument("--n", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--auto-play", default="always", choices=AUTO_PLAY_MODES)
    parser.add_argument("--max-moves", type=int, default=DEFAULT_MAX_MOVES)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    bot = BOT_REGISTRY[args.bot]()
    config = EngineConfig(auto_play=args.auto_play)
    results = run_games(bot, n_games=args.n, seed=args.seed, config=config, max_moves=args.max_moves)

    print(f"Won {results['wins']}/{results['games']} games")
    average = sum(entry["foundation_cards"] for entry in results["history"]) / max(1, results["games"])
    print(f"Average cards on foundations: {average:.1f}")


if __name__ == "__main__":
    main()
