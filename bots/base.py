"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Optional

from solitaire.game import GameEngine
from solitaire.moves import Move, stock_move


class BotStrategy:
    """Base class for solitaire policies."""

    name: str = "BaseBot"

    def on_game_start(self, engine: GameEngine) -> None:
        """Optional hook invoked after each deal."""
        return None

    def choose_move(self, engine: GameEngine) -> Optional[Move]:
        """Return the next move to submit, or None to resign."""
        if engine.is_stock_empty() and engine.is_waste_empty():
            return None
        return stock_move()
