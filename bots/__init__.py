"""Bot strategies for Triple Solitaire."""

from .base import BotStrategy
from .greedy import GreedyBot
from .random_bot import RandomBot

__all__ = ["BotStrategy", "GreedyBot", "RandomBot"]
