"""Core engine package for Triple Solitaire."""

__all__ = [
    "cards",
    "rules",
    "deck",
    "lane",
    "moves",
    "state",
    "events",
    "config",
    "game",
    "snapshot",
    "service",
]
