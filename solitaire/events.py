"""Change notifications emitted by the game engine."""

from __future__ import annotations


class GameListener:
    """Base class for engine observers.

    Every hook is optional. Hooks are called synchronously after the state
    change has been applied and their return values are ignored.
    """

    def on_stock_changed(self) -> None:
        return None

    def on_waste_changed(self) -> None:
        return None

    def on_foundation_changed(self, index: int) -> None:
        return None

    def on_lane_changed(self, index: int) -> None:
        return None

    def on_move_count_changed(self, move_count: int) -> None:
        return None

    def on_time_changed(self, time_in_seconds: int) -> None:
        return None

    def on_undo_available_changed(self, available: bool) -> None:
        return None

    def on_won(self, time_in_seconds: int, move_count: int) -> None:
        """Invoked once when the last card reaches the foundations."""
        return None


class RecordingListener(GameListener):
    """Listener that keeps every notification as a tuple, newest last."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_stock_changed(self) -> None:
        self.events.append(("stock",))

    def on_waste_changed(self) -> None:
        self.events.append(("waste",))

    def on_foundation_changed(self, index: int) -> None:
        self.events.append(("foundation", index))

    def on_lane_changed(self, index: int) -> None:
        self.events.append(("lane", index))

    def on_move_count_changed(self, move_count: int) -> None:
        self.events.append(("move_count", move_count))

    def on_time_changed(self, time_in_seconds: int) -> None:
        self.events.append(("time", time_in_seconds))

    def on_undo_available_changed(self, available: bool) -> None:
        self.events.append(("undo_available", available))

    def on_won(self, time_in_seconds: int, move_count: int) -> None:
        self.events.append(("won", time_in_seconds, move_count))

    def of_kind(self, kind: str) -> list[tuple]:
        return [event for event in self.events if event[0] == kind]

    def clear(self) -> None:
        self.events.clear()
