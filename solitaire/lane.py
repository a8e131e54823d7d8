"""Lane storage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .cards import Card


@dataclass
class LaneData:
    """A face-down stack (top is the last element) and a face-up cascade.

    The last cascade card is exposed; earlier ones are covered.
    """

    stack: List[Card] = field(default_factory=list)
    cascade: List[Card] = field(default_factory=list)

    def exposed_card(self) -> Optional[Card]:
        return self.cascade[-1] if self.cascade else None

    def is_empty(self) -> bool:
        return not self.stack and not self.cascade

    def can_flip(self) -> bool:
        return bool(self.stack) and not self.cascade

    def tail(self, count: int) -> List[Card]:
        if count <= 0 or count > len(self.cascade):
            return []
        return self.cascade[-count:]

    def card_count(self) -> int:
        return len(self.stack) + len(self.cascade)

    def copy(self) -> "LaneData":
        return LaneData(stack=list(self.stack), cascade=list(self.cascade))
