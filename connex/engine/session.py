"""Movement rules and win evaluation for a loaded layout.

Rules: free movement between unblocked neighbours, stepping back onto the
previous trail cell removes the last segment, every other revisit is refused.
A trail wins when it covers the grid, first-visits the numbers as 1..K and
ends on the last number.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from ..core.constants import MOVE_DELTAS, Move
from ..core.models import Cell, Layout
from .grid import PuzzleGrid


class MoveOutcome(str, Enum):
    MOVED = "moved"
    BACKTRACKED = "backtracked"
    WON = "won"
    OUT_OF_BOUNDS = "out_of_bounds"
    BLOCKED = "blocked"
    REVISIT = "revisit"
    GAME_OVER = "game_over"


def numbers_first_order(layout: Layout, trail: Sequence[Cell]) -> List[int]:
    """Checkpoint numbers in the order the trail first reaches them."""

    numbers = layout.numbers()
    seen = set()
    order: List[int] = []
    for cell in trail:
        number = numbers.get(cell)
        if number is not None and number not in seen:
            seen.add(number)
            order.append(number)
    return order


def evaluate_trail(layout: Layout, trail: Sequence[Cell]) -> bool:
    """True iff ``trail`` is a winning trail for ``layout``."""

    if len(trail) != layout.size:
        return False
    if len(set(trail)) != len(trail):
        return False
    expected = list(range(1, layout.anchor_count + 1))
    if numbers_first_order(layout, trail) != expected:
        return False
    return trail[-1] == layout.goal


class PuzzleSession:
    """One player's attempt at a layout."""

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self.grid = PuzzleGrid.for_layout(layout)
        self.trail: List[Cell] = [layout.start]
        self.game_over = False

    @property
    def player(self) -> Cell:
        return self.trail[-1]

    def numbers_first_order(self) -> List[int]:
        return numbers_first_order(self.layout, self.trail)

    def next_required_number(self) -> Optional[int]:
        seen = set(self.numbers_first_order())
        for number in range(1, self.layout.anchor_count + 1):
            if number not in seen:
                return number
        return None

    def is_won(self) -> bool:
        return evaluate_trail(self.layout, self.trail)

    def move(self, move: Move) -> MoveOutcome:
        if self.game_over:
            return MoveOutcome.GAME_OVER

        dx, dy = MOVE_DELTAS[Move(move)]
        current = self.player
        target = current.shifted(dx, dy)
        if not self.grid.contains(target):
            return MoveOutcome.OUT_OF_BOUNDS
        if self.grid.blocked(current, target):
            return MoveOutcome.BLOCKED

        if target in self.trail:
            if len(self.trail) >= 2 and self.trail[-2] == target:
                self.trail.pop()
                return MoveOutcome.BACKTRACKED
            return MoveOutcome.REVISIT

        self.trail.append(target)
        if self.is_won():
            self.game_over = True
            return MoveOutcome.WON
        return MoveOutcome.MOVED

    def restart(self) -> None:
        self.trail = [self.layout.start]
        self.game_over = False
