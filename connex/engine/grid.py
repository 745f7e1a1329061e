"""Grid representation and adjacency helpers."""

from __future__ import annotations

from typing import FrozenSet, Iterable, Iterator, List

from ..core.constants import Bounds, Direction, ORTHOGONAL_STEPS
from ..core.models import Cell, Layout, Wall


class PuzzleGrid:
    """A ``cols`` x ``rows`` rectangle with optional blocked edges."""

    def __init__(self, cols: int, rows: int, walls: Iterable[Wall] = ()) -> None:
        self.bounds = Bounds(cols=cols, rows=rows)
        self.walls: FrozenSet[Wall] = frozenset(walls)

    @classmethod
    def for_layout(cls, layout: Layout) -> "PuzzleGrid":
        return cls(layout.cols, layout.rows, layout.walls)

    @property
    def cols(self) -> int:
        return self.bounds.cols

    @property
    def rows(self) -> int:
        return self.bounds.rows

    @property
    def size(self) -> int:
        return self.bounds.size

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def contains(self, cell: Cell) -> bool:
        return self.bounds.contains(cell.x, cell.y)

    def cells(self) -> List[Cell]:
        """All cells in row-major order."""

        return [Cell(x, y) for y in range(self.rows) for x in range(self.cols)]

    def index_of(self, cell: Cell) -> int:
        return cell.y * self.cols + cell.x

    def blocked(self, a: Cell, b: Cell) -> bool:
        """True iff ``a`` and ``b`` are adjacent and a wall marks their edge."""

        if not a.is_adjacent(b):
            return False
        return Wall.between(a, b) in self.walls

    def neighbors(self, cell: Cell) -> Iterator[Cell]:
        """Yield in-bounds, unblocked orthogonal neighbours."""

        for dx, dy in ORTHOGONAL_STEPS:
            nxt = cell.shifted(dx, dy)
            if self.contains(nxt) and not self.blocked(cell, nxt):
                yield nxt

    def edges(self) -> Iterator[Wall]:
        """Every rightward and downward grid edge, row-major."""

        for y in range(self.rows):
            for x in range(self.cols):
                if x < self.cols - 1:
                    yield Wall(Cell(x, y), Direction.RIGHT)
                if y < self.rows - 1:
                    yield Wall(Cell(x, y), Direction.DOWN)
