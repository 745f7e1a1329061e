"""Value types shared by the generator, verifier and play session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .constants import Direction


@dataclass(frozen=True, order=True)
class Cell:
    """A grid coordinate; ``x`` is the column and ``y`` the row."""

    x: int
    y: int

    def shifted(self, dx: int, dy: int) -> "Cell":
        return Cell(self.x + dx, self.y + dy)

    def is_adjacent(self, other: "Cell") -> bool:
        return abs(self.x - other.x) + abs(self.y - other.y) == 1


@dataclass(frozen=True, order=True)
class Wall:
    """A blocked edge between ``cell`` and its right or down neighbour."""

    cell: Cell
    direction: Direction

    @classmethod
    def between(cls, a: Cell, b: Cell) -> "Wall":
        """Return the canonical wall for the edge joining two adjacent cells."""

        if not a.is_adjacent(b):
            raise ValueError(f"Cells {a} and {b} are not adjacent")
        low, high = (a, b) if (a.y, a.x) < (b.y, b.x) else (b, a)
        direction = Direction.RIGHT if high.x == low.x + 1 else Direction.DOWN
        return cls(low, direction)

    @property
    def other(self) -> Cell:
        if self.direction == Direction.RIGHT:
            return self.cell.shifted(1, 0)
        return self.cell.shifted(0, 1)


@dataclass(frozen=True, order=True)
class Anchor:
    """A checkpoint: ``cell`` must be first-visited as number ``number``."""

    number: int
    cell: Cell


@dataclass(frozen=True)
class Layout:
    """A generated puzzle; owns its anchors and walls exclusively."""

    cols: int
    rows: int
    anchors: Tuple[Anchor, ...]
    walls: FrozenSet[Wall]
    start: Cell
    goal: Cell

    @classmethod
    def from_parts(
        cls,
        cols: int,
        rows: int,
        anchors: Iterable[Anchor],
        walls: Iterable[Wall] = (),
    ) -> "Layout":
        ordered = tuple(sorted(anchors))
        if not ordered:
            raise ValueError("A layout needs at least one anchor")
        return cls(
            cols=cols,
            rows=rows,
            anchors=ordered,
            walls=frozenset(walls),
            start=ordered[0].cell,
            goal=ordered[-1].cell,
        )

    @property
    def anchor_count(self) -> int:
        return len(self.anchors)

    @property
    def size(self) -> int:
        return self.cols * self.rows

    def numbers(self) -> Dict[Cell, int]:
        return {anchor.cell: anchor.number for anchor in self.anchors}

    def number_at(self, cell: Cell) -> Optional[int]:
        for anchor in self.anchors:
            if anchor.cell == cell:
                return anchor.number
        return None

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "cols": self.cols,
            "rows": self.rows,
            "start": [self.start.x, self.start.y],
            "goal": [self.goal.x, self.goal.y],
            "anchors": [
                {"x": anchor.cell.x, "y": anchor.cell.y, "n": anchor.number}
                for anchor in self.anchors
            ],
            "walls": [
                {"x": wall.cell.x, "y": wall.cell.y, "dir": wall.direction.value}
                for wall in sorted(self.walls)
            ],
        }

    @classmethod
    def from_jsonable(cls, payload: Dict[str, Any]) -> "Layout":
        anchors: List[Anchor] = [
            Anchor(number=int(item["n"]), cell=Cell(int(item["x"]), int(item["y"])))
            for item in payload["anchors"]
        ]
        walls = [
            Wall(Cell(int(item["x"]), int(item["y"])), Direction(item["dir"]))
            for item in payload.get("walls", [])
        ]
        return cls.from_parts(int(payload["cols"]), int(payload["rows"]), anchors, walls)
