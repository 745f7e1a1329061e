"""Random rotations, mirrors and reversal applied to template paths."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..core.models import Cell


@dataclass(frozen=True)
class TransformSpec:
    quarter_turns: int = 0
    mirror_x: bool = False
    mirror_y: bool = False
    reverse: bool = False

    def describe(self) -> str:
        parts = [f"rot{self.quarter_turns * 90}"]
        if self.mirror_x:
            parts.append("mirror-x")
        if self.mirror_y:
            parts.append("mirror-y")
        if self.reverse:
            parts.append("reversed")
        return "+".join(parts)


def rotate_cell(cell: Cell, cols: int, rows: int, quarter_turns: int) -> Cell:
    """Rotate clockwise in place; the grid keeps its ``cols`` x ``rows`` size."""

    turns = quarter_turns % 4
    if turns == 1:
        return Cell(cols - 1 - cell.y, cell.x)
    if turns == 2:
        return Cell(cols - 1 - cell.x, rows - 1 - cell.y)
    if turns == 3:
        return Cell(cell.y, rows - 1 - cell.x)
    return cell


def rotate_path(path: Sequence[Cell], cols: int, rows: int, quarter_turns: int) -> List[Cell]:
    return [rotate_cell(cell, cols, rows, quarter_turns) for cell in path]


def mirror_path(
    path: Sequence[Cell], cols: int, rows: int, mirror_x: bool = False, mirror_y: bool = False
) -> List[Cell]:
    out: List[Cell] = []
    for cell in path:
        x = cols - 1 - cell.x if mirror_x else cell.x
        y = rows - 1 - cell.y if mirror_y else cell.y
        out.append(Cell(x, y))
    return out


def reverse_path(path: Sequence[Cell]) -> List[Cell]:
    return list(reversed(path))


def apply_transform(path: Sequence[Cell], cols: int, rows: int, spec: TransformSpec) -> List[Cell]:
    out = rotate_path(path, cols, rows, spec.quarter_turns)
    out = mirror_path(out, cols, rows, spec.mirror_x, spec.mirror_y)
    if spec.reverse:
        out = reverse_path(out)
    return out


def random_transform(
    path: Sequence[Cell], cols: int, rows: int, rng: random.Random
) -> Tuple[List[Cell], TransformSpec]:
    """Draw and apply a transform.

    Quarter turns would carry cells off a non-square grid, so rectangles only
    draw from 0 and 180 degrees.
    """

    if cols == rows:
        turns = rng.randrange(4)
    else:
        # See DESIGN.md "Rotation on non-square grids": 0 or 180 degrees only.
        turns = rng.choice((0, 2))
    spec = TransformSpec(
        quarter_turns=turns,
        mirror_x=rng.random() < 0.5,
        mirror_y=rng.random() < 0.5,
        reverse=rng.random() < 0.5,
    )
    return apply_transform(path, cols, rows, spec), spec
