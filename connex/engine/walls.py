"""Shortcut walls that can never cut the generating path."""

from __future__ import annotations

import random
from typing import Dict, FrozenSet, Sequence, Set

from ..core.models import Cell, Wall
from .grid import PuzzleGrid


def path_positions(path: Sequence[Cell]) -> Dict[Cell, int]:
    return {cell: index for index, cell in enumerate(path)}


def is_consecutive(positions: Dict[Cell, int], wall: Wall) -> bool:
    """True when the wall's endpoints are neighbours in path-visit order."""

    return abs(positions[wall.cell] - positions[wall.other]) == 1


def build_shortcut_walls(
    path: Sequence[Cell], cols: int, rows: int, wall_pct: float, rng: random.Random
) -> FrozenSet[Wall]:
    """Wall each non-consecutive grid edge independently with ``wall_pct``."""

    positions = path_positions(path)
    walls: Set[Wall] = set()
    for edge in PuzzleGrid(cols, rows).edges():
        if is_consecutive(positions, edge):
            continue
        if rng.random() < wall_pct:
            walls.add(edge)
    return frozenset(walls)
