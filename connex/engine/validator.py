"""Deterministic structural validation for paths and layouts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from ..core.constants import Direction
from ..core.exceptions import LayoutValidationError
from ..core.models import Cell, Layout, Wall
from ..utils.logger import get_logger
from .walls import is_consecutive, path_positions


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


def check_path(path: Sequence[Cell], cols: int, rows: int) -> None:
    """Raise unless ``path`` visits every cell of the grid exactly once."""

    if len(path) != cols * rows:
        raise LayoutValidationError(f"Path has {len(path)} cells, expected {cols * rows}")
    seen = set()
    for cell in path:
        if not (0 <= cell.x < cols and 0 <= cell.y < rows):
            raise LayoutValidationError(f"Path leaves the grid at {cell}")
        if cell in seen:
            raise LayoutValidationError(f"Path visits {cell} twice")
        seen.add(cell)


def check_wall_safety(path: Sequence[Cell], walls: Iterable[Wall]) -> None:
    """Raise if any wall blocks an edge the path walks along."""

    positions = path_positions(path)
    for wall in walls:
        if is_consecutive(positions, wall):
            raise LayoutValidationError(f"Wall {wall} cuts the generating path")


class LayoutValidator:
    """Runs deterministic validation over a finished layout."""

    def validate(self, layout: Layout) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_dimensions(layout)
            self._check_anchors(layout)
            self._check_endpoints(layout)
            self._check_walls(layout)
        except LayoutValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_dimensions(self, layout: Layout) -> None:
        if layout.cols <= 0 or layout.rows <= 0:
            raise LayoutValidationError(f"Invalid grid size {layout.cols}x{layout.rows}")

    def _check_anchors(self, layout: Layout) -> None:
        numbers = [anchor.number for anchor in layout.anchors]
        expected = list(range(1, len(numbers) + 1))
        if sorted(numbers) != expected:
            raise LayoutValidationError(f"Anchor numbers {sorted(numbers)} are not 1..{len(numbers)}")
        cells = [anchor.cell for anchor in layout.anchors]
        if len(set(cells)) != len(cells):
            raise LayoutValidationError("Two anchors share a cell")
        for cell in cells:
            if not (0 <= cell.x < layout.cols and 0 <= cell.y < layout.rows):
                raise LayoutValidationError(f"Anchor at {cell} is outside the grid")

    def _check_endpoints(self, layout: Layout) -> None:
        if layout.number_at(layout.start) != 1:
            raise LayoutValidationError(f"Start {layout.start} is not anchor #1")
        if layout.number_at(layout.goal) != layout.anchor_count:
            raise LayoutValidationError(f"Goal {layout.goal} is not anchor #{layout.anchor_count}")

    def _check_walls(self, layout: Layout) -> None:
        for wall in layout.walls:
            cell = wall.cell
            if not (0 <= cell.x < layout.cols and 0 <= cell.y < layout.rows):
                raise LayoutValidationError(f"Wall {wall} is outside the grid")
            if wall.direction == Direction.RIGHT and cell.x >= layout.cols - 1:
                raise LayoutValidationError(f"Wall {wall} points past the right edge")
            if wall.direction == Direction.DOWN and cell.y >= layout.rows - 1:
                raise LayoutValidationError(f"Wall {wall} points past the bottom edge")
