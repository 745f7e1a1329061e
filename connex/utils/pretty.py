"""Pretty-print helpers for layouts and trails."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional, Sequence

from ..core.constants import Direction
from ..core.models import Cell, Layout, Wall

if TYPE_CHECKING:
    from ..engine.generator import LayoutResult


EMPTY = "."
VISITED = "o"


def cell_symbol(layout: Layout, cell: Cell, visited: frozenset) -> str:
    number = layout.number_at(cell)
    if number is not None:
        return str(number)
    return VISITED if cell in visited else EMPTY


def format_layout(layout: Layout, trail: Optional[Sequence[Cell]] = None) -> str:
    """Render the layout as ASCII; ``|`` and ``---`` inside the frame are walls."""

    visited = frozenset(trail or ())
    walls = layout.walls
    corner_row = "+" + "+".join("---" for _ in range(layout.cols)) + "+"
    lines = [corner_row]
    for y in range(layout.rows):
        row = "|"
        for x in range(layout.cols):
            cell = Cell(x, y)
            row += f"{cell_symbol(layout, cell, visited):^3}"
            if x < layout.cols - 1:
                row += "|" if Wall(cell, Direction.RIGHT) in walls else " "
        lines.append(row + "|")
        if y < layout.rows - 1:
            parts = [
                "---" if Wall(Cell(x, y), Direction.DOWN) in walls else "   "
                for x in range(layout.cols)
            ]
            lines.append("+" + "+".join(parts) + "+")
    lines.append(corner_row)
    return "\n".join(lines)


def pretty_print_layout(
    layout: Layout,
    trail: Optional[Sequence[Cell]] = None,
    *,
    label: str | None = None,
    stream=None,
) -> None:
    """Print the layout in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_layout(layout, trail), file=stream)


def print_layout_stats(result: LayoutResult, *, stream=None) -> None:
    """Print layout + generation stats for an accepted result."""

    stream = stream or sys.stdout
    layout = result.layout
    print(format_layout(layout), file=stream)

    # --- Grid geometry ---
    total_edges = layout.cols * (layout.rows - 1) + layout.rows * (layout.cols - 1)
    print(file=stream)
    print("--- Layout ---", file=stream)
    print(f"  Size:          {layout.cols} x {layout.rows} ({layout.size} cells)", file=stream)
    print(f"  Checkpoints:   {layout.anchor_count}", file=stream)
    print(f"  Start / goal:  ({layout.start.x},{layout.start.y}) -> ({layout.goal.x},{layout.goal.y})", file=stream)
    if total_edges:
        print(
            f"  Walls:         {len(layout.walls)} of {total_edges} edges "
            f"({len(layout.walls) / total_edges * 100:.0f}%)",
            file=stream,
        )

    # --- Generation ---
    print(file=stream)
    print("--- Generation ---", file=stream)
    print(f"  Template:      {result.template.value}", file=stream)
    if result.transform is not None:
        print(f"  Transform:     {result.transform.describe()}", file=stream)
    print(f"  Attempts:      {result.attempts}", file=stream)
    print(f"  Attempt seed:  {result.seed}", file=stream)
