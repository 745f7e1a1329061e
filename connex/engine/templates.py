"""Path templates: orderings that visit every grid cell exactly once.

Every geometric template is a pure ``(cols, rows) -> path`` function. Shapes
that only tile cleanly on some dimensions (odd sides for the 2-cell and 2x2
variants, ring stitching, corner layers on rectangles) finish through
:func:`complete_path`, which drops strays and appends whatever is missing in
serpentine order. Consecutive cells of a template are not required to be grid
neighbours; the solvability verifier is the final judge of every layout.

The ``dfs`` template is the only randomized one. It searches for a real
Hamiltonian walk and may fail, in which case the caller picks another template.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set

from ..core.constants import (
    DEFAULT_DFS_ATTEMPTS,
    DEFAULT_DFS_TIME_LIMIT_MS,
    ORTHOGONAL_STEPS,
    TEMPLATE_WEIGHTS,
    TemplateKind,
)
from ..core.exceptions import TemplateGenerationError
from ..core.models import Cell
from ..utils.logger import get_logger
from .budget import Budget


LOGGER = get_logger(__name__)

Path = List[Cell]

_SPIRAL_HEADINGS = ((1, 0), (0, 1), (-1, 0), (0, -1))


# ----------------------------------------------------------------------
# Backstop
# ----------------------------------------------------------------------
def complete_path(cells: Iterable[Cell], cols: int, rows: int) -> Path:
    """Keep the first in-bounds visit of each cell, then append the rest."""

    seen: Set[Cell] = set()
    path: Path = []
    for cell in cells:
        if not (0 <= cell.x < cols and 0 <= cell.y < rows):
            continue
        if cell in seen:
            continue
        seen.add(cell)
        path.append(cell)
    if len(path) < cols * rows:
        for cell in serpentine(cols, rows):
            if cell not in seen:
                seen.add(cell)
                path.append(cell)
    return path


# ----------------------------------------------------------------------
# Row/column sweeps
# ----------------------------------------------------------------------
def serpentine(cols: int, rows: int) -> Path:
    """Boustrophedon over rows; the canonical completion order."""

    path: Path = []
    for y in range(rows):
        xs = range(cols) if y % 2 == 0 else range(cols - 1, -1, -1)
        path.extend(Cell(x, y) for x in xs)
    return path


def column_serpentine(cols: int, rows: int) -> Path:
    path: Path = []
    for x in range(cols):
        ys = range(rows) if x % 2 == 0 else range(rows - 1, -1, -1)
        path.extend(Cell(x, y) for y in ys)
    return path


def diagonal(cols: int, rows: int) -> Path:
    """Zigzag along anti-diagonals (x + y constant)."""

    cells: Path = []
    for s in range(cols + rows - 1):
        diag = [Cell(x, s - x) for x in range(max(0, s - rows + 1), min(s, cols - 1) + 1)]
        if s % 2:
            diag.reverse()
        cells.extend(diag)
    return complete_path(cells, cols, rows)


def diagonal_stripes(cols: int, rows: int) -> Path:
    """Stripes along main diagonals (x - y constant), top-right corner first."""

    cells: Path = []
    for index, d in enumerate(range(cols - 1, -rows, -1)):
        stripe = [Cell(y + d, y) for y in range(max(0, -d), min(rows - 1, cols - 1 - d) + 1)]
        if index % 2:
            stripe.reverse()
        cells.extend(stripe)
    return complete_path(cells, cols, rows)


# ----------------------------------------------------------------------
# Rings and spirals
# ----------------------------------------------------------------------
def _ring(left: int, top: int, right: int, bottom: int) -> Path:
    """Clockwise boundary of a rectangle, starting at its top-left cell."""

    cells = [Cell(x, top) for x in range(left, right + 1)]
    cells.extend(Cell(right, y) for y in range(top + 1, bottom + 1))
    if top < bottom:
        cells.extend(Cell(x, bottom) for x in range(right - 1, left - 1, -1))
    if left < right:
        cells.extend(Cell(left, y) for y in range(bottom - 1, top, -1))
    return cells


def _rings(cols: int, rows: int) -> Iterator[Path]:
    left, top, right, bottom = 0, 0, cols - 1, rows - 1
    while left <= right and top <= bottom:
        yield _ring(left, top, right, bottom)
        left, top, right, bottom = left + 1, top + 1, right - 1, bottom - 1


def spiral(cols: int, rows: int) -> Path:
    """Clockwise spiral from the top-left corner inwards."""

    path: Path = []
    for ring in _rings(cols, rows):
        path.extend(ring)
    return path


def concentric_rings(cols: int, rows: int) -> Path:
    """Rings from the outside in, alternating the travel direction."""

    cells: Path = []
    for depth, ring in enumerate(_rings(cols, rows)):
        if depth % 2:
            ring.reverse()
        cells.extend(ring)
    return complete_path(cells, cols, rows)


def center_spiral(cols: int, rows: int) -> Path:
    """Square spiral growing out of the centre cell."""

    x, y = (cols - 1) // 2, (rows - 1) // 2
    cells: Path = [Cell(x, y)]
    covered = 1
    step = 1
    heading = 0
    limit = 2 * max(cols, rows) + 2
    while covered < cols * rows and step <= limit:
        for _ in range(2):
            dx, dy = _SPIRAL_HEADINGS[heading % 4]
            for _ in range(step):
                x += dx
                y += dy
                if 0 <= x < cols and 0 <= y < rows:
                    cells.append(Cell(x, y))
                    covered += 1
            heading += 1
        step += 1
    return complete_path(cells, cols, rows)


def corner_spiral(cols: int, rows: int) -> Path:
    """L-shaped layers around the top-left corner, alternating direction."""

    cells: Path = []
    for k in range(max(cols, rows)):
        layer = [Cell(k, y) for y in range(k)]
        layer.append(Cell(k, k))
        layer.extend(Cell(x, k) for x in range(k - 1, -1, -1))
        if k % 2:
            layer.reverse()
        cells.extend(layer)
    return complete_path(cells, cols, rows)


def perimeter_first(cols: int, rows: int) -> Path:
    """The outer ring, then the interior as a serpentine."""

    cells = _ring(0, 0, cols - 1, rows - 1)
    for index, y in enumerate(range(1, rows - 1)):
        xs = range(1, cols - 1) if index % 2 == 0 else range(cols - 2, 0, -1)
        cells.extend(Cell(x, y) for x in xs)
    return complete_path(cells, cols, rows)


# ----------------------------------------------------------------------
# Block and tile variants
# ----------------------------------------------------------------------
def block_serpentine(cols: int, rows: int) -> Path:
    """Serpentine over 2-row bands, zigzagging vertically inside each band."""

    cells: Path = []
    for band, top in enumerate(range(0, rows, 2)):
        xs = range(cols) if band % 2 == 0 else range(cols - 1, -1, -1)
        for step, x in enumerate(xs):
            pair = [Cell(x, top), Cell(x, top + 1)]
            if step % 2:
                pair.reverse()
            cells.extend(pair)
    return complete_path(cells, cols, rows)


def tile_serpentine(cols: int, rows: int) -> Path:
    """Serpentine over 2x2 tiles, each tile walked as a U."""

    cells: Path = []
    for band, ty in enumerate(range(0, rows, 2)):
        if band % 2 == 0:
            for tx in range(0, cols, 2):
                cells.extend(
                    [Cell(tx, ty), Cell(tx, ty + 1), Cell(tx + 1, ty + 1), Cell(tx + 1, ty)]
                )
        else:
            for tx in reversed(range(0, cols, 2)):
                cells.extend(
                    [Cell(tx + 1, ty), Cell(tx + 1, ty + 1), Cell(tx, ty + 1), Cell(tx, ty)]
                )
    return complete_path(cells, cols, rows)


def checkerboard(cols: int, rows: int) -> Path:
    """All light squares in serpentine order, then the dark ones backwards."""

    order = serpentine(cols, rows)
    light = [cell for cell in order if (cell.x + cell.y) % 2 == 0]
    dark = [cell for cell in reversed(order) if (cell.x + cell.y) % 2 == 1]
    return complete_path(light + dark, cols, rows)


def checkerboard_2x2(cols: int, rows: int) -> Path:
    """Checkerboard stripes where each square is a 2x2 block."""

    order = serpentine(cols, rows)
    light = [cell for cell in order if (cell.x // 2 + cell.y // 2) % 2 == 0]
    dark = [cell for cell in reversed(order) if (cell.x // 2 + cell.y // 2) % 2 == 1]
    return complete_path(light + dark, cols, rows)


# ----------------------------------------------------------------------
# Radial variants
# ----------------------------------------------------------------------
def spokes(cols: int, rows: int) -> Path:
    """Column spokes above the centre row left to right, below it right to left."""

    cy = (rows - 1) // 2
    cells: Path = []
    for index, x in enumerate(range(cols)):
        ys = range(cy, -1, -1) if index % 2 == 0 else range(0, cy + 1)
        cells.extend(Cell(x, y) for y in ys)
    for index, x in enumerate(range(cols - 1, -1, -1)):
        ys = range(cy + 1, rows) if index % 2 == 0 else range(rows - 1, cy, -1)
        cells.extend(Cell(x, y) for y in ys)
    return complete_path(cells, cols, rows)


def _bresenham(start: Cell, end: Cell) -> Iterator[Cell]:
    x0, y0, x1, y1 = start.x, start.y, end.x, end.y
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        yield Cell(x0, y0)
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def true_spokes(cols: int, rows: int) -> Path:
    """Bresenham rays from the centre to every border cell, alternating in/out."""

    center = Cell((cols - 1) // 2, (rows - 1) // 2)
    cells: Path = [center]
    seen = {center}
    for index, target in enumerate(_ring(0, 0, cols - 1, rows - 1)):
        ray = [cell for cell in _bresenham(center, target) if cell not in seen]
        if index % 2:
            ray.reverse()
        seen.update(ray)
        cells.extend(ray)
    return complete_path(cells, cols, rows)


# ----------------------------------------------------------------------
# Recursive slab split
# ----------------------------------------------------------------------
def _manhattan(a: Cell, b: Cell) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


def _slab_fill(x0: int, y0: int, w: int, h: int) -> Path:
    cells: Path = []
    if h <= w:
        for index, x in enumerate(range(x0, x0 + w)):
            ys = range(y0, y0 + h) if index % 2 == 0 else range(y0 + h - 1, y0 - 1, -1)
            cells.extend(Cell(x, y) for y in ys)
    else:
        for index, y in enumerate(range(y0, y0 + h)):
            xs = range(x0, x0 + w) if index % 2 == 0 else range(x0 + w - 1, x0 - 1, -1)
            cells.extend(Cell(x, y) for x in xs)
    return cells


def _slab_split(x0: int, y0: int, w: int, h: int) -> Path:
    if w <= 2 or h <= 2:
        return _slab_fill(x0, y0, w, h)
    if w >= h:
        half = w // 2
        first = _slab_split(x0, y0, half, h)
        second = _slab_split(x0 + half, y0, w - half, h)
    else:
        half = h // 2
        first = _slab_split(x0, y0, w, half)
        second = _slab_split(x0, y0 + half, w, h - half)
    if _manhattan(first[-1], second[-1]) < _manhattan(first[-1], second[0]):
        second.reverse()
    return first + second


def hilbert_like(cols: int, rows: int) -> Path:
    """Split the longer side in half until slabs are thin, then sweep them."""

    return complete_path(_slab_split(0, 0, cols, rows), cols, rows)


# ----------------------------------------------------------------------
# Randomized DFS (Warnsdorff ordering)
# ----------------------------------------------------------------------
def _open_neighbors(cell: Cell, cols: int, rows: int, visited: Set[Cell]) -> List[Cell]:
    out: List[Cell] = []
    for dx, dy in ORTHOGONAL_STEPS:
        nxt = cell.shifted(dx, dy)
        if 0 <= nxt.x < cols and 0 <= nxt.y < rows and nxt not in visited:
            out.append(nxt)
    return out


def _warnsdorff_moves(
    cell: Cell, cols: int, rows: int, visited: Set[Cell], rng: random.Random
) -> List[Cell]:
    """Candidate moves ordered so that ``pop()`` yields the fewest-onward one."""

    moves = _open_neighbors(cell, cols, rows, visited)
    rng.shuffle(moves)
    moves.sort(key=lambda nxt: len(_open_neighbors(nxt, cols, rows, visited)), reverse=True)
    return moves


def dfs_path(
    cols: int,
    rows: int,
    rng: random.Random,
    attempts: int = DEFAULT_DFS_ATTEMPTS,
    time_limit_ms: float = DEFAULT_DFS_TIME_LIMIT_MS,
) -> Optional[Path]:
    """Search a Hamiltonian walk from a random start; ``None`` when every attempt fails."""

    total = cols * rows
    for attempt in range(1, attempts + 1):
        budget = Budget(time_limit_ms)
        start = Cell(rng.randrange(cols), rng.randrange(rows))
        path: Path = [start]
        visited = {start}
        stack = [_warnsdorff_moves(start, cols, rows, visited, rng)]
        while stack:
            if len(path) == total:
                return path
            if budget.expired():
                break
            moves = stack[-1]
            if moves:
                nxt = moves.pop()
                visited.add(nxt)
                path.append(nxt)
                stack.append(_warnsdorff_moves(nxt, cols, rows, visited, rng))
            else:
                stack.pop()
                visited.discard(path.pop())
        LOGGER.debug("DFS template attempt %s/%s failed from %s", attempt, attempts, start)
    return None


# ----------------------------------------------------------------------
# Registry and selection
# ----------------------------------------------------------------------
PATH_TEMPLATES: Dict[TemplateKind, Callable[[int, int], Path]] = {
    TemplateKind.SERPENTINE: serpentine,
    TemplateKind.SPIRAL: spiral,
    TemplateKind.COLUMN: column_serpentine,
    TemplateKind.DIAGONAL: diagonal,
    TemplateKind.CENTER: center_spiral,
    TemplateKind.RINGS: concentric_rings,
    TemplateKind.BLOCK: block_serpentine,
    TemplateKind.TILE: tile_serpentine,
    TemplateKind.CHECKERBOARD: checkerboard,
    TemplateKind.CHECKER2: checkerboard_2x2,
    TemplateKind.SPOKES: spokes,
    TemplateKind.TRUESPOKES: true_spokes,
    TemplateKind.CORNER: corner_spiral,
    TemplateKind.PERIMETER: perimeter_first,
    TemplateKind.DIAGSTRIPES: diagonal_stripes,
    TemplateKind.HILBERT: hilbert_like,
}

_UNREGISTERED = set(TemplateKind) - set(PATH_TEMPLATES) - {TemplateKind.AUTO, TemplateKind.DFS}
if _UNREGISTERED:
    raise RuntimeError(f"Template kinds without a generator: {sorted(_UNREGISTERED)}")


def resolve_template(name: Optional[str]) -> TemplateKind:
    """Map a user-supplied template name onto a kind; unknown names become serpentine."""

    if name is None or isinstance(name, TemplateKind):
        return name or TemplateKind.AUTO
    try:
        return TemplateKind(name.strip().lower())
    except ValueError:
        LOGGER.warning("Unknown template '%s', falling back to serpentine", name)
        return TemplateKind.SERPENTINE


def choose_template(rng: random.Random) -> TemplateKind:
    """Weighted random pick over every concrete template."""

    kinds = list(TEMPLATE_WEIGHTS)
    weights = [TEMPLATE_WEIGHTS[kind] for kind in kinds]
    return rng.choices(kinds, weights=weights, k=1)[0]


def build_template_path(
    kind: TemplateKind,
    cols: int,
    rows: int,
    rng: random.Random,
    dfs_attempts: int = DEFAULT_DFS_ATTEMPTS,
    dfs_time_limit_ms: float = DEFAULT_DFS_TIME_LIMIT_MS,
) -> Path:
    """Run one concrete template; raises :class:`TemplateGenerationError` on DFS failure."""

    if kind == TemplateKind.AUTO:
        raise ValueError("Resolve 'auto' with choose_template() before building a path")
    if kind == TemplateKind.DFS:
        path = dfs_path(cols, rows, rng, attempts=dfs_attempts, time_limit_ms=dfs_time_limit_ms)
        if path is None:
            raise TemplateGenerationError(
                f"DFS template found no full path on {cols}x{rows} after {dfs_attempts} attempts"
            )
        return path
    return PATH_TEMPLATES[kind](cols, rows)
