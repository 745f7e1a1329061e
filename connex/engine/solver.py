"""Exact CP-SAT solution finder using OR-Tools."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ortools.sat.python import cp_model

from ..core.models import Cell, Layout
from ..utils.logger import get_logger
from .grid import PuzzleGrid

LOGGER = get_logger(__name__)


def solve_layout(
    layout: Layout,
    timeout: float = 10.0,
    start: Optional[Cell] = None,
    goal: Optional[Cell] = None,
    num_workers: int = 4,
) -> Optional[List[Cell]]:
    """Return a winning trail for ``layout`` or ``None``.

    The trail is modelled as a circuit over every cell plus one dummy node:
    the dummy hands off to ``start`` and receives from ``goal``, so the
    remaining arcs form a Hamiltonian path. Position variables order the
    checkpoints.

    Args:
        layout: Layout to solve.
        timeout: Solver time limit in seconds.
        start: Trail start, defaults to the layout's anchor #1.
        goal: Trail end, defaults to the layout's anchor #K.
        num_workers: CP-SAT search workers.

    Returns:
        The trail as a list of cells, or None if infeasible or timed out.
    """
    grid = PuzzleGrid.for_layout(layout)
    start = start or layout.start
    goal = goal or layout.goal
    cells = grid.cells()
    total = len(cells)
    if not grid.contains(start) or not grid.contains(goal):
        return None
    if total == 1:
        return [start] if start == goal else None
    if start == goal:
        return None

    model = cp_model.CpModel()
    index = grid.index_of
    dummy = total

    # ------------------------------------------------------------------
    # Step 1: Arc literals over unblocked moves
    # ------------------------------------------------------------------
    arc_vars: Dict[Tuple[int, int], cp_model.IntVar] = {}
    circuit = []
    for cell in cells:
        for nxt in grid.neighbors(cell):
            u, v = index(cell), index(nxt)
            if v == index(start) or u == index(goal):
                continue
            lit = model.new_bool_var(f"arc_{u}_{v}")
            arc_vars[(u, v)] = lit
            circuit.append((u, v, lit))
    enter = model.new_bool_var("enter_start")
    leave = model.new_bool_var("leave_goal")
    model.add(enter == 1)
    model.add(leave == 1)
    circuit.append((dummy, index(start), enter))
    circuit.append((index(goal), dummy, leave))
    model.add_circuit(circuit)

    # ------------------------------------------------------------------
    # Step 2: Positions along the trail
    # ------------------------------------------------------------------
    pos = [model.new_int_var(0, total - 1, f"pos_{i}") for i in range(total)]
    model.add(pos[index(start)] == 0)
    model.add(pos[index(goal)] == total - 1)
    for (u, v), lit in arc_vars.items():
        model.add(pos[v] == pos[u] + 1).only_enforce_if(lit)

    # ------------------------------------------------------------------
    # Step 3: Checkpoints first-visited in ascending order
    # ------------------------------------------------------------------
    for earlier, later in zip(layout.anchors, layout.anchors[1:]):
        model.add(pos[index(earlier.cell)] < pos[index(later.cell)])

    # ------------------------------------------------------------------
    # Step 4: Solve
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.num_workers = num_workers

    LOGGER.info(
        "CP-SAT: %d cells, %d arcs, solving (timeout=%0.1fs)...",
        total,
        len(arc_vars),
        timeout,
    )
    status = solver.solve(model)
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        LOGGER.warning("CP-SAT: no solution found (status=%s)", solver.status_name(status))
        return None
    LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)

    # ------------------------------------------------------------------
    # Step 5: Extract trail
    # ------------------------------------------------------------------
    return sorted(cells, key=lambda cell: solver.value(pos[index(cell)]))
