"""Deadline-bounded backtracking search proving a layout is solvable.

The search only looks for revisit-free trails: any winning trail in the game
is one, so this is enough to prove solvability. It runs on an explicit stack
of frames instead of Python recursion so large grids never hit the recursion
limit.

A search that runs out of budget reports ``found=False`` with
``timed_out=True``. Callers treat that like "unsolvable", which may reject a
slow-to-prove layout but never accepts a bad one.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..core.models import Cell, Layout
from ..utils.logger import get_logger
from .budget import Budget
from .grid import PuzzleGrid


LOGGER = get_logger(__name__)


@dataclass
class SearchOutcome:
    found: bool
    trail: Tuple[Cell, ...] = ()
    timed_out: bool = False
    expanded: int = 0
    elapsed_ms: float = 0.0

    def __bool__(self) -> bool:
        return self.found


@dataclass
class SearchState:
    """Mutable state of one search; never shared between calls."""

    visited: Set[Cell]
    trail: List[Cell]
    next_required: Optional[int]
    anchor_count: int

    def advance(self, number: int) -> None:
        self.next_required = number + 1 if number < self.anchor_count else None


@dataclass
class _Frame:
    cell: Cell
    candidates: List[Cell] = field(default_factory=list)
    saved_next: Optional[int] = None


class _Search:
    def __init__(self, layout: Layout, start: Cell, goal: Cell, budget: Budget) -> None:
        self.grid = PuzzleGrid.for_layout(layout)
        self.numbers: Dict[Cell, int] = layout.numbers()
        self.total = self.grid.size
        self.cells = self.grid.cells()
        self.start = start
        self.goal = goal
        self.budget = budget
        self.state = SearchState(
            visited=set(),
            trail=[],
            next_required=1 if layout.anchor_count else None,
            anchor_count=layout.anchor_count,
        )
        self.expanded = 0

    def run(self) -> SearchOutcome:
        if not self.grid.contains(self.start) or not self.grid.contains(self.goal):
            return self._outcome(False)
        start_number = self.numbers.get(self.start)
        if start_number is not None and start_number != 1:
            LOGGER.debug("Start %s carries number %s, rejecting", self.start, start_number)
            return self._outcome(False)

        frames = [self._enter(self.start)]
        if self._complete():
            return self._outcome(True)

        while frames:
            if self.budget.expired():
                return self._outcome(False, timed_out=True)
            frame = frames[-1]
            if not frame.candidates:
                self._leave(frames.pop())
                continue
            nxt = frame.candidates.pop()
            frames.append(self._enter(nxt))
            if self._complete():
                return self._outcome(True)
        return self._outcome(False)

    # ------------------------------------------------------------------
    # Frame handling
    # ------------------------------------------------------------------
    def _enter(self, cell: Cell) -> _Frame:
        state = self.state
        frame = _Frame(cell=cell, saved_next=state.next_required)
        state.visited.add(cell)
        state.trail.append(cell)
        number = self.numbers.get(cell)
        if number is not None:
            state.advance(number)
        self.expanded += 1
        if (
            len(state.visited) < self.total
            and not self._has_dead_end(cell)
            and self._reachable_unvisited(cell) >= self.total - len(state.visited)
        ):
            frame.candidates = self._ordered_candidates(cell)
        return frame

    def _leave(self, frame: _Frame) -> None:
        state = self.state
        state.visited.discard(frame.cell)
        state.trail.pop()
        state.next_required = frame.saved_next

    def _complete(self) -> bool:
        state = self.state
        return (
            len(state.visited) == self.total
            and state.trail[-1] == self.goal
            and state.next_required is None
        )

    # ------------------------------------------------------------------
    # Pruning
    # ------------------------------------------------------------------
    def _allowed(self, cell: Cell) -> bool:
        state = self.state
        if cell in state.visited:
            return False
        if cell == self.goal and len(state.visited) + 1 < self.total:
            return False
        number = self.numbers.get(cell)
        return number is None or number == state.next_required

    def _onward(self, cell: Cell) -> int:
        visited = self.state.visited
        return sum(1 for nxt in self.grid.neighbors(cell) if nxt not in visited)

    def _ordered_candidates(self, cell: Cell) -> List[Cell]:
        """Allowed moves ordered so that ``pop()`` tries the best one first."""

        required = self.state.next_required
        moves = [nxt for nxt in self.grid.neighbors(cell) if self._allowed(nxt)]
        moves.sort(
            key=lambda nxt: (self.numbers.get(nxt) == required and required is not None, -self._onward(nxt)),
        )
        return moves

    def _has_dead_end(self, current: Cell) -> bool:
        """A free non-goal cell needs two ways in or out; with fewer the branch is dead."""

        visited = self.state.visited
        for cell in self.cells:
            if cell in visited or cell == self.goal:
                continue
            exits = sum(1 for nxt in self.grid.neighbors(cell) if nxt == current or nxt not in visited)
            if exits < 2:
                return True
        return False

    def _reachable_unvisited(self, origin: Cell) -> int:
        visited = self.state.visited
        seen = {origin}
        queue = deque([origin])
        count = 0
        while queue:
            cell = queue.popleft()
            for nxt in self.grid.neighbors(cell):
                if nxt in seen or nxt in visited:
                    continue
                seen.add(nxt)
                count += 1
                queue.append(nxt)
        return count

    def _outcome(self, found: bool, timed_out: bool = False) -> SearchOutcome:
        return SearchOutcome(
            found=found,
            trail=tuple(self.state.trail) if found else (),
            timed_out=timed_out,
            expanded=self.expanded,
            elapsed_ms=self.budget.elapsed_ms,
        )


def search_layout(
    layout: Layout,
    budget_ms: float,
    start: Optional[Cell] = None,
    goal: Optional[Cell] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SearchOutcome:
    """Look for a full-coverage, checkpoint-ordered trail ending on ``goal``."""

    budget = Budget(budget_ms, cancel_event)
    search = _Search(layout, start or layout.start, goal or layout.goal, budget)
    outcome = search.run()
    LOGGER.debug(
        "Search %s after %s nodes in %.1fms%s",
        "succeeded" if outcome.found else "failed",
        outcome.expanded,
        outcome.elapsed_ms,
        " (timed out)" if outcome.timed_out else "",
    )
    return outcome


def verify_solvable(
    layout: Layout,
    budget_ms: float = 2_000,
    start: Optional[Cell] = None,
    goal: Optional[Cell] = None,
) -> bool:
    return search_layout(layout, budget_ms, start=start, goal=goal).found
