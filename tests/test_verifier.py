import random
import threading
import unittest

from connex.core.models import Anchor, Cell, Layout
from connex.engine.grid import PuzzleGrid
from connex.engine.session import evaluate_trail
from connex.engine.templates import serpentine
from connex.engine.verifier import search_layout, verify_solvable
from connex.engine.walls import build_shortcut_walls


def every_third_layout() -> Layout:
    """6x6 serpentine with checkpoints on path indices 0, 3, ..., 33."""

    path = serpentine(6, 6)
    anchors = [Anchor(i + 1, path[3 * i]) for i in range(12)]
    return Layout.from_parts(6, 6, anchors)


def walled_serpentine_layout() -> Layout:
    """4x4 serpentine where every shortcut is walled; only one trail remains."""

    path = serpentine(4, 4)
    walls = build_shortcut_walls(path, 4, 4, 1.0, random.Random(0))
    anchors = [Anchor(1, path[0]), Anchor(2, path[5]), Anchor(3, path[15])]
    return Layout.from_parts(4, 4, anchors, walls)


class VerifierTests(unittest.TestCase):
    def assert_walkable(self, layout: Layout, trail) -> None:
        grid = PuzzleGrid.for_layout(layout)
        self.assertEqual(trail[0], layout.start)
        for a, b in zip(trail, trail[1:]):
            self.assertTrue(a.is_adjacent(b))
            self.assertFalse(grid.blocked(a, b))

    def test_every_third_checkpoint_layout_is_solvable_and_deterministic(self) -> None:
        layout = every_third_layout()
        self.assertEqual(layout.goal, Cell(2, 5))

        first = search_layout(layout, 2000)
        second = search_layout(layout, 2000)
        self.assertTrue(first.found)
        self.assertFalse(first.timed_out)
        self.assertEqual(first.trail, second.trail)
        self.assertTrue(evaluate_trail(layout, first.trail))
        self.assert_walkable(layout, first.trail)

    def test_walls_leave_exactly_the_generating_path(self) -> None:
        layout = walled_serpentine_layout()
        outcome = search_layout(layout, 2000)
        self.assertTrue(outcome.found)
        self.assertEqual(list(outcome.trail), serpentine(4, 4))

    def test_unsolvable_layout_is_exhausted_without_timeout(self) -> None:
        # Opposite corners of a 2x2 cannot be joined by a path covering all four cells.
        layout = Layout.from_parts(2, 2, [Anchor(1, Cell(0, 0)), Anchor(2, Cell(1, 1))])
        outcome = search_layout(layout, 2000)
        self.assertFalse(outcome.found)
        self.assertFalse(outcome.timed_out)
        self.assertEqual(outcome.trail, ())

    def test_single_checkpoint_on_larger_grid_is_unsolvable(self) -> None:
        layout = Layout.from_parts(2, 2, [Anchor(1, Cell(0, 0))])
        self.assertFalse(verify_solvable(layout, 1000))

    def test_single_cell_grid(self) -> None:
        layout = Layout.from_parts(1, 1, [Anchor(1, Cell(0, 0))])
        self.assertTrue(verify_solvable(layout, 1000))

    def test_start_carrying_later_number_is_rejected(self) -> None:
        layout = every_third_layout()
        outcome = search_layout(layout, 2000, start=layout.anchors[1].cell)
        self.assertFalse(outcome.found)

    def test_zero_budget_times_out(self) -> None:
        outcome = search_layout(every_third_layout(), 0)
        self.assertFalse(outcome.found)
        self.assertTrue(outcome.timed_out)

    def test_cancel_event_stops_search(self) -> None:
        cancel = threading.Event()
        cancel.set()
        outcome = search_layout(every_third_layout(), 5000, cancel_event=cancel)
        self.assertFalse(outcome.found)
        self.assertTrue(outcome.timed_out)

    def test_found_trails_always_win(self) -> None:
        rng = random.Random(21)
        for _ in range(10):
            path = serpentine(4, 4)
            walls = build_shortcut_walls(path, 4, 4, 0.3, rng)
            indices = sorted(rng.sample(range(16), 4))
            anchors = [Anchor(n + 1, path[index]) for n, index in enumerate(indices)]
            layout = Layout.from_parts(4, 4, anchors, walls)
            outcome = search_layout(layout, 2000)
            if outcome.found:
                self.assertTrue(evaluate_trail(layout, outcome.trail))
                self.assert_walkable(layout, outcome.trail)


if __name__ == "__main__":
    unittest.main()
