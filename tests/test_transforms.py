import random
import unittest

from connex.core.models import Cell
from connex.engine.templates import serpentine, spiral
from connex.engine.transforms import (
    TransformSpec,
    apply_transform,
    random_transform,
    rotate_cell,
)
from connex.engine.validator import check_path


class TransformTests(unittest.TestCase):
    def test_quarter_turn_on_square_grid(self) -> None:
        self.assertEqual(rotate_cell(Cell(0, 0), 3, 3, 1), Cell(2, 0))
        self.assertEqual(rotate_cell(Cell(2, 0), 3, 3, 1), Cell(2, 2))
        self.assertEqual(rotate_cell(Cell(0, 1), 3, 3, 2), Cell(2, 1))

    def test_four_quarter_turns_are_identity(self) -> None:
        path = spiral(4, 4)
        out = path
        for _ in range(4):
            out = apply_transform(out, 4, 4, TransformSpec(quarter_turns=1))
        self.assertEqual(out, path)

    def test_transforms_keep_paths_hamiltonian_and_walkable(self) -> None:
        rng = random.Random(5)
        for cols, rows in [(5, 5), (6, 3), (2, 7)]:
            base = serpentine(cols, rows)
            for _ in range(25):
                path, spec = random_transform(base, cols, rows, rng)
                with self.subTest(cols=cols, rows=rows, spec=spec.describe()):
                    check_path(path, cols, rows)
                    for a, b in zip(path, path[1:]):
                        self.assertTrue(a.is_adjacent(b))

    def test_rectangles_never_draw_odd_quarter_turns(self) -> None:
        rng = random.Random(11)
        for _ in range(100):
            _, spec = random_transform(serpentine(4, 2), 4, 2, rng)
            self.assertIn(spec.quarter_turns, (0, 2))

    def test_describe(self) -> None:
        spec = TransformSpec(quarter_turns=3, mirror_y=True, reverse=True)
        self.assertEqual(spec.describe(), "rot270+mirror-y+reversed")


if __name__ == "__main__":
    unittest.main()
