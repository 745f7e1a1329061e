import random
import unittest

from connex.core.constants import Direction
from connex.core.exceptions import LayoutValidationError
from connex.core.models import Cell, Wall
from connex.engine.templates import PATH_TEMPLATES, serpentine
from connex.engine.validator import check_wall_safety
from connex.engine.walls import build_shortcut_walls, is_consecutive, path_positions


class ShortcutWallTests(unittest.TestCase):
    def test_full_probability_walls_every_shortcut(self) -> None:
        path = serpentine(5, 5)
        walls = build_shortcut_walls(path, 5, 5, 1.0, random.Random(1))
        # 40 edges, 24 of them walked by the serpentine.
        self.assertEqual(len(walls), 16)
        check_wall_safety(path, walls)

    def test_zero_probability_places_nothing(self) -> None:
        walls = build_shortcut_walls(serpentine(4, 4), 4, 4, 0.0, random.Random(1))
        self.assertEqual(walls, frozenset())

    def test_walls_never_cut_any_template(self) -> None:
        rng = random.Random(17)
        for kind, template in PATH_TEMPLATES.items():
            path = template(6, 5)
            walls = build_shortcut_walls(path, 6, 5, 0.5, rng)
            with self.subTest(kind=kind.value):
                positions = path_positions(path)
                self.assertFalse(any(is_consecutive(positions, wall) for wall in walls))

    def test_safety_check_rejects_wall_on_path(self) -> None:
        path = serpentine(2, 2)
        with self.assertRaises(LayoutValidationError):
            check_wall_safety(path, [Wall(Cell(0, 0), Direction.RIGHT)])


if __name__ == "__main__":
    unittest.main()
