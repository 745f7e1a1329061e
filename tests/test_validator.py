import unittest

from connex.core.constants import Direction
from connex.core.exceptions import LayoutValidationError
from connex.core.models import Anchor, Cell, Layout, Wall
from connex.engine.validator import LayoutValidator, check_path


class LayoutValidatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = LayoutValidator()

    def test_accepts_well_formed_layout(self) -> None:
        layout = Layout.from_parts(
            3,
            2,
            [Anchor(1, Cell(0, 0)), Anchor(2, Cell(2, 1))],
            [Wall(Cell(1, 0), Direction.DOWN)],
        )
        result = self.validator.validate(layout)
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])

    def test_rejects_repeated_numbers(self) -> None:
        layout = Layout(
            cols=2,
            rows=2,
            anchors=(Anchor(1, Cell(0, 0)), Anchor(1, Cell(1, 0))),
            walls=frozenset(),
            start=Cell(0, 0),
            goal=Cell(1, 0),
        )
        result = self.validator.validate(layout)
        self.assertFalse(result.ok)
        self.assertEqual(len(result.messages), 1)

    def test_rejects_start_that_is_not_first_number(self) -> None:
        layout = Layout(
            cols=2,
            rows=2,
            anchors=(Anchor(1, Cell(0, 0)), Anchor(2, Cell(1, 0))),
            walls=frozenset(),
            start=Cell(1, 0),
            goal=Cell(1, 0),
        )
        self.assertFalse(self.validator.validate(layout).ok)

    def test_rejects_wall_past_the_edge(self) -> None:
        layout = Layout.from_parts(
            2, 2, [Anchor(1, Cell(0, 0)), Anchor(2, Cell(0, 1))], [Wall(Cell(1, 0), Direction.RIGHT)]
        )
        self.assertFalse(self.validator.validate(layout).ok)

    def test_rejects_anchor_outside_grid(self) -> None:
        layout = Layout.from_parts(2, 2, [Anchor(1, Cell(0, 0)), Anchor(2, Cell(4, 4))])
        self.assertFalse(self.validator.validate(layout).ok)


class CheckPathTests(unittest.TestCase):
    def test_rejects_short_duplicate_and_stray_paths(self) -> None:
        with self.assertRaises(LayoutValidationError):
            check_path([Cell(0, 0), Cell(1, 0)], 2, 2)
        with self.assertRaises(LayoutValidationError):
            check_path([Cell(0, 0), Cell(1, 0), Cell(1, 0), Cell(0, 1)], 2, 2)
        with self.assertRaises(LayoutValidationError):
            check_path([Cell(0, 0), Cell(1, 0), Cell(1, 1), Cell(2, 1)], 2, 2)


if __name__ == "__main__":
    unittest.main()
