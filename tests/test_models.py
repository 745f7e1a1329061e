import unittest

from connex.core.constants import Direction
from connex.core.models import Anchor, Cell, Layout, Wall


class WallTests(unittest.TestCase):
    def test_between_is_canonical_in_both_orders(self) -> None:
        a, b = Cell(2, 1), Cell(3, 1)
        self.assertEqual(Wall.between(a, b), Wall(Cell(2, 1), Direction.RIGHT))
        self.assertEqual(Wall.between(b, a), Wall(Cell(2, 1), Direction.RIGHT))

        up, down = Cell(0, 0), Cell(0, 1)
        self.assertEqual(Wall.between(down, up), Wall(Cell(0, 0), Direction.DOWN))
        self.assertEqual(Wall.between(down, up).other, down)

    def test_between_rejects_non_adjacent_cells(self) -> None:
        with self.assertRaises(ValueError):
            Wall.between(Cell(0, 0), Cell(1, 1))


class LayoutTests(unittest.TestCase):
    def _layout(self) -> Layout:
        anchors = [
            Anchor(3, Cell(2, 2)),
            Anchor(1, Cell(0, 0)),
            Anchor(2, Cell(1, 2)),
        ]
        walls = [Wall(Cell(0, 1), Direction.RIGHT), Wall(Cell(2, 0), Direction.DOWN)]
        return Layout.from_parts(3, 3, anchors, walls)

    def test_from_parts_orders_anchors_and_sets_endpoints(self) -> None:
        layout = self._layout()
        self.assertEqual([anchor.number for anchor in layout.anchors], [1, 2, 3])
        self.assertEqual(layout.start, Cell(0, 0))
        self.assertEqual(layout.goal, Cell(2, 2))
        self.assertEqual(layout.number_at(Cell(1, 2)), 2)
        self.assertIsNone(layout.number_at(Cell(1, 1)))
        self.assertEqual(layout.size, 9)

    def test_from_parts_requires_an_anchor(self) -> None:
        with self.assertRaises(ValueError):
            Layout.from_parts(2, 2, [])

    def test_json_round_trip(self) -> None:
        layout = self._layout()
        payload = layout.to_jsonable()
        self.assertEqual(payload["start"], [0, 0])
        self.assertEqual(payload["goal"], [2, 2])
        self.assertIn({"x": 0, "y": 1, "dir": "right"}, payload["walls"])
        self.assertEqual(Layout.from_jsonable(payload), layout)


if __name__ == "__main__":
    unittest.main()
