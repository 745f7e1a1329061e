import unittest

from connex.core.constants import Direction
from connex.core.models import Cell, Wall
from connex.engine.grid import PuzzleGrid


class PuzzleGridTests(unittest.TestCase):
    def test_neighbors_respect_bounds(self) -> None:
        grid = PuzzleGrid(3, 2)
        self.assertEqual(list(grid.neighbors(Cell(0, 0))), [Cell(1, 0), Cell(0, 1)])
        self.assertEqual(
            list(grid.neighbors(Cell(1, 1))),
            [Cell(1, 0), Cell(2, 1), Cell(0, 1)],
        )

    def test_walls_block_both_directions(self) -> None:
        grid = PuzzleGrid(2, 2, [Wall(Cell(0, 0), Direction.RIGHT)])
        self.assertTrue(grid.blocked(Cell(0, 0), Cell(1, 0)))
        self.assertTrue(grid.blocked(Cell(1, 0), Cell(0, 0)))
        self.assertFalse(grid.blocked(Cell(0, 0), Cell(0, 1)))
        self.assertNotIn(Cell(1, 0), list(grid.neighbors(Cell(0, 0))))
        self.assertNotIn(Cell(0, 0), list(grid.neighbors(Cell(1, 0))))

    def test_non_adjacent_cells_are_never_blocked(self) -> None:
        grid = PuzzleGrid(3, 3)
        self.assertFalse(grid.blocked(Cell(0, 0), Cell(2, 2)))

    def test_edges_cover_every_interior_edge_once(self) -> None:
        grid = PuzzleGrid(4, 3)
        edges = list(grid.edges())
        self.assertEqual(len(edges), 3 * 3 + 4 * 2)
        self.assertEqual(len(set(edges)), len(edges))
        for edge in edges:
            self.assertTrue(grid.contains(edge.cell))
            self.assertTrue(grid.contains(edge.other))

    def test_cells_are_row_major(self) -> None:
        grid = PuzzleGrid(2, 2)
        self.assertEqual(grid.cells(), [Cell(0, 0), Cell(1, 0), Cell(0, 1), Cell(1, 1)])
        self.assertEqual(grid.index_of(Cell(1, 1)), 3)


if __name__ == "__main__":
    unittest.main()
