import random
import unittest

from connex.engine.anchors import assign_anchor_numbers, pick_indices_with_min_gap, place_anchors
from connex.engine.templates import serpentine


class AnchorPlacementTests(unittest.TestCase):
    def test_strict_gap_falls_back_to_filling(self) -> None:
        # Twelve picks seven apart cannot fit on 36 cells.
        for seed in range(20):
            picks = pick_indices_with_min_gap(36, 12, 7, random.Random(seed))
            self.assertEqual(len(picks), 12)
            self.assertEqual(len(set(picks)), 12)
            self.assertEqual(picks, sorted(picks))
            self.assertTrue(all(0 <= index < 36 for index in picks))

    def test_satisfiable_gap_is_honoured(self) -> None:
        for seed in range(20):
            picks = pick_indices_with_min_gap(100, 2, 10, random.Random(seed))
            self.assertGreaterEqual(picks[1] - picks[0], 10)

    def test_numbers_are_a_cyclic_shift_of_path_order(self) -> None:
        path = serpentine(4, 4)
        indices = [0, 3, 7, 12, 15]
        anchors = assign_anchor_numbers(path, indices, random.Random(2))
        self.assertEqual([anchor.number for anchor in anchors], [1, 2, 3, 4, 5])

        by_index = {path.index(anchor.cell): anchor.number for anchor in anchors}
        numbers = [by_index[index] for index in indices]
        first = numbers.index(1)
        rotated = numbers[first:] + numbers[:first]
        self.assertEqual(rotated, [1, 2, 3, 4, 5])

    def test_anchor_cells_are_unique(self) -> None:
        path = serpentine(6, 6)
        anchors = place_anchors(path, 12, 3, random.Random(8))
        cells = [anchor.cell for anchor in anchors]
        self.assertEqual(len(set(cells)), 12)

    def test_single_anchor(self) -> None:
        anchors = place_anchors(serpentine(1, 1), 1, 0, random.Random(0))
        self.assertEqual(len(anchors), 1)
        self.assertEqual(anchors[0].number, 1)


if __name__ == "__main__":
    unittest.main()
