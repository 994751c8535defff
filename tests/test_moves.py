import unittest

from punto_core.moves import available_coordinates, can_place, exceeds_span, in_window, neighbors
from punto_core.tokens import Color

from tests.helpers import loose


class TestMoves(unittest.TestCase):
    def test_given_coords_when_checking_window_and_neighbors_then_clipped_to_eleven_by_eleven(self):
        self.assertTrue(in_window((5, -5)))
        self.assertFalse(in_window((6, 0)))
        self.assertFalse(in_window((0, -6)))
        self.assertEqual(len(neighbors((0, 0))), 8)
        self.assertEqual(set(neighbors((5, 5))), {(4, 4), (4, 5), (5, 4)})

    def test_given_empty_board_when_checking_placement_then_any_in_window_cell_is_legal(self):
        self.assertTrue(can_place([], 1, 0, 0))
        self.assertTrue(can_place([], 1, -5, 5))
        self.assertFalse(can_place([], 9, 6, 0))
        self.assertFalse(can_place([], 9, 0, -6))

    def test_given_single_token_when_listing_available_then_own_cell_only_for_higher_values(self):
        placed = [loose(Color.RED, 3, 0, 0)]
        around = {(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)} - {(0, 0)}
        self.assertEqual(set(available_coordinates(placed, 3)), around)
        self.assertEqual(set(available_coordinates(placed, 2)), around)
        self.assertEqual(set(available_coordinates(placed, 4)), around | {(0, 0)})

    def test_given_available_list_when_computed_then_sorted_without_duplicates(self):
        placed = [loose(Color.RED, 5, 0, 0), loose(Color.BLUE, 5, 1, 0)]
        cells = available_coordinates(placed, 6)
        self.assertEqual(cells, sorted(set(cells)))
        self.assertIn((0, 0), cells)
        self.assertIn((1, 0), cells)
        self.assertIn((2, 1), cells)

    def test_given_occupied_cell_when_placing_equal_or_lower_value_then_rejected(self):
        placed = [loose(Color.GREEN, 6, 0, 0), loose(Color.GREEN, 2, 1, 0)]
        for value in range(1, 7):
            self.assertFalse(can_place(placed, value, 0, 0), value)
        for value in range(7, 10):
            self.assertTrue(can_place(placed, value, 0, 0), value)
        self.assertFalse(can_place(placed, 2, 1, 0))
        self.assertTrue(can_place(placed, 3, 1, 0))

    def test_given_cell_not_adjacent_when_placing_then_rejected(self):
        placed = [loose(Color.RED, 1, 0, 0)]
        self.assertFalse(can_place(placed, 9, 2, 0))
        self.assertFalse(can_place(placed, 9, -2, 2))

    def test_given_row_spanning_six_cells_when_extending_then_rejected(self):
        placed = [loose(Color.YELLOW, 1, x, 0) for x in range(-2, 4)]  # x in [-2, 3]
        self.assertFalse(exceeds_span(placed[:-1], (3, 0)))
        self.assertTrue(exceeds_span(placed, (4, 0)))
        self.assertTrue(exceeds_span(placed, (-3, 1)))
        self.assertFalse(can_place(placed, 5, 4, 0))
        self.assertFalse(can_place(placed, 5, -3, 0))
        self.assertTrue(can_place(placed, 5, 3, 1))
        self.assertNotIn((4, 0), available_coordinates(placed, 5))
        self.assertNotIn((-3, -1), available_coordinates(placed, 5))

    def test_given_tall_column_when_extending_on_another_column_then_cap_is_board_wide(self):
        placed = [loose(Color.BLUE, 1, 0, y) for y in range(0, 6)]  # y in [0, 5]
        placed.append(loose(Color.BLUE, 1, 1, 0))
        # Column x=1 would only hold two tokens, but the whole board would cover y in [-1, 5].
        self.assertFalse(can_place(placed, 4, 1, -1))
        self.assertTrue(can_place(placed, 4, 1, 1))


if __name__ == '__main__':
    unittest.main(verbosity=2)
