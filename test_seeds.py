import unittest

import numpy as np

from slic_pixel.seeds import find_local_minimum, grid_points, seed_grid


class TestFindLocalMinimum(unittest.TestCase):
    def test_first_minimum_wins_on_ties(self):
        lightness = np.arange(25, dtype=np.float64).reshape(5, 5)
        # Gradient is 1 + 5 everywhere, so the first scanned pixel wins.
        self.assertEqual(find_local_minimum(lightness, 2, 2), (1, 1))

    def test_moves_off_an_edge(self):
        lightness = np.zeros((5, 5), dtype=np.float64)
        lightness[1, 1] = 50.0
        self.assertEqual(find_local_minimum(lightness, 2, 2), (1, 2))

    def test_unique_minimum(self):
        lightness = np.full((6, 6), 10.0)
        lightness[::2, ::2] = 0.0
        lightness[3, 3] = 7.0
        lightness[3, 4] = 7.0
        lightness[4, 3] = 7.0
        self.assertEqual(find_local_minimum(lightness, 3, 3), (3, 3))

    def test_clamped_at_bottom_right(self):
        lightness = np.random.default_rng(0).random((5, 5))
        # Last row and column are never candidates.
        self.assertEqual(find_local_minimum(lightness, 4, 4), (3, 3))

    def test_clamped_at_top_left(self):
        lightness = np.zeros((4, 4))
        self.assertEqual(find_local_minimum(lightness, 0, 0), (0, 0))

    def test_single_row_returns_input(self):
        lightness = np.zeros((1, 5))
        self.assertEqual(find_local_minimum(lightness, 0, 2), (0, 2))


class TestSeedGrid(unittest.TestCase):
    def test_grid_points_row_major(self):
        self.assertEqual(grid_points(7, 7, 3), [(3, 3), (3, 6), (6, 3), (6, 6)])

    def test_count_twenty_square_step_ten(self):
        table = seed_grid(np.zeros((20, 20, 3)), 10)
        self.assertEqual(len(table), 1)

    def test_count_matches_floor_formula(self):
        for height, width, step in [(21, 31, 10), (50, 37, 6), (9, 9, 2)]:
            table = seed_grid(np.zeros((height, width, 3)), step)
            expected = ((height - 1) // step) * ((width - 1) // step)
            self.assertEqual(len(table), expected, (height, width, step))

    def test_image_smaller_than_step_gets_one_center(self):
        table = seed_grid(np.zeros((3, 4, 3)), 10)
        self.assertEqual(len(table), 1)
        self.assertTrue(0 <= table.rows[0] < 3)
        self.assertTrue(0 <= table.cols[0] < 4)

    def test_seed_colour_taken_from_lab_buffer(self):
        rng = np.random.default_rng(3)
        lab = rng.random((12, 12, 3)) * 50.0
        table = seed_grid(lab, 4)
        for k in range(len(table)):
            np.testing.assert_array_equal(
                table.lab[k], lab[table.rows[k], table.cols[k]]
            )
            self.assertEqual(table.counts[k], 0)


if __name__ == "__main__":
    unittest.main()
