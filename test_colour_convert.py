import unittest

import numpy as np

from slic_pixel.colour_convert import rgb_to_lab, rgb_to_lab_pixel, rgb_to_linear


class TestColourConvert(unittest.TestCase):
    def test_white(self):
        l, a, b = rgb_to_lab_pixel(255, 255, 255)
        self.assertAlmostEqual(l, 100.0, delta=0.01)
        self.assertAlmostEqual(a, 0.0, delta=0.05)
        self.assertAlmostEqual(b, 0.0, delta=0.05)

    def test_black(self):
        l, a, b = rgb_to_lab_pixel(0, 0, 0)
        self.assertAlmostEqual(l, 0.0, delta=1e-9)
        self.assertAlmostEqual(a, 0.0, delta=1e-9)
        self.assertAlmostEqual(b, 0.0, delta=1e-9)

    def test_grey_is_neutral(self):
        l, a, b = rgb_to_lab_pixel(128, 128, 128)
        self.assertAlmostEqual(l, 53.59, delta=0.1)
        self.assertAlmostEqual(a, 0.0, delta=0.05)
        self.assertAlmostEqual(b, 0.0, delta=0.05)

    def test_pure_red(self):
        l, a, b = rgb_to_lab_pixel(255, 0, 0)
        self.assertAlmostEqual(l, 53.24, delta=0.1)
        self.assertAlmostEqual(a, 80.09, delta=0.5)
        self.assertAlmostEqual(b, 67.20, delta=0.5)

    def test_linear_segment_below_threshold(self):
        self.assertAlmostEqual(float(rgb_to_linear(np.array(0.04))), 0.04 / 12.92)
        self.assertAlmostEqual(float(rgb_to_linear(np.array(1.0))), 1.0)

    def test_dark_values_use_kappa_branch(self):
        # (1,1,1) lands below epsilon in XYZ
        l, _a, _b = rgb_to_lab_pixel(1, 1, 1)
        self.assertGreater(l, 0.0)
        self.assertLess(l, 1.0)

    def test_vectorised_matches_scalar(self):
        colours = np.array(
            [[0, 0, 0], [255, 255, 255], [12, 200, 99], [250, 3, 140]], dtype=np.uint8
        )
        lab = rgb_to_lab(colours)
        self.assertEqual(lab.shape, (4, 3))
        for row, rgb in zip(lab, colours):
            expected = rgb_to_lab_pixel(*(int(v) for v in rgb))
            np.testing.assert_allclose(row, expected, atol=1e-9)

    def test_rgba_buffer_and_float_input(self):
        rgba = np.zeros((2, 3, 4), dtype=np.uint8)
        rgba[..., 0] = 200
        rgba[..., 3] = 17
        lab_u8 = rgb_to_lab(rgba)
        self.assertEqual(lab_u8.shape, (2, 3, 3))
        lab_f = rgb_to_lab(rgba[..., :3].astype(np.float64) / 255.0)
        np.testing.assert_allclose(lab_u8, lab_f, atol=1e-9)


if __name__ == "__main__":
    unittest.main()
