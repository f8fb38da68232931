import unittest

import numpy as np

from slic_pixel.core_types import Center, RunParameters, SegmentationSnapshot
from slic_pixel.overlay import contour_mask, draw_overlay


def _snapshot(labels, centers):
    height, width = labels.shape
    return SegmentationSnapshot(
        width=width,
        height=height,
        centers=tuple(centers),
        labels=labels,
        params=RunParameters(step=2, iterations=1, block_size=2, color_weight=1.0),
    )


def _split_labels(height, width, split):
    labels = np.zeros((height, width), dtype=np.int32)
    labels[:, split:] = 1
    return labels


class TestContourMask(unittest.TestCase):
    def test_uniform_labels_have_no_contour(self):
        self.assertFalse(np.any(contour_mask(np.zeros((5, 7), dtype=np.int32))))

    def test_vertical_boundary_is_one_pixel_thin(self):
        mask = contour_mask(_split_labels(6, 6, 3))
        expected = np.zeros((6, 6), dtype=bool)
        expected[:, 2] = True
        np.testing.assert_array_equal(mask, expected)

    def test_horizontal_boundary(self):
        labels = _split_labels(6, 6, 3).T.copy()
        mask = contour_mask(labels)
        self.assertTrue(np.all(mask[2, :]))
        self.assertEqual(int(mask.sum()), 6)

    def test_single_pixel_island(self):
        labels = np.zeros((5, 5), dtype=np.int32)
        labels[2, 2] = 1
        mask = contour_mask(labels)
        # Neighbours see only one differing pixel each; the island sees eight.
        self.assertTrue(mask[2, 2])
        self.assertEqual(int(mask.sum()), 1)


class TestDrawOverlay(unittest.TestCase):
    def setUp(self):
        self.rgba = np.zeros((6, 6, 4), dtype=np.uint8)
        self.rgba[..., 3] = 255
        centers = [
            Center(row=1, col=1, l=0.0, a=0.0, b=0.0, pixel_count=18),
            Center(row=4, col=4, l=0.0, a=0.0, b=0.0, pixel_count=18),
        ]
        self.snapshot = _snapshot(_split_labels(6, 6, 3), centers)

    def test_contours_only(self):
        out = draw_overlay(self.rgba, self.snapshot, centers=False)
        np.testing.assert_array_equal(out[0, 2], [255, 255, 255, 255])
        np.testing.assert_array_equal(out[0, 0], [0, 0, 0, 255])

    def test_centre_markers(self):
        out = draw_overlay(
            self.rgba,
            self.snapshot,
            contours=False,
            center_colour=(10, 20, 30, 255),
            marker_size=2,
        )
        for r, c in [(1, 1), (2, 2), (4, 4), (5, 5)]:
            np.testing.assert_array_equal(out[r, c], [10, 20, 30, 255])
        np.testing.assert_array_equal(out[0, 0], [0, 0, 0, 255])

    def test_input_not_mutated(self):
        before = self.rgba.copy()
        draw_overlay(self.rgba, self.snapshot)
        np.testing.assert_array_equal(self.rgba, before)

    def test_size_mismatch(self):
        with self.assertRaises(ValueError):
            draw_overlay(np.zeros((3, 3, 4), dtype=np.uint8), self.snapshot)


if __name__ == "__main__":
    unittest.main()
