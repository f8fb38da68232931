# slic_pixel/render.py
from __future__ import annotations

"""
Block renderer.

Tiles the image into block_size x block_size blocks (clipped at the right and
bottom edges). Each block takes the original RGBA value found at the centre
of its majority cluster.
"""

import math
from typing import Tuple

import numpy as np

from .constants import EMPTY_BLOCK_RGBA
from .core_types import UNASSIGNED, CenterTable, Labels, U8Image


def block_grid_shape(height: int, width: int, block_size: int) -> Tuple[int, int]:
    """(block rows, block cols) = (ceil(H/bs), ceil(W/bs))."""
    return math.ceil(height / block_size), math.ceil(width / block_size)


def majority_label(block_labels: np.ndarray) -> int:
    """
    Most frequent centre index among assigned pixels, lowest index on ties.
    UNASSIGNED when the block has no assigned pixel.
    """
    valid = block_labels[block_labels != UNASSIGNED]
    if valid.size == 0:
        return UNASSIGNED
    # sized by the largest index present, not the centre count
    tally = np.bincount(valid)
    return int(np.argmax(tally))


def render_blocks(
    original: U8Image,
    labels: Labels,
    centers: CenterTable,
    block_size: int,
) -> U8Image:
    """
    Paint every block with the original pixel under its winning centre.

    Args:
      original  : uint8 [H,W,4] unconverted input
      labels    : int32 [H,W] cluster assignment
      centers   : centre table the labels refer to
      block_size: tile edge in pixels (> 0)

    Returns:
      New uint8 [H,W,4] image. Blocks without assigned pixels are EMPTY_BLOCK_RGBA.
    """
    height, width = labels.shape
    out = np.empty((height, width, 4), dtype=np.uint8)
    n_rows, n_cols = block_grid_shape(height, width, block_size)
    fill_empty = np.array(EMPTY_BLOCK_RGBA, dtype=np.uint8)

    for m in range(n_rows):
        r0 = m * block_size
        r1 = min(r0 + block_size, height)
        for n in range(n_cols):
            c0 = n * block_size
            c1 = min(c0 + block_size, width)
            k = majority_label(labels[r0:r1, c0:c1])
            if k == UNASSIGNED:
                out[r0:r1, c0:c1] = fill_empty
            else:
                out[r0:r1, c0:c1] = original[int(centers.rows[k]), int(centers.cols[k])]
    return out


__all__ = ["block_grid_shape", "majority_label", "render_blocks"]
