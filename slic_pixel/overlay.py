# slic_pixel/overlay.py
from __future__ import annotations

"""
Segment contour and centre-marker overlays.

Works from a SegmentationSnapshot only; never touches engine state.
"""

from typing import Dict, Tuple

import numpy as np
from PIL import Image, ImageDraw

from .constants import CENTER_MARKER_SIZE, CENTER_RGBA, CONTOUR_RGBA
from .core_types import Labels, RGBATuple, SegmentationSnapshot, U8Image

# (dr, dc) for the 8-neighbourhood
_PREV_ROW = ((-1, -1), (-1, 0), (-1, 1))
_NEXT = ((0, 1), (1, -1), (1, 0), (1, 1))


def _differs(labels: Labels, dr: int, dc: int) -> np.ndarray:
    """True where the (dr, dc) neighbour is in bounds and has another label."""
    height, width = labels.shape
    out = np.zeros((height, width), dtype=bool)
    r0, r1 = max(-dr, 0), height - max(dr, 0)
    c0, c1 = max(-dc, 0), width - max(dc, 0)
    if r0 >= r1 or c0 >= c1:
        return out
    out[r0:r1, c0:c1] = (
        labels[r0:r1, c0:c1] != labels[r0 + dr : r1 + dr, c0 + dc : c1 + dc]
    )
    return out


def _shift_row(row: np.ndarray, dc: int) -> np.ndarray:
    """out[j] = row[j + dc], False outside the row."""
    out = np.zeros_like(row)
    if dc < 0:
        out[-dc:] = row[:dc]
    elif dc > 0:
        out[:-dc] = row[dc:]
    else:
        out[:] = row
    return out


def contour_mask(labels: Labels) -> np.ndarray:
    """
    Boundary pixels between segments.

    Row-major scan: a pixel joins the contour when at least two of its
    in-bounds 8-neighbours carry a different label and are not already
    contour pixels. Keeps contours one pixel thin.
    """
    height, width = labels.shape
    taken = np.zeros((height, width), dtype=bool)

    # Neighbours after (i, j) in scan order are never taken yet.
    later = np.zeros((height, width), dtype=np.int32)
    for dr, dc in _NEXT:
        later += _differs(labels, dr, dc)
    prev_diff: Dict[Tuple[int, int], np.ndarray] = {
        (dr, dc): _differs(labels, dr, dc) for dr, dc in _PREV_ROW
    }
    left_diff = _differs(labels, 0, -1)

    for i in range(height):
        counts = later[i].copy()
        if i > 0:
            for dr, dc in _PREV_ROW:
                counts += prev_diff[(dr, dc)][i] & ~_shift_row(taken[i - 1], dc)
        row_taken = taken[i]
        left = left_diff[i]
        for j in range(width):
            n = int(counts[j])
            if j > 0 and left[j] and not row_taken[j - 1]:
                n += 1
            row_taken[j] = n >= 2
    return taken


def draw_overlay(
    rgba: U8Image,
    snapshot: SegmentationSnapshot,
    *,
    contours: bool = True,
    centers: bool = True,
    contour_colour: RGBATuple = CONTOUR_RGBA,
    center_colour: RGBATuple = CENTER_RGBA,
    marker_size: int = CENTER_MARKER_SIZE,
) -> U8Image:
    """
    Copy of `rgba` with segment contours and/or centre markers drawn on it.
    Markers are marker_size squares whose top-left corner sits on the centre.
    """
    out = np.array(rgba, dtype=np.uint8, copy=True)
    if out.shape[:2] != (snapshot.height, snapshot.width):
        raise ValueError(
            f"overlay size mismatch: image {out.shape[1]}x{out.shape[0]}, "
            f"snapshot {snapshot.width}x{snapshot.height}"
        )

    if contours:
        out[contour_mask(snapshot.labels)] = np.array(contour_colour, dtype=np.uint8)

    if centers and snapshot.centers:
        im = Image.fromarray(out)
        draw = ImageDraw.Draw(im)
        size = max(1, int(marker_size))
        for c in snapshot.centers:
            draw.rectangle(
                [c.col, c.row, c.col + size - 1, c.row + size - 1],
                fill=tuple(center_colour),
            )
        out = np.array(im, dtype=np.uint8)
    return out


__all__ = ["contour_mask", "draw_overlay"]
