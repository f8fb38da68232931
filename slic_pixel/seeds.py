# slic_pixel/seeds.py
from __future__ import annotations

"""
Seed placement.

Grid seeds are nudged to the lowest-gradient pixel of their 3x3 neighbourhood
so that no cluster starts on an edge.
"""

from typing import List

import numpy as np

from .core_types import Coord, CenterTable, Lab


def find_local_minimum(lightness: np.ndarray, row: int, col: int) -> Coord:
    """
    Lowest forward-difference gradient in the 3x3 window around (row, col).

    Gradient is |L[r, c+1] - L[r, c]| + |L[r+1, c] - L[r, c]|, so the last row
    and column are never candidates. Scan is row-major and the first strict
    minimum wins. Returns the clamped input when no candidate exists.
    """
    height, width = lightness.shape
    r0, r1 = max(row - 1, 0), min(row + 1, height - 2)
    c0, c1 = max(col - 1, 0), min(col + 1, width - 2)
    if r0 > r1 or c0 > c1:
        return (min(max(row, 0), height - 1), min(max(col, 0), width - 1))

    best = (r0, c0)
    best_grad = np.inf
    for r in range(r0, r1 + 1):
        for c in range(c0, c1 + 1):
            here = float(lightness[r, c])
            grad = abs(float(lightness[r, c + 1]) - here) + abs(
                float(lightness[r + 1, c]) - here
            )
            if grad < best_grad:
                best_grad = grad
                best = (r, c)
    return best


def grid_points(height: int, width: int, step: int) -> List[Coord]:
    """Row-major grid coordinates at spacing `step`, starting at (step, step)."""
    return [
        (r, c) for r in range(step, height, step) for c in range(step, width, step)
    ]


def seed_grid(lab: Lab, step: int) -> CenterTable:
    """
    Build the initial centre table.

    One centre per grid point, refined with find_local_minimum and coloured
    from the Lab buffer. Images no larger than one step in either direction
    get a single centre near the image middle.
    """
    height, width = lab.shape[:2]
    lightness = lab[..., 0]

    points = grid_points(height, width, step)
    if not points:
        points = [(height // 2, width // 2)]

    table = CenterTable.empty(len(points))
    for k, (r, c) in enumerate(points):
        sr, sc = find_local_minimum(lightness, r, c)
        table.rows[k] = sr
        table.cols[k] = sc
        table.lab[k] = lab[sr, sc]
    return table


__all__ = ["find_local_minimum", "grid_points", "seed_grid"]
