# slic_pixel/cluster.py
from __future__ import annotations

"""
Iterative SLIC clustering over the pixel lattice.

Each iteration assigns pixels to the nearest centre inside a local window,
then moves every centre to the mean colour and position of its pixels.
Centres that lose all their pixels keep their previous state.
"""

import time
from typing import Callable, Optional, Tuple

import numpy as np

from .core_types import UNASSIGNED, CenterTable, Lab, Labels
from .seeds import grid_points, seed_grid


def assign_labels(
    lab: Lab,
    centers: CenterTable,
    step: int,
    color_weight: float,
    radius: Optional[int] = None,
) -> Tuple[Labels, np.ndarray]:
    """
    Assignment pass.

    Every centre scans the inclusive square of half-width `radius` (default
    `step`) around it, clipped to the image. A pixel moves to a centre only
    when D = (dc / color_weight)^2 + (ds / step)^2 is strictly smaller than its
    current best, so on ties the lower centre index keeps the pixel.

    Returns:
      labels: int32 [H,W], UNASSIGNED where no window reached
      best  : float64 [H,W], best D per pixel (inf where unassigned)
    """
    height, width = lab.shape[:2]
    half = step if radius is None else int(radius)
    labels = np.full((height, width), UNASSIGNED, dtype=np.int32)
    best = np.full((height, width), np.inf, dtype=np.float64)

    inv_weight2 = 1.0 / (float(color_weight) ** 2)
    inv_step2 = 1.0 / (float(step) ** 2)

    for k in range(len(centers)):
        cr = int(centers.rows[k])
        cc = int(centers.cols[k])
        r0, r1 = max(cr - half, 0), min(cr + half + 1, height)
        c0, c1 = max(cc - half, 0), min(cc + half + 1, width)
        if r0 >= r1 or c0 >= c1:
            continue

        diff = lab[r0:r1, c0:c1] - centers.lab[k]
        dc2 = np.sum(diff * diff, axis=-1)
        dr = np.arange(r0, r1, dtype=np.float64)[:, None] - cr
        dcol = np.arange(c0, c1, dtype=np.float64)[None, :] - cc
        ds2 = dr * dr + dcol * dcol
        dist = dc2 * inv_weight2 + ds2 * inv_step2

        window_best = best[r0:r1, c0:c1]
        closer = dist < window_best
        window_best[closer] = dist[closer]
        labels[r0:r1, c0:c1][closer] = k

    return labels, best


def update_centers(
    lab: Lab, labels: Labels, previous: CenterTable, out: Optional[CenterTable] = None
) -> CenterTable:
    """
    Update pass.

    Writes into `out` (allocated when None) from the members of each centre:
    mean Lab colour and floored mean lattice position. A centre without
    members is restored from `previous` with a count of 0. `previous` is
    never modified, so the caller can swap the two tables each iteration.
    """
    size = len(previous)
    if out is None:
        out = CenterTable.empty(size)

    height, width = labels.shape
    flat = labels.reshape(-1)
    member = flat != UNASSIGNED
    idx = flat[member]

    rows_grid, cols_grid = np.divmod(np.arange(height * width, dtype=np.int64), width)
    lab_flat = lab.reshape(-1, 3)[member]

    counts = np.bincount(idx, minlength=size).astype(np.int64)
    row_sum = np.bincount(idx, weights=rows_grid[member], minlength=size)
    col_sum = np.bincount(idx, weights=cols_grid[member], minlength=size)
    lab_sum = np.stack(
        [np.bincount(idx, weights=lab_flat[:, ch], minlength=size) for ch in range(3)],
        axis=1,
    )

    filled = counts > 0
    empty = ~filled
    denom = np.where(filled, counts, 1)

    out.counts[:] = counts
    out.rows[filled] = np.floor(row_sum[filled] / denom[filled]).astype(np.int64)
    out.cols[filled] = np.floor(col_sum[filled] / denom[filled]).astype(np.int64)
    out.lab[filled] = lab_sum[filled] / denom[filled][:, None]

    # Empty clusters stay where they were.
    out.rows[empty] = previous.rows[empty]
    out.cols[empty] = previous.cols[empty]
    out.lab[empty] = previous.lab[empty]
    return out


IterationHook = Callable[[int, CenterTable, Labels, float], None]
SeedHook = Callable[[CenterTable, float], None]


def search_radius(height: int, width: int, step: int) -> int:
    """
    Half-width of each centre's assignment window.

    `step` whenever the seed grid has points. An image too small for the
    grid gets one fallback seed, whose window must span the whole lattice.
    """
    if grid_points(height, width, step):
        return step
    return max(height, width)


def run_clustering(
    lab: Lab,
    step: int,
    iterations: int,
    color_weight: float,
    *,
    on_seeded: Optional[SeedHook] = None,
    on_iteration: Optional[IterationHook] = None,
) -> Tuple[CenterTable, Labels]:
    """
    Seed, then run exactly `iterations` assign/update rounds.

    `on_seeded(centers, seconds)` is called once after seeding and
    `on_iteration(i, centers, labels, seconds)` after each round.
    With zero iterations the seeds are returned with every pixel UNASSIGNED.
    """
    height, width = lab.shape[:2]
    t0 = time.perf_counter()
    current = seed_grid(lab, step)
    if on_seeded is not None:
        on_seeded(current, time.perf_counter() - t0)

    radius = search_radius(height, width, step)
    spare = CenterTable.empty(len(current))
    labels = np.full((height, width), UNASSIGNED, dtype=np.int32)

    for i in range(iterations):
        t0 = time.perf_counter()
        labels, _ = assign_labels(lab, current, step, color_weight, radius=radius)
        updated = update_centers(lab, labels, current, out=spare)
        spare, current = current, updated
        if on_iteration is not None:
            on_iteration(i, current, labels, time.perf_counter() - t0)

    return current, labels


__all__ = [
    "assign_labels",
    "update_centers",
    "search_radius",
    "run_clustering",
    "IterationHook",
    "SeedHook",
]
