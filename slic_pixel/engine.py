# slic_pixel/engine.py
from __future__ import annotations

"""
SLIC pixelation engine.

Owns the original RGBA buffer, its Lab conversion, the centre table and the
cluster assignment for one image. Changing step, iterations or colour weight
re-runs clustering; changing only the block size re-renders.

Not thread-safe. Readers should take snapshot() rather than touching engine
state while a run may be in progress.
"""

import time
from dataclasses import replace
from typing import Any, Optional, Tuple

import numpy as np

from .cluster import run_clustering
from .colour_convert import rgb_to_lab
from .constants import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_COLOR_WEIGHT,
    DEFAULT_ITERATIONS,
    DEFAULT_STEP,
)
from .core_types import (
    UNASSIGNED,
    CenterTable,
    Lab,
    Labels,
    RunParameters,
    SegmentationSnapshot,
    U8Image,
    as_rgba_image,
    frozen_copy,
)
from .render import render_blocks
from .utils import (
    debug_log,
    format_seconds_compact,
    key_value_pairs_to_string,
    print_config_line,
)


def default_parameters() -> RunParameters:
    return RunParameters(
        step=DEFAULT_STEP,
        iterations=DEFAULT_ITERATIONS,
        block_size=DEFAULT_BLOCK_SIZE,
        color_weight=DEFAULT_COLOR_WEIGHT,
    )


class SlicEngine:
    """
    Superpixel segmentation and block rendering for one image.

    Args:
      rgba : uint8 [H,W,4] (or [H,W,3], given opaque alpha)
      debug: print per-stage timings and counts

    Raises:
      InvalidConfigurationError for empty or malformed buffers.
    """

    def __init__(self, rgba: np.ndarray, *, debug: bool = False) -> None:
        self._original: U8Image = frozen_copy(as_rgba_image(rgba))
        self.height, self.width = self._original.shape[:2]
        self.debug = debug

        self._lab: Optional[Lab] = None
        self._params: RunParameters = default_parameters()
        self._centers: Optional[CenterTable] = None
        self._labels: Optional[Labels] = None
        self._clustered_key: Optional[Tuple[int, int, float]] = None

        if debug:
            debug_log(
                key_value_pairs_to_string(
                    [
                        ("Size", f"{self.width}x{self.height}"),
                        ("Pixels", self.width * self.height),
                    ]
                )
            )

    # Buffers

    @property
    def original(self) -> U8Image:
        """Read-only original RGBA buffer."""
        return self._original

    @property
    def lab(self) -> Lab:
        """Read-only Lab buffer, converted on first access."""
        if self._lab is None:
            t0 = time.perf_counter()
            self._lab = frozen_copy(rgb_to_lab(self._original))
            if self.debug:
                debug_log(f"rgb->lab {format_seconds_compact(time.perf_counter() - t0)}")
        return self._lab

    @property
    def params(self) -> RunParameters:
        return self._params

    @property
    def is_clustered(self) -> bool:
        return self._labels is not None

    # Clustering

    @property
    def needs_clustering(self) -> bool:
        """True when the assignment is missing or stale for the current parameters."""
        return self._clustered_key != self._params.clustering_key()

    def compute(self) -> None:
        """Run seeding and the assign/update loop for the current parameters."""
        p = self._params
        if self.debug:
            print_config_line(
                "slic",
                [
                    ("Step", p.step),
                    ("Iterations", p.iterations),
                    ("Weight", float(p.color_weight)),
                    ("Block", p.block_size),
                ],
                debug=True,
            )

        lab = self.lab
        t0 = time.perf_counter()

        def _seeded(centers: CenterTable, secs: float) -> None:
            debug_log(
                key_value_pairs_to_string(
                    [("Seeds", len(centers)), ("Time", format_seconds_compact(secs))]
                )
            )

        def _report(i: int, centers: CenterTable, labels: Labels, secs: float) -> None:
            debug_log(
                key_value_pairs_to_string(
                    [
                        ("Iter", i + 1),
                        ("Empty centres", int(np.count_nonzero(centers.counts == 0))),
                        ("Unassigned", int(np.count_nonzero(labels == UNASSIGNED))),
                        ("Time", format_seconds_compact(secs)),
                    ]
                )
            )

        centers, labels = run_clustering(
            lab,
            int(p.step),
            int(p.iterations),
            float(p.color_weight),
            on_seeded=_seeded if self.debug else None,
            on_iteration=_report if self.debug else None,
        )
        self._centers = centers
        self._labels = labels
        self._clustered_key = p.clustering_key()

        if self.debug:
            debug_log(
                key_value_pairs_to_string(
                    [
                        ("Centres", len(centers)),
                        ("Cluster time", format_seconds_compact(time.perf_counter() - t0)),
                    ]
                )
            )

    def render(self) -> U8Image:
        """Block-render the current assignment with the current block size."""
        if not self.is_clustered or self._centers is None:
            raise RuntimeError("render() called before compute()")
        t0 = time.perf_counter()
        out = render_blocks(
            self._original, self._labels, self._centers, int(self._params.block_size)
        )
        if self.debug:
            debug_log(
                f"render block={self._params.block_size} "
                f"{format_seconds_compact(time.perf_counter() - t0)}"
            )
        return out

    def pixelate(self, params: Optional[RunParameters] = None) -> U8Image:
        """Cluster (unless the assignment is still valid) and render."""
        if params is not None:
            self._params = params
        if self.needs_clustering:
            self.compute()
        return self.render()

    # Parameter changes

    def _replace(self, **changes: Any) -> RunParameters:
        # dataclasses.replace re-runs validation
        return replace(self._params, **changes)

    def change_step(self, step: int) -> U8Image:
        return self.pixelate(self._replace(step=step))

    def change_weight(self, color_weight: float) -> U8Image:
        return self.pixelate(self._replace(color_weight=color_weight))

    def change_iterations(self, iterations: int) -> U8Image:
        return self.pixelate(self._replace(iterations=iterations))

    def change_block_size(self, block_size: int) -> U8Image:
        """Re-render only; the cluster assignment is reused."""
        self._params = self._replace(block_size=block_size)
        return self.render()

    # Read-only export

    def snapshot(self) -> SegmentationSnapshot:
        """Immutable copy of the last run's centres and assignment."""
        if self._centers is None or self._labels is None:
            raise RuntimeError("snapshot() called before compute()")
        return SegmentationSnapshot(
            width=self.width,
            height=self.height,
            centers=self._centers.to_centers(),
            labels=frozen_copy(self._labels),
            params=self._params,
        )


__all__ = ["SlicEngine", "default_parameters"]
