# slic_pixel/core_types.py
from __future__ import annotations

"""
Core type aliases, value objects, and validation helpers.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBATuple = Tuple[int, int, int, int]
Coord = Tuple[int, int]  # (row, col)

U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
Lab = NDArray[np.float64]  # (..., 3) CIE Lab
Labels = NDArray[np.int32]  # (H, W) centre index or UNASSIGNED

UNASSIGNED = -1


class InvalidConfigurationError(ValueError):
    """Raised for unusable image buffers or run parameters."""


# Value objects


@dataclass(frozen=True)
class RunParameters:
    """Parameters of one clustering run. Validated on construction."""

    step: int
    iterations: int
    block_size: int
    color_weight: float

    def __post_init__(self) -> None:
        for name in ("step", "iterations", "block_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidConfigurationError(
                    f"{name} must be an integer, got {value!r}"
                )
        if self.step <= 0:
            raise InvalidConfigurationError(f"step must be > 0, got {self.step}")
        if self.block_size <= 0:
            raise InvalidConfigurationError(
                f"block_size must be > 0, got {self.block_size}"
            )
        if self.iterations < 0:
            raise InvalidConfigurationError(
                f"iterations must be >= 0, got {self.iterations}"
            )
        weight = float(self.color_weight)
        if not np.isfinite(weight) or weight <= 0.0:
            raise InvalidConfigurationError(
                f"color_weight must be a positive number, got {self.color_weight!r}"
            )

    def clustering_key(self) -> Tuple[int, int, float]:
        """Fields whose change invalidates the current assignment."""
        return (int(self.step), int(self.iterations), float(self.color_weight))


@dataclass(frozen=True)
class Center:
    """One cluster centre: lattice position, mean Lab colour, member count."""

    row: int
    col: int
    l: float  # noqa: E741
    a: float
    b: float
    pixel_count: int


@dataclass
class CenterTable:
    """
    Column-wise centre storage used while clustering.

    rows, cols : int64 [K]
    lab        : float64 [K,3]
    counts     : int64 [K]
    """

    rows: np.ndarray
    cols: np.ndarray
    lab: np.ndarray
    counts: np.ndarray

    @classmethod
    def empty(cls, size: int) -> "CenterTable":
        return cls(
            rows=np.zeros((size,), dtype=np.int64),
            cols=np.zeros((size,), dtype=np.int64),
            lab=np.zeros((size, 3), dtype=np.float64),
            counts=np.zeros((size,), dtype=np.int64),
        )

    def __len__(self) -> int:
        return int(self.rows.shape[0])

    def copy(self) -> "CenterTable":
        return CenterTable(
            rows=self.rows.copy(),
            cols=self.cols.copy(),
            lab=self.lab.copy(),
            counts=self.counts.copy(),
        )

    def to_centers(self) -> Tuple[Center, ...]:
        return tuple(
            Center(
                row=int(self.rows[k]),
                col=int(self.cols[k]),
                l=float(self.lab[k, 0]),
                a=float(self.lab[k, 1]),
                b=float(self.lab[k, 2]),
                pixel_count=int(self.counts[k]),
            )
            for k in range(len(self))
        )


@dataclass(frozen=True)
class SegmentationSnapshot:
    """
    Immutable view of a finished clustering run.

    Handed to overlay drawing and other readers instead of live engine state.
    `labels` is a read-only copy.
    """

    width: int
    height: int
    centers: Tuple[Center, ...]
    labels: Labels
    params: RunParameters

    def cluster_at(self, row: int, col: int) -> int:
        """Centre index owning (row, col), or UNASSIGNED."""
        return int(self.labels[row, col])

    def center_of(self, row: int, col: int) -> Optional[Center]:
        k = self.cluster_at(row, col)
        return None if k == UNASSIGNED else self.centers[k]

    @property
    def unassigned_count(self) -> int:
        return int(np.count_nonzero(self.labels == UNASSIGNED))


# Validation helpers


def as_rgba_image(image: np.ndarray) -> U8Image:
    """
    Validate a uint8 (H,W,3 or 4) image and return an RGBA copy.
    RGB input gets an opaque alpha channel.
    """
    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        raise InvalidConfigurationError(f"expected uint8 image, got {arr.dtype}")
    if arr.ndim != 3 or arr.shape[-1] not in (3, 4):
        raise InvalidConfigurationError(
            f"expected (H,W,3) or (H,W,4) image, got shape {arr.shape}"
        )
    height, width = int(arr.shape[0]), int(arr.shape[1])
    if height <= 0 or width <= 0:
        raise InvalidConfigurationError(
            f"image must be non-empty, got {width}x{height}"
        )
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[..., :3] = arr[..., :3]
    out[..., 3] = arr[..., 3] if arr.shape[-1] == 4 else 255
    return out


def frozen_copy(arr: np.ndarray) -> np.ndarray:
    """Copy an array and mark the copy read-only."""
    out = np.array(arr, copy=True)
    out.flags.writeable = False
    return out


__all__ = [
    # aliases
    "RGBATuple",
    "Coord",
    "U8Image",
    "Lab",
    "Labels",
    "UNASSIGNED",
    # errors
    "InvalidConfigurationError",
    # value objects
    "RunParameters",
    "Center",
    "CenterTable",
    "SegmentationSnapshot",
    # helpers
    "as_rgba_image",
    "frozen_copy",
]
