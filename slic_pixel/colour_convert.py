# slic_pixel/colour_convert.py
from __future__ import annotations

"""
sRGB to CIE Lab (D65 reference white).

Exports:
  rgb_to_linear(srgb)
  rgb_to_lab(rgb)
  rgb_to_lab_pixel(r, g, b)
"""

from typing import Tuple

import numpy as np

from .constants import (
    LAB_EPSILON,
    LAB_KAPPA,
    REF_WHITE_X,
    REF_WHITE_Y,
    REF_WHITE_Z,
    SRGB_LINEAR_THRESHOLD,
)
from .core_types import Lab


# sRGB to linear


def rgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Returns float64 with the input shape.
    """
    srgb_f = np.asarray(srgb, dtype=np.float64)
    return np.where(
        srgb_f <= SRGB_LINEAR_THRESHOLD,
        srgb_f / 12.92,
        ((srgb_f + 0.055) / 1.055) ** 2.4,
    )


def _lab_companding(t: np.ndarray) -> np.ndarray:
    return np.where(
        t > LAB_EPSILON, np.cbrt(t), (LAB_KAPPA * t + 16.0) / 116.0
    )


# sRGB to Lab


def rgb_to_lab(rgb: np.ndarray) -> Lab:
    """
    sRGB to CIE Lab.
    Integer input is read as 0..255, float input as 0..1. Only the first
    three channels are used, so RGBA buffers can be passed directly.
    Returns float64 (...,3) with L, a, b at offsets 0, 1, 2.
    """
    arr = np.asarray(rgb)
    if np.issubdtype(arr.dtype, np.integer):
        rgb_f = arr[..., :3].astype(np.float64) / 255.0
    else:
        rgb_f = arr[..., :3].astype(np.float64, copy=False)

    r_lin = rgb_to_linear(rgb_f[..., 0])
    g_lin = rgb_to_linear(rgb_f[..., 1])
    b_lin = rgb_to_linear(rgb_f[..., 2])

    # Linear RGB -> XYZ
    X = 0.4124564 * r_lin + 0.3575761 * g_lin + 0.1804375 * b_lin
    Y = 0.2126729 * r_lin + 0.7151522 * g_lin + 0.0721750 * b_lin
    Z = 0.0193339 * r_lin + 0.1191920 * g_lin + 0.9503041 * b_lin

    fx = _lab_companding(X / REF_WHITE_X)
    fy = _lab_companding(Y / REF_WHITE_Y)
    fz = _lab_companding(Z / REF_WHITE_Z)

    out = np.empty(rgb_f.shape[:-1] + (3,), dtype=np.float64)
    out[..., 0] = 116.0 * fy - 16.0
    out[..., 1] = 500.0 * (fx - fy)
    out[..., 2] = 200.0 * (fy - fz)
    return out


def rgb_to_lab_pixel(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """Single 8-bit sRGB triple to an (l, a, b) tuple."""
    lab = rgb_to_lab(np.array([r, g, b], dtype=np.uint8))
    return float(lab[0]), float(lab[1]), float(lab[2])


__all__ = [
    "rgb_to_linear",
    "rgb_to_lab",
    "rgb_to_lab_pixel",
]
