"""
Colour constants and run defaults used across the project.

- CIE Lab reference white and thresholds
- Default run parameters for the engine and CLI
- Overlay colours
"""
from __future__ import annotations

from typing import Tuple

# =========================
# CIE Lab (D65)
# =========================
REF_WHITE_X: float = 0.950456
REF_WHITE_Y: float = 1.0
REF_WHITE_Z: float = 1.088754

LAB_EPSILON: float = 0.008856
LAB_KAPPA: float = 903.3

# sRGB companding threshold
SRGB_LINEAR_THRESHOLD: float = 0.04045

# =========================
# Run defaults
# =========================
DEFAULT_STEP: int = 10
DEFAULT_ITERATIONS: int = 10
DEFAULT_BLOCK_SIZE: int = 8
DEFAULT_COLOR_WEIGHT: float = 20.0

# Fill for blocks with no assigned pixel (transparent black).
EMPTY_BLOCK_RGBA: Tuple[int, int, int, int] = (0, 0, 0, 0)

# =========================
# Overlay
# =========================
CONTOUR_RGBA: Tuple[int, int, int, int] = (255, 255, 255, 255)
CENTER_RGBA: Tuple[int, int, int, int] = (255, 0, 255, 255)
CENTER_MARKER_SIZE: int = 5

# Output naming
OUTPUT_SUFFIX: str = "_pixel"
OVERLAY_SUFFIX: str = "_overlay"

__all__ = [
    "REF_WHITE_X",
    "REF_WHITE_Y",
    "REF_WHITE_Z",
    "LAB_EPSILON",
    "LAB_KAPPA",
    "SRGB_LINEAR_THRESHOLD",
    "DEFAULT_STEP",
    "DEFAULT_ITERATIONS",
    "DEFAULT_BLOCK_SIZE",
    "DEFAULT_COLOR_WEIGHT",
    "EMPTY_BLOCK_RGBA",
    "CONTOUR_RGBA",
    "CENTER_RGBA",
    "CENTER_MARKER_SIZE",
    "OUTPUT_SUFFIX",
    "OVERLAY_SUFFIX",
]
