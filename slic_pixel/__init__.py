"""
slic_pixel package.

Purpose:
  SLIC superpixel segmentation and block pixelation of RGBA images.
  See pixelate.py for the CLI.

Public API:
  SlicEngine          : per-image engine (convert, cluster, render, snapshot).
  RunParameters       : validated step / iterations / block_size / color_weight.
  SegmentationSnapshot: read-only centres + assignment after a run.
  colour_convert      : sRGB -> CIE Lab (rgb_to_lab, rgb_to_lab_pixel).
  seeds               : grid seeding with low-gradient refinement.
  cluster             : assign / update passes and the iteration loop.
  render              : majority-vote block renderer.
  overlay             : contour mask and centre markers.
  image_io            : Pillow load / save helpers.
  utils               : logging and formatting helpers.

Quick start:
  from slic_pixel import SlicEngine, RunParameters
  engine = SlicEngine(rgba)
  out = engine.pixelate(RunParameters(step=10, iterations=10, block_size=8, color_weight=20.0))
"""

__version__ = "0.1.0"

from . import colour_convert
from . import core_types
from . import seeds
from . import cluster
from . import render
from . import overlay
from . import image_io
from . import utils

from .core_types import (  # noqa: E402
    UNASSIGNED,
    Center,
    InvalidConfigurationError,
    RunParameters,
    SegmentationSnapshot,
)
from .engine import SlicEngine, default_parameters  # noqa: E402

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "seeds",
    "cluster",
    "render",
    "overlay",
    "image_io",
    "utils",
    "UNASSIGNED",
    "Center",
    "InvalidConfigurationError",
    "RunParameters",
    "SegmentationSnapshot",
    "SlicEngine",
    "default_parameters",
]
