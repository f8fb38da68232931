# slic_pixel/utils.py
from __future__ import annotations

"""
Console output and small formatting helpers for slic_pixel.

Everything prints; there is no logger object. The engine only calls these
when built with debug=True, the CLI calls them for per-file reports.
"""

import sys
from typing import Any, Dict, Iterable, List, Tuple

from PIL import Image

_RESAMPLE_BY_NAME: Dict[str, Image.Resampling] = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


# Durations


def format_seconds_compact(seconds: float) -> str:
    """Stage timing, e.g. '3.2ms' for one SLIC round or '1.250s' for a large image."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Whole-file time for the per-image summary; coarser than stage timings."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        return f"{minutes}m {int(round(seconds - 60 * minutes))}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


def pillow_resample_from_name(name: str) -> Image.Resampling:
    # --resample choices; anything else scales with Lanczos
    return _RESAMPLE_BY_NAME.get(name, Image.Resampling.LANCZOS)


# Key/value lines


def _display(value: Any) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Join run statistics into one line.

    Counts get thousands separators (pixel totals), floats drop trailing
    zeros (colour weight 20.0 shows as 20) and flags read on/off.

      >>> key_value_pairs_to_string([("Centres", 1200), ("Weight", 20.0)])
      'Centres: 1,200  Weight: 20'
    """
    out: List[str] = [f"{name}{eq}{_display(value)}" for name, value in pairs]
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    One bracketed settings line per stage, such as the run parameters:
      [run] Step: 10  Iterations: 10  Weight: 20  Block: 8  Jobs: 1
    Goes through debug_log() when debug is set, log() otherwise.
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


# Output streams


def print_banner(title: str) -> None:
    """Header printed before each input file's report."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    print(message, flush=True)


def debug_log(message: str) -> None:
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Non-fatal problem with the current image, e.g. pixels left unassigned."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """A file failed; goes to stderr so folder runs keep going."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


def enable_line_buffered_stdout() -> None:
    """Flush stdout per line so long folder runs show progress as they go."""
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if not callable(reconfig):
        return
    try:
        reconfig(line_buffering=True, write_through=True)
    except (ValueError, OSError):
        pass


__all__ = [
    "format_seconds_compact",
    "format_total_duration_compact",
    "pillow_resample_from_name",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
    "enable_line_buffered_stdout",
]
