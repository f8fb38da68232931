#!/usr/bin/env python3
"""
pixelate.py
Pixelate RGBA images with SLIC superpixels and majority-vote blocks.

Usage:
  python pixelate.py INPUT --step N --iterations N --weight W --block-size N
                     [--outdir DIR] [--height H] [--resample NAME]
                     [--contours] [--centers] [--jobs N] [--debug]

Pipeline:
  load -> optional resize -> sRGB->Lab -> grid seeds -> SLIC iterations
  -> block render -> save PNG (+ optional overlay PNG)

Input:
  Any Pillow-readable image, or a folder of them. Alpha is carried through:
  each block copies all four channels of the pixel under its winning centre.

Output:
  <stem>_pixel.png next to INPUT (or in --outdir). With --contours and/or
  --centers also <stem>_overlay.png drawn over the original image.
"""

from __future__ import annotations

import argparse
import io
import sys
import time
from contextlib import redirect_stderr, redirect_stdout
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from slic_pixel.constants import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_COLOR_WEIGHT,
    DEFAULT_ITERATIONS,
    DEFAULT_STEP,
    OUTPUT_SUFFIX,
    OVERLAY_SUFFIX,
)
from slic_pixel.core_types import InvalidConfigurationError, RunParameters
from slic_pixel.engine import SlicEngine
from slic_pixel.image_io import (
    is_image_file,
    load_image_rgba,
    resize_rgba_height,
    save_image_rgba,
)
from slic_pixel.overlay import draw_overlay
from slic_pixel.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    pillow_resample_from_name,
    print_banner,
    print_config_line,
    warn,
)

IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif"}

# CLI args


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a value > 0, got {value}")
    return value


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a value >= 0, got {value}")
    return value


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {text!r}") from None
    if not np.isfinite(value) or value <= 0.0:
        raise argparse.ArgumentTypeError(f"expected a value > 0, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixelate",
        description="Pixelate image(s) with SLIC superpixels and block majority vote.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--step",
        type=_positive_int,
        default=DEFAULT_STEP,
        help="Seed grid spacing and search half-width in pixels.",
    )
    parser.add_argument(
        "--iterations",
        type=_non_negative_int,
        default=DEFAULT_ITERATIONS,
        help="Assign/update rounds.",
    )
    parser.add_argument(
        "--weight",
        type=_positive_float,
        default=DEFAULT_COLOR_WEIGHT,
        help="Colour weight. Larger favours compact, grid-like segments.",
    )
    parser.add_argument(
        "--block-size",
        type=_positive_int,
        default=DEFAULT_BLOCK_SIZE,
        help="Output block edge in pixels.",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Resize so height<=H before clustering. Omit for no resize.",
    )
    parser.add_argument(
        "--resample",
        choices=["nearest", "bilinear", "bicubic", "lanczos"],
        default="lanczos",
        help="Scaling filter used with --height.",
    )
    parser.add_argument(
        "--contours", action="store_true", help="Write an overlay with segment contours"
    )
    parser.add_argument(
        "--centers", action="store_true", help="Write an overlay with centre markers"
    )
    parser.add_argument(
        "--jobs", type=_positive_int, default=1, help="Files processed in parallel"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose run details")
    return parser


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def params_from_args(args: argparse.Namespace) -> RunParameters:
    return RunParameters(
        step=args.step,
        iterations=args.iterations,
        block_size=args.block_size,
        color_weight=args.weight,
    )


def output_paths(src_path: Path, outdir: Optional[Path]) -> Tuple[Path, Path]:
    base = outdir if outdir is not None else src_path.parent
    return (
        base / f"{src_path.stem}{OUTPUT_SUFFIX}.png",
        base / f"{src_path.stem}{OVERLAY_SUFFIX}.png",
    )


def is_output_artifact(path: Path) -> bool:
    return path.stem.endswith(OUTPUT_SUFFIX) or path.stem.endswith(OVERLAY_SUFFIX)


# Per-file processing


def process_single_image(
    src_path: Path, args: argparse.Namespace, params: RunParameters
) -> Path:
    """
    Process one image end-to-end:
      load -> optional resize -> cluster -> render -> save -> report.
    Returns the written pixelated PNG path.
    """
    t_start = time.perf_counter()
    out_path, overlay_path = output_paths(src_path, args.outdir)
    print_banner(src_path.name)

    rgba = load_image_rgba(src_path)
    height0, width0 = rgba.shape[:2]
    rgba = resize_rgba_height(rgba, args.height, pillow_resample_from_name(args.resample))
    height, width = rgba.shape[:2]
    if args.debug:
        pairs = [("Loaded", f"{width0}x{height0}")]
        if (width, height) != (width0, height0):
            pairs.append(("Resized", f"{width}x{height}"))
        debug_log(key_value_pairs_to_string(pairs))
    t_loaded = time.perf_counter()

    engine = SlicEngine(rgba, debug=args.debug)
    result = engine.pixelate(params)
    t_mapped = time.perf_counter()

    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)
    written = save_image_rgba(out_path, result)

    snapshot = engine.snapshot()
    if args.contours or args.centers:
        overlay = draw_overlay(
            rgba, snapshot, contours=args.contours, centers=args.centers
        )
        overlay_written = save_image_rgba(overlay_path, overlay)
        log(f"Wrote {overlay_written.name}")
    t_saved = time.perf_counter()

    log(
        f"Wrote {written.name} | size={width}x{height} | centres={len(snapshot.centers)}"
    )
    if snapshot.unassigned_count:
        warn(f"Unassigned pixels: {snapshot.unassigned_count:,}")

    if args.debug:
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"slic={format_seconds_compact(t_mapped - t_loaded)}, "
            f"save={format_seconds_compact(t_saved - t_mapped)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")
    return written


def _process_one_live(
    path: Path, args: argparse.Namespace, params: RunParameters
) -> bool:
    """Process a single file and stream logs to stdout. Returns success."""
    try:
        process_single_image(path, args, params)
    except (OSError, InvalidConfigurationError) as e:
        error(f"{path.name}: {e}")
        return False
    return True


def _process_one_captured(
    path: Path, args: argparse.Namespace, params: RunParameters
) -> Tuple[str, str, bool]:
    """
    Process a single file with stdout and stderr capture.

    Runs in a worker process in folder mode with --jobs > 1, so the redirect
    only touches that worker's streams. The parent prints the captured text
    in input order.
    """
    out_buf, err_buf = io.StringIO(), io.StringIO()
    with redirect_stdout(out_buf), redirect_stderr(err_buf):
        ok = _process_one_live(path, args, params)
    return out_buf.getvalue(), err_buf.getvalue(), ok


def list_images(folder: Path) -> List[Path]:
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not is_output_artifact(p)
        and is_image_file(p)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering. Returns the exit status.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    try:
        params = params_from_args(args)
    except InvalidConfigurationError as e:
        error(str(e))
        return 2

    print_config_line(
        "run",
        [
            ("Step", params.step),
            ("Iterations", params.iterations),
            ("Weight", float(params.color_weight)),
            ("Block", params.block_size),
            ("Jobs", args.jobs),
        ],
        debug=False,
    )

    src = args.src
    if not src.exists():
        print(f"error: not found: {src}", file=sys.stderr, flush=True)
        return 2

    if not src.is_dir():
        return 0 if _process_one_live(src, args, params) else 1

    files = list_images(src)
    if args.debug:
        debug_log(key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)]))

    if args.jobs == 1:
        results = [_process_one_live(p, args, params) for p in files]
        return 0 if all(results) else 1

    workers = min(args.jobs, max(len(files), 1))
    ok_all = True
    with ProcessPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(_process_one_captured, p, args, params) for p in files]
        for fut in futures:
            out_text, err_text, ok = fut.result()
            print(out_text, end="", flush=True)
            if err_text:
                print(err_text, end="", file=sys.stderr, flush=True)
            ok_all = ok_all and ok
    return 0 if ok_all else 1


if __name__ == "__main__":
    sys.exit(main())
