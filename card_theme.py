#!/usr/bin/env python3
"""
card_theme.py
Extract a card colour theme (palette + background/foreground pair) from images.

Usage:
  python card_theme.py SRC [--top K] [--step S] [--stride N] [--alpha-threshold A]
                           [--threshold T] [--shuffle N] [--workers W] [--jobs J]
                           [--json] [--debug]

Input:
  An image or a folder of images (png, jpg, jpeg, webp, gif, bmp). Pixels with
  alpha below the threshold are ignored.

Output:
  Per image: the ranked palette with luminance, the selected theme pair with its
  contrast ratio and WCAG rating, and with --shuffle the next N regenerated pairs.
  --json prints one JSON document instead.

Notes:
  Images that cannot be decoded or have no opaque pixels get the default pair and
  a warning; they do not fail the run.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from card_palette.analysis import analyze_pixels
from card_palette.config import AnalysisConfig
from card_palette.constants import IMAGE_EXTENSIONS
from card_palette.contrast import luminance, pair_contrast, wcag_rating
from card_palette.engine import PaletteEngine
from card_palette.errors import EmptyHistogram, PaletteError
from card_palette.image_io import load_pixel_buffer
from card_palette.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    print_config_line,
)

# CLI args & small helpers


def _default_workers() -> int:
    """Leave a core free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 2
    return max(1, n - 1)


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        top / step / stride / alpha_threshold / threshold: analysis knobs (None = default)
        shuffle: number of regenerated pairs to list
        jobs: files processed in parallel
        workers: sampling shards per image
        json: machine-readable output
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="card_theme",
        description="Pick an accessible card colour theme from image(s).",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument("--top", type=int, default=None, help="Palette size (default 10)")
    parser.add_argument(
        "--step", type=int, default=None, help="Quantization step per channel (default 32)"
    )
    parser.add_argument(
        "--stride", type=int, default=None, help="Sample every Nth pixel (default 5)"
    )
    parser.add_argument(
        "--alpha-threshold",
        type=int,
        default=None,
        help="Minimum alpha for a pixel to count (default 128)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Minimum contrast for an in-palette foreground (default 3.0)",
    )
    parser.add_argument(
        "--shuffle", type=int, default=0, help="Also list the next N regenerated pairs"
    )
    parser.add_argument("--jobs", type=int, default=2, help="Files processed in parallel")
    parser.add_argument(
        "--workers", type=int, default=_default_workers(), help="Sampling shards per image"
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AnalysisConfig:
    """Map CLI flags onto AnalysisConfig; unset flags keep the defaults."""
    return AnalysisConfig().replace(
        palette_size=args.top,
        quant_step=args.step,
        stride=args.stride,
        alpha_threshold=args.alpha_threshold,
        contrast_threshold=args.threshold,
    )


# Per-file processing


def _process_single_image(
    src_path: Path,
    config: AnalysisConfig,
    shuffle: int,
    workers: int,
    debug: bool,
) -> Tuple[List[str], Dict[str, Any]]:
    """
    Analyse one image end-to-end through a PaletteEngine:
      decode -> analyse -> commit -> optional regenerate rounds.

    Returns (text lines, JSON record). Nothing is printed here so parallel jobs
    can emit their blocks in input order.
    """
    t_start = time.perf_counter()
    lines: List[str] = [f"\n=== {src_path.name} ==="]
    record: Dict[str, Any] = {"image": str(src_path), "error": None}

    engine = PaletteEngine(config=config, workers=workers)
    generation = engine.image_changed(str(src_path))
    palette: Tuple[str, ...] = ()
    try:
        buffer = load_pixel_buffer(src_path)
        result = analyze_pixels(buffer, config, workers)
        palette = result.palette
        lines.append(
            key_value_pairs_to_string(
                [
                    ("Size", f"{buffer.width}x{buffer.height}"),
                    ("Samples", result.sample_count),
                    ("Opaque", result.opaque_count),
                    ("Bins", len(result.histogram)),
                ]
            )
        )
        if debug:
            lines.append(f"[debug] analysis {format_seconds_compact(result.elapsed)}")
    except PaletteError as e:
        kind = "no analyzable pixels" if isinstance(e, EmptyHistogram) else "decode failed"
        lines.append(f"[warn] colour analysis skipped ({kind}): {e}")
        record["error"] = e.code
    engine.analysis_completed(generation, palette)

    view = engine.view()
    lines.append(f"Palette ({len(view.palette)}):")
    for i, hx in enumerate(view.palette, start=1):
        lines.append(f"  {i:2d}  {hx}  L={luminance(hx):.3f}")

    ratio = pair_contrast(view.pair)
    lines.append(
        f"Theme: background {view.pair.background}  foreground {view.pair.foreground}  "
        f"contrast {ratio:.2f} ({wcag_rating(ratio)})"
    )
    record.update(
        palette=list(view.palette),
        theme=view.pair.as_dict(),
        contrast=round(ratio, 4),
        rating=wcag_rating(ratio),
    )

    shuffled: List[Dict[str, Any]] = []
    if shuffle > 0 and view.can_regenerate:
        lines.append("Shuffle:")
        for i in range(1, shuffle + 1):
            engine.regenerate()
            pair = engine.view().pair
            r = pair_contrast(pair)
            lines.append(
                f"  {i:2d}  {pair.foreground} on {pair.background}  "
                f"contrast {r:.2f} ({wcag_rating(r)})"
            )
            shuffled.append({**pair.as_dict(), "contrast": round(r, 4)})
    record["shuffle"] = shuffled
    engine.close()

    lines.append(f"Total time {format_seconds_compact(time.perf_counter() - t_start)}")
    return lines, record


def _collect_images(src: Path) -> List[Path]:
    """Image files in a folder, sorted by name (case-insensitive)."""
    files = [
        p for p in src.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving input ordering in the output.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    try:
        config = build_config(args)
    except ValueError as e:
        error(str(e))
        return 2

    if not args.json:
        print_config_line(
            "run",
            [
                ("Stride", config.stride),
                ("Step", config.quant_step),
                ("Top", config.palette_size),
                ("Threshold", config.contrast_threshold),
                ("Jobs", args.jobs),
                ("Workers", args.workers),
            ],
            debug=False,
        )

    files = _collect_images(src) if src.is_dir() else [src]
    if args.debug and not args.json:
        debug_log(key_value_pairs_to_string([("Images", len(files))]))

    def _run(p: Path) -> Tuple[List[str], Dict[str, Any]]:
        return _process_single_image(p, config, args.shuffle, args.workers, args.debug)

    if args.jobs <= 1 or len(files) <= 1:
        results = [_run(p) for p in files]
    else:
        with ThreadPoolExecutor(max_workers=args.jobs) as ex:
            futures = [ex.submit(_run, p) for p in files]
            results = [f.result() for f in futures]

    if args.json:
        records = [rec for _lines, rec in results]
        payload: Any = records[0] if (not src.is_dir() and records) else records
        print(json.dumps(payload, indent=2), flush=True)
    else:
        print("\n".join(line for lines, _rec in results for line in lines), flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
