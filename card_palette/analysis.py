# card_palette/analysis.py
from __future__ import annotations

"""
Image analysis pipeline: sample -> quantize -> rank.

Exports:
  AnalysisResult
  accumulate_histogram(sampler, step, workers, min_shard) -> Histogram
  analyze_pixels(buffer, config, workers)      -> AnalysisResult (raises EmptyHistogram)
  extract_palette(buffer, config, workers)     -> Palette (raises EmptyHistogram)
  analyze_image(source, config, workers, debug) -> Palette, never raises PaletteError

Notes:
  workers > 1 shards the strided sample positions into contiguous spans,
  builds one histogram per span on a thread pool, and merges them in span
  order. Counts are sums and first-encounter order survives the ordered
  merge, so the palette is identical to the serial run.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import reduce

from .config import DEFAULT_CONFIG, AnalysisConfig
from .core_types import Palette, PixelBuffer
from .errors import EmptyHistogram, PaletteError
from .image_io import ImageSource, load_pixel_buffer
from .quantize import Histogram, histogram_from_array, require_bins
from .ranking import rank_palette
from .sampler import RasterSampler
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string, warn

# below this many sample positions threading costs more than it saves
MIN_SAMPLES_PER_SHARD = 16_384


@dataclass(frozen=True)
class AnalysisResult:
    """Palette plus the intermediate numbers worth logging."""

    palette: Palette
    histogram: Histogram
    sample_count: int  # strided positions visited
    opaque_count: int  # samples that passed the alpha threshold
    elapsed: float  # seconds


def accumulate_histogram(
    sampler: RasterSampler,
    step: int,
    workers: int = 1,
    min_shard: int = MIN_SAMPLES_PER_SHARD,
) -> Histogram:
    """Histogram over the sampler, serial or sharded across a thread pool."""
    parts = min(max(1, int(workers)), max(1, sampler.sample_count // max(1, min_shard)))
    if parts <= 1:
        return histogram_from_array(sampler.opaque_rgb(), step)

    def _one_span(lo: int, hi: int) -> Histogram:
        return histogram_from_array(sampler.opaque_rgb(lo, hi), step)

    spans = sampler.shards(parts)
    with ThreadPoolExecutor(max_workers=parts) as ex:
        futures = [ex.submit(_one_span, lo, hi) for lo, hi in spans]
        partials = [f.result() for f in futures]
    return reduce(Histogram.merge, partials, Histogram())


def analyze_pixels(
    buffer: PixelBuffer,
    config: AnalysisConfig = DEFAULT_CONFIG,
    workers: int = 1,
) -> AnalysisResult:
    """Full pipeline on a decoded buffer. Raises EmptyHistogram."""
    t0 = time.perf_counter()
    sampler = RasterSampler(buffer, config.stride, config.alpha_threshold)
    hist = require_bins(accumulate_histogram(sampler, config.quant_step, workers))
    palette = rank_palette(hist, config.palette_size)
    return AnalysisResult(
        palette=palette,
        histogram=hist,
        sample_count=sampler.sample_count,
        opaque_count=hist.total,
        elapsed=time.perf_counter() - t0,
    )


def extract_palette(
    buffer: PixelBuffer,
    config: AnalysisConfig = DEFAULT_CONFIG,
    workers: int = 1,
) -> Palette:
    return analyze_pixels(buffer, config, workers).palette


def analyze_image(
    source: ImageSource,
    config: AnalysisConfig = DEFAULT_CONFIG,
    workers: int = 1,
    debug: bool = False,
) -> Palette:
    """
    Decode and analyse. DecodeUnavailable and EmptyHistogram both log a
    warning and yield the empty palette.
    """
    try:
        buffer = load_pixel_buffer(source)
        result = analyze_pixels(buffer, config, workers)
    except PaletteError as e:
        kind = "no analyzable pixels" if isinstance(e, EmptyHistogram) else "decode failed"
        warn(f"colour analysis skipped ({kind}): {e}")
        return ()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Size", f"{buffer.width}x{buffer.height}"),
                    ("Samples", result.sample_count),
                    ("Opaque", result.opaque_count),
                    ("Bins", len(result.histogram)),
                    ("Palette", len(result.palette)),
                    ("Time", format_seconds_compact(result.elapsed)),
                ]
            )
        )
    return result.palette


__all__ = [
    "AnalysisResult",
    "MIN_SAMPLES_PER_SHARD",
    "accumulate_histogram",
    "analyze_pixels",
    "extract_palette",
    "analyze_image",
]
