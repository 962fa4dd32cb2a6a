# card_palette/quantize.py
from __future__ import annotations

"""
Colour quantizer.

Exports:
  quantize_channel(value, step)        -> int, round-half-up to a multiple of step
  quantize_rgb(rgb_u8, step)           -> int32 [N,3]
  Histogram                            : insertion-ordered bin -> count mapping
  histogram_from_samples(samples, step) -> Histogram (pure Python, lazy input)
  histogram_from_array(rgb_u8, step)   -> Histogram (vectorised)
  require_bins(hist)                   -> hist, raises EmptyHistogram when empty
  build_histogram(sampler, step)       -> Histogram, raises EmptyHistogram

Notes:
  With step 32 each channel lands on one of 0, 32, ..., 256 (9 levels, 729
  bins). The 256 level is kept in the key; conversion to a 24-bit colour
  clamps it later.
"""

from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

import numpy as np

from .constants import QUANT_STEP
from .core_types import BinKey, RGBTuple, U8RGB
from .errors import EmptyHistogram


def quantize_channel(value: int, step: int = QUANT_STEP) -> int:
    """floor(value / step + 0.5) * step, in integer arithmetic."""
    return ((2 * int(value) + step) // (2 * step)) * step


def quantize_rgb(rgb_u8: U8RGB, step: int = QUANT_STEP) -> np.ndarray:
    """Vectorised quantize_channel over a (N, 3) array. Returns int32 [N,3]."""
    arr = np.asarray(rgb_u8, dtype=np.int32)
    return ((2 * arr + step) // (2 * step)) * step


class Histogram:
    """Bin -> count, iterated in first-encounter order."""

    def __init__(self, counts: Optional[Mapping[BinKey, int]] = None) -> None:
        self._counts: Dict[BinKey, int] = {}
        if counts:
            for key, n in counts.items():
                self.add(key, n)

    def add(self, key: BinKey, n: int = 1) -> None:
        k = (int(key[0]), int(key[1]), int(key[2]))
        self._counts[k] = self._counts.get(k, 0) + int(n)

    def merge(self, other: "Histogram") -> "Histogram":
        """
        Sum of two histograms. Bins of self keep their order; bins first seen
        in other follow in other's order.
        """
        out = Histogram(self._counts)
        for key, n in other.items():
            out.add(key, n)
        return out

    def items(self) -> Iterator[Tuple[BinKey, int]]:
        return iter(self._counts.items())

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def as_dict(self) -> Dict[BinKey, int]:
        return dict(self._counts)

    def __getitem__(self, key: BinKey) -> int:
        return self._counts[key]

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __iter__(self) -> Iterator[BinKey]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __bool__(self) -> bool:
        return bool(self._counts)

    def __eq__(self, other: object) -> bool:
        # order is part of the value: it decides ranking ties
        if not isinstance(other, Histogram):
            return NotImplemented
        return list(self._counts.items()) == list(other._counts.items())

    def __repr__(self) -> str:
        return f"Histogram({self._counts!r})"


def histogram_from_samples(
    samples: Iterable[RGBTuple], step: int = QUANT_STEP
) -> Histogram:
    """Accumulate one sample at a time; works on any (lazy) iterable."""
    hist = Histogram()
    for r, g, b in samples:
        hist.add(
            (quantize_channel(r, step), quantize_channel(g, step), quantize_channel(b, step))
        )
    return hist


def histogram_from_array(rgb_u8: U8RGB, step: int = QUANT_STEP) -> Histogram:
    """
    Vectorised accumulation over a (N, 3) sample array.

    Bins are packed into 9-bit fields, counted with np.unique, then reordered
    by first occurrence so iteration order matches histogram_from_samples.
    """
    arr = np.asarray(rgb_u8)
    if arr.shape[0] == 0:
        return Histogram()
    q = quantize_rgb(arr.reshape(-1, 3), step)
    codes = (q[:, 0] << 18) | (q[:, 1] << 9) | q[:, 2]
    uniq, first_idx, counts = np.unique(codes, return_index=True, return_counts=True)
    order = np.argsort(first_idx, kind="stable")

    hist = Histogram()
    for code, n in zip(uniq[order].tolist(), counts[order].tolist()):
        hist.add(((code >> 18) & 0x1FF, (code >> 9) & 0x1FF, code & 0x1FF), n)
    return hist


def require_bins(hist: Histogram) -> Histogram:
    """Pass a non-empty histogram through; raise EmptyHistogram otherwise."""
    if not hist:
        raise EmptyHistogram(
            code="empty_histogram",
            message="Image is transparent or has no analyzable pixels.",
            hint="No sampled pixel reached the opacity threshold.",
        )
    return hist


def build_histogram(samples: Iterable[RGBTuple], step: int = QUANT_STEP) -> Histogram:
    """
    Histogram of a sampler (anything with opaque_rgb() is taken on the fast
    path). Raises EmptyHistogram when nothing opaque was sampled.
    """
    opaque_rgb = getattr(samples, "opaque_rgb", None)
    if callable(opaque_rgb):
        return require_bins(histogram_from_array(opaque_rgb(), step))
    return require_bins(histogram_from_samples(samples, step))


__all__ = [
    "quantize_channel",
    "quantize_rgb",
    "Histogram",
    "histogram_from_samples",
    "histogram_from_array",
    "require_bins",
    "build_histogram",
]
