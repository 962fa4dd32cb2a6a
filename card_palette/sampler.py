# card_palette/sampler.py
from __future__ import annotations

"""
Raster sampler.

Walks a PixelBuffer in row-major order, visiting every `stride`-th pixel
(0, stride, 2*stride, ...) and keeping those with alpha >= alpha_threshold.
The walk is bounded at ceil(W*H / stride) visits regardless of image size.

Sample positions are addressed by ordinal: ordinal i is flat pixel i*stride.
Ordinal spans can be sampled independently; concatenating spans in order
reproduces the full traversal, which is what the sharded analysis relies on.
"""

from typing import Iterator, List, Optional, Tuple

import numpy as np

from .constants import ALPHA_THRESHOLD, SAMPLE_STRIDE
from .core_types import PixelBuffer, RGBTuple, U8RGB
from .utils import split_range_into_parts

# samples materialised per step while iterating lazily
_ITER_CHUNK = 65_536


class RasterSampler:
    """Restartable iterable of opaque (r, g, b) samples."""

    def __init__(
        self,
        buffer: PixelBuffer,
        stride: int = SAMPLE_STRIDE,
        alpha_threshold: int = ALPHA_THRESHOLD,
    ) -> None:
        if int(stride) < 1:
            raise ValueError("stride must be >= 1")
        self.buffer = buffer
        self.stride = int(stride)
        self.alpha_threshold = int(alpha_threshold)

    @property
    def sample_count(self) -> int:
        """Number of strided positions visited (opaque or not)."""
        n = self.buffer.pixel_count
        return (n + self.stride - 1) // self.stride

    def _span(self, start: int, stop: Optional[int]) -> Tuple[int, int]:
        total = self.sample_count
        lo = max(0, min(int(start), total))
        hi = total if stop is None else max(lo, min(int(stop), total))
        return lo, hi

    def opaque_rgb(self, start: int = 0, stop: Optional[int] = None) -> U8RGB:
        """
        Opaque samples for ordinals [start, stop) as a (N, 3) uint8 array,
        in traversal order.
        """
        lo, hi = self._span(start, stop)
        if hi <= lo:
            return np.zeros((0, 3), dtype=np.uint8)
        flat = self.buffer.flat()
        picked = flat[lo * self.stride : hi * self.stride : self.stride]
        keep = picked[:, 3] >= self.alpha_threshold
        return np.ascontiguousarray(picked[keep, :3])

    def shards(self, parts: int) -> List[Tuple[int, int]]:
        """Split the ordinal range into ~parts contiguous [start, stop) spans."""
        return split_range_into_parts(self.sample_count, parts)

    def __iter__(self) -> Iterator[RGBTuple]:
        total = self.sample_count
        for lo in range(0, total, _ITER_CHUNK):
            chunk = self.opaque_rgb(lo, lo + _ITER_CHUNK)
            for r, g, b in chunk.tolist():
                yield (r, g, b)

    def __repr__(self) -> str:
        return (
            f"RasterSampler({self.buffer.width}x{self.buffer.height}, "
            f"stride={self.stride}, alpha_threshold={self.alpha_threshold})"
        )


__all__ = ["RasterSampler"]
