from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence, Tuple

import numpy as np
import pytest

from card_palette.core_types import PixelBuffer
from card_palette.image_io import save_pixel_buffer

RGBA = Tuple[int, int, int, int]


def buffer_from_pixels(pixels: Sequence[RGBA], width: int, height: int) -> PixelBuffer:
    """Row-major list of RGBA tuples -> PixelBuffer."""
    arr = np.array(pixels, dtype=np.uint8).reshape(height, width, 4)
    return PixelBuffer(width=width, height=height, data=arr)


def solid_buffer(rgba: RGBA, width: int = 8, height: int = 8) -> PixelBuffer:
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[...] = rgba
    return PixelBuffer(width=width, height=height, data=arr)


def striped_buffer(colours: Sequence[Tuple[int, int, int]], rows_each: Sequence[int], width: int = 10) -> PixelBuffer:
    """Horizontal opaque bands: colours[i] repeated for rows_each[i] rows."""
    rows = []
    for (r, g, b), n in zip(colours, rows_each):
        rows.extend([[(r, g, b, 255)] * width] * n)
    arr = np.array(rows, dtype=np.uint8)
    return PixelBuffer(width=width, height=arr.shape[0], data=arr)


@pytest.fixture
def random_buffer() -> PixelBuffer:
    rng = np.random.default_rng(7)
    arr = rng.integers(0, 256, size=(64, 80, 4), dtype=np.uint8)
    return PixelBuffer(width=80, height=64, data=arr)


@pytest.fixture
def write_png(tmp_path: Path) -> Callable[[str, PixelBuffer], Path]:
    def _write(name: str, buffer: PixelBuffer) -> Path:
        return save_pixel_buffer(tmp_path / name, buffer)

    return _write
