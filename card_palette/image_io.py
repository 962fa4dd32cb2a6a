# card_palette/image_io.py
from __future__ import annotations

"""
Image decode boundary: anything Pillow can open -> PixelBuffer (RGBA, sRGB
values as stored; no ICC conversion).
"""

import io
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .core_types import PixelBuffer
from .errors import DecodeUnavailable

ImageSource = Union[str, Path, bytes, bytearray, BinaryIO, Image.Image, PixelBuffer]


def _decode_failed(source: object, exc: BaseException) -> DecodeUnavailable:
    label = source if isinstance(source, (str, Path)) else type(source).__name__
    return DecodeUnavailable(
        code="decode_unavailable",
        message=f"could not decode image {label}: {exc}",
        hint="Check that the file exists and is a readable PNG/JPEG/WebP image.",
    )


def image_to_pixel_buffer(im: Image.Image) -> PixelBuffer:
    """Apply EXIF orientation, convert to RGBA and wrap as a PixelBuffer."""
    im = ImageOps.exif_transpose(im)
    arr = np.array(im.convert("RGBA"), dtype=np.uint8)
    return PixelBuffer(width=int(arr.shape[1]), height=int(arr.shape[0]), data=arr)


def load_pixel_buffer(source: ImageSource) -> PixelBuffer:
    """
    Decode a path, raw encoded bytes, binary file object or Pillow image.
    PixelBuffer inputs pass through. Any decode failure raises DecodeUnavailable.
    """
    if isinstance(source, PixelBuffer):
        return source
    try:
        if isinstance(source, Image.Image):
            source.load()
            return image_to_pixel_buffer(source)
        if isinstance(source, (bytes, bytearray)):
            stream: Union[str, Path, BinaryIO] = io.BytesIO(bytes(source))
        else:
            stream = source
        with Image.open(stream) as im:
            im.load()
            return image_to_pixel_buffer(im)
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise _decode_failed(source, e) from e


def save_pixel_buffer(path: Path, buffer: PixelBuffer) -> Path:
    """Write a PixelBuffer as PNG (used to build fixtures and swatches)."""
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    Image.fromarray(np.ascontiguousarray(buffer.data)).save(path)
    return path


__all__ = [
    "ImageSource",
    "image_to_pixel_buffer",
    "load_pixel_buffer",
    "save_pixel_buffer",
]
