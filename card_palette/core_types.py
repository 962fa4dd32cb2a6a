# card_palette/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import DecodeUnavailable

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str
ColourLike = Union[HexStr, Sequence[int]]

RGBABuffer = NDArray[np.uint8]  # (H, W, 4)
U8RGB = NDArray[np.uint8]  # (N, 3)

Palette = Tuple[HexStr, ...]  # ranked "#rrggbb" entries
BinKey = Tuple[int, int, int]  # quantised channels, each in {0, 32, ..., 256}

# Value objects


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Decoded RGBA image, row-major, 4 bytes per pixel."""

    width: int
    height: int
    data: RGBABuffer  # shape (height, width, 4)

    def __post_init__(self) -> None:
        arr = np.asarray(self.data)
        if arr.dtype != np.uint8 or arr.ndim != 3 or arr.shape[-1] != 4:
            raise DecodeUnavailable(
                code="decode_unavailable",
                message=f"expected uint8 (H,W,4) buffer, got {arr.dtype} {arr.shape}",
                hint="Convert the image to RGBA before analysis.",
            )
        if arr.shape[:2] != (self.height, self.width):
            raise DecodeUnavailable(
                code="decode_unavailable",
                message=(
                    f"buffer shape {arr.shape[1]}x{arr.shape[0]} does not match "
                    f"{self.width}x{self.height}"
                ),
                hint="Pass the decoded width and height unchanged.",
            )

    @classmethod
    def from_bytes(cls, width: int, height: int, raw: bytes) -> "PixelBuffer":
        """Wrap a flat RGBA byte string (row-major) without copying."""
        expected = int(width) * int(height) * 4
        if len(raw) != expected:
            raise DecodeUnavailable(
                code="decode_unavailable",
                message=f"expected {expected} bytes for {width}x{height} RGBA, got {len(raw)}",
                hint="The buffer must hold exactly width*height*4 bytes.",
            )
        arr = np.frombuffer(raw, dtype=np.uint8).reshape(int(height), int(width), 4)
        return cls(width=int(width), height=int(height), data=arr)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def flat(self) -> RGBABuffer:
        """View as (width*height, 4) in row-major order."""
        return self.data.reshape(-1, 4)


@dataclass(frozen=True)
class ColorPair:
    """Active theme: background and foreground as '#rrggbb'."""

    background: HexStr
    foreground: HexStr

    def with_side(self, which: str, colour: ColourLike) -> "ColorPair":
        """Return a copy with one side replaced by a normalised colour."""
        value = normalise_hex(colour)
        if which == "background":
            return ColorPair(background=value, foreground=self.foreground)
        if which == "foreground":
            return ColorPair(background=self.background, foreground=value)
        raise ValueError("which must be 'background' or 'foreground'")

    def as_dict(self) -> dict:
        return {"background": self.background, "foreground": self.foreground}


# Small helpers

_HEX_DIGITS = frozenset("0123456789abcdef")


def clamp_channel(value: int) -> int:
    """Clamp an integer channel to [0, 255]."""
    return 0 if value < 0 else 255 if value > 255 else int(value)


def rgb_to_hex(rgb: Sequence[int]) -> HexStr:
    """RGB triplet to lowercase hex string '#rrggbb'. Channels must be in 0..255."""
    if len(rgb) != 3:
        raise ValueError("expected an (r, g, b) triplet")
    r, g, b = (int(c) for c in rgb)
    for c in (r, g, b):
        if c < 0 or c > 255:
            raise ValueError(f"channel out of range: {c}")
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive, '#' optional) into an RGB tuple."""
    s = hex_str.strip().lower()
    if s.startswith("#"):
        s = s[1:]
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise ValueError(f"hex must be '#rrggbb' or '#rgb': {hex_str!r}")
    if not set(s) <= _HEX_DIGITS:
        raise ValueError(f"invalid hex colour: {hex_str!r}")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def coerce_to_rgb_tuple(colour: ColourLike) -> RGBTuple:
    """Accept '#rrggbb' / '#rgb' or an (r, g, b) sequence; return a validated tuple."""
    if isinstance(colour, str):
        return hex_to_rgb(colour)
    if isinstance(colour, np.ndarray):
        colour = colour.tolist()
    if len(colour) != 3:
        raise ValueError("sequence must hold exactly three channels")
    r, g, b = (int(c) for c in colour)
    for c in (r, g, b):
        if c < 0 or c > 255:
            raise ValueError(f"channel out of range: {c}")
    return (r, g, b)


def normalise_hex(colour: ColourLike) -> HexStr:
    """Canonical lowercase '#rrggbb' for any accepted colour form."""
    return rgb_to_hex(coerce_to_rgb_tuple(colour))


def bin_to_hex(key: BinKey) -> HexStr:
    """Quantised bin key to a 24-bit colour; the 256 level clamps to 255."""
    return rgb_to_hex(tuple(clamp_channel(c) for c in key))


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "ColourLike",
    "RGBABuffer",
    "U8RGB",
    "Palette",
    "BinKey",
    # value objects
    "PixelBuffer",
    "ColorPair",
    # helpers
    "clamp_channel",
    "rgb_to_hex",
    "hex_to_rgb",
    "coerce_to_rgb_tuple",
    "normalise_hex",
    "bin_to_hex",
]
