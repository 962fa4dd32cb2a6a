# card_palette/contrast.py
from __future__ import annotations

"""
Relative luminance and contrast ratio (WCAG 2.x, sRGB).

Exports:
  rgb_to_linear(srgb)          -> float64 array, vectorised
  luminance(colour)            -> float in [0, 1]
  luminance_array(rgb_u8)      -> float64 [N]
  contrast_ratio(a, b)         -> float >= 1
  wcag_rating(ratio)           -> "AAA" | "AA" | "AA Large" | "Fail"
  pair_contrast(pair)          -> float

Colours are '#rrggbb' / '#rgb' strings or (r, g, b) ints. Malformed input
raises ValueError; inputs are produced internally, so that is a bug.
"""

import numpy as np

from .constants import (
    LUMINANCE_WEIGHTS,
    SRGB_LINEAR_CUTOFF,
    WCAG_FAIL,
    WCAG_LEVELS,
)
from .core_types import ColorPair, ColourLike, U8RGB, coerce_to_rgb_tuple

_WEIGHTS = np.array(LUMINANCE_WEIGHTS, dtype=np.float64)


def rgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Uses the 0.03928 cutoff from the WCAG definition.
    """
    srgb_f = np.asarray(srgb, dtype=np.float64)
    return np.where(
        srgb_f <= SRGB_LINEAR_CUTOFF,
        srgb_f / 12.92,
        ((srgb_f + 0.055) / 1.055) ** 2.4,
    )


def luminance_array(rgb_u8: U8RGB) -> np.ndarray:
    """Relative luminance for each row of a (N, 3) 0..255 array."""
    arr = np.asarray(rgb_u8, dtype=np.float64).reshape(-1, 3) / 255.0
    return rgb_to_linear(arr) @ _WEIGHTS


def luminance(colour: ColourLike) -> float:
    """Relative luminance of one colour, 0.0 for black and 1.0 for white."""
    rgb = coerce_to_rgb_tuple(colour)
    return float(luminance_array(np.array([rgb], dtype=np.uint8))[0])


def contrast_ratio(colour_a: ColourLike, colour_b: ColourLike) -> float:
    """(L_max + 0.05) / (L_min + 0.05); symmetric, 1.0 for identical colours."""
    lum_a = luminance(colour_a)
    lum_b = luminance(colour_b)
    lighter = max(lum_a, lum_b)
    darker = min(lum_a, lum_b)
    return (lighter + 0.05) / (darker + 0.05)


def wcag_rating(ratio: float) -> str:
    for threshold, label in WCAG_LEVELS:
        if ratio >= threshold:
            return label
    return WCAG_FAIL


def pair_contrast(pair: ColorPair) -> float:
    return contrast_ratio(pair.background, pair.foreground)


__all__ = [
    "rgb_to_linear",
    "luminance",
    "luminance_array",
    "contrast_ratio",
    "wcag_rating",
    "pair_contrast",
]
