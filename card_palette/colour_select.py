# card_palette/colour_select.py
from __future__ import annotations

"""
Theme selection from a ranked palette.

Exports:
  DEFAULT_PAIR
  pick_foreground(palette, background, threshold) -> (foreground, best_ratio)
  fallback_foreground(background)                 -> BLACK or WHITE
  select_theme(palette, rotation_index, threshold) -> ColorPair
  theme_cycle(palette, start, threshold)          -> list[ColorPair], one per rotation
"""

from typing import List, Sequence, Tuple

from .constants import (
    BLACK,
    CONTRAST_THRESHOLD,
    DEFAULT_BACKGROUND,
    DEFAULT_FOREGROUND,
    LUMINANCE_SPLIT,
    WHITE,
)
from .contrast import contrast_ratio, luminance
from .core_types import ColorPair, HexStr, normalise_hex

DEFAULT_PAIR = ColorPair(background=DEFAULT_BACKGROUND, foreground=DEFAULT_FOREGROUND)


def fallback_foreground(background: HexStr) -> HexStr:
    """Black on light backgrounds (luminance > 0.5), white otherwise."""
    return BLACK if luminance(background) > LUMINANCE_SPLIT else WHITE


def pick_foreground(
    palette: Sequence[HexStr],
    background: HexStr,
    threshold: float = CONTRAST_THRESHOLD,
) -> Tuple[HexStr, float]:
    """
    Highest-contrast palette entry against background, or the black/white
    fallback when none reaches threshold.

    Entries equal to background by value are skipped. Only a strictly greater
    ratio replaces the running best, so the earliest entry wins ties.
    Returns (foreground, best in-palette ratio).
    """
    bg = normalise_hex(background)
    best, max_ratio = WHITE, 0.0
    for colour in palette:
        candidate = normalise_hex(colour)
        if candidate == bg:
            continue
        ratio = contrast_ratio(bg, candidate)
        if ratio > max_ratio:
            best, max_ratio = candidate, ratio

    if max_ratio >= threshold:
        return best, max_ratio
    return fallback_foreground(bg), max_ratio


def select_theme(
    palette: Sequence[HexStr],
    rotation_index: int = 0,
    threshold: float = CONTRAST_THRESHOLD,
) -> ColorPair:
    """Background from the rotation, foreground by contrast; never fails."""
    if not palette:
        return DEFAULT_PAIR
    background = normalise_hex(palette[rotation_index % len(palette)])
    foreground, _ratio = pick_foreground(palette, background, threshold)
    return ColorPair(background=background, foreground=foreground)


def theme_cycle(
    palette: Sequence[HexStr],
    start: int = 0,
    threshold: float = CONTRAST_THRESHOLD,
) -> List[ColorPair]:
    """Every pair a full round of regenerates visits, starting at start."""
    if not palette:
        return [DEFAULT_PAIR]
    n = len(palette)
    return [select_theme(palette, start + i, threshold) for i in range(n)]


__all__ = [
    "DEFAULT_PAIR",
    "fallback_foreground",
    "pick_foreground",
    "select_theme",
    "theme_cycle",
]
