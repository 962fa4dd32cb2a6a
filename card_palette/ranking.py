# card_palette/ranking.py
from __future__ import annotations

"""
Palette ranker: top-K histogram bins as '#rrggbb' colours.
"""

from typing import List, Tuple

from .constants import PALETTE_SIZE
from .core_types import BinKey, Palette, bin_to_hex
from .quantize import Histogram


def ranked_bins(hist: Histogram) -> List[Tuple[BinKey, int]]:
    """Bins by descending count. sorted() is stable, so ties keep encounter order."""
    return sorted(hist.items(), key=lambda kv: -kv[1])


def rank_palette(hist: Histogram, k: int = PALETTE_SIZE) -> Palette:
    """
    Top-k bins converted to 24-bit colours; len(result) == min(k, len(hist)).

    Only the top quantized level can exceed 255, so clamping never maps two
    bins onto the same colour.
    """
    return tuple(bin_to_hex(key) for key, _count in ranked_bins(hist)[:k])


__all__ = ["ranked_bins", "rank_palette"]
