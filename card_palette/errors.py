# card_palette/errors.py
from __future__ import annotations

"""
Analysis error taxonomy.

Both conditions are non-fatal: the engine collapses them to an empty palette
and the default colour pair.
"""

from dataclasses import dataclass


@dataclass
class PaletteError(Exception):
    code: str
    message: str
    hint: str

    def __str__(self) -> str:
        return self.message


@dataclass
class DecodeUnavailable(PaletteError):
    """The image could not be rasterized into an RGBA buffer."""


@dataclass
class EmptyHistogram(PaletteError):
    """The image decoded but no sampled pixel passed the opacity threshold."""


__all__ = ["PaletteError", "DecodeUnavailable", "EmptyHistogram"]
