# card_palette/__init__.py
"""
card_palette package.

Purpose:
  Extract a ranked colour palette from an image and pick an accessible
  background / foreground pair for a generated card. See card_theme.py for CLI.

Public API:
  PaletteEngine   : selection state machine (image changes, regenerate, auto/manual).
  analyze_image   : decode + sample + quantize + rank, never raises on bad images.
  extract_palette : same pipeline on an already decoded PixelBuffer.
  select_theme    : (palette, rotation_index) -> ColorPair.
  luminance / contrast_ratio / wcag_rating : WCAG contrast model.
  AnalysisConfig  : stride, alpha threshold, quantization step, palette size, threshold.
  errors          : PaletteError, DecodeUnavailable, EmptyHistogram.

Quick start:
  from card_palette import PaletteEngine
  with PaletteEngine() as engine:
      engine.load_image("cover.png").result()
      view = engine.view()
      view.pair.background, view.pair.foreground
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import contrast
from . import colour_select
from . import utils

from .analysis import AnalysisResult, analyze_image, analyze_pixels, extract_palette
from .colour_select import DEFAULT_PAIR, select_theme
from .config import DEFAULT_CONFIG, AnalysisConfig
from .contrast import contrast_ratio, luminance, wcag_rating
from .core_types import ColorPair, PixelBuffer, hex_to_rgb, rgb_to_hex
from .engine import EngineView, PaletteEngine, SelectionState
from .errors import DecodeUnavailable, EmptyHistogram, PaletteError
from .image_io import load_pixel_buffer

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "contrast",
    "colour_select",
    "utils",
    "AnalysisResult",
    "analyze_image",
    "analyze_pixels",
    "extract_palette",
    "DEFAULT_PAIR",
    "select_theme",
    "DEFAULT_CONFIG",
    "AnalysisConfig",
    "contrast_ratio",
    "luminance",
    "wcag_rating",
    "ColorPair",
    "PixelBuffer",
    "hex_to_rgb",
    "rgb_to_hex",
    "EngineView",
    "PaletteEngine",
    "SelectionState",
    "DecodeUnavailable",
    "EmptyHistogram",
    "PaletteError",
    "load_pixel_buffer",
]
