# card_palette/config.py
from __future__ import annotations

"""
Analysis configuration.

Exports:
  AnalysisConfig  : frozen bundle of sampling / quantization / ranking / contrast knobs
  DEFAULT_CONFIG  : AnalysisConfig() with the documented defaults
"""

import numbers
from dataclasses import dataclass, fields, replace as _dc_replace
from typing import Any, Iterable, Tuple

from .constants import (
    ALPHA_THRESHOLD,
    CONTRAST_THRESHOLD,
    PALETTE_SIZE,
    QUANT_STEP,
    SAMPLE_STRIDE,
)


@dataclass(frozen=True)
class AnalysisConfig:
    """Knobs for the sampler, quantizer, ranker and theme selector."""

    stride: int = SAMPLE_STRIDE
    alpha_threshold: int = ALPHA_THRESHOLD
    quant_step: int = QUANT_STEP
    palette_size: int = PALETTE_SIZE
    contrast_threshold: float = CONTRAST_THRESHOLD

    def __post_init__(self) -> None:
        for name in ("stride", "alpha_threshold", "quant_step", "palette_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise TypeError(f"{name} must be an integer, got {value!r}")
            object.__setattr__(self, name, int(value))
        object.__setattr__(self, "contrast_threshold", float(self.contrast_threshold))

        if self.stride < 1:
            raise ValueError("stride must be >= 1")
        if not 0 <= self.alpha_threshold <= 256:
            raise ValueError("alpha_threshold must be in [0, 256]")
        if not 1 <= self.quant_step <= 255:
            raise ValueError("quant_step must be in [1, 255]")
        if self.palette_size < 1:
            raise ValueError("palette_size must be >= 1")
        if self.contrast_threshold < 1.0:
            raise ValueError("contrast_threshold must be >= 1.0")

    def replace(self, **changes: Any) -> "AnalysisConfig":
        """Copy with some fields changed; None values are ignored."""
        return _dc_replace(self, **{k: v for k, v in changes.items() if v is not None})

    def items(self) -> Iterable[Tuple[str, Any]]:
        """(name, value) pairs, handy for key_value_pairs_to_string."""
        return [(f.name, getattr(self, f.name)) for f in fields(self)]


DEFAULT_CONFIG = AnalysisConfig()

__all__ = ["AnalysisConfig", "DEFAULT_CONFIG"]
