# card_palette/constants.py
"""
Tunables used across the project.

- Sampling / quantization budget (SAMPLE_*, QUANT_STEP)
- Palette size (PALETTE_SIZE)
- Contrast thresholds (CONTRAST_*, WCAG_*)
- Fixed colours (DEFAULT_*, BLACK, WHITE)
"""
from __future__ import annotations

from typing import List, Tuple

# ========
# Sampling
# ========
SAMPLE_STRIDE: int = 5  # every 5th pixel in row-major order
ALPHA_THRESHOLD: int = 128  # opaque iff alpha >= this

# ============
# Quantization
# ============
QUANT_STEP: int = 32  # round(c / 32) * 32, per channel

# =======
# Ranking
# =======
PALETTE_SIZE: int = 10

# ========
# Contrast
# ========
CONTRAST_THRESHOLD: float = 3.0
LUMINANCE_SPLIT: float = 0.5  # background above this gets black text
SRGB_LINEAR_CUTOFF: float = 0.03928
LUMINANCE_WEIGHTS: Tuple[float, float, float] = (0.2126, 0.7152, 0.0722)

WCAG_AAA: float = 7.0
WCAG_AA: float = 4.5
WCAG_AA_LARGE: float = 3.0

# (threshold, label), strongest first
WCAG_LEVELS: List[Tuple[float, str]] = [
    (WCAG_AAA, "AAA"),
    (WCAG_AA, "AA"),
    (WCAG_AA_LARGE, "AA Large"),
]
WCAG_FAIL: str = "Fail"

# =============
# Fixed colours
# =============
BLACK: str = "#000000"
WHITE: str = "#ffffff"
DEFAULT_BACKGROUND: str = "#1a1a1a"
DEFAULT_FOREGROUND: str = WHITE

# ===
# CLI
# ===
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp"}
