from __future__ import annotations

import pytest

from card_palette.colour_select import (
    DEFAULT_PAIR,
    fallback_foreground,
    pick_foreground,
    select_theme,
    theme_cycle,
)
from card_palette.contrast import contrast_ratio
from card_palette.core_types import ColorPair


def test_empty_palette_gives_default_pair() -> None:
    assert select_theme(()) == ColorPair("#1a1a1a", "#ffffff")
    assert select_theme([], rotation_index=4) == DEFAULT_PAIR


def test_dark_low_contrast_palette_falls_back_to_white() -> None:
    pair = select_theme(["#101010", "#121212"])
    assert pair == ColorPair("#101010", "#ffffff")


def test_light_low_contrast_palette_falls_back_to_black() -> None:
    pair = select_theme(["#f0f0f0", "#eeeeee"])
    assert pair == ColorPair("#f0f0f0", "#000000")


def test_picks_highest_contrast_entry() -> None:
    palette = ["#808080", "#ffffff", "#000000", "#202020"]
    fg, ratio = pick_foreground(palette, "#ffffff")
    assert fg == "#000000"
    assert ratio == pytest.approx(21.0)
    assert select_theme(palette, 1) == ColorPair("#ffffff", "#000000")


def test_grey_background_prefers_black_over_white() -> None:
    pair = select_theme(["#000000", "#808080", "#ffffff"], rotation_index=1)
    assert pair.background == "#808080"
    assert pair.foreground == "#000000"
    assert contrast_ratio("#808080", "#000000") > contrast_ratio("#808080", "#ffffff")


def test_rotation_wraps_around() -> None:
    palette = ["#000000", "#ffffff", "#ff0000"]
    assert select_theme(palette, 3) == select_theme(palette, 0)
    assert select_theme(palette, 5).background == "#ff0000"


def test_entries_equal_to_background_are_skipped() -> None:
    fg, ratio = pick_foreground(["#ffffff", "#FFFFFF"], "#ffffff")
    assert ratio == 0.0
    assert fg == "#000000"


def test_result_never_equals_background_by_value() -> None:
    palette = ["#336699", "#336699", "#336699"]
    for i in range(len(palette)):
        pair = select_theme(palette, i)
        assert pair.foreground != pair.background


def test_threshold_controls_fallback() -> None:
    palette = ["#ff0000", "#0000ff"]
    # red/blue is about 2.15:1
    assert select_theme(palette, threshold=3.0).foreground == "#ffffff"
    assert select_theme(palette, threshold=2.0).foreground == "#0000ff"


def test_fallback_foreground_split() -> None:
    assert fallback_foreground("#ffffff") == "#000000"
    assert fallback_foreground("#000000") == "#ffffff"
    # luminance of #ff0000 is 0.2126
    assert fallback_foreground("#ff0000") == "#ffffff"


def test_theme_cycle_visits_every_background() -> None:
    palette = ["#000000", "#ffffff", "#1a1a1a"]
    cycle = theme_cycle(palette, start=1)
    assert [p.background for p in cycle] == ["#ffffff", "#1a1a1a", "#000000"]
    assert theme_cycle(()) == [DEFAULT_PAIR]
