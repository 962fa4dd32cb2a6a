from __future__ import annotations

import numpy as np
import pytest

from card_palette.errors import EmptyHistogram
from card_palette.quantize import (
    Histogram,
    build_histogram,
    histogram_from_array,
    histogram_from_samples,
    quantize_channel,
    quantize_rgb,
)
from card_palette.sampler import RasterSampler

from conftest import solid_buffer


@pytest.mark.parametrize(
    "value, expected",
    [(0, 0), (15, 0), (16, 32), (47, 32), (48, 64), (239, 224), (240, 256), (255, 256)],
)
def test_channel_rounds_half_up_to_step(value: int, expected: int) -> None:
    assert quantize_channel(value) == expected


def test_vectorised_quantize_matches_scalar() -> None:
    values = np.arange(256, dtype=np.uint8)
    rgb = np.stack([values, values[::-1], values], axis=1)
    q = quantize_rgb(rgb)
    for (r, g, _b), (qr, qg, _qb) in zip(rgb.tolist(), q.tolist()):
        assert qr == quantize_channel(r)
        assert qg == quantize_channel(g)


def test_at_most_729_bins() -> None:
    rng = np.random.default_rng(3)
    rgb = rng.integers(0, 256, size=(20_000, 3), dtype=np.uint8)
    hist = histogram_from_array(rgb)
    assert len(hist) <= 9 * 9 * 9
    assert all(c % 32 == 0 and 0 <= c <= 256 for key in hist for c in key)
    assert hist.total == 20_000


def test_array_and_sample_paths_agree_including_order() -> None:
    rng = np.random.default_rng(11)
    rgb = rng.integers(0, 256, size=(500, 3), dtype=np.uint8)
    samples = [tuple(row) for row in rgb.tolist()]
    a = histogram_from_array(rgb)
    b = histogram_from_samples(samples)
    assert a == b
    assert list(a) == list(b)


def test_iteration_is_first_encounter_order() -> None:
    hist = histogram_from_samples([(250, 0, 0), (0, 0, 250), (0, 0, 250), (250, 0, 0), (0, 250, 0)])
    assert list(hist.items()) == [((256, 0, 0), 2), ((0, 0, 256), 2), ((0, 256, 0), 1)]


def test_merge_sums_counts_and_appends_new_bins() -> None:
    left = Histogram({(0, 0, 0): 2, (32, 0, 0): 1})
    right = Histogram({(64, 0, 0): 5, (0, 0, 0): 1})
    merged = left.merge(right)
    assert list(merged.items()) == [((0, 0, 0), 3), ((32, 0, 0), 1), ((64, 0, 0), 5)]
    # inputs untouched
    assert left[(0, 0, 0)] == 2


def test_empty_sampler_raises_empty_histogram() -> None:
    sampler = RasterSampler(solid_buffer((10, 20, 30, 0)))
    with pytest.raises(EmptyHistogram) as info:
        build_histogram(sampler)
    assert info.value.code == "empty_histogram"


def test_build_histogram_accepts_plain_iterables() -> None:
    hist = build_histogram(iter([(1, 2, 3), (4, 5, 6)]))
    assert hist.as_dict() == {(0, 0, 0): 2}
