from __future__ import annotations

import pytest

from card_palette.analysis import (
    accumulate_histogram,
    analyze_image,
    analyze_pixels,
    extract_palette,
)
from card_palette.config import AnalysisConfig
from card_palette.core_types import PixelBuffer
from card_palette.errors import DecodeUnavailable, EmptyHistogram
from card_palette.image_io import load_pixel_buffer
from card_palette.sampler import RasterSampler

from conftest import buffer_from_pixels, solid_buffer, striped_buffer


def test_red_blue_pair_end_to_end() -> None:
    buffer = buffer_from_pixels([(255, 0, 0, 255), (0, 0, 255, 255)], width=2, height=1)
    result = analyze_pixels(buffer, AnalysisConfig(stride=1))
    assert result.histogram.as_dict() == {(256, 0, 0): 1, (0, 0, 256): 1}
    assert result.palette == ("#ff0000", "#0000ff")
    assert result.sample_count == 2
    assert result.opaque_count == 2


def test_ranked_by_frequency_with_default_stride() -> None:
    buffer = striped_buffer([(250, 10, 10), (10, 10, 250), (10, 250, 10)], rows_each=[6, 3, 1])
    assert extract_palette(buffer) == ("#ff0000", "#0000ff", "#00ff00")


def test_deterministic(random_buffer: PixelBuffer) -> None:
    first = analyze_pixels(random_buffer)
    second = analyze_pixels(random_buffer)
    assert first.palette == second.palette
    assert first.histogram == second.histogram


def test_palette_length_bounded_by_k(random_buffer: PixelBuffer) -> None:
    assert len(extract_palette(random_buffer)) == 10
    assert len(extract_palette(random_buffer, AnalysisConfig(palette_size=4))) == 4


@pytest.mark.parametrize("workers", [2, 3, 4, 16])
def test_sharded_histogram_matches_serial(random_buffer: PixelBuffer, workers: int) -> None:
    sampler = RasterSampler(random_buffer)
    serial = accumulate_histogram(sampler, 32, workers=1)
    sharded = accumulate_histogram(sampler, 32, workers=workers, min_shard=1)
    assert sharded == serial
    assert list(sharded.items()) == list(serial.items())


def test_sharded_palette_matches_serial(random_buffer: PixelBuffer) -> None:
    assert extract_palette(random_buffer, workers=8) == extract_palette(random_buffer)


def test_transparent_image_raises_empty_histogram() -> None:
    with pytest.raises(EmptyHistogram):
        analyze_pixels(solid_buffer((200, 100, 50, 0)))


def test_transparent_image_yields_empty_palette_with_warning(capsys) -> None:
    assert analyze_image(solid_buffer((200, 100, 50, 10))) == ()
    out = capsys.readouterr().out
    assert "[warn]" in out
    assert "no analyzable pixels" in out


def test_stride_can_miss_the_only_opaque_pixel() -> None:
    pixels = [(0, 0, 0, 0)] * 10
    pixels[1] = (255, 255, 255, 255)
    buffer = buffer_from_pixels(pixels, width=10, height=1)
    assert analyze_image(buffer) == ()
    assert extract_palette(buffer, AnalysisConfig(stride=1)) == ("#ffffff",)


def test_undecodable_bytes(capsys) -> None:
    with pytest.raises(DecodeUnavailable) as info:
        load_pixel_buffer(b"definitely not an image")
    assert info.value.code == "decode_unavailable"
    assert analyze_image(b"definitely not an image") == ()
    assert "decode failed" in capsys.readouterr().out


def test_missing_file_is_decode_unavailable(tmp_path) -> None:
    with pytest.raises(DecodeUnavailable):
        load_pixel_buffer(tmp_path / "missing.png")


def test_png_file_round_trip(write_png) -> None:
    buffer = striped_buffer([(10, 10, 250), (250, 250, 250)], rows_each=[5, 2])
    path = write_png("stripes.png", buffer)
    assert analyze_image(path) == ("#0000ff", "#ffffff")
    assert analyze_image(path.read_bytes()) == ("#0000ff", "#ffffff")
    assert analyze_image(str(path)) == ("#0000ff", "#ffffff")


def test_debug_prints_stats(capsys, random_buffer: PixelBuffer) -> None:
    analyze_image(random_buffer, debug=True)
    out = capsys.readouterr().out
    assert "[debug]" in out
    assert "Samples: 1,024" in out
