from __future__ import annotations

import numpy as np
import pytest

from card_palette.config import AnalysisConfig
from card_palette.utils import (
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    print_config_line,
    split_range_into_parts,
)


def test_split_range_covers_everything_in_order() -> None:
    assert split_range_into_parts(10, 3) == [(0, 4), (4, 8), (8, 10)]
    assert split_range_into_parts(2, 5) == [(0, 1), (1, 2)]
    assert split_range_into_parts(0, 4) == []


def test_key_value_formatting() -> None:
    text = key_value_pairs_to_string([("Samples", 12345), ("Auto", True), ("Ratio", 2.5)])
    assert text == "Samples: 12,345  Auto: on  Ratio: 2.5"


def test_format_seconds_compact() -> None:
    assert format_seconds_compact(0.0125) == "12.5ms"
    assert format_seconds_compact(2.0) == "2.000s"
    assert format_seconds_compact(125.0) == "2m 5.0s"


def test_config_line_routes_by_debug(capsys) -> None:
    print_config_line("run", AnalysisConfig().items(), debug=False)
    print_config_line("run", [("Top", 3)], debug=True)
    error("boom")
    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "[run] stride: 5  alpha_threshold: 128  quant_step: 32  palette_size: 10  contrast_threshold: 3",
        "[debug] [run] Top: 3",
    ]
    assert captured.err == "[error] boom\n"


def test_config_replace_ignores_none() -> None:
    config = AnalysisConfig().replace(stride=2, palette_size=None)
    assert config.stride == 2
    assert config.palette_size == 10


@pytest.mark.parametrize("field", ["stride", "alpha_threshold", "quant_step", "palette_size"])
def test_config_rejects_non_integer_knobs(field: str) -> None:
    with pytest.raises(TypeError):
        AnalysisConfig(**{field: 2.5})


def test_config_stores_plain_numbers() -> None:
    config = AnalysisConfig(stride=np.int64(3), contrast_threshold=4)
    assert type(config.stride) is int
    assert config.stride == 3
    assert type(config.contrast_threshold) is float
