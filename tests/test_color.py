"""Indicator colour mapping and hex interpolation."""

import pytest

from burette.chemistry.species import Indicator
from burette.color import (
    get_indicator_color,
    hex_to_rgb,
    indicator_colors,
    interpolate_color,
    rgb_to_hex,
)

EPS = 1e-9


@pytest.fixture()
def upper_case_indicator():
    return Indicator("Test indicator", 7.0, "#FFAA00", "#0000FF", (6.0, 8.0))


def test_hex_round_trip_parsing():
    assert hex_to_rgb("#ff1493") == (255, 20, 147)
    assert hex_to_rgb("FF1493") == (255, 20, 147)
    assert rgb_to_hex(255, 20, 147) == "#ff1493"


@pytest.mark.parametrize("bad", ["#fff", "zzzzzz", "", "#12345g"])
def test_hex_to_rgb_rejects_malformed(bad):
    assert hex_to_rgb(bad) is None


def test_rgb_to_hex_clamps_channels():
    assert rgb_to_hex(300, -5, 16) == "#ff0010"


def test_interpolate_endpoints_and_midpoint():
    assert interpolate_color("#000000", "#ffffff", 0.0) == "#000000"
    assert interpolate_color("#000000", "#ffffff", 1.0) == "#ffffff"
    assert interpolate_color("#000000", "#ffffff", 0.5) == "#808080"


def test_interpolate_with_invalid_color_returns_first():
    assert interpolate_color("not-a-color", "#ffffff", 0.5) == "not-a-color"


def test_colors_outside_band_are_verbatim(upper_case_indicator):
    low, high = upper_case_indicator.transition_range
    assert get_indicator_color(upper_case_indicator, low - EPS) == "#FFAA00"
    assert get_indicator_color(upper_case_indicator, 0.0) == "#FFAA00"
    assert get_indicator_color(upper_case_indicator, high + EPS) == "#0000FF"
    assert get_indicator_color(upper_case_indicator, 14.0) == "#0000FF"


def test_band_is_inclusive_and_blended(upper_case_indicator):
    assert get_indicator_color(upper_case_indicator, 6.0) == "#ffaa00"
    assert get_indicator_color(upper_case_indicator, 8.0) == "#0000ff"
    assert get_indicator_color(upper_case_indicator, 7.0) == "#805580"


def test_phenolphthalein_transition(phenolphthalein):
    assert get_indicator_color(phenolphthalein, 7.0) == phenolphthalein.acid_color
    assert get_indicator_color(phenolphthalein, 12.0) == phenolphthalein.base_color
    mid = get_indicator_color(phenolphthalein, 9.15)
    assert mid not in (phenolphthalein.acid_color, phenolphthalein.base_color)
def test_indicator_colors_per_value(phenolphthalein):
    colors = indicator_colors(phenolphthalein, [1.0, 9.15, 13.0])
    assert len(colors) == 3
    assert colors[0] == phenolphthalein.acid_color
    assert colors[1] == get_indicator_color(phenolphthalein, 9.15)
    assert colors[2] == phenolphthalein.base_color


def test_indicator_colors_accepts_generators(phenolphthalein):
    colors = indicator_colors(phenolphthalein, (ph for ph in (2.0, 12.0)))
    assert colors == [phenolphthalein.acid_color, phenolphthalein.base_color]
