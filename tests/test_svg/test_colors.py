"""Tests for color literals and the opacity transfer curve."""

import math

import pytest

from svgmap.svg.colors import Color, linear_to_nonlinear_srgb, parse_rgb, to_color


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.0, 0),
        (1.0, 255),
        (0.5, 187),
        (0.002, 6),  # linear segment
        (0.995, 253),  # passthrough near one
        (-1.0, 0),
        (2.0, 255),
        (math.inf, 255),
        (-math.inf, 0),
        (math.nan, 255),
    ],
)
def test_linear_to_nonlinear_srgb(value, expected):
    assert linear_to_nonlinear_srgb(value) == expected


def test_curve_is_monotonic():
    values = [linear_to_nonlinear_srgb(i / 100) for i in range(101)]
    assert values == sorted(values)


def test_parse_rgb():
    assert parse_rgb("#00ff00") == (0, 255, 0)
    assert parse_rgb("  white ") == (255, 255, 255)
    assert parse_rgb("url(#g)") is None
    assert parse_rgb("none") is None
    assert parse_rgb("notacolor") is None
    assert parse_rgb("") is None


def test_to_color():
    assert to_color("blue", 10) == Color(0, 0, 255, 10)
    assert to_color("none") is None


def test_color_helpers():
    assert Color(255, 0, 0).hex == "#ff0000ff"
    assert Color(0, 0, 0, 0).as_float() == (0.0, 0.0, 0.0, 0.0)
    assert Color.BLACK == Color(0, 0, 0, 255)
