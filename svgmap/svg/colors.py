"""Color literals and the opacity transfer curve. No engine imports."""

from __future__ import annotations

import math
from dataclasses import dataclass

from PIL import ImageColor

# Paint keywords that never resolve to a concrete color.
_NON_COLOR_PAINTS = {"none", "currentcolor", "inherit", "transparent"}

# Above this the curve is indistinguishable from identity at 8 bits.
_SRGB_PASSTHROUGH = 0.99
_SRGB_LINEAR_CUTOFF = 0.0031308


@dataclass(frozen=True)
class Color:
    """8-bit RGBA color."""

    r: int
    g: int
    b: int
    a: int = 255

    def as_float(self) -> tuple[float, float, float, float]:
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a / 255.0)

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"


Color.BLACK = Color(0, 0, 0)
Color.WHITE = Color(255, 255, 255)
Color.RED = Color(255, 0, 0)


def linear_to_nonlinear_srgb(value: float) -> int:
    """Encode a linear opacity into an 8-bit channel using the sRGB transfer curve.

    Out-of-range values clamp to [0, 1]; NaN encodes as opaque.
    """
    if math.isnan(value):
        return 255
    value = min(1.0, max(0.0, value))
    if value == 0.0 or value >= _SRGB_PASSTHROUGH:
        encoded = value
    elif value <= _SRGB_LINEAR_CUTOFF:
        encoded = value * 12.92  # linear falloff in dark values
    else:
        encoded = 1.055 * value ** (1.0 / 2.4) - 0.055
    return int(encoded * 255.0)


def parse_rgb(paint: str) -> tuple[int, int, int] | None:
    """Parse a paint value to (r, g, b); None for keywords, references and junk."""
    paint = paint.strip()
    if not paint or paint.lower() in _NON_COLOR_PAINTS or paint.startswith("url("):
        return None
    try:
        rgb = ImageColor.getrgb(paint)
    except ValueError:
        return None
    return (rgb[0], rgb[1], rgb[2])


def to_color(paint: str, alpha: int = 255) -> Color | None:
    rgb = parse_rgb(paint)
    if rgb is None:
        return None
    return Color(rgb[0], rgb[1], rgb[2], alpha)
