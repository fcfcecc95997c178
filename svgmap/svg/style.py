"""Style model: typed view over an inline ``style="k:v;k:v"`` string.

The string is parsed once at construction. Each typed property keeps the
difference between *absent* (documented default or None) and *malformed*
(StylePropertyError raised by the accessor), so failures surface when the
property is actually used and never as a silent guess.
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from svgmap.errors import MissingStyleProperty, StylePropertyError
from svgmap.svg.colors import Color, linear_to_nonlinear_srgb, to_color

DEFAULT_STYLE = (
    "fill:none;stroke:#000000;stroke-width:0.264583px;"
    "stroke-linecap:butt;stroke-linejoin:miter;stroke-opacity:1"
)
# Inkscape's default hairline (1px at 96dpi expressed in mm).
DEFAULT_STROKE_WIDTH = 0.264583

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_LENGTH_RE = re.compile(rf"^\s*({_NUMBER})\s*(?:px|pt|pc|mm|cm|in|em|ex|%)?\s*$", re.IGNORECASE)
_LIST_SEPARATOR_RE = re.compile(r"[\s,]+")


class LineCap(str, enum.Enum):
    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


class LineJoin(str, enum.Enum):
    MITER = "miter"
    MITER_CLIP = "miter-clip"
    ROUND = "round"
    BEVEL = "bevel"


class FillRule(str, enum.Enum):
    EVEN_ODD = "evenodd"
    NON_ZERO = "nonzero"


_LINECAPS = {cap.value: cap for cap in LineCap}
_LINEJOINS = {join.value: join for join in LineJoin} | {
    "miterclip": LineJoin.MITER_CLIP,
    "butt": LineJoin.BEVEL,
}
_FILL_RULES = {rule.value: rule for rule in FillRule}


def parse_declarations(style: str) -> dict[str, str]:
    """Split on ``;`` then on the first ``:``. Pairs without a name or colon are dropped."""
    declarations: dict[str, str] = {}
    for chunk in style.split(";"):
        name, sep, value = chunk.partition(":")
        name = name.strip()
        if not sep or not name:
            continue
        declarations[name] = value.strip()
    return declarations


def _finite(number: float) -> float:
    if not math.isfinite(number):
        raise ValueError(number)
    return number


def _parse_float(value: str) -> float:
    value = value.strip()
    if value.endswith("%"):
        return _finite(float(value[:-1]) / 100.0)
    return _finite(float(value))


def _parse_length(value: str) -> float:
    match = _LENGTH_RE.match(value)
    if match is None:
        raise ValueError(value)
    return _finite(float(match.group(1)))


def _parse_number_list(value: str) -> tuple[float, ...] | None:
    value = value.strip()
    if value.lower() == "none":
        return None
    parts = [p for p in _LIST_SEPARATOR_RE.split(value) if p]
    if not parts:
        raise ValueError(value)
    return tuple(_parse_length(p) for p in parts)


def _parse_field(
    properties: Mapping[str, str],
    name: str,
    parser: Callable[[str], Any],
    default: Any,
) -> Any:
    """Parsed value, ``default`` when absent, or the StylePropertyError to raise later."""
    raw = properties.get(name)
    if raw is None:
        return default
    try:
        return parser(raw)
    except ValueError:
        return StylePropertyError(name, raw)


def _unwrap(field: Any) -> Any:
    if isinstance(field, StylePropertyError):
        raise field
    return field


class StyleAttributes:
    """Immutable, typed style of one path.

    >>> StyleAttributes().stroke()
    Color(r=0, g=0, b=0, a=255)
    """

    __slots__ = (
        "_properties",
        "_stroke",
        "_fill",
        "_stroke_opacity",
        "_fill_opacity",
        "_stroke_width",
        "_stroke_linecap",
        "_stroke_linejoin",
        "_stroke_dasharray",
        "_stroke_miterlimit",
        "_fill_rule",
    )

    def __init__(self, style: str = DEFAULT_STYLE) -> None:
        props = parse_declarations(style)
        self._properties: Mapping[str, str] = MappingProxyType(props)

        self._stroke_opacity = _parse_field(props, "stroke-opacity", _parse_float, 1.0)
        self._fill_opacity = _parse_field(props, "fill-opacity", _parse_float, 1.0)
        self._stroke_width = _parse_field(props, "stroke-width", _parse_length, DEFAULT_STROKE_WIDTH)
        self._stroke_dasharray = _parse_field(props, "stroke-dasharray", _parse_number_list, None)
        self._stroke_miterlimit = _parse_field(props, "stroke-miterlimit", _parse_float, None)
        self._stroke_linecap = _LINECAPS.get(props.get("stroke-linecap", "").lower())
        self._stroke_linejoin = _LINEJOINS.get(props.get("stroke-linejoin", "").lower())
        self._fill_rule = _FILL_RULES.get(props.get("fill-rule", "").lower())

        self._stroke = self._paint("stroke", self._stroke_opacity)
        self._fill = self._paint("fill", self._fill_opacity)

    def _paint(self, name: str, opacity: Any) -> Color | None:
        raw = self._properties.get(name)
        if raw is None:
            return None
        # A malformed opacity keeps the color opaque rather than dropping it.
        alpha = 255 if isinstance(opacity, StylePropertyError) else linear_to_nonlinear_srgb(opacity)
        return to_color(raw, alpha)

    # -- mapping view -------------------------------------------------------

    @property
    def properties(self) -> Mapping[str, str]:
        return self._properties

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._properties.get(name, default)

    def __getitem__(self, name: str) -> str:
        try:
            return self._properties[name]
        except KeyError:
            raise MissingStyleProperty(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyleAttributes):
            return NotImplemented
        return dict(self._properties) == dict(other._properties)

    def __hash__(self) -> int:
        return hash(frozenset(self._properties.items()))

    def __repr__(self) -> str:
        body = ";".join(f"{k}:{v}" for k, v in self._properties.items())
        return f"StyleAttributes({body!r})"

    # -- typed accessors ----------------------------------------------------

    def stroke(self) -> Color | None:
        """Stroke color with gamma-encoded opacity; None for ``none`` or junk."""
        if "stroke" not in self._properties:
            raise MissingStyleProperty("stroke")
        return self._stroke

    def fill(self) -> Color | None:
        if "fill" not in self._properties:
            raise MissingStyleProperty("fill")
        return self._fill

    def has_stroke(self) -> bool:
        """True when a stroke pass should be produced. Never raises."""
        return self._stroke is not None

    def has_fill(self) -> bool:
        return self._fill is not None

    def stroke_opacity(self) -> float:
        return _unwrap(self._stroke_opacity)

    def fill_opacity(self) -> float:
        return _unwrap(self._fill_opacity)

    def stroke_width(self) -> float:
        """Numeric magnitude, unit ignored. DEFAULT_STROKE_WIDTH when absent."""
        return _unwrap(self._stroke_width)

    def stroke_linecap(self) -> LineCap | None:
        return self._stroke_linecap

    def stroke_linejoin(self) -> LineJoin | None:
        return self._stroke_linejoin

    def stroke_dasharray(self) -> tuple[float, ...] | None:
        return _unwrap(self._stroke_dasharray)

    def stroke_miterlimit(self) -> float | None:
        return _unwrap(self._stroke_miterlimit)

    def fill_rule(self) -> FillRule | None:
        return self._fill_rule
