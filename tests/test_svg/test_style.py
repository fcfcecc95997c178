"""Tests for the style model."""

import pytest

from svgmap.errors import MissingStyleProperty, StylePropertyError
from svgmap.svg.colors import Color
from svgmap.svg.style import (
    DEFAULT_STROKE_WIDTH,
    FillRule,
    LineCap,
    LineJoin,
    StyleAttributes,
    parse_declarations,
)


class TestDeclarations:
    def test_splits_on_first_colon(self):
        assert parse_declarations("fill:url(#a:b);stroke:red") == {"fill": "url(#a:b)", "stroke": "red"}

    def test_malformed_pairs_skipped(self):
        props = parse_declarations("stroke:#fff;;garbage;:x; fill : red ")
        assert props == {"stroke": "#fff", "fill": "red"}

    def test_empty(self):
        assert parse_declarations("") == {}


class TestDefaultStyle:
    def test_stroke_is_opaque_black(self):
        assert StyleAttributes().stroke() == Color(0, 0, 0, 255)

    def test_no_fill(self):
        style = StyleAttributes()
        assert style.fill() is None
        assert not style.has_fill()

    def test_typed_fields(self):
        style = StyleAttributes()
        assert style.stroke_width() == pytest.approx(DEFAULT_STROKE_WIDTH)
        assert style.stroke_linecap() is LineCap.BUTT
        assert style.stroke_linejoin() is LineJoin.MITER
        assert style.stroke_opacity() == 1.0


class TestPaint:
    def test_hex_stroke(self):
        assert StyleAttributes("stroke:#ff0000").stroke() == Color(255, 0, 0, 255)

    def test_short_hex_and_named(self):
        assert StyleAttributes("stroke:#f00").stroke() == Color.RED
        assert StyleAttributes("fill:blue").fill() == Color(0, 0, 255, 255)

    def test_none_and_current_color(self):
        assert StyleAttributes("stroke:none").stroke() is None
        assert StyleAttributes("stroke:currentColor").stroke() is None
        assert StyleAttributes("fill:url(#grad)").fill() is None

    def test_unparseable_literal_is_none(self):
        style = StyleAttributes("stroke:notacolor")
        assert style.stroke() is None
        assert not style.has_stroke()

    def test_missing_key_raises(self):
        style = StyleAttributes("fill:none")
        with pytest.raises(MissingStyleProperty) as exc:
            style.stroke()
        assert exc.value.name == "stroke"
        assert exc.value.fatal

    def test_has_stroke_never_raises(self):
        assert StyleAttributes("fill:red").has_stroke() is False

    def test_half_opacity_is_gamma_encoded(self):
        style = StyleAttributes("stroke:#000000;stroke-opacity:0.5")
        assert style.stroke() == Color(0, 0, 0, 187)

    def test_fill_opacity(self):
        style = StyleAttributes("fill:#ffffff;fill-opacity:0")
        assert style.fill() == Color(255, 255, 255, 0)

    def test_malformed_opacity_keeps_color_opaque(self):
        style = StyleAttributes("stroke:#00ff00;stroke-opacity:half")
        assert style.stroke() == Color(0, 255, 0, 255)
        with pytest.raises(StylePropertyError):
            style.stroke_opacity()

    @pytest.mark.parametrize("opacity", ["nan", "inf", "-inf", "nan%"])
    def test_non_finite_opacity_is_malformed(self, opacity):
        style = StyleAttributes(f"stroke:#00ff00;stroke-opacity:{opacity}")
        assert style.stroke() == Color(0, 255, 0, 255)
        with pytest.raises(StylePropertyError):
            style.stroke_opacity()


class TestTypedFields:
    def test_width_with_unit(self):
        assert StyleAttributes("stroke-width:2px").stroke_width() == 2.0
        assert StyleAttributes("stroke-width:0.5mm").stroke_width() == 0.5

    def test_malformed_width_raises(self):
        with pytest.raises(StylePropertyError) as exc:
            StyleAttributes("stroke-width:thick").stroke_width()
        assert exc.value.name == "stroke-width"
        assert not exc.value.fatal

    def test_out_of_range_width_raises(self):
        with pytest.raises(StylePropertyError):
            StyleAttributes("stroke-width:1e400px").stroke_width()

    def test_dasharray(self):
        assert StyleAttributes("stroke-dasharray:4, 2 1").stroke_dasharray() == (4.0, 2.0, 1.0)
        assert StyleAttributes("stroke-dasharray:none").stroke_dasharray() is None
        assert StyleAttributes("stroke:red").stroke_dasharray() is None

    def test_malformed_dasharray_raises(self):
        with pytest.raises(StylePropertyError):
            StyleAttributes("stroke-dasharray:a b").stroke_dasharray()

    def test_linejoin_synonyms(self):
        assert StyleAttributes("stroke-linejoin:butt").stroke_linejoin() is LineJoin.BEVEL
        assert StyleAttributes("stroke-linejoin:miterclip").stroke_linejoin() is LineJoin.MITER_CLIP
        assert StyleAttributes("stroke-linejoin:miter-clip").stroke_linejoin() is LineJoin.MITER_CLIP
        assert StyleAttributes("stroke-linejoin:wobbly").stroke_linejoin() is None

    def test_linecap(self):
        assert StyleAttributes("stroke-linecap:round").stroke_linecap() is LineCap.ROUND
        assert StyleAttributes("stroke:red").stroke_linecap() is None

    def test_fill_rule_and_miterlimit(self):
        style = StyleAttributes("fill-rule:nonzero;stroke-miterlimit:10")
        assert style.fill_rule() is FillRule.NON_ZERO
        assert style.stroke_miterlimit() == 10.0
        assert StyleAttributes("fill:red").fill_rule() is None


class TestMappingView:
    def test_round_trips_raw_values(self):
        style = StyleAttributes("fill:#abcdef;stroke-width:3px;custom:anything at all")
        assert style["fill"] == "#abcdef"
        assert style["stroke-width"] == "3px"
        assert style.get("custom") == "anything at all"
        assert dict(style.properties) == {"fill": "#abcdef", "stroke-width": "3px", "custom": "anything at all"}

    def test_missing_key(self):
        style = StyleAttributes("fill:red")
        assert "stroke" not in style
        assert style.get("stroke", "none") == "none"
        with pytest.raises(MissingStyleProperty):
            style["stroke"]

    def test_read_only(self):
        style = StyleAttributes("fill:red")
        with pytest.raises(TypeError):
            style.properties["fill"] = "blue"

    def test_equality(self):
        assert StyleAttributes("fill:red;stroke:blue") == StyleAttributes("stroke:blue;fill:red")
        assert len({StyleAttributes("fill:red"), StyleAttributes("fill:red")}) == 1


@pytest.mark.parametrize(
    "text",
    [
        "",
        ";;;",
        "::::",
        "stroke",
        "stroke-width:",
        "stroke-opacity:%",
        "fill:#12",
        "a:b:c;d",
        "stroke:#000;stroke-opacity:nan",
        "fill:#000;fill-opacity:inf",
        "stroke:#000;stroke-opacity:-infinity%",
    ],
)
def test_construction_never_raises(text):
    style = StyleAttributes(text)
    style.has_stroke()
    style.has_fill()
