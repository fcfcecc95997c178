"""Tests for document reading and path extraction."""

import pytest

from svgmap.errors import DocumentReadError
from svgmap.svg.document import extract_paths, parse_document, read_document
from svgmap.svg.style import StyleAttributes


def test_extracts_in_document_order(mixed_svg):
    paths = extract_paths(parse_document(mixed_svg))
    assert [p.element_id for p in paths] == ["room", "door"]
    assert paths[0].class_name == "room"
    assert paths[1].path_data == "m 5,20 h 10"


def test_style_string_is_preserved(single_stroke_svg):
    (path,) = extract_paths(parse_document(single_stroke_svg))
    style = StyleAttributes(path.style)
    assert style["stroke"] == "#ff0000"
    assert style["stroke-width"] == "2"
    assert style["fill"] == "none"


def test_inherited_and_presentation_styles(inherited_svg):
    paths = extract_paths(parse_document(inherited_svg))
    assert [p.element_id for p in paths] == ["a", "b"]

    a = StyleAttributes(paths[0].style)
    assert a["stroke"] == "#123456"
    assert a["stroke-width"] == "3"
    assert a["fill"] == "none"

    # Own declarations win over inherited ones.
    b = StyleAttributes(paths[1].style)
    assert b["stroke"] == "#654321"
    assert b["stroke-width"] == "3"


def test_defs_and_unstyled_paths_skipped(inherited_svg):
    ids = [p.element_id for p in extract_paths(parse_document(inherited_svg))]
    assert "template" not in ids
    assert "bare" not in ids


def test_inline_style_beats_presentation_attribute():
    svg = '<svg><path stroke="red" style="stroke:blue" d="M0 0 L1 1"/></svg>'
    (path,) = extract_paths(parse_document(svg))
    assert StyleAttributes(path.style)["stroke"] == "blue"


def test_empty_path_data_skipped():
    svg = '<svg><path style="stroke:red" d="  "/><path style="stroke:red" d="M0 0 L1 1"/></svg>'
    assert len(extract_paths(parse_document(svg))) == 1


def test_parse_errors():
    with pytest.raises(DocumentReadError):
        parse_document("")
    with pytest.raises(DocumentReadError):
        parse_document("<svg><path></svg>")


def test_read_document_from_file(tmp_path, filled_rect_svg):
    file = tmp_path / "floor.svg"
    file.write_text(filled_rect_svg, encoding="utf-8")
    assert len(extract_paths(read_document(file))) == 1
    assert len(extract_paths(read_document(str(file)))) == 1


def test_read_document_from_markup(filled_rect_svg):
    assert len(extract_paths(read_document(filled_rect_svg))) == 1


def test_read_missing_file(tmp_path):
    with pytest.raises(DocumentReadError) as exc:
        read_document(tmp_path / "missing.svg")
    assert exc.value.fatal


def test_markup_with_byte_order_mark(filled_rect_svg):
    assert len(extract_paths(read_document("\ufeff\n" + filled_rect_svg))) == 1


def test_file_with_byte_order_mark(tmp_path, filled_rect_svg):
    file = tmp_path / "bom.svg"
    file.write_bytes(b"\xef\xbb\xbf" + filled_rect_svg.encode("utf-8"))
    assert len(extract_paths(read_document(file))) == 1


def test_deeply_nested_groups():
    depth = 5000
    svg = (
        '<svg><g stroke="#000">' + "<g>" * depth
        + '<path id="deep" d="M0,0 L1,0"/>'
        + "</g>" * depth + '</g><path id="after" style="stroke:red" d="M0,0 L1,1"/></svg>'
    )
    paths = extract_paths(parse_document(svg))
    assert [p.element_id for p in paths] == ["deep", "after"]
    assert paths[0].style == "stroke:#000"
