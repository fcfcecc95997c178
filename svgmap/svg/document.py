"""Document reading and path extraction over xml.etree.

Collects every element carrying path data together with the style it is
drawn with, in document order.
"""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from svgmap.errors import DocumentReadError
from svgmap.svg.style import parse_declarations

logger = logging.getLogger(__name__)

# Properties that flow from ancestors and presentation attributes into a path's style.
STYLE_PROPERTIES = (
    "fill",
    "fill-opacity",
    "fill-rule",
    "stroke",
    "stroke-opacity",
    "stroke-width",
    "stroke-linecap",
    "stroke-linejoin",
    "stroke-miterlimit",
    "stroke-dasharray",
)

# Containers whose content is referenced elsewhere and never drawn in place.
_NON_RENDERED = {"defs", "symbol", "clipPath", "mask", "marker", "pattern"}

# Byte order mark and whitespace allowed before the markup starts.
_LEADING_NOISE = "\ufeff \t\r\n"


@dataclass(frozen=True)
class RawPath:
    """One drawable node: its merged style string and its raw path data."""

    style: str
    path_data: str
    element_id: str | None = None
    class_name: str | None = None


def _strip_ns(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def parse_document(text: str) -> ET.Element:
    """Parse SVG markup, returning the root element."""
    text = (text or "").lstrip(_LEADING_NOISE)
    if not text:
        raise DocumentReadError("empty document")
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise DocumentReadError(f"could not parse document: {e}") from e


def read_document(source: str | os.PathLike[str]) -> ET.Element:
    """Read a document from a file path or an in-memory markup string."""
    if isinstance(source, str) and source.lstrip(_LEADING_NOISE).startswith("<"):
        return parse_document(source)
    try:
        text = Path(source).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentReadError(f"could not read {source}: {e}") from e
    logger.debug("Read %d characters from %s", len(text), source)
    return parse_document(text)


def _own_style(element: ET.Element) -> dict[str, str]:
    """Presentation attributes overridden by the inline style declarations."""
    style = {name: element.get(name).strip() for name in STYLE_PROPERTIES if element.get(name) is not None}
    inline = element.get("style")
    if inline:
        style.update(parse_declarations(inline))
    return style


def _format_style(style: dict[str, str]) -> str:
    return ";".join(f"{k}:{v}" for k, v in style.items())


def extract_paths(root: ET.Element) -> list[RawPath]:
    """All styled path-data nodes under ``root`` in document order."""
    found: list[RawPath] = []
    # Depth-first; children are pushed reversed to keep document order.
    stack: list[tuple[ET.Element, dict[str, str]]] = [(root, {})]
    while stack:
        element, inherited = stack.pop()
        if _strip_ns(element.tag) in _NON_RENDERED:
            continue

        style = {**inherited, **_own_style(element)}

        path_data = element.get("d")
        if path_data is not None and path_data.strip():
            if style:
                found.append(
                    RawPath(
                        style=_format_style(style),
                        path_data=path_data,
                        element_id=element.get("id"),
                        class_name=element.get("class"),
                    )
                )
            else:
                logger.warning("Skipping <%s id=%r>: path data without any style", _strip_ns(element.tag), element.get("id"))

        passed_down = {k: v for k, v in style.items() if k in STYLE_PROPERTIES}
        stack.extend((child, passed_down) for child in reversed(element))
    logger.debug("Extracted %d styled paths", len(found))
    return found
