"""svgmap: turn SVG path documents into triangulated stroke and fill meshes."""

from svgmap.config import configure_logging, settings
from svgmap.engine.config import LoaderConfig
from svgmap.engine.context import PathSegment, RenderRecord
from svgmap.engine.runtime import EntityRef, HostRuntime, RecordingRuntime
from svgmap.engine.strategy import LiteralStrategy, PassKind, StyleStrategy
from svgmap.engine.tessellation import GeometryBuffer
from svgmap.errors import (
    DocumentReadError,
    MalformedPathData,
    MissingStyleProperty,
    StylePropertyError,
    SvgMapError,
    TessellationError,
    UnsupportedPathCommand,
)
from svgmap.loader import LoadResult, load_svg_map, tokenize_svg
from svgmap.svg.colors import Color
from svgmap.svg.style import StyleAttributes

__all__ = [
    "Color",
    "DocumentReadError",
    "EntityRef",
    "GeometryBuffer",
    "HostRuntime",
    "LiteralStrategy",
    "LoadResult",
    "LoaderConfig",
    "MalformedPathData",
    "MissingStyleProperty",
    "PassKind",
    "PathSegment",
    "RecordingRuntime",
    "RenderRecord",
    "StyleAttributes",
    "StylePropertyError",
    "StyleStrategy",
    "SvgMapError",
    "TessellationError",
    "UnsupportedPathCommand",
    "configure_logging",
    "load_svg_map",
    "settings",
    "tokenize_svg",
]
