"""LoadContext: the single mutable state object flowing through all stages.

Per-segment results are keyed by segment index (render_paths) or carry it
(passes, records); document-wide results live on the context itself.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Hashable

from svgmap.engine.config import LoaderConfig
from svgmap.engine.coordinates import CoordinateTransform, DocumentExtent, RenderPath
from svgmap.engine.runtime import HostRuntime
from svgmap.engine.strategy import LiteralStrategy, PassKind, StyleStrategy
from svgmap.engine.tessellation import GeometryBuffer, Translation
from svgmap.errors import SvgMapError
from svgmap.models.report import Diagnostic
from svgmap.svg.colors import Color
from svgmap.svg.document import RawPath
from svgmap.svg.path_data import PathCommand
from svgmap.svg.style import StyleAttributes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathSegment:
    """One shape node: its parsed style and its commands, in document order."""

    index: int
    style: StyleAttributes
    commands: tuple[PathCommand, ...]
    element_id: str | None = None
    class_name: str | None = None


@dataclass(frozen=True)
class GeometryPass:
    segment_index: int
    kind: PassKind
    geometry: GeometryBuffer


@dataclass(frozen=True)
class RenderRecord:
    """A mesh handed to the runtime, with the color and semantics it got."""

    segment_index: int
    kind: PassKind
    geometry: GeometryBuffer
    color: Color
    translation: Translation
    handle: Hashable | None = None
    semantics: Any = None
    element_id: str | None = None
    class_name: str | None = None


@dataclass
class LoadContext:
    """Shared state flowing through the entire load."""

    # Parsed document root
    root: ET.Element | None = None
    config: LoaderConfig = field(default_factory=LoaderConfig)
    strategy: StyleStrategy = field(default_factory=LiteralStrategy)
    runtime: HostRuntime | None = None

    # S0.01
    raw_paths: list[RawPath] = field(default_factory=list)
    # S0.02 (segments with malformed path data are absent)
    segments: list[PathSegment] = field(default_factory=list)
    # S1.01
    extent: DocumentExtent | None = None
    # S1.02
    transform: CoordinateTransform | None = None
    render_paths: dict[int, RenderPath] = field(default_factory=dict)
    # S2.x
    passes: list[GeometryPass] = field(default_factory=list)
    # S3.01
    records: list[RenderRecord] = field(default_factory=list)
    parent: Hashable | None = None

    diagnostics: list[Diagnostic] = field(default_factory=list)
    completed_stages: set[str] = field(default_factory=set)
    # Stage ID → error message for stages that failed outright
    errors: dict[str, str] = field(default_factory=dict)

    def segment(self, index: int) -> PathSegment:
        for seg in self.segments:
            if seg.index == index:
                return seg
        raise KeyError(index)

    def report(self, error: SvgMapError, stage: str, segment: int | None = None) -> None:
        """Record a recoverable error against a stage (and segment)."""
        element_id = None
        if segment is not None and segment < len(self.raw_paths):
            element_id = self.raw_paths[segment].element_id
        self.diagnostics.append(Diagnostic.from_error(error, stage, segment, element_id))
        logger.warning("%s segment=%s id=%s: %s", stage, segment, element_id, error)
