"""Public entry points: load a document into meshes, or just tokenize it."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Hashable

from svgmap.config import settings
from svgmap.engine.config import LoaderConfig
from svgmap.engine.context import LoadContext, PathSegment, RenderRecord
from svgmap.engine.coordinates import DocumentExtent
from svgmap.engine.pipeline import Pipeline
from svgmap.engine.registry import Layer
from svgmap.engine.runtime import HostRuntime, RecordingRuntime
from svgmap.engine.strategy import LiteralStrategy, PassKind, StyleStrategy
from svgmap.models.report import Diagnostic, LoadReport
from svgmap.svg.document import read_document

logger = logging.getLogger(__name__)

Source = str | os.PathLike[str] | ET.Element


@dataclass
class LoadResult:
    records: list[RenderRecord] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    parent: Hashable | None = None
    extent: DocumentExtent = field(default_factory=DocumentExtent)
    errors: dict[str, str] = field(default_factory=dict)
    runtime: HostRuntime | None = None
    segments: int = 0
    paths: int = 0
    completed_stages: set[str] = field(default_factory=set)

    @classmethod
    def from_context(cls, ctx: LoadContext) -> "LoadResult":
        return cls(
            records=list(ctx.records),
            diagnostics=list(ctx.diagnostics),
            parent=ctx.parent,
            extent=ctx.extent or DocumentExtent(),
            errors=dict(ctx.errors),
            runtime=ctx.runtime,
            segments=len(ctx.segments),
            paths=len(ctx.raw_paths),
            completed_stages=set(ctx.completed_stages),
        )

    def of_kind(self, kind: PassKind) -> list[RenderRecord]:
        return [r for r in self.records if r.kind is kind]

    def report(self) -> LoadReport:
        return LoadReport(
            paths=self.paths,
            segments=self.segments,
            fill_meshes=len(self.of_kind(PassKind.FILL)),
            stroke_meshes=len(self.of_kind(PassKind.STROKE)),
            triangles=sum(r.geometry.triangle_count for r in self.records),
            extent=(self.extent.x, self.extent.y),
            completed_stages=sorted(self.completed_stages),
            diagnostics=list(self.diagnostics),
            errors=dict(self.errors),
        )


def _root(source: Source) -> ET.Element:
    if isinstance(source, ET.Element):
        return source
    return read_document(source)


def load_svg_map(
    source: Source,
    strategy: StyleStrategy | None = None,
    runtime: HostRuntime | None = None,
    config: LoaderConfig | None = None,
) -> LoadResult:
    """Load a document into meshes handed to ``runtime``.

    ``source`` is a file path, a markup string or an already parsed element.
    Without a config the defaults come from the environment (``SVGMAP_*``).
    Without a runtime the meshes are kept by a fresh ``RecordingRuntime``
    (available as ``result.runtime``). Raises DocumentReadError and
    MissingStyleProperty; every other problem becomes a diagnostic.
    """
    ctx = LoadContext(
        root=_root(source),
        config=config or LoaderConfig.from_settings(settings),
        strategy=strategy or LiteralStrategy(),
        runtime=runtime if runtime is not None else RecordingRuntime(),
    )
    Pipeline().run(ctx)
    result = LoadResult.from_context(ctx)
    logger.info(
        "Loaded %d/%d paths into %d meshes (%d diagnostics)",
        result.segments,
        result.paths,
        len(result.records),
        len(result.diagnostics),
    )
    return result


def tokenize_svg(source: Source) -> list[PathSegment]:
    """Extract and tokenize every path without transforming or meshing it.

    Segments with malformed path data are left out (and logged).
    """
    ctx = LoadContext(root=_root(source))
    Pipeline().run_layer(ctx, Layer.EXTRACTION)
    return ctx.segments
