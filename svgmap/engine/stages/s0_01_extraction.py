"""S0.01 — Path Extraction.

Collect every styled element with path data, in document order.
"""

from __future__ import annotations

from svgmap.engine.context import LoadContext
from svgmap.engine.registry import Layer, stage
from svgmap.errors import DocumentReadError
from svgmap.svg.document import extract_paths


@stage(
    id="S0.01",
    layer=Layer.EXTRACTION,
    description="Extract (style, path data) pairs from the document",
)
def path_extraction(ctx: LoadContext) -> None:
    if ctx.root is None:
        raise DocumentReadError("no document loaded")
    ctx.raw_paths = extract_paths(ctx.root)
