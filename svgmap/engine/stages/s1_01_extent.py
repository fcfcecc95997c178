"""S1.01 — Document Extent.

Largest absolute endpoint operand on each axis over the whole document. Must
finish before any coordinate is transformed: it fixes the centering offset.
"""

from __future__ import annotations

import logging

from svgmap.engine.context import LoadContext
from svgmap.engine.coordinates import document_extent
from svgmap.engine.registry import Layer, stage

logger = logging.getLogger(__name__)


@stage(
    id="S1.01",
    layer=Layer.GEOMETRY,
    dependencies=["S0.02"],
    description="Compute the document extent",
)
def extent(ctx: LoadContext) -> None:
    ctx.extent = document_extent(seg.commands for seg in ctx.segments)
    logger.debug("Document extent: %.3f x %.3f", ctx.extent.x, ctx.extent.y)
