"""S1.02 — Coordinate Resolution.

Fold each segment's commands into an absolute render-space path.
"""

from __future__ import annotations

from svgmap.engine.context import LoadContext
from svgmap.engine.coordinates import CoordinateTransform, resolve_path
from svgmap.engine.registry import Layer, stage


@stage(
    id="S1.02",
    layer=Layer.GEOMETRY,
    dependencies=["S1.01"],
    description="Resolve commands into render space",
)
def coordinate_resolution(ctx: LoadContext) -> None:
    ctx.transform = CoordinateTransform.from_config(ctx.config, ctx.extent)
    for seg in ctx.segments:
        render_path, unsupported = resolve_path(seg.commands, ctx.transform)
        for error in unsupported:
            ctx.report(error, "S1.02", seg.index)
        ctx.render_paths[seg.index] = render_path
