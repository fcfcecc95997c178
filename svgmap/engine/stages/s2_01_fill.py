"""S2.01 — Fill Tessellation.

One fill mesh per segment whose style has a usable fill color.
"""

from __future__ import annotations

from svgmap.engine.context import GeometryPass, LoadContext
from svgmap.engine.registry import Layer, stage
from svgmap.engine.strategy import PassKind
from svgmap.engine.tessellation import FillOptions, tessellate_fill
from svgmap.errors import TessellationError


@stage(
    id="S2.01",
    layer=Layer.TESSELLATION,
    dependencies=["S1.02"],
    description="Tessellate fills",
)
def fill_tessellation(ctx: LoadContext) -> None:
    for seg in ctx.segments:
        render_path = ctx.render_paths.get(seg.index)
        if render_path is None or not seg.style.has_fill():
            continue
        options = FillOptions(
            tolerance=ctx.config.tolerance,
            fill_rule=seg.style.fill_rule() or ctx.config.fill_rule,
        )
        try:
            geometry = tessellate_fill(render_path, options, ctx.config.translation)
        except TessellationError as e:
            ctx.report(e, "S2.01", seg.index)
            continue
        except Exception as e:
            ctx.report(TessellationError(f"unexpected {type(e).__name__}: {e}"), "S2.01", seg.index)
            continue
        ctx.passes.append(GeometryPass(seg.index, PassKind.FILL, geometry))
