"""S2.02 — Stroke Tessellation.

One stroke mesh per segment whose style has a usable stroke color. Widths and
dash lengths are document lengths and get scaled into render space unless the
config fixes the width.
"""

from __future__ import annotations

from svgmap.engine.config import LoaderConfig
from svgmap.engine.context import GeometryPass, LoadContext
from svgmap.engine.coordinates import CoordinateTransform
from svgmap.engine.registry import Layer, stage
from svgmap.engine.strategy import PassKind
from svgmap.engine.tessellation import StrokeOptions, tessellate_stroke
from svgmap.errors import StylePropertyError, TessellationError
from svgmap.svg.style import StyleAttributes


def stroke_options(
    style: StyleAttributes, config: LoaderConfig, transform: CoordinateTransform
) -> StrokeOptions:
    """Raises StylePropertyError for a malformed width, dash array or miter limit."""
    scale = transform.width_scale
    width = config.stroke_width if config.stroke_width is not None else style.stroke_width() * scale

    dashes = style.stroke_dasharray() if config.apply_dashes else None
    if dashes:
        dashes = tuple(d * scale for d in dashes)

    miter_limit = style.stroke_miterlimit()
    if miter_limit is None:
        miter_limit = config.miter_limit

    return StrokeOptions(
        width=width,
        cap=style.stroke_linecap() or config.default_linecap,
        join=style.stroke_linejoin() or config.default_linejoin,
        miter_limit=max(1.0, miter_limit),
        tolerance=config.tolerance,
        dash_pattern=dashes,
    )


@stage(
    id="S2.02",
    layer=Layer.TESSELLATION,
    dependencies=["S1.02"],
    description="Tessellate strokes",
)
def stroke_tessellation(ctx: LoadContext) -> None:
    for seg in ctx.segments:
        render_path = ctx.render_paths.get(seg.index)
        if render_path is None or not seg.style.has_stroke():
            continue
        try:
            options = stroke_options(seg.style, ctx.config, ctx.transform)
            geometry = tessellate_stroke(render_path, options, ctx.config.translation)
        except (StylePropertyError, TessellationError) as e:
            ctx.report(e, "S2.02", seg.index)
            continue
        except Exception as e:
            ctx.report(TessellationError(f"unexpected {type(e).__name__}: {e}"), "S2.02", seg.index)
            continue
        ctx.passes.append(GeometryPass(seg.index, PassKind.STROKE, geometry))
