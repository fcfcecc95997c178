"""S3.01 — Strategy Dispatch.

Ask the strategy for a color per mesh, hand each mesh to the runtime, then let
the strategy attach its semantics to the spawned entity. Fill meshes of a
segment come before its stroke mesh.
"""

from __future__ import annotations

import logging

from svgmap.engine.context import LoadContext, RenderRecord
from svgmap.engine.registry import Layer, stage
from svgmap.engine.runtime import EntityRef
from svgmap.engine.strategy import PassKind

logger = logging.getLogger(__name__)

_ORIGIN = (0.0, 0.0, 0.0)


@stage(
    id="S3.01",
    layer=Layer.DISPATCH,
    dependencies=["S2.01", "S2.02"],
    description="Color, spawn and annotate meshes",
)
def dispatch(ctx: LoadContext) -> None:
    segments = {seg.index: seg for seg in ctx.segments}
    passes = sorted(ctx.passes, key=lambda p: (p.segment_index, p.kind is PassKind.STROKE))

    # Colors first: a missing style property aborts before anything is spawned.
    colors = [ctx.strategy.color_for(segments[p.segment_index].style, p.kind) for p in passes]

    runtime = ctx.runtime
    if runtime is not None and ctx.config.as_unit and passes:
        ctx.parent = runtime.spawn_group(ctx.config.translation)

    for geometry_pass, color in zip(passes, colors):
        seg = segments[geometry_pass.segment_index]
        # Children of a group are positioned by the group.
        translation = _ORIGIN if ctx.parent is not None else geometry_pass.geometry.translation
        handle = None
        semantics = None
        if runtime is not None:
            handle = runtime.spawn(geometry_pass.geometry, color, translation, parent=ctx.parent)
            semantics = ctx.strategy.attach_semantics(seg.style, EntityRef(runtime, handle))
        ctx.records.append(
            RenderRecord(
                segment_index=seg.index,
                kind=geometry_pass.kind,
                geometry=geometry_pass.geometry,
                color=color,
                translation=translation,
                handle=handle,
                semantics=semantics,
                element_id=seg.element_id,
                class_name=seg.class_name,
            )
        )

    logger.debug("Dispatched %d meshes", len(ctx.records))
