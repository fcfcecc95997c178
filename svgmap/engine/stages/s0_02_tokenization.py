"""S0.02 — Tokenization.

Parse each extracted style string and tokenize its path data. A segment whose
path data is malformed is reported and dropped; the rest of the document
still loads.
"""

from __future__ import annotations

from svgmap.engine.context import LoadContext, PathSegment
from svgmap.engine.registry import Layer, stage
from svgmap.errors import MalformedPathData
from svgmap.svg.path_data import tokenize_path
from svgmap.svg.style import StyleAttributes


@stage(
    id="S0.02",
    layer=Layer.EXTRACTION,
    dependencies=["S0.01"],
    description="Parse styles and tokenize path data",
)
def tokenization(ctx: LoadContext) -> None:
    segments: list[PathSegment] = []
    for index, raw in enumerate(ctx.raw_paths):
        try:
            commands = tokenize_path(raw.path_data)
            style = StyleAttributes(raw.style)
        except MalformedPathData as e:
            ctx.report(e, "S0.02", index)
            continue
        except Exception as e:
            ctx.report(MalformedPathData(f"unexpected {type(e).__name__}: {e}"), "S0.02", index)
            continue
        segments.append(
            PathSegment(
                index=index,
                style=style,
                commands=tuple(commands),
                element_id=raw.element_id,
                class_name=raw.class_name,
            )
        )
    ctx.segments = segments
