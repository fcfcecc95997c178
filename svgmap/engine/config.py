"""Loader configuration: target space, stroke defaults and pass gating."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from svgmap.svg.style import FillRule, LineCap, LineJoin

if TYPE_CHECKING:
    from svgmap.config import Settings


@dataclass
class LoaderConfig:
    """Controls how document coordinates map to render space and how paths are meshed."""

    # Target canvas; scale = canvas size / document extent when no explicit scale
    canvas_width: float | None = None
    canvas_height: float | None = None
    # Explicit per-axis scale, wins over the canvas (y sign is applied by flip_y)
    scale_x: float | None = None
    scale_y: float | None = None
    # Use the smaller canvas scale on both axes
    preserve_aspect: bool = True

    # Subtract half the document extent so the drawing is centred on the origin
    center: bool = True
    # SVG is y-down; most render spaces are y-up
    flip_y: bool = True
    rotate_90: bool = False
    # Swap x and y after rotation
    mirror: bool = False
    # Translation applied in render space after scaling
    render_offset: tuple[float, float] = (0.0, 0.0)
    # Entity translation handed to the runtime with every mesh
    translation: tuple[float, float, float] = (0.0, 0.0, 0.0)

    # Max distance between a curve and its flattened polyline (render units)
    tolerance: float = 0.1

    # Stroke width in render units; None = style width scaled into render space
    stroke_width: float | None = None
    default_linecap: LineCap = LineCap.ROUND
    default_linejoin: LineJoin = LineJoin.ROUND
    miter_limit: float = 4.0
    apply_dashes: bool = True

    # Used when the style carries no fill-rule
    fill_rule: FillRule = FillRule.EVEN_ODD

    stroke_enabled: bool = True
    fill_enabled: bool = True

    # Spawn every mesh as a child of one group entity
    as_unit: bool = False

    def __post_init__(self) -> None:
        if not math.isfinite(self.tolerance) or self.tolerance <= 0:
            raise ValueError(f"tolerance must be a positive number, got {self.tolerance}")

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides) -> "LoaderConfig":
        values = {
            "canvas_width": settings.svgmap_canvas_width,
            "canvas_height": settings.svgmap_canvas_height,
            "tolerance": settings.svgmap_tolerance,
        }
        values.update(overrides)
        return cls(**values)
