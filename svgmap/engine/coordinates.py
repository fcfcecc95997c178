"""Document space → render space.

The document extent is folded over every command first; it fixes the
centering offset. Each path is then replayed once, strictly in order, through
``resolve_path``: the cursor (current point and subpath start, in document
space) is an explicit accumulator because relative commands and H/V cannot be
resolved without it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from svgmap.engine.config import LoaderConfig
from svgmap.errors import UnsupportedPathCommand
from svgmap.svg.path_data import (
    ClosePath,
    CubicCurveTo,
    EllipticalArcTo,
    HorizontalLineTo,
    LineTo,
    MoveTo,
    PathCommand,
    QuadraticCurveTo,
    SmoothCubicCurveTo,
    SmoothQuadraticCurveTo,
    VerticalLineTo,
    endpoint,
)

logger = logging.getLogger(__name__)

_ROTATE_90 = np.array([[0.0, -1.0], [1.0, 0.0]])
_SWAP_AXES = np.array([[0.0, 1.0], [1.0, 0.0]])


@dataclass(frozen=True)
class DocumentExtent:
    """Largest absolute x and y endpoint operand seen in a document."""

    x: float = 0.0
    y: float = 0.0


def document_extent(paths: Iterable[Sequence[PathCommand]]) -> DocumentExtent:
    max_x = 0.0
    max_y = 0.0
    for commands in paths:
        for command in commands:
            x, y = endpoint(command)
            if x is not None:
                max_x = max(max_x, abs(x))
            if y is not None:
                max_y = max(max_y, abs(y))
    return DocumentExtent(max_x, max_y)


@dataclass(frozen=True)
class CoordinateTransform:
    """p' = S · W · R · (p − offset) + render_offset."""

    offset: tuple[float, float] = (0.0, 0.0)
    rotate_90: bool = False
    mirror: bool = False
    scale_x: float = 1.0
    scale_y: float = 1.0
    render_offset: tuple[float, float] = (0.0, 0.0)

    @classmethod
    def from_config(cls, config: LoaderConfig, extent: DocumentExtent) -> "CoordinateTransform":
        offset = (extent.x / 2.0, extent.y / 2.0) if config.center else (0.0, 0.0)

        # After an odd number of axis swaps the render x axis spans the document's y extent.
        swapped = config.rotate_90 != config.mirror
        span_x, span_y = (extent.y, extent.x) if swapped else (extent.x, extent.y)

        sx = config.scale_x
        sy = config.scale_y
        explicit = sx is not None or sy is not None
        if sx is None and config.canvas_width and span_x > 0:
            sx = config.canvas_width / span_x
        if sy is None and config.canvas_height and span_y > 0:
            sy = config.canvas_height / span_y
        if config.preserve_aspect and not explicit:
            fitted = [s for s in (sx, sy) if s is not None]
            if fitted:
                sx = sy = min(fitted)
        sx = 1.0 if sx is None else sx
        sy = 1.0 if sy is None else sy
        if config.flip_y:
            sy = -sy

        return cls(
            offset=offset,
            rotate_90=config.rotate_90,
            mirror=config.mirror,
            scale_x=sx,
            scale_y=sy,
            render_offset=config.render_offset,
        )

    @property
    def linear(self) -> NDArray[np.float64]:
        """The 2×2 linear part S · W · R."""
        m = np.eye(2)
        if self.rotate_90:
            m = _ROTATE_90 @ m
        if self.mirror:
            m = _SWAP_AXES @ m
        return np.diag([self.scale_x, self.scale_y]) @ m

    @property
    def width_scale(self) -> float:
        """Factor that carries a document length (stroke width, dash) into render space."""
        return math.sqrt(abs(float(np.linalg.det(self.linear))))

    def apply(self, x: float, y: float) -> tuple[float, float]:
        px = x - self.offset[0]
        py = y - self.offset[1]
        if self.rotate_90:
            px, py = -py, px
        if self.mirror:
            px, py = py, px
        return (px * self.scale_x + self.render_offset[0], py * self.scale_y + self.render_offset[1])


@dataclass(frozen=True)
class RenderPath:
    """Absolute commands in render space. Never transformed again."""

    commands: tuple[PathCommand, ...] = ()

    def __iter__(self) -> Iterator[PathCommand]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)


class Cursor(NamedTuple):
    """Document-space state threaded through the fold."""

    current: tuple[float, float] = (0.0, 0.0)
    start: tuple[float, float] = (0.0, 0.0)


def _absolute(cursor: Cursor, x: float, y: float, relative: bool) -> tuple[float, float]:
    if relative:
        return (cursor.current[0] + x, cursor.current[1] + y)
    return (x, y)


def _transform_arc(
    command: EllipticalArcTo, end: tuple[float, float], transform: CoordinateTransform
) -> EllipticalArcTo:
    """Re-express an arc's ellipse after the linear part of the transform."""
    linear = transform.linear
    phi = math.radians(command.x_axis_rotation)
    rotation = np.array([[math.cos(phi), -math.sin(phi)], [math.sin(phi), math.cos(phi)]])
    axes = linear @ rotation @ np.diag([abs(command.rx), abs(command.ry)])
    u, radii, _ = np.linalg.svd(axes)
    angle = math.degrees(math.atan2(u[1, 0], u[0, 0]))
    # A reflection reverses the angular direction of the sweep.
    sweep = command.sweep if np.linalg.det(linear) > 0 else not command.sweep
    return EllipticalArcTo(float(radii[0]), float(radii[1]), angle, command.large_arc, sweep, *end)


def step(
    cursor: Cursor, command: PathCommand, transform: CoordinateTransform
) -> tuple[Cursor, PathCommand]:
    """Resolve one command against the cursor. Pure; raises UnsupportedPathCommand."""
    t = transform.apply

    if isinstance(command, MoveTo):
        p = _absolute(cursor, command.x, command.y, command.relative)
        return Cursor(p, p), MoveTo(*t(*p))
    if isinstance(command, LineTo):
        p = _absolute(cursor, command.x, command.y, command.relative)
        return Cursor(p, cursor.start), LineTo(*t(*p))
    if isinstance(command, HorizontalLineTo):
        x = cursor.current[0] + command.x if command.relative else command.x
        p = (x, cursor.current[1])
        return Cursor(p, cursor.start), LineTo(*t(*p))
    if isinstance(command, VerticalLineTo):
        y = cursor.current[1] + command.y if command.relative else command.y
        p = (cursor.current[0], y)
        return Cursor(p, cursor.start), LineTo(*t(*p))
    if isinstance(command, QuadraticCurveTo):
        c = _absolute(cursor, command.x1, command.y1, command.relative)
        p = _absolute(cursor, command.x, command.y, command.relative)
        return Cursor(p, cursor.start), QuadraticCurveTo(*t(*c), *t(*p))
    if isinstance(command, CubicCurveTo):
        c1 = _absolute(cursor, command.x1, command.y1, command.relative)
        c2 = _absolute(cursor, command.x2, command.y2, command.relative)
        p = _absolute(cursor, command.x, command.y, command.relative)
        return Cursor(p, cursor.start), CubicCurveTo(*t(*c1), *t(*c2), *t(*p))
    if isinstance(command, EllipticalArcTo):
        p = _absolute(cursor, command.x, command.y, command.relative)
        return Cursor(p, cursor.start), _transform_arc(command, t(*p), transform)
    if isinstance(command, ClosePath):
        return Cursor(cursor.start, cursor.start), ClosePath()
    raise UnsupportedPathCommand(command)


def resolve_path(
    commands: Sequence[PathCommand], transform: CoordinateTransform
) -> tuple[RenderPath, list[UnsupportedPathCommand]]:
    """Fold the commands left to right into a RenderPath.

    Unsupported commands are skipped and returned; the cursor still moves to
    their endpoint so later relative commands land where the author meant.
    """
    cursor = Cursor()
    resolved: list[PathCommand] = []
    unsupported: list[UnsupportedPathCommand] = []

    for command in commands:
        try:
            cursor, out = step(cursor, command, transform)
        except UnsupportedPathCommand as e:
            unsupported.append(e)
            if isinstance(command, (SmoothCubicCurveTo, SmoothQuadraticCurveTo)):
                cursor = Cursor(_absolute(cursor, command.x, command.y, command.relative), cursor.start)
            continue
        resolved.append(out)

    if unsupported:
        logger.debug("Skipped %d unsupported commands", len(unsupported))
    return RenderPath(tuple(resolved)), unsupported
