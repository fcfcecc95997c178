"""Tessellation: render paths to triangle meshes.

Curves are flattened into polylines first (svgpathtools evaluates the
Béziers and arcs). Strokes are built from one quad per segment between the
two offset rails plus join and cap pieces; fills are the faces of the noded
ring arrangement selected by the fill rule. Either way the region is unioned
with shapely and cut into triangles by a constrained Delaunay triangulation,
so overlapping pieces never cover a pixel twice.
"""

from __future__ import annotations

import functools
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import numpy as np
import shapely
from numpy.typing import NDArray
from shapely.geometry import LineString, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import substring, unary_union
from svgpathtools import Arc, CubicBezier, QuadraticBezier

from svgmap.errors import TessellationError
from svgmap.svg.path_data import (
    ClosePath,
    CubicCurveTo,
    EllipticalArcTo,
    LineTo,
    MoveTo,
    PathCommand,
    QuadraticCurveTo,
)
from svgmap.svg.style import FillRule, LineCap, LineJoin
from svgmap.utils.geometry import (
    POINT_EPS,
    close_ring,
    dedupe_consecutive,
    triangle_areas,
    triangle_cross,
    unit_normals,
    winding_number,
)

logger = logging.getLogger(__name__)

# Upper bound on the pieces a single curve or round join is cut into.
_MAX_CURVE_SEGMENTS = 512
_MAX_ROUND_SEGMENTS = 64

Translation = tuple[float, float, float]


@dataclass(frozen=True, eq=False)
class GeometryBuffer:
    """Triangle list: (N, 3) float32 vertices and flat uint32 indices, both read-only."""

    vertices: NDArray[np.float32]
    indices: NDArray[np.uint32]
    translation: Translation = (0.0, 0.0, 0.0)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def triangles(self) -> NDArray[np.float32]:
        """(T, 3, 3) array of triangle corner positions."""
        return self.vertices[self.indices.reshape(-1, 3)]

    def area(self) -> float:
        return float(triangle_areas(self.triangles().astype(np.float64)).sum())


@dataclass(frozen=True, eq=False)
class Polyline:
    points: NDArray[np.float64]
    closed: bool = False


@dataclass(frozen=True)
class StrokeOptions:
    width: float = 1.0
    cap: LineCap = LineCap.BUTT
    join: LineJoin = LineJoin.MITER
    miter_limit: float = 4.0
    tolerance: float = 0.1
    dash_pattern: tuple[float, ...] | None = None
    dash_offset: float = 0.0


@dataclass(frozen=True)
class FillOptions:
    tolerance: float = 0.1
    fill_rule: FillRule = FillRule.EVEN_ODD


# ── Flattening ────────────────────────────────────────────────────────────


def _bezier_segment_count(control: NDArray[np.complex128], tolerance: float) -> int:
    """Wang's bound: enough uniform steps to stay within ``tolerance`` of the curve."""
    degree = len(control) - 1
    second = control[2:] - 2 * control[1:-1] + control[:-2]
    m = float(np.max(np.abs(second)))
    if m <= POINT_EPS:
        return 1
    n = math.ceil(math.sqrt(degree * (degree - 1) * m / (8.0 * tolerance)))
    return max(1, min(n, _MAX_CURVE_SEGMENTS))


def _sample_bezier(segment: QuadraticBezier | CubicBezier, tolerance: float) -> NDArray[np.float64]:
    control = np.array(segment.bpoints(), dtype=np.complex128)
    n = _bezier_segment_count(control, tolerance)
    samples = segment.poly()(np.linspace(0.0, 1.0, n + 1)[1:])
    samples[-1] = segment.end
    return np.column_stack([samples.real, samples.imag])


def _arc_step(radius: float, tolerance: float) -> float:
    """Largest angle whose chord stays within ``tolerance`` of a circle of ``radius``."""
    if tolerance >= radius:
        return math.pi / 2
    return 2.0 * math.acos(1.0 - tolerance / radius)


def _sample_arc(start: complex, command: EllipticalArcTo, tolerance: float) -> NDArray[np.float64]:
    end = complex(command.x, command.y)
    if abs(end - start) <= POINT_EPS:
        return np.empty((0, 2))
    if abs(command.rx) <= POINT_EPS or abs(command.ry) <= POINT_EPS:
        return np.array([[end.real, end.imag]])
    arc = Arc(start, complex(abs(command.rx), abs(command.ry)), command.x_axis_rotation,
              command.large_arc, command.sweep, end)
    radius = max(arc.radius.real, arc.radius.imag)
    n = math.ceil(math.radians(abs(arc.delta)) / _arc_step(radius, tolerance))
    n = max(1, min(n, _MAX_CURVE_SEGMENTS))
    samples = [arc.point(float(t)) for t in np.linspace(0.0, 1.0, n + 1)[1:-1]]
    samples.append(end)
    return np.array([[p.real, p.imag] for p in samples])


def flatten(path: Iterable[PathCommand], tolerance: float) -> list[Polyline]:
    """Render-space commands to polylines, one per subpath."""
    if tolerance <= 0:
        raise ValueError("tolerance must be positive")

    polylines: list[Polyline] = []
    chunks: list[NDArray[np.float64]] = []
    current = 0j
    start = 0j

    def finish(closed: bool) -> None:
        if chunks:
            polylines.append(Polyline(np.vstack(chunks), closed))
            chunks.clear()

    def begin() -> None:
        # Drawing after a closepath starts a new subpath at the old start point.
        if not chunks:
            chunks.append(np.array([[current.real, current.imag]]))

    for command in path:
        if isinstance(command, MoveTo):
            finish(False)
            current = start = complex(command.x, command.y)
            begin()
        elif isinstance(command, LineTo):
            begin()
            current = complex(command.x, command.y)
            chunks.append(np.array([[command.x, command.y]]))
        elif isinstance(command, QuadraticCurveTo):
            begin()
            segment = QuadraticBezier(current, complex(command.x1, command.y1), complex(command.x, command.y))
            chunks.append(_sample_bezier(segment, tolerance))
            current = segment.end
        elif isinstance(command, CubicCurveTo):
            begin()
            segment = CubicBezier(
                current,
                complex(command.x1, command.y1),
                complex(command.x2, command.y2),
                complex(command.x, command.y),
            )
            chunks.append(_sample_bezier(segment, tolerance))
            current = segment.end
        elif isinstance(command, EllipticalArcTo):
            begin()
            chunks.append(_sample_arc(current, command, tolerance))
            current = complex(command.x, command.y)
        elif isinstance(command, ClosePath):
            finish(True)
            current = start
        else:
            raise TessellationError(f"unexpected command in render path: {command!r}")

    finish(False)
    return polylines


# ── Triangulation ─────────────────────────────────────────────────────────


def _triangulate(region: BaseGeometry, translation: Translation) -> GeometryBuffer:
    polygons = [g for g in shapely.get_parts(region) if isinstance(g, Polygon) and not g.is_empty]
    if not polygons:
        raise TessellationError("region is empty")

    triangles = shapely.get_parts(shapely.constrained_delaunay_triangles(MultiPolygon(polygons)))
    corners = [np.asarray(t.exterior.coords)[:3, :2] for t in triangles if not t.is_empty]
    if not corners:
        raise TessellationError("triangulation produced no triangles")

    coords = np.array(corners, dtype=np.float64)
    cross = triangle_cross(coords)
    keep = np.abs(cross) > POINT_EPS
    coords, cross = coords[keep], cross[keep]
    if len(coords) == 0:
        raise TessellationError("all triangles are degenerate")
    # Counter-clockwise winding for every triangle.
    clockwise = cross < 0
    coords[clockwise] = coords[clockwise][:, [0, 2, 1]]

    unique, inverse = np.unique(coords.reshape(-1, 2), axis=0, return_inverse=True)
    vertices = np.column_stack([unique, np.zeros(len(unique))]).astype(np.float32)
    indices = inverse.reshape(-1).astype(np.uint32)
    vertices.flags.writeable = False
    indices.flags.writeable = False
    return GeometryBuffer(vertices, indices, translation)


def _geometry_errors(fn: Callable[..., GeometryBuffer]) -> Callable[..., GeometryBuffer]:
    """Re-raise anything the geometry libraries throw as a TessellationError."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs) -> GeometryBuffer:
        try:
            return fn(*args, **kwargs)
        except TessellationError:
            raise
        except Exception as e:
            raise TessellationError(f"{fn.__name__} failed: {type(e).__name__}: {e}") from e

    return wrapper


# ── Stroke ────────────────────────────────────────────────────────────────


def _round_segments(radius: float, tolerance: float) -> int:
    """shapely ``quad_segs`` for a round join/cap within ``tolerance``."""
    step = _arc_step(radius, tolerance)
    return max(1, min(_MAX_ROUND_SEGMENTS, math.ceil((math.pi / 2) / step)))


def _polygon(*points: NDArray[np.float64]) -> Polygon | None:
    poly = Polygon(points)
    return poly if poly.area > POINT_EPS else None


def _join(
    vertex: NDArray[np.float64],
    incoming: NDArray[np.float64],
    outgoing: NDArray[np.float64],
    half_width: float,
    options: StrokeOptions,
    quad_segs: int,
) -> Polygon | None:
    cross = incoming[0] * outgoing[1] - incoming[1] * outgoing[0]
    if abs(cross) <= POINT_EPS and float(incoming @ outgoing) > 0:
        return None  # collinear: the quads already meet
    if options.join is LineJoin.ROUND:
        return Point(vertex).buffer(half_width, quad_segs=quad_segs)

    # The gap opens on the outside of the turn.
    side = -1.0 if cross > 0 else 1.0
    normals = unit_normals(np.array([incoming, outgoing])) * side
    a = vertex + normals[0] * half_width
    b = vertex + normals[1] * half_width
    if options.join is LineJoin.BEVEL:
        return _polygon(vertex, a, b)

    bisector = normals[0] + normals[1]
    length = float(np.linalg.norm(bisector))
    if length <= POINT_EPS:
        return None  # full reversal: no outside corner to fill
    bisector /= length
    cos_half = float(bisector @ normals[0])
    ratio = 1.0 / cos_half
    tip = vertex + bisector * half_width * ratio
    if ratio <= options.miter_limit:
        return _polygon(vertex, a, tip, b)
    if options.join is LineJoin.MITER_CLIP:
        t = (options.miter_limit - cos_half) / (ratio - cos_half)
        return _polygon(vertex, a, a + (tip - a) * t, b + (tip - b) * t, b)
    return _polygon(vertex, a, b)


def _cap(
    point: NDArray[np.float64],
    direction: NDArray[np.float64],
    half_width: float,
    cap: LineCap,
    quad_segs: int,
) -> Polygon | None:
    if cap is LineCap.ROUND:
        return Point(point).buffer(half_width, quad_segs=quad_segs)
    if cap is LineCap.SQUARE:
        normal = unit_normals(direction[None, :])[0] * half_width
        extension = direction * half_width
        return _polygon(point + normal, point + normal + extension, point - normal + extension, point - normal)
    return None


def _stroke_pieces(line: Polyline, half_width: float, options: StrokeOptions, quad_segs: int) -> list[Polygon]:
    pts = line.points
    if line.closed:
        pts = np.vstack([pts, pts[:1]])
    starts = pts[:-1]
    ends = pts[1:]
    directions = ends - starts
    directions = directions / np.linalg.norm(directions, axis=1, keepdims=True)
    offsets = unit_normals(directions) * half_width

    # One quad per segment between the left and right rails.
    quads = np.stack([starts + offsets, ends + offsets, ends - offsets, starts - offsets], axis=1)
    pieces: list[Polygon] = list(shapely.polygons(quads))

    # A closed line also joins at its seam (index 0 pairs with the last segment).
    first = 0 if line.closed else 1
    for i in range(first, len(directions)):
        joint = _join(starts[i], directions[i - 1], directions[i], half_width, options, quad_segs)
        if joint is not None:
            pieces.append(joint)

    if not line.closed:
        for cap in (
            _cap(starts[0], -directions[0], half_width, options.cap, quad_segs),
            _cap(ends[-1], directions[-1], half_width, options.cap, quad_segs),
        ):
            if cap is not None:
                pieces.append(cap)
    return pieces


def _dash(polylines: list[Polyline], pattern: tuple[float, ...], offset: float) -> list[Polyline]:
    """Cut polylines into dashes. Patterns that cannot advance are ignored."""
    lengths = [float(v) for v in pattern]
    if any(v < 0 for v in lengths) or sum(lengths) <= POINT_EPS:
        return polylines
    if len(lengths) % 2:
        lengths = lengths * 2
    period = sum(lengths)

    dashes: list[Polyline] = []
    for line in polylines:
        geom = LineString(close_ring(line.points) if line.closed else line.points)
        total = geom.length
        position = -(offset % period)
        i = 0
        while position < total:
            length = lengths[i % len(lengths)]
            if i % 2 == 0:
                lo, hi = max(0.0, position), min(position + length, total)
                if hi - lo > POINT_EPS:
                    piece = substring(geom, lo, hi)
                    if isinstance(piece, LineString):
                        dashes.append(Polyline(np.asarray(piece.coords)[:, :2], False))
            position += length
            i += 1
    return dashes


@_geometry_errors
def tessellate_stroke(
    path: Iterable[PathCommand],
    options: StrokeOptions,
    translation: Translation = (0.0, 0.0, 0.0),
) -> GeometryBuffer:
    if options.width <= 0:
        raise TessellationError(f"stroke width must be positive, got {options.width}")

    polylines = flatten(path, options.tolerance)
    if options.dash_pattern:
        polylines = _dash(polylines, options.dash_pattern, options.dash_offset)

    lines: list[Polyline] = []
    for line in polylines:
        pts = dedupe_consecutive(line.points, closed=line.closed)
        if len(pts) >= 2:
            lines.append(Polyline(pts, line.closed))
    if not lines:
        raise TessellationError("stroke needs at least two distinct points")

    half_width = options.width / 2.0
    quad_segs = _round_segments(half_width, options.tolerance)
    pieces: list[Polygon] = []
    for line in lines:
        pieces.extend(_stroke_pieces(line, half_width, options, quad_segs))

    buffer = _triangulate(unary_union(pieces), translation)
    logger.debug("Stroke: %d polylines → %d triangles", len(lines), buffer.triangle_count)
    return buffer


# ── Fill ──────────────────────────────────────────────────────────────────


def _is_inside(winding: int, rule: FillRule) -> bool:
    if rule is FillRule.NON_ZERO:
        return winding != 0
    return winding % 2 != 0


@_geometry_errors
def tessellate_fill(
    path: Iterable[PathCommand],
    options: FillOptions,
    translation: Translation = (0.0, 0.0, 0.0),
) -> GeometryBuffer:
    """Fill every subpath (implicitly closed) under the chosen fill rule."""
    rings: list[NDArray[np.float64]] = []
    for line in flatten(path, options.tolerance):
        pts = dedupe_consecutive(line.points, closed=True)
        if len(pts) >= 3:
            rings.append(close_ring(pts))
    if not rings:
        raise TessellationError("fill needs a subpath with at least three distinct points")

    # Node the rings against each other; every bounded face is uniformly in or out.
    noded = unary_union([LineString(ring) for ring in rings])
    faces = shapely.get_parts(shapely.polygonize(shapely.get_parts(noded)))

    kept = []
    for face in faces:
        probe = face.representative_point()
        winding = sum(winding_number((probe.x, probe.y), ring) for ring in rings)
        if _is_inside(winding, options.fill_rule):
            kept.append(face)
    if not kept:
        raise TessellationError("fill region is empty")

    buffer = _triangulate(unary_union(kept), translation)
    logger.debug("Fill: %d rings, %d faces → %d triangles", len(rings), len(kept), buffer.triangle_count)
    return buffer
