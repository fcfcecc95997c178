"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# Points closer than this are treated as the same point.
POINT_EPS = 1e-9


def close_ring(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Append the first point if the ring is not already closed."""
    if len(points) and np.allclose(points[0], points[-1], atol=POINT_EPS):
        return points
    return np.vstack([points, points[:1]])


def dedupe_consecutive(points: NDArray[np.float64], closed: bool = False) -> NDArray[np.float64]:
    """Drop points equal to their predecessor (and the closing duplicate of a ring)."""
    if len(points) < 2:
        return points
    steps = np.linalg.norm(np.diff(points, axis=0), axis=1)
    keep = np.concatenate([[True], steps > POINT_EPS])
    points = points[keep]
    if closed and len(points) > 1 and np.linalg.norm(points[-1] - points[0]) <= POINT_EPS:
        points = points[:-1]
    return points


def winding_number(point: tuple[float, float], polygon_points: NDArray[np.float64]) -> int:
    """Compute winding number of point w.r.t. a closed polygon boundary.

    Non-zero → point is inside under the nonzero rule; odd → inside under even-odd.
    """
    px, py = point
    x = polygon_points[:, 0]
    y = polygon_points[:, 1]
    n = len(x)

    wn = 0
    for i in range(n - 1):
        if y[i] <= py:
            if y[i + 1] > py:
                # Upward crossing
                cross = (x[i + 1] - x[i]) * (py - y[i]) - (px - x[i]) * (y[i + 1] - y[i])
                if cross > 0:
                    wn += 1
        else:
            if y[i + 1] <= py:
                # Downward crossing
                cross = (x[i + 1] - x[i]) * (py - y[i]) - (px - x[i]) * (y[i + 1] - y[i])
                if cross < 0:
                    wn -= 1
    return wn


def triangle_cross(triangles: NDArray[np.float64]) -> NDArray[np.float64]:
    """Twice the signed area of each triangle in a (T, 3, 2+) array."""
    a = triangles[:, 0, :2]
    b = triangles[:, 1, :2]
    c = triangles[:, 2, :2]
    ab = b - a
    ac = c - a
    return ab[:, 0] * ac[:, 1] - ab[:, 1] * ac[:, 0]


def triangle_areas(triangles: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.abs(triangle_cross(triangles)) * 0.5


def unit_normals(directions: NDArray[np.float64]) -> NDArray[np.float64]:
    """Left-hand unit normals of (N, 2) direction vectors."""
    lengths = np.linalg.norm(directions, axis=1, keepdims=True)
    unit = directions / np.where(lengths < POINT_EPS, 1.0, lengths)
    return np.column_stack([-unit[:, 1], unit[:, 0]])
