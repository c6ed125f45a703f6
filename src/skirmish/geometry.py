"""Planar helpers shared by missions and squads.

Points are plain ``(x, y)`` tuples in tile units.  Anything that aggregates
many points goes through numpy.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

Point = tuple[float, float]


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def centroid(points: Iterable[Point]) -> Point | None:
    """Mean position, or None for an empty input."""
    arr = np.asarray(list(points), dtype=float)
    if arr.size == 0:
        return None
    cx, cy = arr.mean(axis=0)
    return (float(cx), float(cy))


def max_spread(points: Sequence[Point], center: Point) -> float:
    """Distance from *center* to the farthest of *points* (0 when empty)."""
    if not points:
        return 0.0
    arr = np.asarray(points, dtype=float)
    d = np.hypot(arr[:, 0] - center[0], arr[:, 1] - center[1])
    return float(d.max())


def clamp_to_map(p: Point, map_size: tuple[int, int]) -> Point:
    """Clamp a point so it lies on a valid tile of a ``(width, height)`` map."""
    w, h = map_size
    x = min(max(p[0], 0.0), float(w - 1))
    y = min(max(p[1], 0.0), float(h - 1))
    return (x, y)


def unit_vector(src: Point, dst: Point) -> Point:
    """Normalised direction from *src* to *dst*; (0, 0) if they coincide."""
    dx = dst[0] - src[0]
    dy = dst[1] - src[1]
    mag = math.hypot(dx, dy)
    if mag < 1e-9:
        return (0.0, 0.0)
    return (dx / mag, dy / mag)


def offset(p: Point, direction: Point, length: float) -> Point:
    return (p[0] + direction[0] * length, p[1] + direction[1] * length)


def tile(p: Point) -> tuple[int, int]:
    """Integer tile containing *p*."""
    return (int(math.floor(p[0])), int(math.floor(p[1])))
