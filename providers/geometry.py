"""
Polygon → axis-aligned bounding box.

Cloud Vision sends locations as boundingPoly.vertices. A vertex with a zero
coordinate is serialised without that key, so a missing x or y reads as 0.
"""
from __future__ import annotations

from typing import Iterable, Optional

from providers.base import BoundingBox


def reduce_polygon(vertices: Optional[Iterable[dict]]) -> Optional[BoundingBox]:
    """Smallest box containing every vertex, or None when there are none."""
    if not vertices:
        return None
    points = list(vertices)
    if not points:
        return None

    xs = [p.get("x") or 0 for p in points]
    ys = [p.get("y") or 0 for p in points]

    x, y = min(xs), min(ys)
    return BoundingBox(x=x, y=y, width=max(xs) - x, height=max(ys) - y)
