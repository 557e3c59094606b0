"""
Screen-space geometry helpers shared by paths and the label placer.
"""

from enum import Enum
from typing import List, Sequence, Tuple


Point = Tuple[float, float]
Subpath = List[Point]


class WindingOrder(Enum):
    CW = "cw"
    CCW = "ccw"


def winding_order(subpath: Sequence[Point]) -> WindingOrder:
    """
    Orientation of a closed subpath from its signed shoelace sum.

    Args:
        subpath: Sequence of (x, y) points

    Returns:
        WindingOrder.CW when the signed sum is positive, WindingOrder.CCW otherwise
    """
    area = 0.0
    j = len(subpath) - 1
    for i in range(len(subpath)):
        x1, y1 = subpath[i]
        x2, y2 = subpath[j]
        area += (x2 - x1) * (y2 + y1)
        j = i
    return WindingOrder.CW if area > 0 else WindingOrder.CCW


def bounding_box(subpath: Sequence[Point]) -> Tuple[float, float, float, float]:
    """Return ``(min_x, min_y, max_x, max_y)`` of a subpath."""
    xs = [p[0] for p in subpath]
    ys = [p[1] for p in subpath]
    return min(xs), min(ys), max(xs), max(ys)
