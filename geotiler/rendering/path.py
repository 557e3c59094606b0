"""
Pixel-space paths built from projected feature coordinates.

A :class:`Path` holds one or more subpaths (an outer ring and its holes, or
the parts of a multi-line). It draws them onto a surface either as straight
segments or as a centripetal Catmull-Rom spline, and answers the geometric
questions the label placer needs (bounding box, winding order).
"""

import logging
import math
from typing import List, Sequence, Tuple

from ..constants import CATMULL_ROM_ALPHA, CURVE_EPSILON
from ..exceptions import IndexOutOfRangeError, InvalidGeometryError
from .geometry import Point, Subpath, WindingOrder, bounding_box, winding_order
from .labels import LabelPlacement, LabelPlacer, LabelPosition
from .surface import DrawingSurface

logger = logging.getLogger("geotiler.rendering.path")


class CatmullRomCurve:
    """
    Open centripetal Catmull-Rom spline emitting cubic Bezier segments.

    Feed points with :meth:`point` between :meth:`line_start` and
    :meth:`line_end`. The curve passes through every point.
    """

    def __init__(self, surface: DrawingSurface, alpha: float = CATMULL_ROM_ALPHA):
        self.surface = surface
        self.alpha = alpha

    def line_start(self) -> None:
        self._x0 = self._x1 = self._x2 = math.nan
        self._y0 = self._y1 = self._y2 = math.nan
        self._l01_a = self._l12_a = self._l23_a = 0.0
        self._l01_2a = self._l12_2a = self._l23_2a = 0.0
        self._point = 0

    def line_end(self) -> None:
        if self._point == 2:
            self.surface.line_to(self._x2, self._y2)
        elif self._point == 3:
            self.point(self._x2, self._y2)

    def _segment(self, x: float, y: float) -> None:
        x1, y1, x2, y2 = self._x1, self._y1, self._x2, self._y2

        if self._l01_a > CURVE_EPSILON:
            a = 2 * self._l01_2a + 3 * self._l01_a * self._l12_a + self._l12_2a
            n = 3 * self._l01_a * (self._l01_a + self._l12_a)
            x1 = (x1 * a - self._x0 * self._l12_2a + self._x2 * self._l01_2a) / n
            y1 = (y1 * a - self._y0 * self._l12_2a + self._y2 * self._l01_2a) / n

        if self._l23_a > CURVE_EPSILON:
            b = 2 * self._l23_2a + 3 * self._l23_a * self._l12_a + self._l12_2a
            m = 3 * self._l23_a * (self._l23_a + self._l12_a)
            x2 = (x2 * b + self._x1 * self._l23_2a - x * self._l12_2a) / m
            y2 = (y2 * b + self._y1 * self._l23_2a - y * self._l12_2a) / m

        self.surface.bezier_curve_to(x1, y1, x2, y2, self._x2, self._y2)

    def _measure(self, x: float, y: float) -> None:
        if self._point:
            x23 = self._x2 - x
            y23 = self._y2 - y
            self._l23_2a = math.pow(x23 * x23 + y23 * y23, self.alpha)
            self._l23_a = math.sqrt(self._l23_2a)

    def _shift(self, x: float, y: float) -> None:
        self._l01_a, self._l12_a = self._l12_a, self._l23_a
        self._l01_2a, self._l12_2a = self._l12_2a, self._l23_2a
        self._x0, self._x1, self._x2 = self._x1, self._x2, x
        self._y0, self._y1, self._y2 = self._y1, self._y2, y

    def point(self, x: float, y: float) -> None:
        self._measure(x, y)

        if self._point == 0:
            self._point = 1
            self.surface.move_to(x, y)
        elif self._point == 1:
            self._point = 2
        else:
            self._point = 3
            self._segment(x, y)

        self._shift(x, y)


class CatmullRomClosedCurve(CatmullRomCurve):
    """
    Closed centripetal Catmull-Rom spline.

    The first three points are held back and replayed at :meth:`line_end`,
    so the curve wraps smoothly around the closing point.
    """

    def line_start(self) -> None:
        super().line_start()
        self._x3 = self._x4 = self._x5 = math.nan
        self._y3 = self._y4 = self._y5 = math.nan

    def line_end(self) -> None:
        if self._point == 1:
            self.surface.move_to(self._x3, self._y3)
            self.surface.close_path()
        elif self._point == 2:
            self.surface.line_to(self._x3, self._y3)
            self.surface.close_path()
        elif self._point == 3:
            self.point(self._x3, self._y3)
            self.point(self._x4, self._y4)
            self.point(self._x5, self._y5)

    def point(self, x: float, y: float) -> None:
        self._measure(x, y)

        if self._point == 0:
            self._point = 1
            self._x3, self._y3 = x, y
        elif self._point == 1:
            self._point = 2
            self._x4, self._y4 = x, y
            self.surface.move_to(x, y)
        elif self._point == 2:
            self._point = 3
            self._x5, self._y5 = x, y
        else:
            self._segment(x, y)

        self._shift(x, y)


class Path:
    """
    One or more subpaths in tile pixel space.

    Attributes:
        subpaths: List of subpaths, each a list of (x, y) tuples

    Raises:
        InvalidGeometryError: If any subpath has fewer than 3 points

    Example:
        >>> path = Path([[(0, 0), (100, 0), (100, 100), (0, 0)]])
        >>> path.bounding_box(0)
        (0.0, 0.0, 100.0, 100.0)
    """

    def __init__(self, subpaths: Sequence[Sequence[Sequence[float]]]):
        self.subpaths: List[Subpath] = []
        for index, subpath in enumerate(subpaths):
            points = [(float(p[0]), float(p[1])) for p in subpath]
            if len(points) < 3:
                raise InvalidGeometryError(f"Subpath {index} must have at least 3 points")
            self.subpaths.append(points)

    def __len__(self) -> int:
        return len(self.subpaths)

    def coordinate_at(self, subpath_index: int, index: int) -> Point:
        """
        Look up a point; the point index wraps around the subpath.

        Raises:
            IndexOutOfRangeError: If ``subpath_index`` is out of bounds
        """
        if subpath_index < 0 or subpath_index >= len(self.subpaths):
            raise IndexOutOfRangeError(f"Subpath index {subpath_index} is out of bounds")

        subpath = self.subpaths[subpath_index]
        return subpath[index % len(subpath)]

    def bounding_box(self, subpath_index: int = 0) -> Tuple[float, float, float, float]:
        if subpath_index < 0 or subpath_index >= len(self.subpaths):
            raise IndexOutOfRangeError(f"Subpath index {subpath_index} is out of bounds")
        return bounding_box(self.subpaths[subpath_index])

    def winding_order(self, subpath_index: int = 0) -> WindingOrder:
        if subpath_index < 0 or subpath_index >= len(self.subpaths):
            raise IndexOutOfRangeError(f"Subpath index {subpath_index} is out of bounds")
        return winding_order(self.subpaths[subpath_index])

    @property
    def closed(self) -> bool:
        """Whether the first subpath ends where it starts."""
        first = self.subpaths[0]
        return first[0] == first[-1]

    def place_labels(self, position: LabelPosition, count: int = 1) -> List[LabelPlacement]:
        """
        Place labels on every subpath.

        Args:
            position: LabelPosition strategy
            count: Number of labels requested per subpath

        Returns:
            List of LabelPlacement, subpath by subpath
        """
        placements = []
        for subpath in self.subpaths:
            placements.extend(LabelPlacer(subpath, position).place(count))
        return placements

    # #region Drawing

    def draw_linear(self, surface: DrawingSurface) -> None:
        for subpath in self.subpaths:
            x, y = subpath[0]
            surface.move_to(x, y)
            for x, y in subpath[1:]:
                surface.line_to(x, y)

    def draw_catmull_rom(self, surface: DrawingSurface) -> None:
        closed = self.closed
        curve = CatmullRomClosedCurve(surface) if closed else CatmullRomCurve(surface)

        for subpath in self.subpaths:
            coordinates = subpath[:-1] if closed else subpath

            curve.line_start()
            for x, y in coordinates:
                curve.point(x, y)
            curve.line_end()

    # #endregion
