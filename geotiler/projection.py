"""
Geographic to pixel projection for map tiles.

This module maps longitude/latitude pairs into the pixel space of a tile.
Longitude is interpolated linearly across the tile width. Latitude is either
interpolated linearly or passed through the spherical Mercator transform
first, so tiles line up with standard web-map tiling.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

from .constants import MERCATOR_MAX_LATITUDE
from .exceptions import InvalidParameterError

logger = logging.getLogger("geotiler.projection")


def mercator_y(lat):
    """
    Spherical Mercator ordinate of a latitude, ``ln(tan(pi/4 + lat*pi/360))``.

    Accepts scalars or numpy arrays of latitudes in degrees. Latitudes are
    clamped to the web-map limit of about 85.0511 degrees so the poles stay finite.
    """
    lat = np.clip(np.asarray(lat, dtype=float), -MERCATOR_MAX_LATITUDE, MERCATOR_MAX_LATITUDE)
    return np.log(np.tan(np.pi / 4 + lat * np.pi / 360))


@dataclass(frozen=True)
class BoundingBox:
    """
    Geographic extent of a tile.

    Attributes:
        lon1: Western longitude in degrees
        lat1: Southern latitude in degrees
        lon2: Eastern longitude in degrees
        lat2: Northern latitude in degrees
    """

    lon1: float
    lat1: float
    lon2: float
    lat2: float

    def __post_init__(self):
        if not self.lon1 < self.lon2:
            raise InvalidParameterError(
                f"lon1 must be smaller than lon2, got {self.lon1} >= {self.lon2}"
            )
        if not self.lat1 < self.lat2:
            raise InvalidParameterError(
                f"lat1 must be smaller than lat2, got {self.lat1} >= {self.lat2}"
            )

    @property
    def lon_span(self) -> float:
        return self.lon2 - self.lon1

    @property
    def lat_span(self) -> float:
        return self.lat2 - self.lat1

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "BoundingBox":
        """Build a box from a GeoJSON-style ``[west, south, east, north]`` list."""
        if len(values) != 4:
            raise InvalidParameterError(
                f"Bounding box needs 4 values (lon1, lat1, lon2, lat2), got {len(values)}"
            )
        return cls(*(float(v) for v in values))

    @classmethod
    def from_tile_index(cls, z: int, x: int, y: int) -> "BoundingBox":
        """
        Bounding box of a slippy-map tile.

        Args:
            z: Zoom level
            x: Tile column, counted eastward from the antimeridian
            y: Tile row, counted southward from the top of the Mercator square

        Returns:
            BoundingBox covering the tile

        Raises:
            InvalidParameterError: If the tile index does not exist at zoom ``z``

        Example:
            >>> BoundingBox.from_tile_index(0, 0, 0).lon_span
            360.0
        """
        if z < 0:
            raise InvalidParameterError(f"Zoom level must be non-negative, got {z}")
        n = 2 ** z
        if not (0 <= x < n and 0 <= y < n):
            raise InvalidParameterError(f"Tile {z}/{x}/{y} does not exist")

        def lon(col):
            return col / n * 360.0 - 180.0

        def lat(row):
            return math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * row / n))))

        return cls(lon(x), lat(y + 1), lon(x + 1), lat(y))


@dataclass(frozen=True)
class PixelRect:
    """Axis-aligned rectangle in tile pixel space."""

    left: float
    top: float
    width: float
    height: float


class Projector:
    """
    Project geographic coordinates into tile pixels.

    The inner area of the tile (``width`` x ``height`` pixels) covers the
    bounding box exactly; padding shifts the inner area away from the canvas
    origin. Coordinates outside the box project outside the inner area, which
    lets callers draw partially visible features.

    Attributes:
        bbox: Geographic extent of the tile
        width: Inner width in pixels
        height: Inner height in pixels
        padding: Padding as given, in ``padding_unit``
        padding_unit: "px" or "deg"
        projection: "linear" or "mercator"
    """

    def __init__(
        self,
        bbox: BoundingBox,
        width: float,
        height: float,
        padding: float = 0.0,
        padding_unit: str = "px",
        projection: str = "linear"
    ):
        if padding_unit not in ("px", "deg"):
            raise InvalidParameterError(
                f"padding_unit must be 'px' or 'deg', got '{padding_unit}'"
            )
        if projection not in ("linear", "mercator"):
            raise InvalidParameterError(
                f"projection must be 'linear' or 'mercator', got '{projection}'"
            )

        self.bbox = bbox
        self.width = width
        self.height = height
        self.padding = padding
        self.padding_unit = padding_unit
        self.projection = projection

        self.padding_x, self.padding_y = self._padding_in_px()

        if projection == "mercator":
            self._y1 = float(mercator_y(bbox.lat1))
            self._y2 = float(mercator_y(bbox.lat2))
        else:
            self._y1 = bbox.lat1
            self._y2 = bbox.lat2

        logger.debug(
            f"Projector for {bbox} ({projection}) at {width}x{height}px, "
            f"padding=({self.padding_x:.2f}, {self.padding_y:.2f})px"
        )

    def _padding_in_px(self) -> Tuple[float, float]:
        if self.padding_unit == "px":
            return float(self.padding), float(self.padding)

        px_per_lon_deg = self.width / self.bbox.lon_span
        px_per_lat_deg = self.height / self.bbox.lat_span
        return self.padding * px_per_lon_deg, self.padding * px_per_lat_deg

    @property
    def inner_bounds(self) -> PixelRect:
        return PixelRect(self.padding_x, self.padding_y, self.width, self.height)

    @property
    def outer_bounds(self) -> PixelRect:
        return PixelRect(
            0.0, 0.0,
            self.width + 2 * self.padding_x,
            self.height + 2 * self.padding_y,
        )

    def project(self, lon: float, lat: float) -> Tuple[float, float]:
        """
        Project a single longitude/latitude pair to ``(x, y)`` pixels.

        Example:
            >>> projector = Projector(BoundingBox(0, 0, 10, 10), 256, 256)
            >>> projector.project(0, 10)
            (0.0, 0.0)
        """
        x = (lon - self.bbox.lon1) / self.bbox.lon_span * self.width

        if self.projection == "mercator":
            lat = float(mercator_y(lat))
        y = (1 - (lat - self._y1) / (self._y2 - self._y1)) * self.height

        return (float(x + self.padding_x), float(y + self.padding_y))

    def project_many(self, coordinates: Iterable[Sequence[float]]) -> np.ndarray:
        """
        Project a sequence of ``(lon, lat)`` positions at once.

        Extra position members (e.g. altitude) are ignored.

        Returns:
            Array of shape (N, 2) with pixel coordinates
        """
        coords = np.asarray([(c[0], c[1]) for c in coordinates], dtype=float)
        if coords.size == 0:
            return np.empty((0, 2))

        lons = coords[:, 0]
        lats = coords[:, 1]
        if self.projection == "mercator":
            lats = mercator_y(lats)

        xs = (lons - self.bbox.lon1) / self.bbox.lon_span * self.width + self.padding_x
        ys = (1 - (lats - self._y1) / (self._y2 - self._y1)) * self.height + self.padding_y
        return np.column_stack([xs, ys])
