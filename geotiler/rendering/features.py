"""
Feature rendering for a single GeoJSON feature.

:class:`FeatureRenderer` projects a feature's coordinates through its tile,
builds pixel paths and fills/strokes them with the paint supplied by a
:class:`~geotiler.rendering.delegates.FeatureRendererDelegate`.
"""

import logging
from functools import cached_property
from typing import Any, Mapping, Sequence

from ..constants import POINT_RADIUS
from ..exceptions import InvalidGeometryError
from .delegates import FeatureRendererDelegate
from .paint import Paint
from .path import Path
from .surface import DrawingSurface

logger = logging.getLogger("geotiler.rendering.features")


class FeatureRenderer:
    """
    Draw one feature onto a surface.

    The paint is requested from the delegate once and reused for every part
    of a multi-geometry.

    Attributes:
        tile: Tile providing the projection
        feature: GeoJSON feature mapping
        delegate: Style delegate
    """

    def __init__(self, tile, feature: Mapping[str, Any], delegate: FeatureRendererDelegate):
        self.tile = tile
        self.feature = feature
        self.delegate = delegate

    @cached_property
    def paint(self) -> Paint:
        properties = self.feature.get("properties") or {}
        return Paint.from_mapping(self.delegate.paint(properties, self.feature))

    def render(self, surface: DrawingSurface) -> None:
        """
        Render the feature.

        Raises:
            InvalidGeometryError: If the geometry type is unsupported or a
                path has fewer than 3 points
        """
        geometry = self.feature.get("geometry")
        if geometry is None:
            logger.debug("Feature without geometry, nothing to draw")
            return

        geometry_type = geometry.get("type")
        coordinates = geometry.get("coordinates")

        if geometry_type == "Point":
            self._render_point(surface, coordinates)
        elif geometry_type == "MultiPoint":
            for coords in coordinates:
                self._render_point(surface, coords)
        elif geometry_type == "Polygon":
            self._render_polygon(surface, coordinates)
        elif geometry_type == "MultiPolygon":
            for coords in coordinates:
                self._render_polygon(surface, coords)
        elif geometry_type == "LineString":
            self._render_line_string(surface, coordinates)
        elif geometry_type == "MultiLineString":
            for coords in coordinates:
                self._render_line_string(surface, coords)
        else:
            raise InvalidGeometryError(f"Unsupported geometry type: {geometry_type}")

    def _render_point(self, surface: DrawingSurface, coordinates: Sequence[float]) -> None:
        cx, cy = self.tile.project(coordinates[0], coordinates[1])

        surface.begin_path()
        surface.ellipse(cx, cy, POINT_RADIUS, POINT_RADIUS)
        self.paint.draw(surface)

    def _render_polygon(self, surface: DrawingSurface, coordinates: Sequence[Sequence[Sequence[float]]]) -> None:
        path = Path([self.tile.project_many(ring) for ring in coordinates])
        self._draw_path(surface, path)

    def _render_line_string(self, surface: DrawingSurface, coordinates: Sequence[Sequence[float]]) -> None:
        path = Path([self.tile.project_many(coordinates)])
        self._draw_path(surface, path)

    def _draw_path(self, surface: DrawingSurface, path: Path) -> None:
        surface.begin_path()
        if self.paint.bezier:
            path.draw_catmull_rom(surface)
        else:
            path.draw_linear(surface)
        self.paint.draw(surface)
