"""
Label rendering for a single GeoJSON feature.

:class:`LabelRenderer` computes label placements for a feature (below point
markers, or along polygon and line outlines through
:class:`~geotiler.rendering.labels.LabelPlacer`) and draws the text the
delegate returns for each placement.
"""

import logging
from functools import cached_property
from typing import Any, List, Mapping, Sequence

from ..constants import DEFAULT_LABEL_FILL
from ..exceptions import InvalidGeometryError
from .delegates import LabelRendererDelegate
from .labels import LabelPlacement
from .paint import Paint
from .path import Path
from .surface import DrawingSurface

logger = logging.getLogger("geotiler.rendering.label_renderer")


class LabelRenderer:
    """
    Draw the labels of one feature onto a surface.

    Attributes:
        tile: Tile providing the projection
        feature: GeoJSON feature mapping
        delegate: Label delegate
    """

    def __init__(self, tile, feature: Mapping[str, Any], delegate: LabelRendererDelegate):
        self.tile = tile
        self.feature = feature
        self.delegate = delegate

    @property
    def properties(self) -> Mapping[str, Any]:
        return self.feature.get("properties") or {}

    @cached_property
    def paint(self) -> Paint:
        return Paint.from_mapping(
            self.delegate.paint(self.properties, self.feature),
            fill=DEFAULT_LABEL_FILL,
        )

    def render(self, surface: DrawingSurface) -> int:
        """
        Render the labels of the feature.

        Returns:
            Number of labels drawn
        """
        drawn = 0
        for placement in self.place_labels():
            text = self.delegate.label(self.properties, self.feature, placement)
            if text is None:
                continue
            self.paint.draw_text(surface, text, placement.x, placement.y, placement.rotation)
            drawn += 1
        return drawn

    # #region Placement

    def place_labels(self) -> List[LabelPlacement]:
        """
        Compute all placements for the feature.

        Raises:
            InvalidGeometryError: If the geometry type is unsupported or a
                path has fewer than 3 points
        """
        geometry = self.feature.get("geometry")
        if geometry is None:
            return []

        geometry_type = geometry.get("type")
        coordinates = geometry.get("coordinates")

        if geometry_type == "Point":
            return [self._place_for_point(coordinates)]
        if geometry_type == "MultiPoint":
            return [self._place_for_point(coords) for coords in coordinates]
        if geometry_type == "Polygon":
            return self._place_for_polygon(coordinates)
        if geometry_type == "MultiPolygon":
            return [p for coords in coordinates for p in self._place_for_polygon(coords)]
        if geometry_type == "LineString":
            return self._place_for_line_string(coordinates)
        if geometry_type == "MultiLineString":
            return [p for coords in coordinates for p in self._place_for_line_string(coords)]

        raise InvalidGeometryError(f"Unsupported geometry type: {geometry_type}")

    def _place_for_point(self, coordinates: Sequence[float]) -> LabelPlacement:
        cx, cy = self.tile.project(coordinates[0], coordinates[1])
        return LabelPlacement(x=cx, y=cy + self.paint.font_size, rotation=0.0)

    def _place_for_polygon(self, coordinates) -> List[LabelPlacement]:
        path = Path([self.tile.project_many(ring) for ring in coordinates])
        return path.place_labels(self.paint.label_position, self.paint.label_count)

    def _place_for_line_string(self, coordinates) -> List[LabelPlacement]:
        path = Path([self.tile.project_many(coordinates)])
        return path.place_labels(self.paint.label_position, self.paint.label_count)

    # #endregion
